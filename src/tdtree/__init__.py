"""
Tabular Decision Tree (tdtree) Package

Compiles a table of decision rows into an immutable binary decision
tree, and evaluates it against a subject's attribute values to produce
a single typed outcome.

    Node ID, Attribute, Operator, Operand, True,    False
    root,    #age,      ge,       18,      "adult", "minor"

ARCHITECTURAL GUARANTEE:
------------------------
The compiler and evaluator contain ZERO knowledge of:
    - Where subject values are stored (see AttributeModel)
    - Where tables come from (see tdtree.table)
    - File formats beyond the table loaders

Compiled trees are immutable and may be shared between evaluations.
"""

from tdtree.attributes import (
    Attribute,
    AttributeModel,
    Cardinality,
    InMemoryAttributeModel,
    Kind,
)
from tdtree.compiler import compile_tree
from tdtree.evaluator import evaluate, evaluate_many
from tdtree.literals import LiteralType, TypedLiteral
from tdtree.model import Branch, Decision, DecisionTree, Leaf
from tdtree.operators import Operator

__version__ = "0.1.0"

__all__ = [
    "Attribute",
    "AttributeModel",
    "Branch",
    "Cardinality",
    "Decision",
    "DecisionTree",
    "InMemoryAttributeModel",
    "Kind",
    "Leaf",
    "LiteralType",
    "Operator",
    "TypedLiteral",
    "compile_tree",
    "evaluate",
    "evaluate_many",
]
