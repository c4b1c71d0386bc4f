"""
Decision tree action: a tree table wired to an attribute store.

The action loads its tree from a CSV file when initialised, then on
each step decides the outcome for one subject and writes it to that
subject's choice attribute.

    action = DecisionTreeAction("trees/grade.csv", model, base_uri="http://example.org/school")
    action.initialise()
    action.step("alice")          # model now holds alice's #choice
"""

import logging
from typing import Dict, Hashable, Iterable, Optional

from tdtree.attributes import Attribute, Cardinality, WritableAttributeModel
from tdtree.compiler import compile_tree
from tdtree.errors import CompileError, EvaluationError, TableError
from tdtree.evaluator import evaluate
from tdtree.literals import TypedLiteral
from tdtree.model import DecisionTree
from tdtree.table import parse_table_file

logger = logging.getLogger(__name__)

CHOICE_ATTRIBUTE = "#choice"


class DecisionTreeAction:
    """
    Sets a subject's choice attribute from a decision tree.

    Properties:
        tree_file: CSV file holding the tree table
        attribute_model: Store the tree reads from and the choice is written to
        base_uri: Prefix for '#fragment' leaves (defaults to TDTREE_BASE_URI)
        choice_attribute: Single-valued attribute receiving the outcome
    """

    def __init__(
        self,
        tree_file: str,
        attribute_model: WritableAttributeModel,
        base_uri: Optional[str] = None,
        choice_attribute: str = CHOICE_ATTRIBUTE,
        delimiter: Optional[str] = None,
    ):
        self.tree_file = tree_file
        self.attribute_model = attribute_model
        self.base_uri = base_uri
        self.choice_attribute = choice_attribute
        self.delimiter = delimiter
        self.tree: Optional[DecisionTree] = None
        self.choice: Optional[Attribute] = None

    def initialise(self) -> DecisionTree:
        """
        Load and compile the tree, and resolve the choice attribute.

        Raises:
            FileNotFoundError: If the tree file is missing
            TableError: If the file cannot be read as a table
            CompileError: If the table is not a valid tree
        """
        choice = self.attribute_model.resolve_attribute(self.choice_attribute)
        if choice.cardinality is not Cardinality.SINGLE:
            raise CompileError(
                f"Choice attribute '{self.choice_attribute}' must be single-valued"
            )
        try:
            table = parse_table_file(self.tree_file, delimiter=self.delimiter)
            self.tree = compile_tree(table, self.attribute_model, self.base_uri)
        except (TableError, CompileError) as e:
            logger.error("Reading decision tree CSV file %s: %s", self.tree_file, e)
            raise
        self.choice = choice
        return self.tree

    def step(self, subject: Hashable) -> TypedLiteral:
        """
        Decide for one subject and store the outcome as its choice.

        Raises:
            RuntimeError: If initialise() has not been called
            EvaluationError: If the tree cannot be evaluated for the subject
        """
        if self.tree is None or self.choice is None:
            raise RuntimeError("DecisionTreeAction.step() called before initialise()")
        literal = evaluate(self.tree, subject, self.attribute_model)
        self.attribute_model.set_value(subject, self.choice.identifier, literal.to_python())
        return literal

    def run(self, subjects: Iterable[Hashable]) -> Dict[Hashable, EvaluationError]:
        """
        Step every subject; subjects that fail are skipped.

        Returns:
            Errors of the subjects that were skipped
        """
        failures: Dict[Hashable, EvaluationError] = {}
        for subject in subjects:
            try:
                self.step(subject)
            except EvaluationError as e:
                logger.warning("Skipping %s: %s", subject, e)
                failures[subject] = e
        return failures


__all__ = ["CHOICE_ATTRIBUTE", "DecisionTreeAction"]
