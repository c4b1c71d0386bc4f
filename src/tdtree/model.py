"""
Compiled Decision Tree Objects

Defines the structure a tree table compiles into:
    - Decision (attribute + operator + operand)
    - Branch (internal node: a decision and two children)
    - Leaf (terminal node: a typed outcome literal)
    - DecisionTree (root container)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable once built (frozen dataclasses, read-only node map)
        - Know nothing about tables, files or how a subject's values are stored
        - Represent structure; walking it lives in the evaluator
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Hashable, Iterator, Mapping, Optional, Set, Tuple, Union

from tdtree.attributes import Attribute, AttributeModel
from tdtree.literals import LiteralType, TypedLiteral
from tdtree.operators import Operator


@dataclass(frozen=True)
class Decision:
    """
    The test carried by a branch.

    Example:
        Row:  root, #age, ge, 18, "adult", "minor"
        Decision(attribute=Attribute("#age"), operator=Operator.GE, operand="18")

    Properties:
        attribute: Resolved attribute to test
        operator: Operator to apply
        operand: Operand cell text, verbatim. It is interpreted by the
            operator at evaluation time, never at compile time.
    """

    attribute: Attribute
    operator: Operator
    operand: str

    def __str__(self) -> str:
        return f"{self.attribute.identifier} {self.operator.value} {self.operand}"


@dataclass(frozen=True)
class Leaf:
    """
    Terminal node holding the tree's outcome.

    Properties:
        id: Diagnostic id ("Leaf_<branch id>_T" or "Leaf_<branch id>_F")
        literal: Typed outcome returned by evaluation
    """

    id: str
    literal: TypedLiteral


@dataclass(frozen=True, eq=False, repr=False)
class Branch:
    """
    Internal node: evaluate the decision, follow on_true or on_false.

    Properties:
        id: Node ID from the table row
        decision: Decision to evaluate
        on_true: Child followed when the decision holds
        on_false: Child followed otherwise

    Both children may be the same node object: a row can be the target
    of several [id] references, it is still only compiled once.

    Equality compares whole subtrees without recursion; repr only names
    the children.
    """

    id: str
    decision: Decision
    on_true: "Node"
    on_false: "Node"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Branch):
            return NotImplemented
        pending = [(self, other)]
        compared: Set[Tuple[int, int]] = set()
        while pending:
            left, right = pending.pop()
            if left is right or (id(left), id(right)) in compared:
                continue
            compared.add((id(left), id(right)))
            if not (isinstance(left, Branch) and isinstance(right, Branch)):
                if left != right:
                    return False
                continue
            if left.id != right.id or left.decision != right.decision:
                return False
            pending.append((left.on_false, right.on_false))
            pending.append((left.on_true, right.on_true))
        return True

    def __hash__(self) -> int:
        return hash((self.id, self.decision))

    def __repr__(self) -> str:
        return (
            f"Branch(id={self.id!r}, decision={str(self.decision)!r}, "
            f"on_true={self.on_true.id!r}, on_false={self.on_false.id!r})"
        )


Node = Union[Branch, Leaf]


@dataclass(frozen=True)
class DecisionTree:
    """
    Root container of a compiled tree.

    Properties:
        root:
            Node compiled from the first data row
        nodes:
            Read-only map NodeId -> Branch for every compiled row.
            Used for lookup and diagnostics; evaluation walks from root.
            Derived from root, so equality compares root only.
        inferred_type:
            The single LiteralType shared by every leaf
        base_uri:
            Prefix used to expand '#fragment' leaf cells
        attribute_model:
            Model the attributes were resolved against; evaluate() reads
            subject values from it unless given another one

    INVARIANTS:
        - Every node id was defined by exactly one row
        - Every leaf literal has type inferred_type
        - Nothing here changes after compilation
    """

    root: Node
    nodes: Mapping[str, Branch] = field(compare=False)
    inferred_type: LiteralType
    base_uri: str = ""
    attribute_model: Optional[AttributeModel] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def get_node(self, node_id: str) -> Optional[Branch]:
        """
        Retrieve a branch by Node ID.

        Returns:
            Branch or None if no row had that id
        """
        return self.nodes.get(node_id)

    def iter_nodes(self) -> Iterator[Node]:
        """Yield every reachable node once, depth first, true side before false side."""
        seen: Set[int] = set()
        stack = [self.root]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            if isinstance(node, Branch):
                stack.append(node.on_false)
                stack.append(node.on_true)

    def leaves(self) -> Iterator[Leaf]:
        for node in self.iter_nodes():
            if isinstance(node, Leaf):
                yield node

    def attributes(self) -> Dict[str, Attribute]:
        """Attributes this tree depends on, by identifier."""
        return {b.decision.attribute.identifier: b.decision.attribute for b in self.nodes.values()}

    def decide(self, subject: Hashable, attribute_model: Optional[AttributeModel] = None) -> TypedLiteral:
        """Evaluate the tree for a subject (see tdtree.evaluator.evaluate)."""
        from tdtree.evaluator import evaluate

        return evaluate(self, subject, attribute_model)


__all__ = ["Branch", "Decision", "DecisionTree", "Leaf", "Node"]
