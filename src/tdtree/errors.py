"""
Error taxonomy for decision tree compilation and evaluation.

Two families:
    - CompileError: the table cannot become a tree. Construction aborts,
      no partial tree is returned.
    - EvaluationError: one evaluation for one subject failed. The tree
      is untouched and stays usable.

Every error keeps the offending node id / column / value as attributes
so callers can point at the exact cell that needs fixing.
"""

from typing import Iterable, Optional


class DecisionTreeError(Exception):
    """Base class for all tdtree errors."""
    pass


# =============================================================================
# COMPILE-TIME ERRORS
# =============================================================================


class CompileError(DecisionTreeError):
    """Raised when a table cannot be compiled into a decision tree."""

    def __init__(self, message: str, node_id: Optional[str] = None, column: Optional[str] = None):
        super().__init__(message)
        self.node_id = node_id
        self.column = column


class SchemaError(CompileError):
    """Required column headings are missing (or the table has no rows)."""

    def __init__(self, message: str, missing: Iterable[str] = ()):
        super().__init__(message)
        self.missing = sorted(missing)


class DuplicateNodeError(CompileError):
    """A node id is defined by more than one row."""

    def __init__(self, node_id: str, message: Optional[str] = None):
        super().__init__(message or f"Node {node_id} is defined twice", node_id=node_id)


class CyclicReferenceError(DuplicateNodeError):
    """A node refers (directly or indirectly) to itself while being defined."""

    def __init__(self, node_id: str, path: Iterable[str]):
        self.path = list(path)
        super().__init__(
            node_id,
            f"Node {node_id} is defined recursively: {' -> '.join(self.path)}",
        )


class UndefinedNodeError(CompileError):
    """A [id] reference points at a node id with no row."""

    def __init__(self, missing_id: str, referrer: str, column: str):
        super().__init__(
            f"Node {missing_id} referred to in node {referrer} ({column}) is not defined",
            node_id=referrer,
            column=column,
        )
        self.missing_id = missing_id


class UnknownOperatorError(CompileError):
    """The Operator cell does not name a known operator."""

    def __init__(self, operator: str, node_id: Optional[str] = None):
        where = f" in node {node_id}" if node_id is not None else ""
        super().__init__(f"Unknown operator '{operator}'{where}", node_id=node_id, column="Operator")
        self.operator = operator


class TypeInconsistencyError(CompileError):
    """Leaf literals of one tree do not share a single datatype."""

    def __init__(self, found, expected, node_id: str, first_node_id: Optional[str] = None):
        since = f" (set by {first_node_id})" if first_node_id else ""
        super().__init__(
            f"Inconsistent type: {found.value} in {node_id}. "
            f"Previous types have been: {expected.value}{since}",
            node_id=node_id,
        )
        self.found = found
        self.expected = expected
        self.first_node_id = first_node_id


class AttributeResolutionError(CompileError):
    """The attribute model does not know an attribute identifier."""

    def __init__(self, identifier: str, node_id: Optional[str] = None):
        where = f" (node {node_id})" if node_id is not None else ""
        super().__init__(f"Unknown attribute '{identifier}'{where}", node_id=node_id, column="Attribute")
        self.identifier = identifier


# =============================================================================
# EVALUATION-TIME ERRORS
# =============================================================================


class EvaluationError(DecisionTreeError):
    """Raised when one evaluation of a compiled tree fails."""
    pass


class ShapeViolationError(EvaluationError):
    """An operator was applied to an attribute of the wrong cardinality/kind."""

    def __init__(self, operator, attribute):
        cardinality, kind = operator.requires
        super().__init__(
            f"Operator '{operator.value}' needs a {cardinality.value} {kind.value} attribute, "
            f"but '{attribute.identifier}' is {attribute.cardinality.value} {attribute.kind.value}"
        )
        self.operator = operator
        self.attribute = attribute


class MissingValueError(EvaluationError):
    """The subject has no existing value for a tested attribute."""

    def __init__(self, subject, identifier: str):
        super().__init__(f"Subject {subject} has no value for attribute '{identifier}'")
        self.subject = subject
        self.identifier = identifier


class OperandError(EvaluationError):
    """An operand cannot be interpreted the way its operator needs."""

    def __init__(self, operator, operand: str, reason: str):
        super().__init__(f"Bad operand '{operand}' for operator '{operator.value}': {reason}")
        self.operator = operator
        self.operand = operand


# =============================================================================
# TABLE LOADING
# =============================================================================


class TableError(DecisionTreeError):
    """Raised when a tree table cannot be loaded."""
    pass


__all__ = [
    "DecisionTreeError",
    "CompileError",
    "SchemaError",
    "DuplicateNodeError",
    "CyclicReferenceError",
    "UndefinedNodeError",
    "UnknownOperatorError",
    "TypeInconsistencyError",
    "AttributeResolutionError",
    "EvaluationError",
    "ShapeViolationError",
    "MissingValueError",
    "OperandError",
    "TableError",
]
