"""
Typed leaf literals.

The datatype of a decision tree's outcome is never declared. It is
inferred from the syntax of the leaf cells:

    "text"          -> STRING      (quotes stripped)
    <http://x/y>    -> URI         (angle brackets stripped)
    #fragment       -> URI         (base URI prepended)
    42, -7          -> INT
    42L             -> LONG
    3.14, 1.0e-3    -> DOUBLE
    3.14F, 1.0e3F   -> FLOAT
    anything else   -> ANY_SIMPLE

All leaves of one tree must agree. TypeTracker enforces that while the
tree is being built.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from tdtree.errors import TypeInconsistencyError


class LiteralType(Enum):
    """Inferred leaf datatypes (named after their XSD counterparts)."""

    STRING = "xsd:string"
    URI = "xsd:anyURI"
    INT = "xsd:int"
    LONG = "xsd:long"
    DOUBLE = "xsd:double"
    FLOAT = "xsd:float"
    ANY_SIMPLE = "xsd:anySimpleType"


_INT_RE = re.compile(r"^[+-]?\d+$")
_LONG_RE = re.compile(r"^[+-]?\d+L$")
_DOUBLE_RE = re.compile(r"^[+-]?\d+\.\d+([Ee][+-]?\d+)?$")
_FLOAT_RE = re.compile(r"^[+-]?\d+\.\d+([Ee][+-]?\d+)?F$")


@dataclass(frozen=True)
class TypedLiteral:
    """
    A leaf value together with its inferred datatype.

    Properties:
        type: LiteralType inferred from the cell syntax
        value: Lexical form with any wrapping syntax removed
            ("adult" for '"adult"', "http://x#a" for '#a' with base "http://x")
    """

    type: LiteralType
    value: str

    def to_python(self) -> Union[str, int, float]:
        """Convert to the closest Python value (strings stay strings)."""
        if self.type is LiteralType.INT:
            return int(self.value)
        if self.type is LiteralType.LONG:
            return int(self.value[:-1])
        if self.type is LiteralType.DOUBLE:
            return float(self.value)
        if self.type is LiteralType.FLOAT:
            return float(self.value[:-1])
        return self.value

    def __str__(self) -> str:
        return self.value


def infer_type(text: str) -> LiteralType:
    """Classify raw cell text by syntax only."""
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return LiteralType.STRING
    if len(text) >= 2 and text.startswith("<") and text.endswith(">"):
        return LiteralType.URI
    if text.startswith("#"):
        return LiteralType.URI
    if _INT_RE.match(text):
        return LiteralType.INT
    if _LONG_RE.match(text):
        return LiteralType.LONG
    if _DOUBLE_RE.match(text):
        return LiteralType.DOUBLE
    if _FLOAT_RE.match(text):
        return LiteralType.FLOAT
    return LiteralType.ANY_SIMPLE


def parse_literal(text: str, base_uri: str = "") -> TypedLiteral:
    """
    Parse a leaf cell into a TypedLiteral.

    Args:
        text: Raw cell text
        base_uri: Prefix for '#fragment' cells

    Returns:
        TypedLiteral with wrapping syntax removed
    """
    literal_type = infer_type(text)

    if literal_type is LiteralType.STRING:
        return TypedLiteral(literal_type, text[1:-1])
    if literal_type is LiteralType.URI:
        if text.startswith("#"):
            return TypedLiteral(literal_type, base_uri + text)
        return TypedLiteral(literal_type, text[1:-1])
    return TypedLiteral(literal_type, text)


class TypeTracker:
    """
    Set-once holder for the datatype of a tree under construction.

    The first leaf fixes the type. Every later leaf must match it.
    """

    def __init__(self) -> None:
        self._type: Optional[LiteralType] = None
        self._set_by: Optional[str] = None

    @property
    def inferred_type(self) -> Optional[LiteralType]:
        return self._type

    def check(self, literal_type: LiteralType, node_id: str) -> None:
        """
        Record or verify a leaf datatype.

        Raises:
            TypeInconsistencyError: If literal_type differs from the recorded type
        """
        if self._type is None:
            self._type = literal_type
            self._set_by = node_id
        elif self._type is not literal_type:
            raise TypeInconsistencyError(literal_type, self._type, node_id, self._set_by)


__all__ = [
    "LiteralType",
    "TypedLiteral",
    "TypeTracker",
    "infer_type",
    "parse_literal",
]
