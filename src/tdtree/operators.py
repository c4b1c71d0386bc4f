"""
Operator algebra for decision nodes.

Every operator is only legal for one attribute shape:

    Single + Scalar     eq ne gt ge lt le
                        match mismatch          (regex, full match)
                        within outwith          (operand is a|b|c)
    Multi + Scalar      in out                  (operand is one of the values)
    Single + Reference  is isnt
                        oneof noneof            (operand is a|b|c)
    Multi + Reference   has hasnt               (operand is one of the values)
                        #eq #ne #gt #ge #lt #le (number of values vs operand)

The shape is checked first. A wrong shape raises ShapeViolationError
without any method of the value being called.
"""

import re
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from tdtree.attributes import Attribute, AttributeValue, Cardinality, Kind
from tdtree.errors import OperandError, ShapeViolationError, UnknownOperatorError

LIST_SEPARATOR = "|"


class Operator(Enum):
    """Decision operators, valued by their spelling in the Operator column."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    MATCH = "match"
    MISMATCH = "mismatch"
    WITHIN = "within"
    OUTWITH = "outwith"
    IN = "in"
    OUT = "out"
    IS = "is"
    ISNT = "isnt"
    ONEOF = "oneof"
    NONEOF = "noneof"
    HAS = "has"
    HASNT = "hasnt"
    CARD_EQ = "#eq"
    CARD_NE = "#ne"
    CARD_GT = "#gt"
    CARD_GE = "#ge"
    CARD_LT = "#lt"
    CARD_LE = "#le"

    @classmethod
    def parse(cls, name: str, node_id: Optional[str] = None) -> "Operator":
        """
        Look up an operator by its table spelling.

        Raises:
            UnknownOperatorError: If name is not an operator
        """
        try:
            return cls(name.strip())
        except ValueError:
            raise UnknownOperatorError(name, node_id) from None

    @property
    def requires(self) -> Tuple[Cardinality, Kind]:
        """Attribute shape this operator can be applied to."""
        return _REQUIRES[self]

    def accepts(self, attribute: Attribute) -> bool:
        return attribute.shape == self.requires

    def check(self, attribute: Attribute) -> None:
        """
        Raises:
            ShapeViolationError: If attribute has the wrong shape for this operator
        """
        if not self.accepts(attribute):
            raise ShapeViolationError(self, attribute)

    def decide(self, value: AttributeValue, operand: str) -> bool:
        """
        Apply the operator to a subject's value.

        Raises:
            ShapeViolationError: If the value's attribute has the wrong shape
            OperandError: If the operand cannot be read the way this operator needs
        """
        self.check(value.attribute)
        try:
            return _RULES[self](value, operand)
        except re.error as e:
            raise OperandError(self, operand, f"invalid regular expression ({e})") from e
        except (TypeError, ValueError) as e:
            raise OperandError(self, operand, str(e)) from e

    def __str__(self) -> str:
        return self.value


def split_alternatives(operand: str) -> set:
    """Split a within/oneof operand on the literal list separator."""
    return set(operand.split(LIST_SEPARATOR))


def _within(value: AttributeValue, operand: str) -> bool:
    return value.as_string() in split_alternatives(operand)


def _matches(value: AttributeValue, operand: str) -> bool:
    return re.fullmatch(operand, value.as_string()) is not None


def _cardinality(operand: str) -> int:
    try:
        return int(operand.strip())
    except ValueError:
        raise ValueError(f"'{operand}' is not an integer count") from None


_SINGLE_SCALAR = (Cardinality.SINGLE, Kind.SCALAR)
_MULTI_SCALAR = (Cardinality.MULTI, Kind.SCALAR)
_SINGLE_REFERENCE = (Cardinality.SINGLE, Kind.REFERENCE)
_MULTI_REFERENCE = (Cardinality.MULTI, Kind.REFERENCE)

_REQUIRES: Dict[Operator, Tuple[Cardinality, Kind]] = {
    Operator.EQ: _SINGLE_SCALAR,
    Operator.NE: _SINGLE_SCALAR,
    Operator.GT: _SINGLE_SCALAR,
    Operator.GE: _SINGLE_SCALAR,
    Operator.LT: _SINGLE_SCALAR,
    Operator.LE: _SINGLE_SCALAR,
    Operator.MATCH: _SINGLE_SCALAR,
    Operator.MISMATCH: _SINGLE_SCALAR,
    Operator.WITHIN: _SINGLE_SCALAR,
    Operator.OUTWITH: _SINGLE_SCALAR,
    Operator.IN: _MULTI_SCALAR,
    Operator.OUT: _MULTI_SCALAR,
    Operator.IS: _SINGLE_REFERENCE,
    Operator.ISNT: _SINGLE_REFERENCE,
    Operator.ONEOF: _SINGLE_REFERENCE,
    Operator.NONEOF: _SINGLE_REFERENCE,
    Operator.HAS: _MULTI_REFERENCE,
    Operator.HASNT: _MULTI_REFERENCE,
    Operator.CARD_EQ: _MULTI_REFERENCE,
    Operator.CARD_NE: _MULTI_REFERENCE,
    Operator.CARD_GT: _MULTI_REFERENCE,
    Operator.CARD_GE: _MULTI_REFERENCE,
    Operator.CARD_LT: _MULTI_REFERENCE,
    Operator.CARD_LE: _MULTI_REFERENCE,
}

_RULES: Dict[Operator, Callable[[AttributeValue, str], bool]] = {
    Operator.EQ: lambda v, o: v.compare_to_string(o) == 0,
    Operator.NE: lambda v, o: v.compare_to_string(o) != 0,
    Operator.GT: lambda v, o: v.compare_to_string(o) > 0,
    Operator.GE: lambda v, o: v.compare_to_string(o) >= 0,
    Operator.LT: lambda v, o: v.compare_to_string(o) < 0,
    Operator.LE: lambda v, o: v.compare_to_string(o) <= 0,
    Operator.MATCH: _matches,
    Operator.MISMATCH: lambda v, o: not _matches(v, o),
    Operator.WITHIN: _within,
    Operator.OUTWITH: lambda v, o: not _within(v, o),
    Operator.IN: lambda v, o: v.contains_string(o),
    Operator.OUT: lambda v, o: not v.contains_string(o),
    Operator.IS: lambda v, o: v.compare_to_string(o) == 0,
    Operator.ISNT: lambda v, o: v.compare_to_string(o) != 0,
    Operator.ONEOF: _within,
    Operator.NONEOF: lambda v, o: not _within(v, o),
    Operator.HAS: lambda v, o: v.contains_string(o),
    Operator.HASNT: lambda v, o: not v.contains_string(o),
    Operator.CARD_EQ: lambda v, o: v.count() == _cardinality(o),
    Operator.CARD_NE: lambda v, o: v.count() != _cardinality(o),
    Operator.CARD_GT: lambda v, o: v.count() > _cardinality(o),
    Operator.CARD_GE: lambda v, o: v.count() >= _cardinality(o),
    Operator.CARD_LT: lambda v, o: v.count() < _cardinality(o),
    Operator.CARD_LE: lambda v, o: v.count() <= _cardinality(o),
}


__all__ = ["LIST_SEPARATOR", "Operator", "split_alternatives"]
