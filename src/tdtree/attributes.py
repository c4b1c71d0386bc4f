"""
Attribute model: the boundary between decision trees and subject state.

A decision tree never stores subject data. It asks an AttributeModel to
    - resolve an attribute identifier (at compile time), and
    - hand over a subject's current value for that attribute (at
      evaluation time).

Attributes have a shape:
    cardinality: SINGLE (one value) or MULTI (a set of values)
    kind:        SCALAR (data value) or REFERENCE (identifier of another entity)

Operators check the shape before touching a value.

InMemoryAttributeModel is a dictionary-backed implementation used by the
action adapter, the demos and the tests. Implementations backed by other
stores must be safe for concurrent reads of different subjects if trees
are evaluated from several threads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Iterable, Iterator, Set, Tuple

from tdtree.errors import AttributeResolutionError, MissingValueError


class Cardinality(Enum):
    """How many values an attribute holds per subject."""
    SINGLE = "single-valued"
    MULTI = "multi-valued"


class Kind(Enum):
    """What an attribute's values are."""
    SCALAR = "scalar"
    REFERENCE = "reference"


@dataclass(frozen=True)
class Attribute:
    """
    Resolved attribute descriptor.

    Properties:
        identifier: Identifier as written in the tree table (e.g. "#age")
        cardinality: SINGLE or MULTI
        kind: SCALAR or REFERENCE
    """

    identifier: str
    cardinality: Cardinality = Cardinality.SINGLE
    kind: Kind = Kind.SCALAR

    @property
    def shape(self) -> Tuple[Cardinality, Kind]:
        return (self.cardinality, self.kind)


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce(sample: Any, text: str) -> Any:
    """
    Interpret text as a value of the same Python type as sample.

    Raises:
        ValueError: If text cannot be read as that type
    """
    if isinstance(sample, bool):
        lowered = text.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(f"'{text}' is not a boolean")
    if isinstance(sample, int):
        return int(text)
    if isinstance(sample, float):
        return float(text)
    if isinstance(sample, str):
        return text
    try:
        return type(sample)(text)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ValueError(f"'{text}' is not a {type(sample).__name__}") from e


def _compare(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


class AttributeValue(ABC):
    """A subject's current value(s) for one attribute."""

    def __init__(self, attribute: Attribute):
        self.attribute = attribute

    @abstractmethod
    def compare_to_string(self, operand: str) -> int:
        """Negative, zero or positive as the value is below, equal to or above operand."""

    @abstractmethod
    def as_string(self) -> str:
        """String form used for regex matching and set membership."""

    @abstractmethod
    def contains_string(self, operand: str) -> bool:
        """Whether operand is one of the values."""

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of values held."""


class SingleValue(AttributeValue):
    """Value of a single-valued attribute."""

    def __init__(self, attribute: Attribute, value: Any):
        super().__init__(attribute)
        self.value = value

    def compare_to_string(self, operand: str) -> int:
        # References compare by identifier, scalars in their natural order
        if self.attribute.kind is Kind.REFERENCE:
            return _compare(_to_string(self.value), operand)
        if isinstance(self.value, str):
            return _compare(self.value, operand)
        return _compare(self.value, _coerce(self.value, operand))

    def as_string(self) -> str:
        return _to_string(self.value)

    def contains_string(self, operand: str) -> bool:
        return self.compare_to_string(operand) == 0

    def __iter__(self) -> Iterator[Any]:
        yield self.value

    def count(self) -> int:
        return 1

    def __repr__(self) -> str:
        return f"SingleValue({self.attribute.identifier}={self.value!r})"


class MultiValue(AttributeValue):
    """Values of a multi-valued attribute (no duplicates, order irrelevant)."""

    def __init__(self, attribute: Attribute, values: Iterable[Any]):
        super().__init__(attribute)
        self.values = tuple(values)

    def compare_to_string(self, operand: str) -> int:
        raise TypeError(f"Multi-valued attribute '{self.attribute.identifier}' has no ordering")

    def as_string(self) -> str:
        return "|".join(_to_string(v) for v in self.values)

    def contains_string(self, operand: str) -> bool:
        if self.attribute.kind is Kind.REFERENCE:
            return operand in {_to_string(v) for v in self.values}
        for value in self.values:
            if isinstance(value, str):
                if value == operand:
                    return True
            else:
                try:
                    if value == _coerce(value, operand):
                        return True
                except ValueError:
                    continue
        return False

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def count(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"MultiValue({self.attribute.identifier}={list(self.values)!r})"


class AttributeModel(ABC):
    """Interface a decision tree needs from the store holding subject state."""

    @abstractmethod
    def resolve_attribute(self, identifier: str) -> Attribute:
        """
        Resolve an identifier to an Attribute.

        Raises:
            AttributeResolutionError: If the identifier is unknown
        """

    @abstractmethod
    def current_value(self, attribute: Attribute, subject: Hashable) -> AttributeValue:
        """
        Fetch the subject's existing value for the attribute.

        Raises:
            MissingValueError: If the subject has no value yet
        """


class WritableAttributeModel(AttributeModel):
    """AttributeModel that can also store a subject's value."""

    @abstractmethod
    def set_value(self, subject: Hashable, identifier: str, value: Any) -> None:
        """Store value as the subject's value for the attribute."""


class InMemoryAttributeModel(WritableAttributeModel):
    """
    Dictionary-backed AttributeModel.

    Example:
        model = InMemoryAttributeModel()
        model.define("#age")
        model.define("#friends", Cardinality.MULTI, Kind.REFERENCE)
        model.set_value("alice", "#age", 20)
        model.set_value("alice", "#friends", ["#bob", "#carol"])

    `resolved` records every identifier a compiled tree depends on.
    """

    def __init__(self) -> None:
        self._attributes: Dict[str, Attribute] = {}
        self._values: Dict[Tuple[Hashable, str], Any] = {}
        self.resolved: Set[str] = set()

    def define(
        self,
        identifier: str,
        cardinality: Cardinality = Cardinality.SINGLE,
        kind: Kind = Kind.SCALAR,
    ) -> Attribute:
        """Declare an attribute. Re-declaring with a different shape is an error."""
        attribute = Attribute(identifier, cardinality, kind)
        existing = self._attributes.get(identifier)
        if existing is not None and existing != attribute:
            raise ValueError(
                f"Attribute '{identifier}' already defined as "
                f"{existing.cardinality.value} {existing.kind.value}"
            )
        self._attributes[identifier] = attribute
        return attribute

    def attributes(self) -> Dict[str, Attribute]:
        return dict(self._attributes)

    def set_value(self, subject: Hashable, identifier: str, value: Any) -> None:
        """
        Set a subject's value. Multi-valued attributes take an iterable;
        None removes the value.
        """
        attribute = self._lookup(identifier)
        key = (subject, identifier)
        if value is None:
            self._values.pop(key, None)
            return
        if attribute.cardinality is Cardinality.MULTI:
            if isinstance(value, (str, bytes)):
                raise TypeError(f"Multi-valued attribute '{identifier}' needs an iterable of values")
            values = []
            for item in value:
                if item not in values:
                    values.append(item)
            self._values[key] = tuple(values)
        else:
            self._values[key] = value

    def get_value(self, subject: Hashable, identifier: str) -> Any:
        """Raw stored value, or None."""
        return self._values.get((subject, identifier))

    def subjects(self) -> Set[Hashable]:
        return {subject for subject, _ in self._values}

    def resolve_attribute(self, identifier: str) -> Attribute:
        attribute = self._lookup(identifier)
        self.resolved.add(identifier)
        return attribute

    def current_value(self, attribute: Attribute, subject: Hashable) -> AttributeValue:
        key = (subject, attribute.identifier)
        if key not in self._values:
            raise MissingValueError(subject, attribute.identifier)
        stored = self._values[key]
        if attribute.cardinality is Cardinality.MULTI:
            return MultiValue(attribute, stored)
        return SingleValue(attribute, stored)

    def _lookup(self, identifier: str) -> Attribute:
        try:
            return self._attributes[identifier]
        except KeyError:
            raise AttributeResolutionError(identifier) from None


__all__ = [
    "Attribute",
    "AttributeModel",
    "AttributeValue",
    "Cardinality",
    "InMemoryAttributeModel",
    "Kind",
    "MultiValue",
    "SingleValue",
    "WritableAttributeModel",
]
