"""
Tests for attribute values and the in-memory attribute model.
"""

from datetime import date
from decimal import Decimal

import pytest
from tdtree.attributes import (
    Attribute,
    Cardinality,
    InMemoryAttributeModel,
    Kind,
    MultiValue,
    SingleValue,
)
from tdtree.errors import AttributeResolutionError, MissingValueError


@pytest.fixture
def model():
    model = InMemoryAttributeModel()
    model.define("#age")
    model.define("#tags", Cardinality.MULTI, Kind.SCALAR)
    model.define("#friends", Cardinality.MULTI, Kind.REFERENCE)
    return model


class TestValues:
    """Comparisons on SingleValue and MultiValue."""

    def test_single_compare(self):
        value = SingleValue(Attribute("#age"), 20)
        assert value.compare_to_string("18") > 0
        assert value.compare_to_string("20") == 0
        assert value.compare_to_string("30") < 0

    def test_single_reference_compares_text(self):
        value = SingleValue(Attribute("#home", kind=Kind.REFERENCE), "#paris")
        assert value.compare_to_string("#paris") == 0
        assert value.count() == 1
        assert list(value) == ["#paris"]

    def test_bool_as_string(self):
        assert SingleValue(Attribute("#ok"), False).as_string() == "false"

    def test_bad_coercion(self):
        value = SingleValue(Attribute("#ok"), True)
        with pytest.raises(ValueError):
            value.compare_to_string("maybe")

    def test_single_compare_other_types(self):
        assert SingleValue(Attribute("#price"), Decimal("1.10")).compare_to_string("1.1") == 0
        with pytest.raises(ValueError):
            SingleValue(Attribute("#born"), date(2000, 1, 1)).compare_to_string("2000")

    def test_multi_contains_skips_other_types(self):
        value = MultiValue(Attribute("#tags", Cardinality.MULTI), [1, "x"])
        assert value.contains_string("x")
        assert not value.contains_string("y")

    def test_multi_has_no_order(self):
        value = MultiValue(Attribute("#tags", Cardinality.MULTI), ["a"])
        with pytest.raises(TypeError):
            value.compare_to_string("a")

    def test_multi_as_string(self):
        value = MultiValue(Attribute("#tags", Cardinality.MULTI), ["a", 2])
        assert value.as_string() == "a|2"
        assert value.count() == 2


class TestInMemoryAttributeModel:
    """Dictionary-backed store."""

    def test_resolve(self, model):
        attribute = model.resolve_attribute("#friends")
        assert attribute == Attribute("#friends", Cardinality.MULTI, Kind.REFERENCE)
        assert model.resolved == {"#friends"}

    def test_resolve_unknown(self, model):
        with pytest.raises(AttributeResolutionError) as excinfo:
            model.resolve_attribute("#height")
        assert excinfo.value.identifier == "#height"
        assert excinfo.value.node_id is None

    def test_redefine_same_shape(self, model):
        assert model.define("#age") == Attribute("#age")

    def test_redefine_other_shape(self, model):
        with pytest.raises(ValueError, match="already defined"):
            model.define("#age", Cardinality.MULTI)

    def test_single_value(self, model):
        model.set_value("alice", "#age", 20)
        value = model.current_value(model.resolve_attribute("#age"), "alice")
        assert isinstance(value, SingleValue)
        assert value.value == 20

    def test_multi_value_deduplicated(self, model):
        model.set_value("alice", "#friends", ["#bob", "#carol", "#bob"])
        value = model.current_value(model.resolve_attribute("#friends"), "alice")
        assert isinstance(value, MultiValue)
        assert value.values == ("#bob", "#carol")

    def test_multi_value_needs_iterable(self, model):
        with pytest.raises(TypeError):
            model.set_value("alice", "#tags", "abc")

    def test_missing_value(self, model):
        with pytest.raises(MissingValueError) as excinfo:
            model.current_value(model.resolve_attribute("#age"), "ghost")
        assert excinfo.value.subject == "ghost"

    def test_none_clears(self, model):
        model.set_value("alice", "#age", 20)
        model.set_value("alice", "#age", None)
        assert model.get_value("alice", "#age") is None
        assert model.subjects() == set()

    def test_set_unknown_attribute(self, model):
        with pytest.raises(AttributeResolutionError):
            model.set_value("alice", "#height", 170)
