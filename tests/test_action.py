"""
Tests for DecisionTreeAction: tree file in, choices written to the model.
"""

import pytest
from tdtree.action import DecisionTreeAction
from tdtree.errors import (
    AttributeResolutionError,
    CompileError,
    MissingValueError,
    TableError,
    UndefinedNodeError,
)
from tdtree.examples import GRADING_CSV, build_example_model


@pytest.fixture
def tree_file(tmp_path):
    path = tmp_path / "grades.csv"
    path.write_text(GRADING_CSV, encoding="utf-8")
    return str(path)


class TestInitialise:
    """Loading the tree."""

    def test_compiles_tree(self, tree_file):
        action = DecisionTreeAction(tree_file, build_example_model(), base_uri="")
        tree = action.initialise()
        assert tree is action.tree
        assert tree.root.id == "root"
        assert action.choice.identifier == "#choice"

    def test_missing_file(self, tmp_path):
        action = DecisionTreeAction(str(tmp_path / "none.csv"), build_example_model())
        with pytest.raises(FileNotFoundError):
            action.initialise()

    def test_bad_tree_logged_and_raised(self, tmp_path, caplog):
        path = tmp_path / "bad.csv"
        path.write_text(GRADING_CSV.replace("[fail]", "[flop]"), encoding="utf-8")
        action = DecisionTreeAction(str(path), build_example_model(), base_uri="")

        with pytest.raises(UndefinedNodeError):
            action.initialise()
        assert "bad.csv" in caplog.text
        assert action.tree is None

    def test_bad_table(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        action = DecisionTreeAction(str(path), build_example_model())
        with pytest.raises(TableError):
            action.initialise()

    def test_unknown_choice_attribute(self, tree_file):
        action = DecisionTreeAction(tree_file, build_example_model(), choice_attribute="#grade")
        with pytest.raises(AttributeResolutionError):
            action.initialise()

    def test_multi_valued_choice_rejected(self, tree_file):
        model = build_example_model()
        action = DecisionTreeAction(tree_file, model, choice_attribute="#friends")
        with pytest.raises(CompileError, match="single-valued"):
            action.initialise()

    def test_semicolon_delimiter(self, tmp_path):
        path = tmp_path / "grades.csv"
        path.write_text(GRADING_CSV.replace(",", ";"), encoding="utf-8")
        action = DecisionTreeAction(str(path), build_example_model(), base_uri="", delimiter=";")
        assert action.initialise().root.decision.operand == "50"


class TestStep:
    """Deciding and storing the choice."""

    def test_sets_choice(self, tree_file):
        model = build_example_model()
        action = DecisionTreeAction(tree_file, model, base_uri="")
        action.initialise()

        literal = action.step("ann")

        assert literal.value == "A"
        assert model.get_value("ann", "#choice") == "A"

    def test_typed_choice(self, tmp_path):
        path = tmp_path / "bonus.csv"
        path.write_text(
            "Node ID,Attribute,Operator,Operand,True,False\n"
            "root,#score,ge,50,10,0\n",
            encoding="utf-8",
        )
        model = build_example_model()
        action = DecisionTreeAction(str(path), model, base_uri="")
        action.initialise()
        action.step("bob")
        assert model.get_value("bob", "#choice") == 10

    def test_uri_choice(self, tmp_path):
        path = tmp_path / "uri.csv"
        path.write_text(
            "Node ID,Attribute,Operator,Operand,True,False\n"
            "root,#score,ge,50,#pass,#fail\n",
            encoding="utf-8",
        )
        model = build_example_model()
        action = DecisionTreeAction(str(path), model, base_uri="http://example.org/school")
        action.initialise()
        action.step("cat")
        assert model.get_value("cat", "#choice") == "http://example.org/school#fail"

    def test_before_initialise(self, tree_file):
        action = DecisionTreeAction(tree_file, build_example_model())
        with pytest.raises(RuntimeError):
            action.step("ann")

    def test_failure_leaves_choice_unset(self, tree_file):
        model = build_example_model()
        action = DecisionTreeAction(tree_file, model, base_uri="")
        action.initialise()
        with pytest.raises(MissingValueError):
            action.step("nobody")
        assert model.get_value("nobody", "#choice") is None


class TestRun:
    """Stepping many subjects."""

    def test_run_all(self, tree_file):
        model = build_example_model()
        action = DecisionTreeAction(tree_file, model, base_uri="")
        action.initialise()

        failures = action.run(["ann", "bob", "cat", "dan"])

        assert failures == {}
        assert {s: model.get_value(s, "#choice") for s in ("ann", "bob", "cat", "dan")} == {
            "ann": "A", "bob": "B", "cat": "F", "dan": "C",
        }

    def test_run_skips_failures(self, tree_file):
        model = build_example_model()
        action = DecisionTreeAction(tree_file, model, base_uri="")
        action.initialise()

        failures = action.run(["ann", "ghost", "dan"])

        assert list(failures) == ["ghost"]
        assert isinstance(failures["ghost"], MissingValueError)
        assert model.get_value("dan", "#choice") == "C"
