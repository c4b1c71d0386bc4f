"""
Test the example grading tree built from the CSV snippet.

Validates that the example builder wires the table, attribute model and
subjects together into a tree that grades every sample subject.
"""

from tdtree.evaluator import evaluate_many
from tdtree.examples import EXAMPLE_SCORES, build_example_model, build_example_tree, single_row_table
from tdtree.literals import LiteralType


def test_example_tree_structure():
    tree = build_example_tree()

    assert tree.root.id == "root"
    assert set(tree.nodes) == {"root", "pass", "fail"}
    assert tree.inferred_type is LiteralType.STRING
    assert sorted(leaf.literal.value for leaf in tree.leaves()) == ["A", "B", "C", "F"]
    assert set(tree.attributes()) == {"#score"}


def test_example_subjects_graded():
    results = evaluate_many(build_example_tree(), EXAMPLE_SCORES)
    assert {s: r.value for s, r in results.items()} == {"ann": "A", "bob": "B", "cat": "F", "dan": "C"}


def test_example_model_shapes():
    model = build_example_model({"zoe": 75})
    attributes = model.attributes()

    assert set(attributes) == {"#score", "#choice", "#friends"}
    assert attributes["#friends"].shape[0].value == "multi-valued"
    assert model.subjects() == {"zoe"}


def test_single_row_table():
    table = single_row_table("#score", "ge", "18", '"yes"', '"no"', node_id="start")
    assert table.records() == [{
        "Node ID": "start",
        "Attribute": "#score",
        "Operator": "ge",
        "Operand": "18",
        "True": '"yes"',
        "False": '"no"',
    }]
