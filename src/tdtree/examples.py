"""
Example grading tree used by the demos and tests.

    root:  #score gt 50 ? [pass] : [fail]
    pass:  #score gt 90 ? "A" : "B"
    fail:  #score lt 10 ? "F" : "C"

plus a few subjects with scores.
"""
from tdtree.attributes import Cardinality, InMemoryAttributeModel, Kind
from tdtree.compiler import compile_tree
from tdtree.model import DecisionTree
from tdtree.table import HeadedTable, REQUIRED_HEADINGS, parse_table_string

GRADING_CSV = """Node ID,Attribute,Operator,Operand,True,False
root,#score,gt,50,[pass],[fail]
pass,#score,gt,90,"A","B"
fail,#score,lt,10,"F","C"
"""

EXAMPLE_SCORES = {"ann": 95, "bob": 60, "cat": 5, "dan": 20}


def build_example_model(scores=None) -> InMemoryAttributeModel:
    model = InMemoryAttributeModel()
    model.define("#score")
    model.define("#choice")
    model.define("#friends", Cardinality.MULTI, Kind.REFERENCE)
    for subject, score in (scores or EXAMPLE_SCORES).items():
        model.set_value(subject, "#score", score)
    return model


def build_example_table() -> HeadedTable:
    return parse_table_string(GRADING_CSV)


def build_example_tree(model: InMemoryAttributeModel = None) -> DecisionTree:
    return compile_tree(build_example_table(), model or build_example_model(), base_uri="")


def single_row_table(attribute: str, operator: str, operand: str, on_true: str, on_false: str,
                     node_id: str = "root") -> HeadedTable:
    """One-branch table, handy for trying a single operator."""
    return HeadedTable.from_rows(
        REQUIRED_HEADINGS,
        [[node_id, attribute, operator, operand, on_true, on_false]],
    )


def chain_table(length: int, attribute: str = "#score", operand: str = "10") -> HeadedTable:
    """
    A chain of length branches, each row's True column pointing at the next.

    A subject above operand walks every row and gets 1; anything else gets
    0 at the first row.
    """
    rows = [[f"n{i}", attribute, "gt", operand, f"[n{i + 1}]", "0"] for i in range(length - 1)]
    rows.append([f"n{length - 1}", attribute, "gt", operand, "1", "0"])
    return HeadedTable.from_rows(REQUIRED_HEADINGS, rows)
