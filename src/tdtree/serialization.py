"""
Serialization helpers for tree tables and compiled trees.

Tables round-trip losslessly through JSON/YAML as lists of row mappings.
Compiled trees export to a flat dict (JSON/YAML) for inspection, and
can be turned back into a table with tree_to_table(), which compiles to
an equal tree.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from tdtree.errors import TableError
from tdtree.literals import LiteralType, TypedLiteral
from tdtree.model import Branch, DecisionTree, Leaf, Node
from tdtree.table import (
    ATTRIBUTE_HEADING,
    FALSE_HEADING,
    NODE_ID_HEADING,
    OPERAND_HEADING,
    OPERATOR_HEADING,
    REQUIRED_HEADINGS,
    TRUE_HEADING,
    HeadedTable,
    table_from_records,
)


# =============================================================================
# TABLES
# =============================================================================


def table_to_json(table: HeadedTable) -> str:
    return json.dumps(table.records())


def table_from_json(s: str) -> HeadedTable:
    """Load a table written as a JSON list of row objects. Numbers keep their lexical form."""
    try:
        loaded = json.loads(s, parse_int=str, parse_float=str)
    except json.JSONDecodeError as e:
        raise TableError(f"Invalid JSON tree table: {e}") from e
    return _table_from_loaded(loaded)


def table_to_yaml(table: HeadedTable) -> str:
    return yaml.safe_dump(table.records(), sort_keys=False)


def table_from_yaml(s: str) -> HeadedTable:
    """
    Load a table written as a YAML list of row mappings.

    Every scalar is read as the text it was written as (BaseLoader), so
    unquoted True:/False: headings stay headings and an operand such as
    010 or 1.50 is kept verbatim. YAML still strips its own quotes: a
    string leaf is written as '"adult"' so the cell keeps its double
    quotes.
    """
    try:
        loaded = yaml.load(s, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise TableError(f"Invalid YAML tree table: {e}") from e
    return _table_from_loaded(loaded)


def _table_from_loaded(d: Any) -> HeadedTable:
    if not isinstance(d, list) or not all(isinstance(r, dict) for r in d):
        raise TableError("A serialized tree table must be a list of row mappings")
    return table_from_records(d)


# =============================================================================
# COMPILED TREES
# =============================================================================


def literal_to_cell(literal: TypedLiteral) -> str:
    """Write a literal back in leaf cell syntax."""
    if literal.type is LiteralType.STRING:
        return f'"{literal.value}"'
    if literal.type is LiteralType.URI:
        return f"<{literal.value}>"
    return literal.value


def _child_to_dict(node: Node) -> Dict[str, Any]:
    if isinstance(node, Leaf):
        return {
            "type": "leaf",
            "id": node.id,
            "datatype": node.literal.type.value,
            "value": node.literal.value,
        }
    return {"type": "ref", "id": node.id}


def node_to_dict(branch: Branch) -> Dict[str, Any]:
    """One branch; child branches are written as refs to their own entry."""
    decision = branch.decision
    return {
        "id": branch.id,
        "attribute": decision.attribute.identifier,
        "cardinality": decision.attribute.cardinality.value,
        "kind": decision.attribute.kind.value,
        "operator": decision.operator.value,
        "operand": decision.operand,
        "true": _child_to_dict(branch.on_true),
        "false": _child_to_dict(branch.on_false),
    }


def tree_to_dict(tree: DecisionTree) -> Dict[str, Any]:
    """
    Flat dict form: one entry per branch, root first, depth first.

    The form stays shallow however deep the tree is, and a shared
    branch is written once however many parents it has.
    """
    return {
        "inferred_type": tree.inferred_type.value,
        "base_uri": tree.base_uri,
        "root": tree.root.id,
        "nodes": [node_to_dict(n) for n in tree.iter_nodes() if isinstance(n, Branch)],
    }


def tree_to_json(tree: DecisionTree) -> str:
    return json.dumps(tree_to_dict(tree), sort_keys=True)


def tree_to_yaml(tree: DecisionTree) -> str:
    return yaml.safe_dump(tree_to_dict(tree), sort_keys=False)


def _child_cell(node: Node) -> str:
    if isinstance(node, Branch):
        return f"[{node.id}]"
    return literal_to_cell(node.literal)


def tree_to_table(tree: DecisionTree) -> HeadedTable:
    """
    Rebuild a table from a compiled tree, root row first.

    Only rows reachable from the root exist in a compiled tree, so
    unreachable rows of the source table are not reproduced.
    """
    rows: List[List[str]] = []
    for node in tree.iter_nodes():
        if not isinstance(node, Branch):
            continue
        cells = {
            NODE_ID_HEADING: node.id,
            ATTRIBUTE_HEADING: node.decision.attribute.identifier,
            OPERATOR_HEADING: node.decision.operator.value,
            OPERAND_HEADING: node.decision.operand,
            TRUE_HEADING: _child_cell(node.on_true),
            FALSE_HEADING: _child_cell(node.on_false),
        }
        rows.append([cells[h] for h in REQUIRED_HEADINGS])
    return HeadedTable(list(REQUIRED_HEADINGS), rows)


__all__ = [
    "literal_to_cell",
    "table_from_json",
    "table_from_yaml",
    "table_to_json",
    "table_to_yaml",
    "tree_to_dict",
    "tree_to_json",
    "tree_to_table",
    "tree_to_yaml",
]
