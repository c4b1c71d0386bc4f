"""
Graphviz DOT diagram generator for compiled decision trees.

Converts a DecisionTree into Graphviz DOT format for visualization.
Branches are diamonds, leaves are boxes, edges are labelled with the
decision outcome that follows them.

Supports two modes:
    - SIMPLE: Node ids on branches, "true"/"false" on edges
    - DETAILED: Decisions on branches, leaf datatypes on leaves
"""

import re
from enum import Enum
from typing import List

from tdtree.model import Branch, DecisionTree, Leaf

_BARE_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"          # Just tree shape
    DETAILED = "detailed"      # Include decisions and leaf types


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace("\\", "\\\\")
    s = s.replace('"', '\\"')
    s = s.replace("\n", "\\n")
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Quote an identifier for DOT unless it is a plain name."""
    if _BARE_ID_RE.match(identifier):
        return identifier
    return _escape_dot_string(identifier)


def generate_dot(tree: DecisionTree, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a compiled tree.

    Args:
        tree: DecisionTree to visualize
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines: List[str] = []

    # Header
    lines.append("digraph decision_tree {")
    lines.append('  node [shape=diamond, fontname="Helvetica"];')
    lines.append('  edge [fontname="Helvetica"];')

    # =========================================================================
    # NODES
    # =========================================================================

    nodes = list(tree.iter_nodes())

    for node in nodes:
        node_id = _escape_dot_id(node.id)
        if isinstance(node, Leaf):
            label = node.literal.value
            if mode == DotMode.DETAILED:
                label = f"{label}\n({node.literal.type.value})"
            lines.append(f"  {node_id} [shape=box, label={_escape_dot_string(label)}];")
        else:
            label = node.id
            if mode == DotMode.DETAILED:
                label = f"{node.id}\n{node.decision}"
            lines.append(f"  {node_id} [label={_escape_dot_string(label)}];")

    # =========================================================================
    # EDGES
    # =========================================================================

    for node in nodes:
        if not isinstance(node, Branch):
            continue
        from_id = _escape_dot_id(node.id)
        lines.append(f'  {from_id} -> {_escape_dot_id(node.on_true.id)} [label="true"];')
        lines.append(f'  {from_id} -> {_escape_dot_id(node.on_false.id)} [label="false"];')

    # Footer
    lines.append("}")

    return "\n".join(lines)


def save_dot_file(tree: DecisionTree, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        tree: DecisionTree to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(tree, mode=mode)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
