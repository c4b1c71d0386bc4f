"""
Tree Analyzer: diagnostics and inventory of compiled decision trees.

This module provides lightweight analysis of a DecisionTree (and,
optionally, the table it came from):
    - Attribute usage inventory
    - Depth and size of the tree
    - Rows the root never reaches
    - Operators that can never succeed on their attribute's shape
    - Nodes shared by several parents

IMPORTANT: This is read-only. It does NOT modify the tree. A tree with
warnings still compiles and evaluates; shape mismatches only fail when
an evaluation reaches them.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from tdtree.model import Branch, DecisionTree, Leaf, Node
from tdtree.table import NODE_ID_HEADING, Table


@dataclass
class ShapeMismatch:
    """An operator applied to an attribute of the wrong shape."""
    node_id: str
    operator: str
    attribute: str
    required: str
    actual: str


@dataclass
class TreeReport:
    """Analysis report for a compiled tree."""

    inferred_type: str
    total_rows: int = 0
    total_branches: int = 0
    total_leaves: int = 0
    max_depth: int = 0

    # Attribute usage
    attribute_usage: Dict[str, int] = field(default_factory=dict)

    # Structure
    unreachable_rows: Set[str] = field(default_factory=set)
    shared_nodes: Set[str] = field(default_factory=set)
    outcomes: Set[str] = field(default_factory=set)

    # Operator legality
    shape_mismatches: List[ShapeMismatch] = field(default_factory=list)

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _depth(root: Node) -> int:
    """Number of decisions on the longest path from root to a leaf."""
    if isinstance(root, Leaf):
        return 0
    memo: Dict[str, int] = {}
    stack = [root]
    while stack:
        node = stack[-1]
        if node.id in memo:
            stack.pop()
            continue
        children = [c for c in (node.on_true, node.on_false) if isinstance(c, Branch)]
        waiting = [c for c in children if c.id not in memo]
        if waiting:
            stack.extend(waiting)
            continue
        stack.pop()
        memo[node.id] = 1 + max((memo[c.id] for c in children), default=0)
    return memo[root.id]


def analyze_tree(tree: DecisionTree, table: Optional[Table] = None) -> TreeReport:
    """
    Perform analysis of a compiled tree.

    Args:
        tree: Compiled tree
        table: Source table; needed to report unreachable rows

    Returns:
        TreeReport with metrics and warnings
    """
    report = TreeReport(inferred_type=tree.inferred_type.value)

    branches = list(tree.nodes.values())
    report.total_branches = len(branches)
    report.total_rows = table.row_count() if table is not None else len(branches)

    # =========================================================================
    # 1. ATTRIBUTES AND OPERATORS
    # =========================================================================

    usage: Counter = Counter()
    for branch in branches:
        decision = branch.decision
        usage[decision.attribute.identifier] += 1
        if not decision.operator.accepts(decision.attribute):
            cardinality, kind = decision.operator.requires
            report.shape_mismatches.append(ShapeMismatch(
                node_id=branch.id,
                operator=decision.operator.value,
                attribute=decision.attribute.identifier,
                required=f"{cardinality.value} {kind.value}",
                actual=f"{decision.attribute.cardinality.value} {decision.attribute.kind.value}",
            ))
    report.attribute_usage = dict(usage)

    # =========================================================================
    # 2. STRUCTURE
    # =========================================================================

    parents: Counter = Counter()
    for branch in branches:
        for child in (branch.on_true, branch.on_false):
            if isinstance(child, Branch):
                parents[child.id] += 1
            else:
                report.total_leaves += 1
                report.outcomes.add(child.literal.value)
    report.shared_nodes = {node_id for node_id, n in parents.items() if n > 1}
    report.max_depth = _depth(tree.root)

    if table is not None:
        for row in range(table.row_count()):
            node_id = table.cell(row, NODE_ID_HEADING)
            if node_id not in tree.nodes:
                report.unreachable_rows.add(node_id)

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    if report.unreachable_rows:
        report.add_warning(
            f"Rows not reachable from the root: {', '.join(sorted(report.unreachable_rows))}"
        )

    for mismatch in report.shape_mismatches:
        report.add_warning(
            f"Node {mismatch.node_id}: '{mismatch.operator}' needs a {mismatch.required} "
            f"attribute but {mismatch.attribute} is {mismatch.actual}"
        )

    if len(report.outcomes) == 1:
        report.add_warning(f"Every leaf gives the same outcome: {next(iter(report.outcomes))}")

    return report


__all__ = ["ShapeMismatch", "TreeReport", "analyze_tree"]
