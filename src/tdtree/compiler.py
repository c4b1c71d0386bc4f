"""
Tree compiler (Layer 2: headed table -> DecisionTree).

Each row defines one branch. The True/False cells either hold a leaf
literal or refer to another row as [node id]. Rows may be referred to
before they appear, so the compiler resolves references depth first,
starting at the first data row (the root).

Checks, all fatal for the whole table:
    - all required headings present            SchemaError
    - no node id defined by two rows           DuplicateNodeError
    - no node that contains itself             CyclicReferenceError
    - every [id] names an existing row         UndefinedNodeError
    - every operator is known                  UnknownOperatorError
    - every attribute resolves                 AttributeResolutionError
    - all leaves share one datatype            TypeInconsistencyError

Either a complete DecisionTree is returned or an error is raised.
Rows that are never referenced from the root are not compiled (see
tdtree.analyzer for reporting them).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from tdtree.attributes import AttributeModel
from tdtree.config import load_settings
from tdtree.errors import (
    AttributeResolutionError,
    CyclicReferenceError,
    DuplicateNodeError,
    SchemaError,
    UndefinedNodeError,
)
from tdtree.literals import TypeTracker, parse_literal
from tdtree.model import Branch, Decision, DecisionTree, Leaf, Node
from tdtree.operators import Operator
from tdtree.table import (
    ATTRIBUTE_HEADING,
    FALSE_HEADING,
    NODE_ID_HEADING,
    OPERAND_HEADING,
    OPERATOR_HEADING,
    REQUIRED_HEADINGS,
    TRUE_HEADING,
    Table,
)

logger = logging.getLogger(__name__)


def parse_reference(cell: str) -> Optional[str]:
    """
    Return the node id of a [id] cell, or None if the cell is a literal.

    "[]" is not a reference; it is an ANY_SIMPLE leaf.
    """
    if cell.startswith("[") and cell.endswith("]") and len(cell) > 2:
        return cell[1:-1]
    return None


def index_rows(table: Table) -> Dict[str, int]:
    """
    Map Node ID -> row index.

    Raises:
        SchemaError: If a required heading is missing or there are no rows
        DuplicateNodeError: If two rows share a Node ID
    """
    missing = set(REQUIRED_HEADINGS) - table.column_names()
    if missing:
        raise SchemaError(
            f"The decision tree table does not contain all the required headings: "
            f"missing {sorted(missing)}",
            missing=missing,
        )
    if table.row_count() == 0:
        raise SchemaError("The decision tree table has no rows")

    rows: Dict[str, int] = {}
    for i in range(table.row_count()):
        node_id = table.cell(i, NODE_ID_HEADING)
        if node_id in rows:
            raise DuplicateNodeError(node_id)
        rows[node_id] = i
    return rows


@dataclass
class _PendingRow:
    """A row whose children are still being resolved."""

    node_id: str
    row: int
    children: List[Node] = field(default_factory=list)


class _TreeBuilder:
    """
    Mutable state of one compilation.

    Owned by a single compile_tree() call and never exposed: the result
    is frozen into a DecisionTree once the root has been built.

    Rows are compiled post-order with an explicit stack, True child
    before False child, so the depth of a table is not limited by the
    interpreter's recursion limit.
    """

    def __init__(self, table: Table, attribute_model: AttributeModel, base_uri: str):
        self.table = table
        self.attribute_model = attribute_model
        self.base_uri = base_uri
        self.rows = index_rows(table)
        self.nodes: Dict[str, Branch] = {}
        self.in_progress: Set[str] = set()
        self.types = TypeTracker()

    def build(self) -> DecisionTree:
        root = self.compile_from(0)
        return DecisionTree(
            root=root,
            nodes=self.nodes,
            inferred_type=self.types.inferred_type,
            base_uri=self.base_uri,
            attribute_model=self.attribute_model,
        )

    def compile_from(self, row: int) -> Branch:
        stack = [self.open_row(row)]
        while True:
            pending = stack[-1]
            if len(pending.children) == 2:
                stack.pop()
                branch = self.close_row(pending)
                if not stack:
                    return branch
                stack[-1].children.append(branch)
                continue

            if pending.children:
                column, suffix = FALSE_HEADING, "F"
            else:
                column, suffix = TRUE_HEADING, "T"
            text = self.table.cell(pending.row, column)
            target = parse_reference(text)

            if target is None:
                pending.children.append(self.make_leaf(pending.node_id, text, suffix))
            elif target not in self.rows:
                raise UndefinedNodeError(target, pending.node_id, column)
            elif target in self.nodes:
                # Several references to one row share the compiled node
                pending.children.append(self.nodes[target])
            elif target in self.in_progress:
                ids = [p.node_id for p in stack]
                raise CyclicReferenceError(target, ids[ids.index(target):] + [target])
            else:
                stack.append(self.open_row(self.rows[target]))

    def open_row(self, row: int) -> _PendingRow:
        node_id = self.table.cell(row, NODE_ID_HEADING)
        self.in_progress.add(node_id)
        return _PendingRow(node_id, row)

    def close_row(self, pending: _PendingRow) -> Branch:
        cell = self.table.cell
        node_id = pending.node_id
        self.in_progress.discard(node_id)

        identifier = cell(pending.row, ATTRIBUTE_HEADING)
        try:
            attribute = self.attribute_model.resolve_attribute(identifier)
        except AttributeResolutionError as e:
            if e.node_id is None:
                raise AttributeResolutionError(identifier, node_id) from e
            raise

        operator = Operator.parse(cell(pending.row, OPERATOR_HEADING), node_id)
        decision = Decision(attribute, operator, cell(pending.row, OPERAND_HEADING))

        on_true, on_false = pending.children
        branch = Branch(node_id, decision, on_true, on_false)
        self.nodes[node_id] = branch
        logger.debug("Compiled node %s: %s", node_id, decision)
        return branch

    def make_leaf(self, node_id: str, text: str, suffix: str) -> Leaf:
        leaf_id = f"Leaf_{node_id}_{suffix}"
        literal = parse_literal(text, self.base_uri)
        self.types.check(literal.type, leaf_id)
        return Leaf(leaf_id, literal)


def compile_tree(
    table: Table,
    attribute_model: AttributeModel,
    base_uri: Optional[str] = None,
) -> DecisionTree:
    """
    Compile a tree table into a DecisionTree.

    Args:
        table: Table with the Node ID / Attribute / Operator / Operand /
            True / False headings; row 0 is the root
        attribute_model: Resolves the Attribute column; also the default
            source of subject values when the tree is evaluated
        base_uri: Prefix for '#fragment' leaves (defaults to TDTREE_BASE_URI)

    Returns:
        Immutable DecisionTree

    Raises:
        CompileError: Any of the subclasses listed in the module docstring
    """
    if base_uri is None:
        base_uri = load_settings().base_uri

    tree = _TreeBuilder(table, attribute_model, base_uri).build()
    logger.info(
        "Compiled decision tree: %d branch node(s), root %s, type %s",
        len(tree.nodes),
        tree.root.id,
        tree.inferred_type.value,
    )
    return tree


__all__ = ["compile_tree", "index_rows", "parse_reference"]
