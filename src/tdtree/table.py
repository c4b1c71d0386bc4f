"""
Tree tables (Layer 1: Raw Input -> headed table of strings).

A tree table has one row per branch node:

    Node ID, Attribute, Operator, Operand, True, False
    root,    #age,      ge,       18,      "adult", "minor"

Column order does not matter and extra columns are ignored. The first
data row is the root.

CSV Syntax Notes:
    - '"' is NOT a quote character. Leaf cells keep their quotes, so
      "adult" stays a string literal rather than becoming bare adult.
    - Cells cannot contain the delimiter. Tables that need one use
      another delimiter (TDTREE_CSV_DELIMITER, e.g. ";").
    - Backslashes are kept as written, so regex operands work unchanged
    - Cells are stripped; blank lines are skipped
"""

import csv
import warnings
from dataclasses import dataclass, field
from io import StringIO
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Set

from tdtree.config import load_settings
from tdtree.errors import TableError

NODE_ID_HEADING = "Node ID"
ATTRIBUTE_HEADING = "Attribute"
OPERATOR_HEADING = "Operator"
OPERAND_HEADING = "Operand"
TRUE_HEADING = "True"
FALSE_HEADING = "False"

REQUIRED_HEADINGS = (
    NODE_ID_HEADING,
    ATTRIBUTE_HEADING,
    OPERATOR_HEADING,
    OPERAND_HEADING,
    TRUE_HEADING,
    FALSE_HEADING,
)


class Table(Protocol):
    """What the compiler needs from a table."""

    def column_names(self) -> Set[str]: ...

    def row_count(self) -> int: ...

    def cell(self, row: int, column: str) -> str: ...


@dataclass
class HeadedTable:
    """
    Row/column grid of strings with named columns.

    Properties:
        headings: Column names in file order
        rows: Cell values, one list per data row (short rows read as "")
    """

    headings: List[str]
    rows: List[List[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(set(self.headings)) != len(self.headings):
            duplicates = {h for h in self.headings if self.headings.count(h) > 1}
            raise TableError(f"Duplicate column headings: {sorted(duplicates)}")
        self._index: Dict[str, int] = {h: i for i, h in enumerate(self.headings)}

    @classmethod
    def from_rows(cls, headings: Sequence[str], rows: Iterable[Sequence[str]]) -> "HeadedTable":
        return cls(list(headings), [list(r) for r in rows])

    def column_names(self) -> Set[str]:
        return set(self.headings)

    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row: int, column: str) -> str:
        """
        Cell text at (row, column).

        Raises:
            KeyError: If column is not a heading
            IndexError: If row is out of range
        """
        index = self._index[column]
        values = self.rows[row]
        return values[index] if index < len(values) else ""

    def records(self) -> List[Dict[str, str]]:
        """Rows as heading -> cell dicts."""
        return [{h: self.cell(r, h) for h in self.headings} for r in range(self.row_count())]


def table_from_records(
    records: Iterable[Mapping[str, object]],
    headings: Optional[Sequence[str]] = None,
) -> HeadedTable:
    """
    Build a table from mappings (e.g. YAML or JSON rows).

    Headings default to the required ones followed by any extra keys in
    first-seen order. Values are converted with str(); None becomes "".
    """
    records = list(records)
    if headings is None:
        headings = list(REQUIRED_HEADINGS)
        for record in records:
            for key in record:
                if key not in headings:
                    headings.append(key)
    rows = []
    for record in records:
        rows.append(["" if record.get(h) is None else str(record.get(h)).strip() for h in headings])
    return HeadedTable(list(headings), rows)


def parse_table_string(content: str, delimiter: Optional[str] = None) -> HeadedTable:
    """
    Parse CSV content into a HeadedTable.

    Args:
        content: CSV text, header line first
        delimiter: Cell delimiter (defaults to TDTREE_CSV_DELIMITER or ",")

    Raises:
        TableError: If the content has no header line
    """
    delimiter = delimiter or load_settings().csv_delimiter
    reader = csv.reader(
        StringIO(content),
        delimiter=delimiter,
        quoting=csv.QUOTE_NONE,
    )

    headings = None
    rows: List[List[str]] = []
    for line_num, row in enumerate(reader, start=1):
        cells = [c.strip() for c in row]
        if not any(cells):
            if headings is not None:
                warnings.warn(f"Skipping blank line {line_num}", UserWarning)
            continue
        if headings is None:
            headings = cells
            continue
        if len(cells) > len(headings):
            raise TableError(
                f"Line {line_num} has {len(cells)} cells but there are {len(headings)} headings"
            )
        rows.append(cells)

    if headings is None:
        raise TableError("Tree table is empty")

    return HeadedTable(headings, rows)


def parse_table_file(filepath: str, delimiter: Optional[str] = None) -> HeadedTable:
    """
    Parse a CSV file into a HeadedTable.

    Raises:
        FileNotFoundError: If file doesn't exist
        TableError: If parsing fails
    """
    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Tree table not found: {filepath}")

    return parse_table_string(content, delimiter=delimiter)


__all__ = [
    "ATTRIBUTE_HEADING",
    "FALSE_HEADING",
    "HeadedTable",
    "NODE_ID_HEADING",
    "OPERAND_HEADING",
    "OPERATOR_HEADING",
    "REQUIRED_HEADINGS",
    "TRUE_HEADING",
    "Table",
    "parse_table_file",
    "parse_table_string",
    "table_from_records",
]
