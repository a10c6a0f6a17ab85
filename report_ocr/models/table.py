"""
Table data models.

Extracted tables are read-only once produced by the extraction client:
formatting derives display strings from them on demand and never
writes back into the rows.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Union

CellValue = Union[str, int, float]
RowRecord = Mapping[str, CellValue]


class ViewMode(Enum):
    """Layouts available for showing the active table."""
    TABLE = "table"
    LIST = "list"


class CellId(NamedTuple):
    """Position of a cell within the active table."""
    row: int
    column: int


@dataclass(frozen=True)
class TableData:
    """A single extracted table."""
    headers: tuple[str, ...]
    rows: tuple[RowRecord, ...] = ()
    title: Optional[str] = None
    summary: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(
            self,
            "rows",
            tuple(MappingProxyType(dict(row)) for row in self.rows),
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def contains(self, row: int, column: int) -> bool:
        """Whether a position lies inside the table (no negative indexing)."""
        return 0 <= row < self.row_count and 0 <= column < self.column_count

    def value_at(self, row: int, column: int) -> CellValue:
        """
        Look up a cell by position.

        Rows may omit a header's key; a missing value reads as an
        empty string. So does a position outside the table.
        """
        if not self.contains(row, column):
            return ""
        header = self.headers[column]
        return self.rows[row].get(header, "")

    def display_title(self, index: int, total: int) -> str:
        """Label used for the table's tab and heading."""
        if self.title:
            return self.title
        if total > 1:
            return f"Table {index + 1}"
        return "Extracted Data"


@dataclass(frozen=True)
class ExtractedData:
    """All tables returned by one extraction call."""
    tables: tuple[TableData, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "tables", tuple(self.tables))

    def __len__(self) -> int:
        return len(self.tables)

    def get(self, index: int) -> Optional[TableData]:
        """Return the table at ``index`` or None if out of range."""
        if 0 <= index < len(self.tables):
            return self.tables[index]
        return None

    @property
    def is_empty(self) -> bool:
        return not self.tables
