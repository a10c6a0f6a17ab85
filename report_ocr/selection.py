"""
Active-table and cell selection state for the results view.

Selection and the transient "copied" flag are kept here, keyed by
CellId, so the extracted tables themselves stay untouched.
"""

import logging
import time
from typing import Iterable, Optional

from report_ocr.models.table import CellId, ExtractedData, TableData

logger = logging.getLogger(__name__)

COPIED_FLASH_SECONDS = 1.5


class TableSelection:
    """
    Tracks which table is active and which of its cells are selected.

    Starts with no selection on table 0. Switching tables or loading a
    new extraction result always clears the selection.
    """

    def __init__(self, data: Optional[ExtractedData] = None):
        self._data = data
        self._active_index = 0
        self._selected: set[CellId] = set()
        self._copied: Optional[tuple[CellId, float]] = None

    @property
    def data(self) -> Optional[ExtractedData]:
        return self._data

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_table(self) -> Optional[TableData]:
        if self._data is None:
            return None
        return self._data.get(self._active_index)

    @property
    def selected(self) -> frozenset[CellId]:
        return frozenset(self._selected)

    @property
    def has_selection(self) -> bool:
        return bool(self._selected)

    def load(self, data: Optional[ExtractedData]):
        """Replace the extraction result, resetting to table 0 with no selection."""
        self._data = data
        self._active_index = 0
        self._selected.clear()
        self._copied = None

    def select_table(self, index: int):
        """Make another table active; the selection is always cleared."""
        table_count = len(self._data) if self._data is not None else 0
        if not 0 <= index < max(table_count, 1):
            raise IndexError(f"Table index {index} out of range ({table_count} tables)")
        self._active_index = index
        self._selected.clear()
        self._copied = None

    def _in_active_table(self, cell: CellId) -> bool:
        table = self.active_table
        return table is not None and table.contains(cell.row, cell.column)

    def toggle(self, row: int, column: int) -> bool:
        """
        Toggle a cell's selection.

        Positions outside the active table are ignored.

        Returns:
            True if the cell is selected after the call
        """
        cell = CellId(row, column)
        if not self._in_active_table(cell):
            logger.warning(f"Ignoring selection of {cell} outside the active table")
            return False
        if cell in self._selected:
            self._selected.discard(cell)
            return False
        self._selected.add(cell)
        return True

    def set_selection(self, cells: Iterable[tuple[int, int]]):
        """Replace the selection with the given cells, dropping any outside the active table."""
        requested = {CellId(*cell) for cell in cells}
        self._selected = {cell for cell in requested if self._in_active_table(cell)}
        if len(self._selected) != len(requested):
            logger.warning(f"Dropped {len(requested) - len(self._selected)} cells outside the active table")

    def is_selected(self, row: int, column: int) -> bool:
        return CellId(row, column) in self._selected

    def clear(self):
        self._selected.clear()

    def sorted_cells(self) -> list[CellId]:
        """Selected cells in reading order: by row, then column."""
        return sorted(self._selected)

    def mark_copied(self, cell: CellId, now: Optional[float] = None):
        """Flag a cell as just copied, for the transient copy indicator."""
        self._copied = (CellId(*cell), time.monotonic() if now is None else now)
        logger.debug(f"Copied cell {cell}")

    def is_copied(self, cell: CellId, now: Optional[float] = None) -> bool:
        if self._copied is None:
            return False
        copied_cell, copied_at = self._copied
        now = time.monotonic() if now is None else now
        if now - copied_at >= COPIED_FLASH_SECONDS:
            self._copied = None
            return False
        return copied_cell == tuple(cell)
