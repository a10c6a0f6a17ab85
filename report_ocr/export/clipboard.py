"""
Clipboard text export.

Builds the text handed to the clipboard for:
- Full table copy (tab-separated, header row first)
- Multi-cell selection copy (one value per line)
- Single cell copy

Thousands separators are display-only and are stripped so the copied
text stays machine-parseable.
"""

import logging
from typing import Iterable, Optional

from report_ocr.formatting.pipeline import format_value
from report_ocr.formatting.text import format_header
from report_ocr.models.options import ProcessingOptions
from report_ocr.models.table import CellId, TableData
from report_ocr.selection import TableSelection

logger = logging.getLogger(__name__)

COLUMN_DELIMITER = "\t"
ROW_DELIMITER = "\n"


def strip_separators(text: str) -> str:
    """Remove comma thousands separators from a formatted value."""
    return text.replace(",", "")


def _export_value(table: TableData, row: int, column: int, options: ProcessingOptions) -> str:
    return strip_separators(format_value(table.value_at(row, column), options))


def copy_table_text(table: Optional[TableData], options: ProcessingOptions) -> Optional[str]:
    """
    Serialize a whole table as tab-separated text.

    Args:
        table: Active table, or None when nothing has been extracted
        options: Processing options snapshot

    Returns:
        TSV text, or None if there is no table
    """
    if table is None:
        return None

    header_line = COLUMN_DELIMITER.join(format_header(header, options) for header in table.headers)
    body_lines = [
        COLUMN_DELIMITER.join(
            _export_value(table, row, column, options)
            for column in range(table.column_count)
        )
        for row in range(table.row_count)
    ]

    logger.info(f"Prepared table copy: {table.row_count} rows x {table.column_count} columns")
    # Header line is always newline-terminated, even with no rows
    return header_line + ROW_DELIMITER + ROW_DELIMITER.join(body_lines)


def copy_selection_text(
    table: Optional[TableData],
    cells: Iterable[tuple[int, int]],
    options: ProcessingOptions,
) -> Optional[str]:
    """
    Serialize selected cells, one value per line.

    Cells are emitted in reading order (row, then column) regardless of
    the order in which they were selected. Cells outside the table are
    skipped.
    """
    if table is None:
        return None

    ordered = sorted(CellId(*cell) for cell in cells if table.contains(*cell))
    values = [_export_value(table, cell.row, cell.column, options) for cell in ordered]

    logger.info(f"Prepared selection copy: {len(values)} values")
    return ROW_DELIMITER.join(values)


def copy_cell_text(
    table: Optional[TableData],
    cell: tuple[int, int],
    options: ProcessingOptions,
) -> Optional[str]:
    if table is None:
        return None
    row, column = cell
    return _export_value(table, row, column, options)


def copy_selected(selection: TableSelection, options: ProcessingOptions, now: Optional[float] = None) -> Optional[str]:
    """
    Copy text for the current selection of the active table.

    A single cell is copied on its own and flagged as just copied. Several
    cells are copied in reading order and the selection is then cleared.

    Returns:
        Copy text, or None if there is no table or nothing is selected
    """
    table = selection.active_table
    cells = selection.sorted_cells()
    if table is None or not cells:
        return None

    if len(cells) == 1:
        selection.mark_copied(cells[0], now=now)
        return copy_cell_text(table, cells[0], options)

    text = copy_selection_text(table, cells, options)
    selection.clear()
    return text
