"""
Whole-table formatting for the table and list views.
"""

from dataclasses import dataclass

from report_ocr.formatting.pipeline import format_value
from report_ocr.formatting.text import format_header
from report_ocr.models.options import ProcessingOptions
from report_ocr.models.table import TableData


@dataclass(frozen=True)
class FormattedTable:
    """Display strings for one table under one options snapshot."""
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]

    def records(self) -> list[dict[str, str]]:
        """Rows as header -> value dicts, used by the list view."""
        return [dict(zip(self.headers, row)) for row in self.rows]


def format_row(table: TableData, row: int, options: ProcessingOptions) -> tuple[str, ...]:
    return tuple(
        format_value(table.value_at(row, column), options)
        for column in range(table.column_count)
    )


def format_table(table: TableData, options: ProcessingOptions) -> FormattedTable:
    """
    Format every header and cell of a table.

    Lookups go through the raw header names; only the displayed header
    text is title-cased.
    """
    return FormattedTable(
        headers=tuple(format_header(header, options) for header in table.headers),
        rows=tuple(format_row(table, row, options) for row in range(table.row_count)),
    )
