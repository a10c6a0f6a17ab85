"""
Excel export module for extracted tables.

Handles:
- One worksheet per extracted table
- Numbers written as real numbers with a precision-matched format
- Title-cased headers when enabled
- Download-ready workbook bytes
"""

import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from report_ocr.formatting.pipeline import format_number_value, format_value
from report_ocr.formatting.text import format_header
from report_ocr.models.options import Precision, ProcessingOptions
from report_ocr.models.table import ExtractedData, TableData

logger = logging.getLogger(__name__)

# Excel limits sheet titles to 31 characters and forbids these characters
MAX_SHEET_TITLE = 31
INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")

MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 50


def number_format_for(precision: Precision) -> str:
    """Excel number format matching the display precision."""
    if precision.keeps_all:
        return "General"
    if precision.places == 0:
        return "#,##0"
    return "#,##0." + "0" * precision.places


class ExcelExporter:
    """
    Exports extracted tables to Excel workbooks.

    Features:
    - Each table on its own sheet, named after its title
    - Numeric cells stored as numbers, not display strings
    - Frozen, styled header row
    - Alternating row fill
    """

    def __init__(self):
        """Initialize the Excel exporter."""
        self._setup_styles()

    def _setup_styles(self):
        """Set up Excel styles for formatting."""
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        thin_border = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border,
        )

        self.even_row_fill = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")

    def build_workbook(self, data: ExtractedData, options: ProcessingOptions) -> Workbook:
        """
        Build a workbook holding every extracted table.

        Raises:
            ValueError: If there are no tables to export
        """
        if data is None or data.is_empty:
            raise ValueError("No tables to export")

        wb = Workbook()
        wb.remove(wb.active)

        used_titles: set[str] = set()
        for index, table in enumerate(data.tables):
            title = self._sheet_title(table.display_title(index, len(data)), used_titles)
            used_titles.add(title.lower())
            ws = wb.create_sheet(title=title)
            self._write_table(ws, table, options)

        return wb

    def export(
        self,
        data: ExtractedData,
        file_path: Union[str, Path],
        options: ProcessingOptions,
    ) -> Path:
        """
        Export extracted tables to an Excel file.

        Args:
            data: Extraction result
            file_path: Path to Excel file
            options: Processing options applied to every cell

        Returns:
            Path to the exported file
        """
        file_path = Path(file_path)

        # Ensure .xlsx extension
        if file_path.suffix.lower() != ".xlsx":
            file_path = file_path.with_suffix(".xlsx")

        wb = self.build_workbook(data, options)
        wb.save(file_path)
        logger.info(f"Exported {len(data)} tables to {file_path}")

        return file_path

    def to_bytes(self, data: ExtractedData, options: ProcessingOptions) -> bytes:
        """Serialize the workbook in memory, for download buttons."""
        buffer = BytesIO()
        self.build_workbook(data, options).save(buffer)
        return buffer.getvalue()

    def _sheet_title(self, title: str, used_titles: set[str]) -> str:
        """Make a valid, unique worksheet title."""
        base = INVALID_SHEET_CHARS.sub("", title).strip() or "Table"
        base = base[:MAX_SHEET_TITLE]
        candidate = base
        counter = 2
        while candidate.lower() in used_titles:
            suffix = f" ({counter})"
            candidate = base[:MAX_SHEET_TITLE - len(suffix)] + suffix
            counter += 1
        return candidate

    def _write_table(self, ws, table: TableData, options: ProcessingOptions):
        """Write headers and rows of one table."""
        widths = []
        for col, header in enumerate(table.headers, start=1):
            text = format_header(header, options)
            cell = ws.cell(row=1, column=col, value=text)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.cell_border
            widths.append(len(text))

        number_format = number_format_for(options.decimal_places)

        for row in range(table.row_count):
            row_num = row + 2
            for column in range(table.column_count):
                raw = table.value_at(row, column)
                display = format_value(raw, options)
                number = format_number_value(raw, options)

                cell = ws.cell(row=row_num, column=column + 1)
                if number is None:
                    cell.value = display
                else:
                    cell.value = number
                    cell.number_format = number_format
                cell.border = self.cell_border
                if row_num % 2 == 0:
                    cell.fill = self.even_row_fill

                widths[column] = max(widths[column], len(display))

        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = min(
                max(width + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
            )

        # Freeze header row
        ws.freeze_panes = "A2"
