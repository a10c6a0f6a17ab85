"""Export module for clipboard text and Excel spreadsheets."""

from .clipboard import copy_cell_text, copy_selected, copy_selection_text, copy_table_text, strip_separators
from .excel import ExcelExporter

__all__ = [
    "ExcelExporter",
    "copy_cell_text",
    "copy_selected",
    "copy_selection_text",
    "copy_table_text",
    "strip_separators",
]
