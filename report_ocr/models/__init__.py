"""Data models for extracted tables and processing options."""

from .options import Precision, ProcessingOptions
from .table import CellId, ExtractedData, RowRecord, TableData, ViewMode

__all__ = [
    "CellId",
    "ExtractedData",
    "Precision",
    "ProcessingOptions",
    "RowRecord",
    "TableData",
    "ViewMode",
]
