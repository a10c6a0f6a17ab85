"""Formatting module for normalizing and rendering extracted cell values."""

from .normalizer import NormalizedValue, normalize_value, parse_number
from .pipeline import format_number_value, format_value, render_number, transform_number
from .table import FormattedTable, format_table
from .text import format_header, to_title_case

__all__ = [
    "FormattedTable",
    "NormalizedValue",
    "format_header",
    "format_number_value",
    "format_table",
    "format_value",
    "normalize_value",
    "parse_number",
    "render_number",
    "to_title_case",
    "transform_number",
]
