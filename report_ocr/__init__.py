"""
Report OCR - Financial table extraction and formatting.

This package provides functionality for:
- Vision/LLM-powered table extraction from report screenshots or pasted text
- Normalization of OCR'd cell values (accounting negatives, thousands separators)
- Unit scaling, sign and precision formatting for display and copy
- Clipboard text and Excel export of extracted tables
"""

__version__ = "0.1.0"
__author__ = "Report OCR"
