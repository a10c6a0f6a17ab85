"""
Cell value normalization.

Interprets the loosely typed values produced by OCR of financial
reports as numbers where possible:
- Accounting negatives: "(1,234.50)" -> -1234.50
- Thousands separators: "1,000,000" -> 1000000
- Anything else is kept as text
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

# Plain decimal literal left after stripping parentheses and commas
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass(frozen=True)
class NormalizedValue:
    """A cell value interpreted either as a number or as plain text."""
    original: Union[str, int, float]
    number: Optional[Decimal] = None

    @property
    def is_numeric(self) -> bool:
        return self.number is not None

    @property
    def text(self) -> str:
        return str(self.original)


def normalize_value(value: Union[str, int, float, None]) -> NormalizedValue:
    """
    Classify a raw cell value as numeric or text.

    Numeric inputs are accepted directly. Strings are trimmed, a single
    wrapping pair of parentheses marks the value negative, and comma
    separators are removed before parsing. Strings that do not parse are
    returned unchanged as text.

    Args:
        value: Raw cell value from an extracted row

    Returns:
        NormalizedValue with ``number`` set for numeric cells
    """
    if value is None:
        return NormalizedValue(original="")

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            return NormalizedValue(original=value)
        return NormalizedValue(original=value, number=Decimal(str(value)))

    cleaned = str(value).strip()
    negative = False

    if len(cleaned) >= 2 and cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1].strip()

    cleaned = cleaned.replace(",", "")

    if not cleaned or not NUMBER_PATTERN.match(cleaned):
        return NormalizedValue(original=value)

    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        return NormalizedValue(original=value)

    if negative:
        # Parentheses are the only sign source for accounting values
        number = -abs(number)

    return NormalizedValue(original=value, number=number)


def parse_number(value: Union[str, int, float, None]) -> Optional[Decimal]:
    """Return the numeric interpretation of a cell, or None for text."""
    return normalize_value(value).number


def is_numeric(value: Union[str, int, float, None]) -> bool:
    return normalize_value(value).is_numeric
