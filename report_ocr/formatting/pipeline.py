"""
Number transform pipeline.

Applies the user's processing options to a normalized number, in a
fixed order:
1. Scale by the multiplier
2. Epsilon cleanup (round to 10 decimal digits)
3. Force negative
4. Render with the configured precision and thousands separators
"""

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Optional, Union

from report_ocr.formatting.normalizer import normalize_value
from report_ocr.formatting.text import apply_text_case
from report_ocr.models.options import Precision, ProcessingOptions

EPSILON_DIGITS = 10
MAX_FRACTION_DIGITS = 20

# Wide enough that scaling a large OCR'd figure never rounds integer digits
_CONTEXT = Context(prec=100, rounding=ROUND_HALF_UP)


def _to_decimal(value: Union[Decimal, int, float]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _round_to(number: Decimal, digits: int) -> Decimal:
    try:
        return number.quantize(Decimal(1).scaleb(-digits), context=_CONTEXT)
    except InvalidOperation:
        # Too many integer digits for the context; no fractional noise to clean
        return number


def clean_epsilon(number: Decimal) -> Decimal:
    """Round away representation noise such as ``...99999`` or ``...00001``."""
    return _round_to(number, EPSILON_DIGITS)


def transform_number(
    number: Union[Decimal, int, float],
    options: ProcessingOptions,
) -> Decimal:
    """
    Scale, clean and sign a numeric value.

    Args:
        number: Normalized numeric cell value
        options: Processing options snapshot

    Returns:
        The transformed value, before rendering
    """
    scaled = _CONTEXT.multiply(_to_decimal(number), _to_decimal(options.multiplier))
    converted = clean_epsilon(scaled)

    if converted.is_zero():
        return converted.copy_abs()

    if options.force_negative:
        converted = -converted.copy_abs()

    return converted


def render_number(number: Decimal, precision: Precision) -> str:
    """
    Render a number with thousands separators.

    Fixed precision pads or rounds (half away from zero) to exactly that
    many fractional digits. Full precision keeps up to 20 fractional
    digits with trailing zeros trimmed.
    """
    if precision.keeps_all:
        if number.as_tuple().exponent < -MAX_FRACTION_DIGITS:
            number = _round_to(number, MAX_FRACTION_DIGITS)
        if number.is_zero():
            return "0"
        text = format(number, ",f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    places = precision.places
    rendered = _round_to(number, places)
    if rendered.is_zero():
        rendered = rendered.copy_abs()
    return format(rendered, f",.{places}f")


def format_value(value: Union[str, int, float, None], options: ProcessingOptions) -> str:
    """
    Produce the display string for a raw cell value.

    Numeric cells go through the transform pipeline; text cells are
    returned as given, title-cased when that option is on.
    """
    normalized = normalize_value(value)
    if not normalized.is_numeric:
        if isinstance(normalized.original, str):
            return apply_text_case(normalized.original, options)
        return normalized.text

    converted = transform_number(normalized.number, options)
    return render_number(converted, options.decimal_places)


def format_number_value(
    value: Union[str, int, float, None],
    options: ProcessingOptions,
) -> Optional[float]:
    """Transformed number for programmatic reuse, or None for text cells."""
    normalized = normalize_value(value)
    if not normalized.is_numeric:
        return None
    return float(transform_number(normalized.number, options))
