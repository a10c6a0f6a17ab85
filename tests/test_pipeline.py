"""
Unit tests - transform pipeline and rendering.
"""

from decimal import Decimal

import pytest

from report_ocr.formatting.normalizer import parse_number
from report_ocr.formatting.pipeline import (
    clean_epsilon,
    format_number_value,
    format_value,
    render_number,
    transform_number,
)
from report_ocr.models.options import Precision, ProcessingOptions


# ============================================================================
# Scenarios
# ============================================================================

def test_accounting_negative(options):
    assert format_value("(1,234.50)", options) == "-1,234.50"


def test_scaled_to_thousands(options):
    scaled = options.with_changes(multiplier=0.001)
    assert format_number_value("(1,234.50)", scaled) == -1.2345
    assert format_value("(1,234.50)", scaled) == "-1.23"


def test_force_negative(options):
    forced = options.with_changes(force_negative=True)
    assert format_value("1,000", forced) == "-1,000.00"
    assert format_value("(1,000)", forced) == "-1,000.00"


@pytest.mark.parametrize("raw", ["0", "-0", "(0)", 0, 0.0, "0.000"])
def test_zero_is_never_negative(options, raw):
    forced = options.with_changes(force_negative=True)
    assert format_value(raw, forced) == "0.00"
    assert format_value(raw, forced.with_changes(decimal_places=Precision.full())) == "0"


def test_tiny_negative_rounds_to_unsigned_zero(options):
    assert format_value("-0.001", options) == "0.00"


# ============================================================================
# Scaling and epsilon cleanup
# ============================================================================

@pytest.mark.parametrize(
    "multiplier, expected",
    [
        (1000, "1,234,500"),
        (1000000, "1,234,500,000"),
        (0.000001, "0.0012345"),
        (0.000000001, "0.0000012345"),
    ],
)
def test_multiplier_presets(options, multiplier, expected):
    full = options.with_changes(multiplier=multiplier, decimal_places=Precision.full())
    assert format_value("1,234.5", full) == expected


def test_float_noise_removed(options):
    full = options.with_changes(decimal_places=Precision.full())
    assert format_value(0.1 + 0.2, full) == "0.3"
    assert format_value(0.8456260999999999, full) == "0.8456261"


def test_clean_epsilon_rounds_to_ten_digits():
    assert clean_epsilon(Decimal("1.00000000004")) == Decimal("1")
    assert clean_epsilon(Decimal("2.99999999999")) == Decimal("3")
    assert clean_epsilon(Decimal("0.1234567891")) == Decimal("0.1234567891")


def test_transform_huge_value_does_not_fail(options):
    assert transform_number(Decimal("1e120"), options) == Decimal("1e120")


def test_transform_returns_decimal(options):
    result = transform_number(parse_number("(1,234.50)"), options.with_changes(multiplier=0.001))
    assert result == Decimal("-1.2345")


# ============================================================================
# Rendering
# ============================================================================

@pytest.mark.parametrize("places", [0, 1, 2, 3, 5])
def test_fixed_precision_renders_exact_digits(places):
    rendered = render_number(Decimal("3.14159"), Precision.fixed(places))
    if places == 0:
        assert "." not in rendered
    else:
        assert len(rendered.split(".")[1]) == places


def test_fixed_precision_pads_zeros():
    assert render_number(Decimal("12.5"), Precision.fixed(3)) == "12.500"


def test_fixed_precision_rounds_half_away_from_zero():
    assert render_number(Decimal("1.005"), Precision.fixed(2)) == "1.01"
    assert render_number(Decimal("-2.5"), Precision.fixed(0)) == "-3"


def test_full_precision_keeps_source_digits():
    assert render_number(Decimal("1234567.891"), Precision.full()) == "1,234,567.891"
    assert render_number(Decimal("0.1234567891"), Precision.full()) == "0.1234567891"


def test_full_precision_trims_trailing_zeros():
    assert render_number(Decimal("1000.5000000000"), Precision.full()) == "1,000.5"
    assert render_number(Decimal("1000.0000000000"), Precision.full()) == "1,000"


def test_thousands_separators_on_negative():
    assert render_number(Decimal("-9876543.21"), Precision.fixed(2)) == "-9,876,543.21"


# ============================================================================
# Text cells and properties
# ============================================================================

def test_text_passes_through(options):
    assert format_value("n/a", options) == "n/a"
    assert format_value("TOTAL REVENUE", options) == "TOTAL REVENUE"
    assert format_number_value("n/a", options) is None


def test_text_title_cased_when_enabled(options):
    assert format_value("TOTAL REVENUE", options.with_changes(title_case=True)) == "Total Revenue"


def test_missing_value_is_empty(options):
    assert format_value(None, options) == ""
    assert format_value("", options) == ""


@pytest.mark.parametrize("raw", ["(1,234.50)", "1,234,567.891", "0.5", "42", "-17.125"])
@pytest.mark.parametrize("force_negative", [False, True])
def test_reformatting_rendered_value_is_stable(options, raw, force_negative):
    opts = options.with_changes(force_negative=force_negative)
    rendered = format_value(raw, opts)
    assert format_value(rendered, opts) == rendered


@pytest.mark.parametrize("raw", ["1,234,567.891", "(42.5)", "0.125", "1000"])
def test_stripping_separators_preserves_value(raw):
    for precision in (Precision.full(), Precision.fixed(3)):
        opts = ProcessingOptions(decimal_places=precision)
        rendered = format_value(raw, opts)
        assert parse_number(rendered.replace(",", "")) == parse_number(raw)
