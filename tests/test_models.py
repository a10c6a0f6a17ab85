"""
Unit tests - data models and processing options.
"""

import dataclasses

import pytest

from report_ocr.models.options import Precision, ProcessingOptions
from report_ocr.models.table import CellId, ExtractedData, TableData


# ============================================================================
# Precision / ProcessingOptions
# ============================================================================

def test_precision_from_setting():
    assert Precision.from_setting(-1).keeps_all
    assert Precision.from_setting(3) == Precision.fixed(3)
    assert Precision.from_setting(0).places == 0


def test_precision_round_trips_setting():
    assert Precision.full().as_setting() == -1
    assert Precision.fixed(4).as_setting() == 4


@pytest.mark.parametrize("setting", [-2, -5])
def test_precision_rejects_other_negatives(setting):
    with pytest.raises(ValueError):
        Precision.from_setting(setting)


def test_options_defaults():
    options = ProcessingOptions()
    assert options.multiplier == 1
    assert options.decimal_places == Precision.fixed(2)
    assert not options.force_negative
    assert not options.title_case
    assert options.custom_instruction == ""


def test_options_accept_integer_setting():
    assert ProcessingOptions(decimal_places=-1).decimal_places.keeps_all
    assert ProcessingOptions(decimal_places=0).decimal_places == Precision.fixed(0)


@pytest.mark.parametrize("multiplier", [0, -1, float("nan")])
def test_options_reject_non_positive_multiplier(multiplier):
    with pytest.raises(ValueError):
        ProcessingOptions(multiplier=multiplier)


def test_options_are_immutable():
    options = ProcessingOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.multiplier = 2
    changed = options.with_changes(multiplier=0.001)
    assert changed.multiplier == 0.001
    assert options.multiplier == 1


# ============================================================================
# TableData / ExtractedData
# ============================================================================

def test_value_at_missing_key_is_empty(sample_table):
    assert sample_table.value_at(1, 3) == ""
    assert sample_table.value_at(0, 2) == "(1,234.50)"


def test_value_at_outside_table_is_empty(sample_table):
    assert sample_table.value_at(-1, 0) == ""
    assert sample_table.value_at(0, -1) == ""
    assert sample_table.value_at(3, 0) == ""
    assert sample_table.value_at(0, 4) == ""


def test_contains(sample_table):
    assert sample_table.contains(2, 3)
    assert not sample_table.contains(-1, 0)
    assert not sample_table.contains(3, 0)
    assert not sample_table.contains(0, 4)


def test_rows_are_read_only(sample_table):
    with pytest.raises(TypeError):
        sample_table.rows[0]["Item"] = "changed"


def test_table_copies_source_rows():
    source = {"A": "1"}
    table = TableData(headers=["A"], rows=[source])
    source["A"] = "2"
    assert table.value_at(0, 0) == "1"
    assert table.headers == ("A",)


def test_display_title(sample_data):
    first, second = sample_data.tables
    assert first.display_title(0, 2) == "Income Statement"
    assert second.display_title(1, 2) == "Table 2"
    assert second.display_title(0, 1) == "Extracted Data"


def test_extracted_data_get(sample_data):
    assert sample_data.get(1) is sample_data.tables[1]
    assert sample_data.get(2) is None
    assert sample_data.get(-1) is None
    assert len(sample_data) == 2
    assert ExtractedData().is_empty


def test_cell_id_orders_by_row_then_column():
    assert sorted([CellId(2, 1), CellId(0, 0), CellId(1, 3)]) == [(0, 0), (1, 3), (2, 1)]
