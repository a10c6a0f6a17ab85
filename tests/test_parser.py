"""
Unit tests - LLM response parsing.
"""

import json

import pytest

from report_ocr.llm.errors import ExtractionError
from report_ocr.llm.parser import TableParser, parse_extraction_response

RESPONSE = {
    "tables": [
        {
            "title": "2. Goodwill Impairment",
            "summary": "Goodwill by segment.",
            "headers": ["Segment", "2023", "2022"],
            "rows": [
                {"values": ["Retail", "(1,200)", "3,400"]},
                {"values": ["Wholesale", "500"]},
            ],
        },
        {
            "headers": ["Value"],
            "rows": [{"values": ["1"]}, {"values": ["2"]}],
        },
    ]
}


def test_positional_values_keyed_by_header():
    data = parse_extraction_response(json.dumps(RESPONSE))

    assert len(data) == 2
    table = data.tables[0]
    assert table.title == "2. Goodwill Impairment"
    assert table.summary == "Goodwill by segment."
    assert table.headers == ("Segment", "2023", "2022")
    assert dict(table.rows[0]) == {"Segment": "Retail", "2023": "(1,200)", "2022": "3,400"}


def test_short_rows_padded_with_empty_strings():
    data = parse_extraction_response(json.dumps(RESPONSE))
    assert dict(data.tables[0].rows[1]) == {"Segment": "Wholesale", "2023": "500", "2022": ""}


def test_missing_title_is_none():
    data = parse_extraction_response(json.dumps(RESPONSE))
    assert data.tables[1].title is None
    assert data.tables[1].row_count == 2


def test_json_in_code_fence():
    response = "Here are the tables:\n```json\n" + json.dumps(RESPONSE) + "\n```\nDone."
    data = parse_extraction_response(response)
    assert len(data) == 2


def test_json_surrounded_by_text():
    response = "Sure! " + json.dumps(RESPONSE) + " Let me know if you need more."
    assert len(parse_extraction_response(response)) == 2


def test_extra_values_dropped():
    response = json.dumps({"tables": [{"headers": ["A"], "rows": [{"values": ["1", "2"]}]}]})
    table = parse_extraction_response(response).tables[0]
    assert dict(table.rows[0]) == {"A": "1"}


def test_rows_as_objects_and_lists():
    response = json.dumps({
        "tables": [{
            "headers": ["A", "B"],
            "rows": [{"A": 1, "B": None}, ["x", "y"]],
        }]
    })
    table = parse_extraction_response(response).tables[0]
    assert dict(table.rows[0]) == {"A": 1, "B": ""}
    assert dict(table.rows[1]) == {"A": "x", "B": "y"}


def test_duplicate_headers_made_unique():
    response = json.dumps({
        "tables": [{"headers": ["Amount", "Amount"], "rows": [{"values": ["1", "2"]}]}]
    })
    table = parse_extraction_response(response).tables[0]
    assert table.headers == ("Amount", "Amount (2)")
    assert table.value_at(0, 1) == "2"


def test_empty_tables_list():
    assert parse_extraction_response('{"tables": []}').is_empty


@pytest.mark.parametrize(
    "response, message",
    [
        ("", "No data returned"),
        ("I could not find any tables.", "No valid JSON"),
        ('{"data": []}', "'tables' array missing"),
        ('{"tables": "none"}', "'tables' array missing"),
    ],
)
def test_invalid_responses(response, message):
    with pytest.raises(ExtractionError, match=message):
        TableParser().parse_response(response)
