"""
LLM response parser for table extraction.

Handles:
- JSON extraction from LLM responses (raw or inside code fences)
- Validation of the tables payload
- Conversion of positional row values to header-keyed records
"""

import json
import logging
import re
from typing import Any, Optional

from report_ocr.llm.errors import ExtractionError
from report_ocr.models.table import CellValue, ExtractedData, TableData

logger = logging.getLogger(__name__)


class TableParser:
    """
    Parses LLM responses into extracted tables.

    Rows arrive as ``{"values": [...]}`` aligned with the headers; each is
    re-keyed by header name, with empty strings filling any missing
    trailing positions.
    """

    def parse_response(self, response: str) -> ExtractedData:
        """
        Parse an LLM response into tables.

        Args:
            response: Raw LLM response string

        Returns:
            ExtractedData with one TableData per table found

        Raises:
            ExtractionError: If the response holds no usable tables payload
        """
        if not response or not response.strip():
            raise ExtractionError("No data returned from the extraction service.")

        json_str = self._extract_json(response)
        if not json_str:
            raise ExtractionError("No valid JSON found in response")

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"JSON parse error: {str(e)}") from e

        tables = data.get("tables") if isinstance(data, dict) else None
        if not isinstance(tables, list):
            raise ExtractionError("Invalid response format: 'tables' array missing.")

        parsed = []
        for index, table_data in enumerate(tables):
            if not isinstance(table_data, dict):
                logger.warning(f"Skipping table {index}: expected an object, got {type(table_data).__name__}")
                continue
            parsed.append(self._dict_to_table(table_data))

        logger.info(f"Parsed {len(parsed)} tables from response")
        return ExtractedData(tables=tuple(parsed))

    def _extract_json(self, response: str) -> Optional[str]:
        """Extract JSON object from response string."""
        # Try to find JSON block in markdown code blocks
        code_block_pattern = r"```(?:json)?\s*(\{[\s\S]*?\})\s*```"
        match = re.search(code_block_pattern, response)
        if match:
            return match.group(1)

        # Try the entire response as JSON
        try:
            json.loads(response.strip())
            return response.strip()
        except json.JSONDecodeError:
            pass

        # Try to find raw JSON object
        json_pattern = r"(\{[\s\S]*\})"
        match = re.search(json_pattern, response)
        if match:
            try:
                json.loads(match.group(1))
                return match.group(1)
            except json.JSONDecodeError:
                pass

        return None

    def _dict_to_table(self, data: dict) -> TableData:
        """Convert one table object to a TableData."""
        headers = self._unique_headers(data.get("headers") or [])

        rows = []
        for row_data in data.get("rows") or []:
            rows.append(self._row_to_record(row_data, headers))

        return TableData(
            headers=headers,
            rows=tuple(rows),
            title=self._optional_text(data.get("title")),
            summary=self._optional_text(data.get("summary")),
        )

    def _row_to_record(self, row_data: Any, headers: tuple[str, ...]) -> dict[str, CellValue]:
        """Key a row's values by header name."""
        if isinstance(row_data, dict) and "values" not in row_data:
            # Already keyed by header
            return {header: self._cell(row_data.get(header)) for header in headers}

        values = row_data.get("values") if isinstance(row_data, dict) else row_data
        if not isinstance(values, list):
            values = []

        if len(values) > len(headers):
            logger.warning(f"Row has {len(values)} values for {len(headers)} headers; extra values dropped")

        return {
            header: self._cell(values[index]) if index < len(values) else ""
            for index, header in enumerate(headers)
        }

    def _unique_headers(self, raw_headers: list) -> tuple[str, ...]:
        """Headers as strings, de-duplicated so each keys one column."""
        headers = []
        seen = set()
        for raw in raw_headers:
            header = "" if raw is None else str(raw)
            candidate = header
            counter = 2
            while candidate in seen:
                candidate = f"{header} ({counter})"
                counter += 1
            if candidate != header:
                logger.warning(f"Duplicate header {header!r} renamed to {candidate!r}")
            seen.add(candidate)
            headers.append(candidate)
        return tuple(headers)

    @staticmethod
    def _cell(value: Any) -> CellValue:
        if value is None:
            return ""
        if isinstance(value, bool):
            return str(value)
        if isinstance(value, (str, int, float)):
            return value
        return str(value)

    @staticmethod
    def _optional_text(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


def parse_extraction_response(response: str) -> ExtractedData:
    """
    Convenience function to parse an LLM response.

    Args:
        response: Raw LLM response

    Returns:
        ExtractedData with parsed tables
    """
    parser = TableParser()
    return parser.parse_response(response)
