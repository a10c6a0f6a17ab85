"""
Pytest configuration and fixtures.

Fixtures available:
- options: default processing options (x1, 2 decimal places)
- sample_table: small financial table with OCR-style values
- sample_data: extraction result with two tables
- app_config: configuration pointing at test provider endpoints
"""

import pytest

from report_ocr.config import AppConfig, GeminiConfig, LLMProvider, LMStudioConfig
from report_ocr.models.options import Precision, ProcessingOptions
from report_ocr.models.table import ExtractedData, TableData


@pytest.fixture
def options():
    return ProcessingOptions(multiplier=1, decimal_places=Precision.fixed(2))


@pytest.fixture
def sample_table():
    return TableData(
        headers=("Item", "FY2023", "FY2022", "Note"),
        rows=(
            {"Item": "TOTAL REVENUE", "FY2023": "1,234,567.891", "FY2022": "(1,234.50)", "Note": "cost of goods"},
            {"Item": "Net income", "FY2023": 2500, "FY2022": "0"},
            {"Item": "Margin", "FY2023": "12.5", "FY2022": "n/a", "Note": "x"},
        ),
        title="Income Statement",
        summary="Key lines of the income statement.",
    )


@pytest.fixture
def sample_data(sample_table):
    second = TableData(
        headers=("Asset", "Amount"),
        rows=({"Asset": "Cash", "Amount": "5,000"},),
    )
    return ExtractedData(tables=(sample_table, second))


@pytest.fixture
def app_config():
    return AppConfig(
        llm_provider=LLMProvider.GEMINI,
        gemini=GeminiConfig(base_url="https://gemini.test/v1beta", api_key="test-key"),
        lm_studio=LMStudioConfig(base_url="http://lmstudio.test/v1"),
    )
