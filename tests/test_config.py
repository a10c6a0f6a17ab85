"""
Unit tests - configuration.
"""

import pytest

from report_ocr import config as config_module
from report_ocr.config import (
    MULTIPLIER_PRESETS,
    AppConfig,
    GeminiConfig,
    LLMProvider,
    get_config,
    reset_config,
    update_config,
)
from report_ocr.models.options import Precision


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def test_gemini_key_from_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    assert GeminiConfig().api_key == "env-key"


def test_gemini_key_fallback_variable(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy-key")
    assert GeminiConfig().api_key == "legacy-key"


def test_gemini_key_validation():
    assert GeminiConfig(api_key="").validate_api_key()[0] is False
    assert GeminiConfig(api_key="abc").validate_api_key()[0] is True


def test_default_options():
    options = AppConfig().default_options
    assert options.multiplier == 1
    assert options.decimal_places == Precision.fixed(2)


def test_multiplier_presets_positive_and_unique():
    values = [value for _, value in MULTIPLIER_PRESETS]
    assert values[0] == 1
    assert all(value > 0 for value in values)
    assert len(set(values)) == len(values)


def test_get_config_is_singleton():
    assert get_config() is get_config()


def test_update_config_ignores_unknown_keys():
    config = update_config(llm_provider=LLMProvider.LM_STUDIO, not_a_setting=True)
    assert config.llm_provider == LLMProvider.LM_STUDIO
    assert not hasattr(config, "not_a_setting")
    assert config_module.get_config() is config

