"""
Configuration module for Report OCR.

Handles settings for the extraction providers, API keys, upload limits
and the default processing options shown in the UI.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

from report_ocr.models.options import Precision, ProcessingOptions

# Load environment variables from .env file
load_dotenv()


class LLMProvider(Enum):
    """Supported providers for table extraction."""
    GEMINI = "gemini"
    LM_STUDIO = "lm_studio"  # Any OpenAI-compatible local vision server


# (label, multiplier) choices offered for unit conversion
MULTIPLIER_PRESETS: list[tuple[str, float]] = [
    ("No Conversion (Original)", 1),
    ("Convert to Thousands (x 0.001)", 0.001),
    ("Convert to Millions (x 10⁻⁶)", 0.000001),
    ("Convert to Billions (x 10⁻⁹)", 0.000000001),
    ("From Thousands to Ones (x 1,000)", 1000),
    ("From Millions to Ones (x 1,000,000)", 1000000),
    ("From Billions to Ones (x 10⁹)", 1000000000),
]


@dataclass
class GeminiConfig:
    """Configuration for the Gemini API."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    api_key: str = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
    )
    temperature: float = 0.1  # Low temperature for higher accuracy
    timeout: int = 120

    def validate_api_key(self) -> tuple[bool, str]:
        """Validate the Gemini API key is set."""
        if not self.api_key:
            return False, (
                "Gemini API key not set.\n"
                "Set it via environment variable: GEMINI_API_KEY=your_key\n"
                "Or add it to a .env file."
            )
        return True, "Gemini API key is configured"


@dataclass
class LMStudioConfig:
    """Configuration for LM Studio (OpenAI-compatible API)."""
    base_url: str = field(
        default_factory=lambda: os.getenv("LM_STUDIO_BASE_URL", "http://localhost:1234/v1")
    )
    model: str = "qwen3-vl-4b-instruct"  # Must be vision-capable
    api_key: str = "not-needed"  # LM Studio doesn't require API key
    temperature: float = 0.1
    timeout: int = 180  # Vision models need more time
    max_tokens: int = 8192

    @staticmethod
    def validate_connection(base_url: str = "http://localhost:1234/v1") -> tuple[bool, str, list]:
        """Validate LM Studio is running and accessible.

        Returns:
            Tuple of (is_valid, message, loaded_models)
        """
        import requests
        try:
            response = requests.get(f"{base_url}/models", timeout=5)
            if response.status_code == 200:
                data = response.json()
                models = [m.get("id", "unknown") for m in data.get("data", [])]
                model_str = ", ".join(models) if models else "no models listed"
                return True, f"LM Studio connected. Loaded models: {model_str}", models
            return False, f"LM Studio returned status {response.status_code}", []
        except requests.exceptions.ConnectionError:
            return False, (
                "Cannot connect to LM Studio. Ensure LM Studio is running:\n"
                "• Open LM Studio application\n"
                "• Load a vision model\n"
                "• Start the local server (Developer tab)"
            ), []
        except requests.exceptions.RequestException as e:
            return False, f"Error connecting to LM Studio: {str(e)}", []


@dataclass
class AppConfig:
    """Main application configuration."""
    llm_provider: LLMProvider = LLMProvider.GEMINI

    # Provider-specific configs
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    lm_studio: LMStudioConfig = field(default_factory=LMStudioConfig)

    # Upload settings
    max_file_size_mb: int = 10
    max_image_edge: int = 2048
    accepted_image_types: tuple[str, ...] = ("png", "jpg", "jpeg", "webp", "bmp", "gif")

    # Formatting defaults
    default_options: ProcessingOptions = field(
        default_factory=lambda: ProcessingOptions(
            multiplier=1,
            decimal_places=Precision.fixed(2),
        )
    )


def validate_system_requirements() -> dict:
    """
    Validate all system requirements on startup.

    Returns:
        Dictionary with validation results for each requirement.
    """
    config = get_config()
    results = {}

    gemini_valid, gemini_msg = config.gemini.validate_api_key()
    results["gemini"] = {
        "configured": gemini_valid,
        "message": gemini_msg,
    }

    lm_valid, lm_msg, lm_models = LMStudioConfig.validate_connection(config.lm_studio.base_url)
    results["lm_studio"] = {
        "available": lm_valid,
        "message": lm_msg,
        "models": lm_models,
    }

    return results


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def update_config(**kwargs) -> AppConfig:
    """Update configuration with new values."""
    global _config
    config = get_config()
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


def reset_config():
    """Drop the global configuration so the next access rebuilds it."""
    global _config
    _config = None
