"""LLM module for table extraction using cloud or local vision models."""

from .client import LLMClient
from .errors import ExtractionError, LLMClientError
from .parser import TableParser

__all__ = ["ExtractionError", "LLMClient", "LLMClientError", "TableParser"]
