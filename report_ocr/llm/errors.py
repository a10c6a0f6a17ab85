"""Exceptions raised by the extraction client and response parser."""


class LLMClientError(Exception):
    """Base exception for LLM client errors."""
    pass


class LLMConnectionError(LLMClientError):
    """Error connecting to LLM service."""
    pass


class LLMResponseError(LLMClientError):
    """Error in LLM response."""
    pass


class ExtractionError(LLMClientError):
    """Request could not be made or its result could not be turned into tables."""
    pass
