"""
Multi-provider LLM client for table extraction.

Supports:
- Gemini (cloud, schema-constrained JSON output)
- LM Studio (local, OpenAI-compatible vision models)

With automatic fallback and retry logic.
"""

import base64
import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence, Union

import requests
from PIL import Image, ImageOps
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from report_ocr.config import (
    AppConfig,
    GeminiConfig,
    LLMProvider,
    LMStudioConfig,
    get_config,
)
from report_ocr.llm.errors import ExtractionError, LLMClientError, LLMConnectionError, LLMResponseError
from report_ocr.llm.parser import TableParser
from report_ocr.llm.prompts import DATA_SCHEMA, JSON_FORMAT_INSTRUCTIONS, build_prompt
from report_ocr.models.table import ExtractedData

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, bytes, Image.Image]

NO_CONTENT_MESSAGE = "No content to process. Please upload images or provide text data."


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    max_image_edge: int = 2048

    @abstractmethod
    def extract_tables(self, images: Sequence[ImageSource], instructions: Optional[str] = None) -> str:
        """Send images and/or text and return the raw JSON response text."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the LLM service is available."""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the provider name."""
        pass

    def _prepare_image(self, image: ImageSource, max_size: Optional[int] = None) -> tuple[str, str]:
        """
        Prepare image for LLM vision API: validate, resize, convert, encode.

        Returns:
            Tuple of (base64_string, mime_type) e.g. ("abc...", "image/png")
        """
        max_size = max_size or self.max_image_edge

        # Step 1: Load into PIL Image
        if isinstance(image, (str, Path)):
            pil_img = Image.open(image)
        elif isinstance(image, bytes):
            pil_img = Image.open(BytesIO(image))
        elif isinstance(image, Image.Image):
            pil_img = image
        else:
            raise TypeError(f"Unsupported image type: {type(image)}")

        # Step 2: Handle EXIF orientation
        pil_img = ImageOps.exif_transpose(pil_img)

        # Step 3: Convert to RGB (handles CMYK, RGBA, palette modes)
        if pil_img.mode != "RGB":
            pil_img = pil_img.convert("RGB")

        # Step 4: Resize if too large (preserve aspect ratio)
        w, h = pil_img.size
        if max(w, h) > max_size:
            scale = max_size / max(w, h)
            new_w, new_h = int(w * scale), int(h * scale)
            pil_img = pil_img.resize((new_w, new_h), Image.LANCZOS)
            logger.info(f"Resized image from {w}x{h} to {new_w}x{new_h}")

        # Step 5: Save as PNG (universally supported, lossless)
        buffer = BytesIO()
        pil_img.save(buffer, format="PNG", optimize=True)
        b64 = base64.b64encode(buffer.getvalue()).decode("utf-8")

        logger.info(f"Prepared image: {pil_img.size[0]}x{pil_img.size[1]}, PNG, {len(buffer.getvalue()):,} bytes")
        return b64, "image/png"


class GeminiClient(BaseLLMClient):
    """Client for the Gemini generateContent REST API."""

    def __init__(self, config: Optional[GeminiConfig] = None):
        """Initialize Gemini client."""
        self.config = config or get_config().gemini
        self.base_url = self.config.base_url.rstrip("/")

    def get_provider_name(self) -> str:
        return "Gemini"

    def is_available(self) -> bool:
        """Check if a Gemini API key is configured."""
        return bool(self.config.api_key)

    def _build_payload(self, images: Sequence[ImageSource], instructions: Optional[str]) -> dict:
        parts = []
        for image in images:
            image_base64, mime_type = self._prepare_image(image)
            parts.append({"inline_data": {"mime_type": mime_type, "data": image_base64}})
        parts.append({"text": build_prompt(bool(images), instructions)})

        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": DATA_SCHEMA,
                "temperature": self.config.temperature,
            },
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(LLMConnectionError),
        reraise=True,
    )
    def extract_tables(self, images: Sequence[ImageSource], instructions: Optional[str] = None) -> str:
        """Extract tables using Gemini."""
        payload = self._build_payload(images, instructions)

        try:
            response = requests.post(
                f"{self.base_url}/models/{self.config.model}:generateContent",
                headers={
                    "x-goog-api-key": self.config.api_key,
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise LLMConnectionError(f"Failed to connect to Gemini: {e}")
        except requests.exceptions.Timeout:
            raise LLMConnectionError("Gemini request timed out")
        except requests.exceptions.RequestException as e:
            raise LLMConnectionError(f"Gemini request failed: {e}")

        if response.status_code in (401, 403):
            raise LLMClientError("Invalid Gemini API key")
        elif response.status_code in (429, 503):
            raise LLMConnectionError(f"Gemini unavailable (status {response.status_code})")
        elif response.status_code != 200:
            raise LLMResponseError(f"Gemini returned status {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise LLMResponseError(f"Gemini returned invalid JSON: {e}")

        try:
            parts = result["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            raise LLMResponseError("No data returned from Gemini.")

        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise LLMResponseError("No data returned from Gemini.")
        return text


class LMStudioClient(BaseLLMClient):
    """Client for LM Studio local server."""

    def __init__(self, config: Optional[LMStudioConfig] = None):
        """Initialize LM Studio client."""
        self.config = config or get_config().lm_studio
        self.base_url = self.config.base_url.rstrip("/")

    def get_provider_name(self) -> str:
        return "LM Studio"

    def is_available(self) -> bool:
        """Check if LM Studio server is running."""
        try:
            response = requests.get(
                f"{self.base_url}/models",
                timeout=5,
            )
            return response.status_code == 200
        except requests.exceptions.RequestException as e:
            logger.debug(f"LM Studio not available: {e}")
            return False

    def _build_messages(self, images: Sequence[ImageSource], instructions: Optional[str]) -> list:
        content = [{"type": "text", "text": build_prompt(bool(images), instructions) + JSON_FORMAT_INSTRUCTIONS}]
        for image in images:
            image_base64, mime_type = self._prepare_image(image)
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
            })
        return [{"role": "user", "content": content}]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(LLMConnectionError),
        reraise=True,
    )
    def extract_tables(self, images: Sequence[ImageSource], instructions: Optional[str] = None) -> str:
        """Extract tables using an LM Studio vision model."""
        if not self.config.model:
            raise LLMClientError("No vision model configured for LM Studio")

        messages = self._build_messages(images, instructions)
        logger.info(f"Sending {len(images)} images to LM Studio model: {self.config.model}")

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                json={
                    "model": self.config.model,
                    "messages": messages,
                    "temperature": self.config.temperature,
                    "max_tokens": self.config.max_tokens,
                },
                timeout=self.config.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise LLMConnectionError(f"Failed to connect to LM Studio: {e}")
        except requests.exceptions.Timeout:
            raise LLMConnectionError("LM Studio request timed out")
        except requests.exceptions.RequestException as e:
            raise LLMConnectionError(f"LM Studio request failed: {e}")

        if response.status_code != 200:
            raise LLMResponseError(f"LM Studio returned status {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise LLMResponseError(f"LM Studio returned invalid JSON: {e}")

        try:
            return result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise LLMResponseError("LM Studio response missing message content")


class LLMClient:
    """
    Unified LLM client with automatic provider selection and fallback.

    Tries providers in order of preference until one succeeds.
    Default order: Gemini -> LM Studio
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        preferred_provider: Optional[LLMProvider] = None,
    ):
        """
        Initialize the unified LLM client.

        Args:
            config: Application configuration
            preferred_provider: Preferred provider to try first
        """
        self.config = config or get_config()
        self.preferred_provider = preferred_provider or self.config.llm_provider
        self.parser = TableParser()

        # Initialize clients
        self.clients: dict[LLMProvider, BaseLLMClient] = {
            LLMProvider.GEMINI: GeminiClient(self.config.gemini),
            LLMProvider.LM_STUDIO: LMStudioClient(self.config.lm_studio),
        }
        for client in self.clients.values():
            client.max_image_edge = self.config.max_image_edge

        self._last_used_provider: Optional[LLMProvider] = None

    def _get_provider_order(self) -> list[LLMProvider]:
        """Get providers in order of preference."""
        order = [self.preferred_provider]
        for provider in LLMProvider:
            if provider not in order and provider in self.clients:
                order.append(provider)
        # Filter to only providers that have client implementations
        return [p for p in order if p in self.clients]

    def get_available_providers(self) -> list[LLMProvider]:
        """Get list of currently available providers."""
        available = []
        for provider, client in self.clients.items():
            if client.is_available():
                available.append(provider)
        return available

    @property
    def last_used_provider(self) -> Optional[LLMProvider]:
        """Get the last provider that was successfully used."""
        return self._last_used_provider

    def extract(
        self,
        images: Sequence[ImageSource] = (),
        instructions: Optional[str] = None,
        provider: Optional[LLMProvider] = None,
    ) -> tuple[ExtractedData, LLMProvider]:
        """
        Extract tables from images and/or pasted text.

        Args:
            images: Zero or more report screenshots
            instructions: Extraction instructions, or the raw data when
                there are no images
            provider: Specific provider to use (optional)

        Returns:
            Tuple of (extracted tables, provider used)

        Raises:
            ExtractionError: If there is nothing to process
            LLMClientError: If all providers fail
        """
        images = list(images)
        if not images and not (instructions and instructions.strip()):
            raise ExtractionError(NO_CONTENT_MESSAGE)

        if provider:
            providers = [provider]
        else:
            providers = self._get_provider_order()

        errors = []
        for prov in providers:
            client = self.clients[prov]

            if not client.is_available():
                logger.info(f"{prov.value} not available, skipping")
                errors.append(f"{prov.value}: not available")
                continue

            try:
                logger.info(f"Attempting extraction with {prov.value} ({len(images)} images)")
                response = client.extract_tables(images, instructions)
                data = self.parser.parse_response(response)
            except LLMClientError as e:
                logger.warning(f"{prov.value} failed: {e}")
                errors.append(f"{prov.value}: {str(e)}")
                continue

            self._last_used_provider = prov
            return data, prov

        raise LLMClientError(f"All providers failed: {'; '.join(errors)}")

