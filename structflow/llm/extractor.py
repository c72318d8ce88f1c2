"""
Gemini client for natural-language parameter extraction.

One request, no retry. Any failure (no key, HTTP error, unexpected response
shape) is logged and returns None so the caller can report it.
"""

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from ..config import settings
from .prompt_builder import build_gemini_request, gemini_endpoint

logger = logging.getLogger(__name__)


class ParameterExtractor:
    """Sends a design description to Gemini and returns the raw response text."""

    def __init__(self, api_key: str = None, model: str = None, timeout: int = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.GEMINI_TIMEOUT_SECONDS

    def extract(self, natural_language_input: str) -> Optional[str]:
        if not natural_language_input or not natural_language_input.strip():
            return None

        if not self.api_key:
            logger.warning("No GEMINI_API_KEY — natural-language extraction unavailable")
            return None

        url = f"{gemini_endpoint(self.model)}?key={self.api_key}"
        payload = json.dumps(build_gemini_request(natural_language_input)).encode("utf-8")
        req = urllib.request.Request(
            url, data=payload,
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                result = json.loads(response.read())
                return result["candidates"][0]["content"]["parts"][0]["text"]
        except (urllib.error.URLError, TimeoutError) as e:
            logger.warning(f"Gemini request failed: {e}")
            return None
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            logger.warning(f"Unexpected Gemini response shape: {e}")
            return None
