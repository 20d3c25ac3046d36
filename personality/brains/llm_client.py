"""Blocking LLM backends used by the LLM brain.

Both clients expose ``generate_json`` returning the raw model text and ``ping``
for a startup reachability check. They raise ``LLMClientError`` for transport
or protocol problems.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import google.generativeai as genai
import requests
from requests import Response
from requests.adapters import HTTPAdapter

from personality.constants import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)

LOGGER = logging.getLogger(__name__)


class LLMClientError(RuntimeError):
    """Raised when the LLM backend returns an unexpected response."""


@dataclass
class OllamaClient:
    """Thin client for a local Ollama server."""

    base_url: str = DEFAULT_OLLAMA_URL
    model: str = DEFAULT_OLLAMA_MODEL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self.model = self.model or DEFAULT_OLLAMA_MODEL
        if not self.request_timeout:
            self.request_timeout = DEFAULT_REQUEST_TIMEOUT_SECONDS
        adapter = HTTPAdapter(pool_connections=2, pool_maxsize=4, max_retries=1)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    @property
    def model_name(self) -> str:
        return self.model

    def generate_json(self, prompt: str) -> str:
        """Generate with Ollama's JSON output mode enabled."""
        body: Dict[str, Any] = {"model": self.model, "prompt": prompt, "stream": False, "format": "json"}
        response = self._request("POST", "/api/generate", json=body)
        try:
            payload = response.json()
        except ValueError as exc:
            raise LLMClientError(f"decoding response: {exc}") from exc
        text = payload.get("response")
        if not isinstance(text, str):
            raise LLMClientError(f"response missing text: {payload!r}")
        return text

    def ping(self, timeout: Optional[float] = None) -> None:
        """Raise LLMClientError unless the server answers."""
        self._request("GET", "/api/tags", timeout=timeout or self.request_timeout)

    def check_model(self, timeout: Optional[float] = None) -> Tuple[bool, List[str]]:
        """Return whether the configured model is pulled, plus every available model."""
        response = self._request("GET", "/api/tags", timeout=timeout or self.request_timeout)
        try:
            models = response.json().get("models", [])
        except ValueError as exc:
            raise LLMClientError(f"decoding response: {exc}") from exc
        available = [entry.get("name", "") for entry in models]
        return self.model in available, available

    def _request(self, method: str, path: str, **kwargs) -> Response:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.request_timeout)
        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.debug("Ollama request failed (%s %s): %s", method, url, exc)
            raise LLMClientError(str(exc)) from exc
        return response


class GeminiClient:
    """Google Gemini backend with JSON response mode."""

    def __init__(self, model_name: str = DEFAULT_GEMINI_MODEL) -> None:
        self.model_name = model_name
        self._model = genai.GenerativeModel(
            model_name,
            generation_config={"response_mime_type": "application/json"},
        )

    def generate_json(self, prompt: str) -> str:
        try:
            response = self._model.generate_content(prompt)
        except Exception as exc:
            raise LLMClientError(f"gemini request failed: {exc}") from exc
        text = getattr(response, "text", None)
        if not text:
            raise LLMClientError("gemini returned no text")
        return text

    def ping(self, timeout: Optional[float] = None) -> None:
        name = self.model_name if self.model_name.startswith("models/") else f"models/{self.model_name}"
        try:
            genai.get_model(name)
        except Exception as exc:
            raise LLMClientError(f"gemini model {name} unavailable: {exc}") from exc
