"""Centralized configuration management for the Koji simulator."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from personality.constants import (
    DEFAULT_DECAY_TICK_SECONDS,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LLM_BACKEND,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_PING_TIMEOUT_SECONDS,
    DEFAULT_RECENT_EVENT_LIMIT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_STRATEGY_TIMEOUT_SECONDS,
)

LLMBackend = Literal["ollama", "gemini", "none"]


class PetConfig(BaseModel):
    """Type-safe configuration for the pet simulator with validation."""

    llm_backend: LLMBackend = Field(default=DEFAULT_LLM_BACKEND)
    ollama_url: str = Field(default=DEFAULT_OLLAMA_URL)
    ollama_model: str = Field(default=DEFAULT_OLLAMA_MODEL)
    gemini_model: str = Field(default=DEFAULT_GEMINI_MODEL)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, ge=0.1, le=300.0)
    strategy_timeout: float = Field(default=DEFAULT_STRATEGY_TIMEOUT_SECONDS, ge=0.1, le=300.0)
    ping_timeout: float = Field(default=DEFAULT_PING_TIMEOUT_SECONDS, ge=0.1, le=60.0)
    decay_tick: float = Field(default=DEFAULT_DECAY_TICK_SECONDS, ge=0.05, le=60.0)
    recent_event_limit: int = Field(default=DEFAULT_RECENT_EVENT_LIMIT, ge=1, le=50)

    @field_validator("ollama_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Ollama URL must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @field_validator("gemini_model")
    @classmethod
    def validate_gemini_model(cls, v: str) -> str:
        if not v.removeprefix("models/").startswith("gemini-"):
            raise ValueError("Model name must start with 'gemini-'")
        return v

    @property
    def llm_enabled(self) -> bool:
        return self.llm_backend != "none"

    @classmethod
    def from_env(cls) -> "PetConfig":
        """Load configuration from environment variables.

        Values are passed through as strings so pydantic does the coercion and
        malformed numbers surface as ``ValidationError``.
        """
        return cls(
            llm_backend=os.getenv("KOJI_LLM_BACKEND", DEFAULT_LLM_BACKEND),
            ollama_url=os.getenv("OLLAMA_URL", DEFAULT_OLLAMA_URL),
            ollama_model=os.getenv("KOJI_MODEL", DEFAULT_OLLAMA_MODEL),
            gemini_model=os.getenv("GEMINI_MODEL_NAME", DEFAULT_GEMINI_MODEL),
            request_timeout=os.getenv("KOJI_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)),
            strategy_timeout=os.getenv("KOJI_STRATEGY_TIMEOUT", str(DEFAULT_STRATEGY_TIMEOUT_SECONDS)),
            decay_tick=os.getenv("KOJI_DECAY_TICK", str(DEFAULT_DECAY_TICK_SECONDS)),
            recent_event_limit=os.getenv("KOJI_RECENT_EVENTS", str(DEFAULT_RECENT_EVENT_LIMIT)),
        )
