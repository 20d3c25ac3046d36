"""Pluggable action-selection strategies."""

from personality.brains.llm_brain import LLMBrain
from personality.brains.llm_client import GeminiClient, LLMClientError, OllamaClient
from personality.brains.shared import (
    ActionRequest,
    ActionResponse,
    ActionStrategy,
    RateLimiter,
    StrategyError,
    select_with_fallback,
)

__all__ = [
    "ActionRequest",
    "ActionResponse",
    "ActionStrategy",
    "GeminiClient",
    "LLMBrain",
    "LLMClientError",
    "OllamaClient",
    "RateLimiter",
    "StrategyError",
    "select_with_fallback",
]
