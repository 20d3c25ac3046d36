"""LLM-backed action selection for Koji's personality."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Optional, Protocol

from personality.brains.shared import (
    ActionRequest,
    ActionResponse,
    RateLimiter,
    StrategyError,
)
from personality.structured_logger import StructuredLogger

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Koji, a small robot pet with a curious, excitable personality.

Personality traits:
- Curious by nature, easily excited by new things
- A little clumsy but enthusiastic
- Loves music, bobs head and wags tail
- Startled by loud noises, hides then peeks out cautiously
- Wary of strangers at first, but warms up quickly
- Gets sleepy when quiet for too long
- Affectionate with familiar people

You are NOT a helpful assistant. You are a pet. You don't answer questions or provide information. You react to your environment like an animal would.

IMPORTANT: You must respond with ONLY valid JSON in this exact format:
{"action": "<action_from_list>", "reason": "<brief 5-10 word reason>"}

Do not include any other text, explanation, or markdown. Just the JSON object."""


class CompletionClient(Protocol):
    model_name: str

    def generate_json(self, prompt: str) -> str:
        ...


def extract_json(text: str) -> str:
    """Return the outermost ``{...}`` span of ``text``, or ``text`` unchanged."""

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start:end + 1]
    return text


def parse_action_response(raw: str) -> ActionResponse:
    """Parse ``{"action": ..., "reason": ...}``, tolerating chatter around the object."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        try:
            payload = json.loads(extract_json(raw))
        except json.JSONDecodeError as exc:
            raise StrategyError(f"parsing response {raw!r}: {exc}") from exc

    if not isinstance(payload, dict):
        raise StrategyError(f"expected a JSON object, got {raw!r}")
    action = payload.get("action")
    if not isinstance(action, str) or not action:
        raise StrategyError(f"response has no action: {raw!r}")
    reason = payload.get("reason")
    return ActionResponse(action=action.strip(), reason=str(reason or "").strip())


class LLMBrain:
    """Asks a language model to pick one action from the current mood's vocabulary."""

    def __init__(
        self,
        client: CompletionClient,
        rate_limiter: Optional[RateLimiter] = None,
        structured_logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.client = client
        self._rate_limiter = rate_limiter
        self._structured_logger = structured_logger
        self.last_duration: Optional[float] = None

    @property
    def rate_limiter(self) -> Optional[RateLimiter]:
        return self._rate_limiter

    @property
    def model_name(self) -> str:
        return getattr(self.client, "model_name", "unknown")

    def build_prompt(self, request: ActionRequest) -> str:
        state = request.state
        lines = [
            SYSTEM_PROMPT,
            "",
            "Current state:",
            f"- Mood: {state.mood.value}",
            f"- Intensity: {state.intensity:.1f} (0=mild, 1=intense)",
            f"- Time in mood: {round(state.duration)}s",
        ]
        if request.recent_events:
            recent = ", ".join(event.value for event in request.recent_events)
            lines.append(f"- Recent events: [{recent}]")
        lines.append("")

        actions = ", ".join(action.value for action in state.available_actions)
        lines.append(f"Available actions: [{actions}]")
        lines.append("")

        event_line = f"Event just detected: {request.event.event.value}"
        if request.event.intensity > 0.7:
            event_line += " (intense)"
        elif request.event.intensity < 0.3:
            event_line += " (mild)"
        if request.event.source:
            event_line += f" from {request.event.source}"
        lines.append(event_line)
        lines.append("")
        lines.append("Choose ONE action from the list. Respond with JSON only.")
        return "\n".join(lines)

    async def select_action(self, request: ActionRequest) -> ActionResponse:
        """Query the model; raises on transport or parse failure."""

        prompt = self.build_prompt(request)
        LOGGER.debug("[LLMBrain] Prompt payload: %s", prompt)

        if self._rate_limiter:
            await self._rate_limiter.acquire()

        loop = asyncio.get_running_loop()
        start_time = time.monotonic()
        try:
            raw = await loop.run_in_executor(None, self.client.generate_json, prompt)
        except asyncio.CancelledError:
            # Cancelled by the caller's timeout.
            if self._rate_limiter:
                self._rate_limiter.record_failure(asyncio.TimeoutError())
            raise
        except Exception as exc:
            if self._rate_limiter:
                self._rate_limiter.record_failure(exc)
            raise
        self.last_duration = time.monotonic() - start_time

        if self._rate_limiter:
            self._rate_limiter.record_success()
        if self._structured_logger:
            self._structured_logger.log_strategy_call(
                strategy=type(self).__name__,
                duration=self.last_duration,
                model=self.model_name,
            )

        response = parse_action_response(raw)
        LOGGER.info("[LLMBrain] Decision: %s (%s)", response.action, response.reason)
        return response

