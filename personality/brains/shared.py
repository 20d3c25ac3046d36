"""Shared types for pluggable action-selection strategies.

A strategy replaces the variation engine's choice of action. The caller owns
the timeout and always validates the answer against the mood's vocabulary;
anything unusable is swapped for the mood's deterministic default.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple, Type, Union, runtime_checkable

from personality.actions import ActionSet, default_action_set
from personality.emotional_state import StateSnapshot
from personality.events import Event, EventContext

LOGGER = logging.getLogger(__name__)


class StrategyError(RuntimeError):
    """Raised when a strategy cannot produce a usable action."""


class InvalidActionError(StrategyError):
    """The strategy proposed an action outside the mood's vocabulary."""


class StrategyUnavailableError(StrategyError):
    """The strategy is temporarily refusing calls (circuit breaker open)."""


@dataclass(frozen=True)
class ActionRequest:
    """Everything a strategy may look at when picking an action."""

    state: StateSnapshot
    event: EventContext
    recent_events: Tuple[Event, ...] = ()


@dataclass(frozen=True)
class ActionResponse:
    action: str
    reason: str
    fallback: bool = False
    default_set: Optional[ActionSet] = field(default=None, compare=False)


@runtime_checkable
class ActionStrategy(Protocol):
    """Contract an alternate selector must satisfy."""

    async def select_action(self, request: ActionRequest) -> ActionResponse:
        ...


def fallback_response(request: ActionRequest, reason: str) -> ActionResponse:
    defaults = default_action_set(request.state.mood)
    return ActionResponse(
        action=defaults.movement.value,
        reason=reason,
        fallback=True,
        default_set=defaults,
    )


def validate_response(request: ActionRequest, response: ActionResponse) -> ActionResponse:
    """Raise InvalidActionError unless the action belongs to the mood's vocabulary."""

    allowed = {action.value for action in request.state.available_actions}
    if response.action not in allowed:
        raise InvalidActionError(
            f"action {response.action!r} not available while {request.state.mood.value}"
        )
    return response


async def select_with_fallback(
    strategy: ActionStrategy,
    request: ActionRequest,
    timeout: Optional[float] = None,
) -> ActionResponse:
    """Ask ``strategy`` for an action; never raises.

    Timeouts, strategy errors and out-of-vocabulary answers all resolve to the
    mood's default action set with a diagnostic reason.
    """

    try:
        response = await asyncio.wait_for(strategy.select_action(request), timeout)
        return validate_response(request, response)
    except asyncio.TimeoutError:
        LOGGER.warning("Action strategy timed out after %ss; using default action", timeout)
        return fallback_response(request, f"fallback: timed out after {timeout}s")
    except InvalidActionError as exc:
        LOGGER.warning("Action strategy chose an invalid action: %s", exc)
        return fallback_response(request, f"fallback - invalid action: {exc}")
    except Exception as exc:
        LOGGER.warning("Action strategy failed (%s): %s", type(exc).__name__, exc)
        return fallback_response(request, f"fallback: {exc}")


class CircuitBreakerState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"      # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing if service recovered


class RateLimiter:
    """Sliding window rate limiter with circuit breaker for strategy calls."""

    def __init__(
        self,
        max_calls: int = 30,
        window_seconds: int = 60,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        expected_exception: Union[Type[BaseException], Tuple[Type[BaseException], ...]] = Exception,
    ):
        self.max_calls = max_calls
        self.window = window_seconds
        self._calls: deque = deque()

        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception

        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._next_attempt_time = 0.0

    async def acquire(self) -> None:
        """Wait if necessary to respect the rate limit; fail fast while the circuit is open."""
        if self._state == CircuitBreakerState.OPEN:
            if time.monotonic() < self._next_attempt_time:
                raise StrategyUnavailableError(
                    f"circuit breaker open; next retry in {self._next_attempt_time - time.monotonic():.1f}s"
                )
            self._state = CircuitBreakerState.HALF_OPEN

        now = time.monotonic()
        while self._calls and self._calls[0] < now - self.window:
            self._calls.popleft()

        if len(self._calls) >= self.max_calls:
            sleep_time = self._calls[0] + self.window - now
            if sleep_time > 0:
                await asyncio.sleep(sleep_time)
                now = time.monotonic()
                while self._calls and self._calls[0] < now - self.window:
                    self._calls.popleft()

        self._calls.append(time.monotonic())

    def record_success(self) -> None:
        if self._state == CircuitBreakerState.HALF_OPEN:
            self._state = CircuitBreakerState.CLOSED
            self._failure_count = 0
        elif self._state == CircuitBreakerState.CLOSED:
            self._failure_count = max(0, self._failure_count - 1)  # Gradual recovery

    def record_failure(self, exc: BaseException) -> None:
        if isinstance(exc, self.expected_exception):
            self._failure_count += 1
            if self._state == CircuitBreakerState.HALF_OPEN or self._failure_count >= self.failure_threshold:
                self._state = CircuitBreakerState.OPEN
                self._next_attempt_time = time.monotonic() + self.recovery_timeout

    @property
    def state(self) -> CircuitBreakerState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count
