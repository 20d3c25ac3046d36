"""Tests for the strategy seam: fallback handling and the circuit breaker."""

import asyncio

import pytest

from personality.actions import Action, ActionSet
from personality.brains.shared import (
    ActionRequest,
    ActionResponse,
    ActionStrategy,
    CircuitBreakerState,
    InvalidActionError,
    RateLimiter,
    StrategyUnavailableError,
    fallback_response,
    select_with_fallback,
    validate_response,
)
from personality.emotional_state import EmotionalState
from personality.events import Event, EventContext
from personality.mood import Mood
from tests.fixtures.fake_clock import FakeClock
from tests.fixtures.mock_llm import MockStrategy


def make_request(mood: Mood = Mood.CURIOUS, event: Event = Event.MUSIC) -> ActionRequest:
    state = EmotionalState(mood=mood, clock=FakeClock())
    return ActionRequest(state=state.snapshot(), event=EventContext(event))


def test_mock_strategy_satisfies_protocol():
    assert isinstance(MockStrategy(), ActionStrategy)


async def test_valid_action_passes_through():
    request = make_request()
    response = await select_with_fallback(MockStrategy(action="explore"), request, timeout=1)

    assert response == ActionResponse(action="explore", reason="mock reason")
    assert response.fallback is False


async def test_timeout_falls_back_to_default_movement():
    request = make_request(Mood.FRIGHTENED)
    response = await select_with_fallback(MockStrategy(delay=1.0), request, timeout=0.01)

    assert response.action == Action.FLEE.value
    assert response.fallback is True
    assert response.reason.startswith("fallback: timed out")
    assert response.default_set == ActionSet(Action.FLEE, Action.FLATTEN_EARS, Action.WHIMPER)


async def test_strategy_error_falls_back():
    request = make_request(Mood.SLEEPY)
    response = await select_with_fallback(
        MockStrategy(error=RuntimeError("backend down")), request, timeout=1
    )

    assert response.action == Action.CURL.value
    assert response.fallback is True
    assert response.reason == "fallback: backend down"


async def test_out_of_vocabulary_action_falls_back():
    request = make_request(Mood.CURIOUS)
    response = await select_with_fallback(MockStrategy(action="flee"), request, timeout=1)

    assert response.action == Action.EXPLORE.value
    assert response.fallback is True
    assert response.reason.startswith("fallback - invalid action")


async def test_pseudo_actions_are_not_accepted_from_strategies():
    request = make_request(Mood.CURIOUS)
    response = await select_with_fallback(MockStrategy(action="sniff"), request, timeout=1)

    assert response.fallback is True


async def test_no_timeout_waits_for_strategy():
    request = make_request()
    response = await select_with_fallback(MockStrategy(action="chirp", delay=0.01), request)

    assert response.action == "chirp"


def test_validate_response_raises_for_unknown_action():
    request = make_request(Mood.HAPPY)
    with pytest.raises(InvalidActionError):
        validate_response(request, ActionResponse(action="growl", reason="grr"))


def test_fallback_response_carries_reason():
    response = fallback_response(make_request(Mood.CAUTIOUS), "fallback: test")

    assert response.action == Action.FREEZE.value
    assert response.reason == "fallback: test"
    assert response.default_set.sound == Action.GROWL


class TestRateLimiter:
    def test_opens_after_threshold(self):
        limiter = RateLimiter(failure_threshold=3)
        for _ in range(3):
            limiter.record_failure(RuntimeError("boom"))

        assert limiter.state == CircuitBreakerState.OPEN
        assert limiter.failure_count == 3

    def test_unexpected_exceptions_do_not_count(self):
        limiter = RateLimiter(failure_threshold=1, expected_exception=ConnectionError)
        limiter.record_failure(ValueError("bad json"))

        assert limiter.state == CircuitBreakerState.CLOSED
        assert limiter.failure_count == 0

    def test_success_gradually_recovers(self):
        limiter = RateLimiter(failure_threshold=5)
        limiter.record_failure(RuntimeError("boom"))
        limiter.record_failure(RuntimeError("boom"))
        limiter.record_success()

        assert limiter.failure_count == 1

    async def test_open_circuit_rejects_calls(self):
        limiter = RateLimiter(failure_threshold=1, recovery_timeout=60)
        limiter.record_failure(RuntimeError("boom"))

        with pytest.raises(StrategyUnavailableError):
            await limiter.acquire()

    async def test_half_open_closes_on_success(self):
        limiter = RateLimiter(failure_threshold=1, recovery_timeout=0)
        limiter.record_failure(RuntimeError("boom"))

        await limiter.acquire()
        assert limiter.state == CircuitBreakerState.HALF_OPEN

        limiter.record_success()
        assert limiter.state == CircuitBreakerState.CLOSED
        assert limiter.failure_count == 0

    async def test_half_open_reopens_on_failure(self):
        limiter = RateLimiter(failure_threshold=5, recovery_timeout=0)
        for _ in range(5):
            limiter.record_failure(RuntimeError("boom"))
        await limiter.acquire()

        limiter.record_failure(RuntimeError("again"))

        assert limiter.state == CircuitBreakerState.OPEN

    async def test_rate_limit_waits_for_window(self):
        limiter = RateLimiter(max_calls=2, window_seconds=0.05)
        loop = asyncio.get_running_loop()

        start = loop.time()
        for _ in range(3):
            await limiter.acquire()

        assert loop.time() - start >= 0.04
