"""Pytest fixtures shared across the test suite."""

from __future__ import annotations

import asyncio
import inspect

import pytest

from personality.emotional_state import EmotionalState
from personality.variation import VariationEngine
from tests.fixtures.fake_clock import FakeClock


def pytest_pyfunc_call(pyfuncitem):  # pragma: no cover - pytest hook
    """Allow ``async def`` tests without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        testargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # pylint: disable=protected-access
        }
        asyncio.run(pyfuncitem.obj(**testargs))
        return True
    return None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state(clock: FakeClock) -> EmotionalState:
    return EmotionalState(clock=clock)


@pytest.fixture
def engine(clock: FakeClock) -> VariationEngine:
    return VariationEngine(seed=1234, clock=clock)
