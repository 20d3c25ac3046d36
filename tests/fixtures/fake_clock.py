"""Deterministic stand-in for ``time.monotonic``."""

from __future__ import annotations


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now
