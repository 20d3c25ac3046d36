"""Counters and timings for the behavior pipeline."""

from collections import deque
from typing import Any, Deque, Dict


class PerformanceMetrics:
    """Performance metrics collection for monitoring."""

    def __init__(self) -> None:
        self.strategy_call_times: Deque[float] = deque(maxlen=100)
        self.events_processed: int = 0
        self.mood_changes: int = 0
        self.decays: int = 0
        self.fallbacks: int = 0

    def record_strategy_call(self, duration: float) -> None:
        """Record how long an action strategy took to answer."""
        self.strategy_call_times.append(duration)

    def record_event(self, changed: bool) -> None:
        self.events_processed += 1
        if changed:
            self.mood_changes += 1

    def record_decay(self) -> None:
        self.decays += 1

    def record_fallback(self) -> None:
        self.fallbacks += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get performance statistics."""
        return {
            "avg_strategy_time_ms": (
                sum(self.strategy_call_times) / len(self.strategy_call_times) * 1000
                if self.strategy_call_times else 0
            ),
            "strategy_call_count": len(self.strategy_call_times),
            "total_events": self.events_processed,
            "total_mood_changes": self.mood_changes,
            "total_decays": self.decays,
            "total_fallbacks": self.fallbacks,
        }
