"""Structured logging with JSON-formatted context for better observability."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Dict, Optional


class StructuredLogger:
    """Logger that emits one JSON object per behavior-pipeline event."""
    
    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _emit(self, event: Dict[str, Any], level: int = logging.INFO) -> None:
        event["timestamp"] = datetime.now(UTC).isoformat()
        self.logger.log(level, json.dumps(event, ensure_ascii=False))
    
    def log_mood_change(
        self,
        trigger: str,
        from_mood: str,
        to_mood: str,
        intensity: float,
        source: Optional[str] = None,
    ) -> None:
        """Log a mood transition caused by an event."""
        event = {
            "event": "mood_change",
            "trigger": trigger,
            "from_mood": from_mood,
            "to_mood": to_mood,
            "intensity": round(intensity, 3),
        }
        if source:
            event["source"] = source
        self._emit(event)

    def log_decay(self, from_mood: str, to_mood: str, held_seconds: float) -> None:
        self._emit({
            "event": "mood_decay",
            "from_mood": from_mood,
            "to_mood": to_mood,
            "held_seconds": round(held_seconds, 2),
        })

    def log_action(
        self,
        mood: str,
        action: str,
        modifier: Optional[str],
        selector: str,
        reason: Optional[str] = None,
    ) -> None:
        """Log the action chosen for the current mood."""
        event = {
            "event": "action_selected",
            "mood": mood,
            "action": action,
            "selector": selector,
        }
        if modifier:
            event["modifier"] = modifier
        if reason:
            event["reason"] = reason
        self._emit(event, logging.DEBUG)

    def log_strategy_call(self, strategy: str, duration: float, model: Optional[str] = None) -> None:
        """Log an external strategy call with timing information."""
        event = {
            "event": "strategy_call",
            "strategy": strategy,
            "duration_ms": round(duration * 1000, 2),
        }
        if model:
            event["model"] = model
        self._emit(event)

    def log_fallback(self, mood: str, reason: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log a strategy failure that was replaced by the default action."""
        event = {
            "event": "strategy_fallback",
            "mood": mood,
            "reason": reason,
        }
        if context:
            event["context"] = context
        self._emit(event, logging.WARNING)
