"""Event bus for loose coupling between the controller and its observers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

LOGGER = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can be published."""
    MOOD_CHANGED = "mood_changed"
    MOOD_DECAYED = "mood_decayed"
    EVENT_IGNORED = "event_ignored"
    ACTION_SELECTED = "action_selected"
    MICRO_BEHAVIOR = "micro_behavior"
    STRATEGY_FALLBACK = "strategy_fallback"


class EventBus:
    """Simple pub/sub event bus for component communication."""
    
    def __init__(self):
        self._subscribers: Dict[EventType, List[Callable[[Any], None]]] = {}
    
    def subscribe(self, event_type: EventType, handler: Callable[[Any], None]) -> None:
        """Subscribe to an event type.
        
        Args:
            event_type: The type of event to subscribe to
            handler: Callback function that receives event data
        """
        self._subscribers.setdefault(event_type, []).append(handler)
        LOGGER.debug("Subscribed handler to event type: %s", event_type.value)
    
    def unsubscribe(self, event_type: EventType, handler: Callable[[Any], None]) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            LOGGER.debug("Unsubscribed handler from event type: %s", event_type.value)
    
    def publish(self, event_type: EventType, data: Any = None) -> None:
        """Publish an event to all subscribers.

        A failing handler is logged and skipped so one observer cannot break
        the behavior pipeline.
        """
        for handler in list(self._subscribers.get(event_type, [])):
            try:
                handler(data)
            except Exception as exc:
                LOGGER.error("Event handler failed for %s: %s", event_type.value, exc)
    
    def clear(self) -> None:
        self._subscribers.clear()
