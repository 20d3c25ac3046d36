"""Single owner of Koji's emotional state and variation engine.

Event handling and the periodic decay tick both mutate the same state, so the
controller serialises them behind one ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

from personality.brains.shared import ActionRequest, ActionResponse, ActionStrategy, select_with_fallback
from personality.constants import DEFAULT_RECENT_EVENT_LIMIT, DEFAULT_STRATEGY_TIMEOUT_SECONDS
from personality.emotional_state import EmotionalState, TransitionOutcome
from personality.event_bus import EventBus, EventType
from personality.events import Event, EventContext
from personality.metrics import PerformanceMetrics
from personality.micro_behaviors import MicroBehavior
from personality.mood import Mood
from personality.structured_logger import StructuredLogger
from personality.variation import ActionModifier, VariationEngine

LOGGER = logging.getLogger(__name__)

SELECTOR_VARIATION = "variation"
SELECTOR_STRATEGY = "strategy"
SELECTOR_FALLBACK = "fallback"


@dataclass(frozen=True)
class Reaction:
    """What Koji did in response to one event."""

    event: EventContext
    previous_mood: Mood
    mood: Mood
    outcome: TransitionOutcome
    action: str
    modifier: ActionModifier
    selector: str
    reason: Optional[str] = None
    response: Optional[ActionResponse] = None

    @property
    def changed(self) -> bool:
        return self.outcome is TransitionOutcome.CHANGED


class PetController:
    """Feeds events through the state machine and picks a reaction for each one."""

    def __init__(
        self,
        state: Optional[EmotionalState] = None,
        engine: Optional[VariationEngine] = None,
        strategy: Optional[ActionStrategy] = None,
        event_bus: Optional[EventBus] = None,
        metrics: Optional[PerformanceMetrics] = None,
        strategy_timeout: float = DEFAULT_STRATEGY_TIMEOUT_SECONDS,
        recent_event_limit: int = DEFAULT_RECENT_EVENT_LIMIT,
    ) -> None:
        self.state = state or EmotionalState()
        self.engine = engine or VariationEngine()
        self.strategy = strategy
        self.use_strategy = strategy is not None
        self.strategy_timeout = strategy_timeout
        self._event_bus = event_bus or EventBus()
        self._metrics = metrics or PerformanceMetrics()
        self._structured_logger = StructuredLogger(__name__)
        self._recent_events: Deque[Event] = deque(maxlen=max(1, recent_event_limit))
        self._lock = asyncio.Lock()

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def metrics(self) -> PerformanceMetrics:
        return self._metrics

    @property
    def recent_events(self) -> Tuple[Event, ...]:
        return tuple(self._recent_events)

    def toggle_strategy(self) -> bool:
        """Flip between the strategy and the variation engine; returns the new setting."""

        if self.strategy is None:
            self.use_strategy = False
        else:
            self.use_strategy = not self.use_strategy
        return self.use_strategy

    async def handle_event(self, context: EventContext) -> Reaction:
        async with self._lock:
            self._recent_events.append(context.event)
            previous = self.state.mood
            outcome = self.state.apply_event(context)
            changed = outcome is TransitionOutcome.CHANGED
            self._metrics.record_event(changed)

            if changed:
                self.engine.record_mood_change(previous)
                self._structured_logger.log_mood_change(
                    trigger=context.event.value,
                    from_mood=previous.value,
                    to_mood=self.state.mood.value,
                    intensity=self.state.intensity,
                    source=context.source,
                )
                self._event_bus.publish(
                    EventType.MOOD_CHANGED,
                    {"from": previous, "to": self.state.mood, "event": context.event},
                )
            elif outcome is TransitionOutcome.NO_RULE:
                self._event_bus.publish(
                    EventType.EVENT_IGNORED, {"event": context.event, "mood": self.state.mood}
                )

            return await self._react(context, previous, outcome)

    async def tick(self) -> bool:
        """Apply time-based decay; returns True if the mood moved."""

        async with self._lock:
            previous = self.state.mood
            held = self.state.duration()
            if not self.state.decay():
                return False
            self.engine.record_mood_change(previous)
            self._metrics.record_decay()
            self._structured_logger.log_decay(previous.value, self.state.mood.value, held)
            self._event_bus.publish(EventType.MOOD_DECAYED, {"from": previous, "to": self.state.mood})
            return True

    def idle(self) -> Optional[MicroBehavior]:
        behavior = self.engine.select_micro_behavior(self.state.mood)
        if behavior is not None:
            self._event_bus.publish(EventType.MICRO_BEHAVIOR, behavior)
        return behavior

    async def _react(
        self,
        context: EventContext,
        previous: Mood,
        outcome: TransitionOutcome,
    ) -> Reaction:
        mood = self.state.mood
        if self.use_strategy and self.strategy is not None:
            request = ActionRequest(
                state=self.state.snapshot(),
                event=context,
                recent_events=tuple(self._recent_events),
            )
            loop = asyncio.get_running_loop()
            start = loop.time()
            response = await select_with_fallback(self.strategy, request, self.strategy_timeout)
            self._metrics.record_strategy_call(loop.time() - start)
            modifier = self.engine.intensity_to_modifier(self.state.intensity, mood)
            selector = SELECTOR_STRATEGY
            if response.fallback:
                selector = SELECTOR_FALLBACK
                self._metrics.record_fallback()
                self._structured_logger.log_fallback(mood.value, response.reason)
                self._event_bus.publish(EventType.STRATEGY_FALLBACK, response)
            action = response.action
            reason: Optional[str] = response.reason
        else:
            response = None
            chosen = self.engine.select_action(self.state)
            action = chosen.action.value
            modifier = chosen.modifier
            selector = SELECTOR_VARIATION
            reason = None

        self._structured_logger.log_action(mood.value, action, modifier.value, selector, reason)
        reaction = Reaction(
            event=context,
            previous_mood=previous,
            mood=mood,
            outcome=outcome,
            action=action,
            modifier=modifier,
            selector=selector,
            reason=reason,
            response=response,
        )
        self._event_bus.publish(EventType.ACTION_SELECTED, reaction)
        return reaction

