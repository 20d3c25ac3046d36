"""Koji's emotional state machine.

The state is pull-based: nothing runs in the background. Decay is evaluated
against the injected clock each time ``decay`` is called, so tests can supply
a fixed "now".
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from personality.actions import Action, ActionSet, available_actions, default_action_set
from personality.constants import DECAY_INTENSITY_STEP
from personality.events import DEFAULT_EVENT_INTENSITY, Event, EventContext
from personality.mood import BASELINE_MOOD, IntensityTier, Mood
from personality.transitions import (
    NO_TRANSITION,
    decay_dwell_time,
    decay_successor,
    lookup_transition,
)

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class TransitionOutcome(Enum):
    """Result of applying an event, finer grained than ``process_event``'s bool."""

    NO_RULE = "no_rule"
    UNCHANGED = "unchanged"  # a rule matched but kept the same mood
    CHANGED = "changed"


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only view of an emotional state handed to external strategies."""

    mood: Mood
    intensity: float
    entered_at: float
    duration: float
    is_baseline: bool
    available_actions: Tuple[Action, ...]


@dataclass
class EmotionalState:
    """Tracks the current mood and how it changes over time."""

    mood: Mood = BASELINE_MOOD
    intensity: float = IntensityTier.MEDIUM.value
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)
    baseline: Mood = field(default=BASELINE_MOOD, repr=False)
    entered_at: Optional[float] = None

    def __post_init__(self) -> None:
        self.mood = Mood(self.mood)
        self.baseline = Mood(self.baseline)
        if self.entered_at is None:
            self.entered_at = self.clock()

    def set_mood(self, mood: Mood, intensity: float, now: Optional[float] = None) -> None:
        self.mood = Mood(mood)
        self.intensity = float(intensity)
        self.entered_at = self.clock() if now is None else now

    def duration(self, now: Optional[float] = None) -> float:
        """Seconds spent in the current mood."""

        current = self.clock() if now is None else now
        return current - self.entered_at

    def is_baseline(self) -> bool:
        return self.mood == self.baseline

    @property
    def intensity_label(self) -> str:
        return IntensityTier.nearest(self.intensity).label

    def apply_event(
        self,
        event: Union[EventContext, Event, str],
        intensity_hint: Optional[float] = None,
    ) -> TransitionOutcome:
        """Apply an event and report whether a rule matched and moved the mood."""

        if isinstance(event, EventContext):
            hint = event.intensity if intensity_hint is None else intensity_hint
            event = event.event
        else:
            hint = DEFAULT_EVENT_INTENSITY if intensity_hint is None else intensity_hint

        transition = lookup_transition(event, self.mood)
        if transition is NO_TRANSITION:
            LOGGER.debug("No transition for %s while %s", event, self.mood.value)
            return TransitionOutcome.NO_RULE

        tier = transition.intensity
        if hint > 0.7:
            tier = IntensityTier.HIGH
        elif hint < 0.3:
            tier = IntensityTier.LOW

        previous = self.mood
        self.set_mood(transition.new_mood, tier.value)
        if previous != self.mood:
            return TransitionOutcome.CHANGED
        return TransitionOutcome.UNCHANGED

    def process_event(
        self,
        event: Union[EventContext, Event, str],
        intensity_hint: Optional[float] = None,
    ) -> bool:
        """Update the state for an incoming event. Returns True if the mood changed."""

        return self.apply_event(event, intensity_hint) is TransitionOutcome.CHANGED

    def decay(self, now: Optional[float] = None) -> bool:
        """Move one step toward baseline once the current mood has been held long enough."""

        if self.is_baseline():
            return False

        dwell = decay_dwell_time(self.mood)
        if dwell is None:
            return False
        if self.duration(now) < dwell:
            return False

        successor = decay_successor(self.mood)
        if successor == self.mood:
            return False

        intensity = max(self.intensity - DECAY_INTENSITY_STEP, IntensityTier.LOW.value)
        self.set_mood(successor, intensity, now)
        return True

    def available_actions(self) -> Tuple[Action, ...]:
        return available_actions(self.mood)

    def suggest_default_action(self) -> ActionSet:
        return default_action_set(self.mood)

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            mood=self.mood,
            intensity=self.intensity,
            entered_at=self.entered_at,
            duration=self.duration(),
            is_baseline=self.is_baseline(),
            available_actions=self.available_actions(),
        )
