"""Lifelike variation on top of the emotional state machine.

The engine owns its own ``random.Random`` so tests can pin a seed, and keeps a
short ledger of recent mood changes whose echoes bias action selection with
linearly fading weight.
"""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Sequence, Tuple, TypeVar

from personality.action_tables import ECHO_EFFECTS, WeightedAction, weighted_actions_for
from personality.actions import NEUTRAL_ACTION, Action
from personality.constants import ECHO_HISTORY_SIZE, MICRO_BEHAVIOR_PAUSE_PROBABILITY
from personality.emotional_state import EmotionalState
from personality.micro_behaviors import MICRO_BEHAVIORS, MicroBehavior
from personality.mood import Mood

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ActionModifier(str, Enum):
    """How an action is performed."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"
    FRANTIC = "frantic"
    GENTLE = "gentle"
    HESITANT = "hesitant"
    EAGER = "eager"


@dataclass(frozen=True)
class ModifiedAction:
    action: Action
    modifier: ActionModifier


@dataclass(frozen=True)
class MoodEcho:
    """Lingering influence of a mood that has already ended."""

    from_mood: Mood
    strength: float  # 0.0 to 1.0
    started_at: float


def weighted_choice(rng: random.Random, candidates: Sequence[Tuple[T, float]]) -> Optional[T]:
    """Pick an item in proportion to its weight.

    Draws ``r`` in ``[0, total)`` and returns the first item whose cumulative
    weight reaches ``r``; ties resolve in table order. Returns None when there
    is nothing with positive weight to choose from.
    """

    total = sum(weight for _, weight in candidates)
    if not candidates or total <= 0:
        return None

    r = rng.random() * total
    cumulative = 0.0
    for item, weight in candidates:
        cumulative += weight
        if r <= cumulative:
            return item
    return candidates[0][0]


class VariationEngine:
    """Weighted-random action selection with mood echoes and intensity modifiers."""

    def __init__(
        self,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        max_history: int = ECHO_HISTORY_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        if rng is None:
            rng = random.Random(time.time_ns() if seed is None else seed)
        self._rng = rng
        self._clock = clock
        self.max_history = max_history
        self._mood_history: Deque[MoodEcho] = deque(maxlen=max_history)

    # ------------------------------------------------------------------
    # Mood echoes
    # ------------------------------------------------------------------
    def record_mood_change(self, from_mood: Mood, now: Optional[float] = None) -> None:
        """Remember a mood that just ended; the oldest echo is evicted at capacity."""

        started_at = self._clock() if now is None else now
        self._mood_history.append(MoodEcho(from_mood=from_mood, strength=1.0, started_at=started_at))
        LOGGER.debug("Recorded mood echo from %s (%d stored)", from_mood.value, len(self._mood_history))

    def get_active_echoes(self, now: Optional[float] = None) -> List[MoodEcho]:
        """Echoes still affecting behavior, with strength recomputed for ``now``."""

        current = self._clock() if now is None else now
        active: List[MoodEcho] = []
        for echo in self._mood_history:
            effect = ECHO_EFFECTS.get(echo.from_mood)
            if effect is None:
                continue
            elapsed = max(0.0, current - echo.started_at)
            if elapsed >= effect.decay_time:
                continue
            strength = 1.0 - elapsed / effect.decay_time
            active.append(MoodEcho(from_mood=echo.from_mood, strength=strength, started_at=echo.started_at))
        return active

    def clear_echoes(self) -> None:
        self._mood_history.clear()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def candidate_actions(self, mood: Mood, now: Optional[float] = None) -> List[WeightedAction]:
        """The mood's weighted table plus echo-injected candidates."""

        actions = weighted_actions_for(mood)
        for echo in self.get_active_echoes(now):
            for extra in ECHO_EFFECTS[echo.from_mood].actions_for(mood):
                actions.append(WeightedAction(extra.action, extra.weight * echo.strength))
        return actions

    def select_action(self, state: EmotionalState) -> ModifiedAction:
        """Pick an action and a modifier for the current emotional state."""

        candidates = self.candidate_actions(state.mood)
        action = weighted_choice(self._rng, candidates)
        if action is None:
            LOGGER.warning("No weighted actions for %s; using %s", state.mood.value, NEUTRAL_ACTION.value)
            action = NEUTRAL_ACTION
        modifier = self.intensity_to_modifier(state.intensity, state.mood)
        return ModifiedAction(action=action, modifier=modifier)

    def select_micro_behavior(self, mood: Mood) -> Optional[MicroBehavior]:
        """A small idle animation, or None for a natural pause."""

        if self._rng.random() < MICRO_BEHAVIOR_PAUSE_PROBABILITY:
            return None
        behaviors = MICRO_BEHAVIORS.get(mood)
        if not behaviors:
            return None
        return weighted_choice(self._rng, [(wb.behavior, wb.weight) for wb in behaviors])

    def intensity_to_modifier(self, intensity: float, mood: Mood) -> ActionModifier:
        """Map jittered intensity to a mood-specific modifier."""

        adjusted = float(intensity) + (self._rng.random() - 0.5) * 0.2  # +/- 0.1

        if mood in (Mood.FRIGHTENED, Mood.STARTLED):
            if adjusted > 0.8:
                return ActionModifier.FRANTIC
            if adjusted > 0.5:
                return ActionModifier.FAST
            return ActionModifier.HESITANT

        if mood == Mood.EXCITED:
            if adjusted > 0.8:
                return ActionModifier.FRANTIC
            if adjusted > 0.5:
                return ActionModifier.EAGER
            return ActionModifier.FAST

        if mood == Mood.SLEEPY:
            if adjusted > 0.7:
                return ActionModifier.SLOW
            return ActionModifier.GENTLE

        if mood == Mood.CAUTIOUS:
            if adjusted > 0.6:
                return ActionModifier.HESITANT
            return ActionModifier.SLOW

        if mood == Mood.HAPPY:
            if adjusted > 0.7:
                return ActionModifier.EAGER
            return ActionModifier.NORMAL

        if adjusted > 0.7:
            return ActionModifier.EAGER
        if adjusted < 0.3:
            return ActionModifier.GENTLE
        return ActionModifier.NORMAL
