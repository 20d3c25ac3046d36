"""Weighted action tables and mood echo effects.

Weights are relative and need not sum to 1. Echo effects describe how a mood
that just ended keeps leaking actions into the mood that replaced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Tuple

from personality.actions import Action
from personality.mood import Mood


class WeightedAction(NamedTuple):
    action: Action
    weight: float


WEIGHTED_MOOD_ACTIONS: Dict[Mood, Tuple[WeightedAction, ...]] = {
    Mood.CURIOUS: (
        WeightedAction(Action.EXPLORE, 4.0),
        WeightedAction(Action.PERK_EARS, 3.0),
        WeightedAction(Action.TILT_HEAD, 3.0),  # the classic curious head tilt
        WeightedAction(Action.APPROACH, 2.0),
        WeightedAction(Action.STAY, 1.0),
        WeightedAction(Action.CHIRP, 1.5),
        WeightedAction(Action.SNIFF, 2.5),
    ),
    Mood.EXCITED: (
        WeightedAction(Action.BOUNCE, 4.0),
        WeightedAction(Action.WAG_TAIL, 4.0),
        WeightedAction(Action.SPIN, 3.0),
        WeightedAction(Action.APPROACH, 3.0),
        WeightedAction(Action.BARK, 2.0),
        WeightedAction(Action.PERK_EARS, 2.0),
        WeightedAction(Action.CHIRP, 2.5),
        WeightedAction(Action.EXPLORE, 1.5),  # too excited to focus
    ),
    Mood.HAPPY: (
        WeightedAction(Action.WAG_TAIL, 5.0),
        WeightedAction(Action.NUZZLE, 3.0),
        WeightedAction(Action.PURR, 3.0),
        WeightedAction(Action.STAY, 2.5),
        WeightedAction(Action.HEAD_BOB, 2.0),
        WeightedAction(Action.CHIRP, 2.0),
        WeightedAction(Action.APPROACH, 1.5),
        WeightedAction(Action.EXPLORE, 1.0),
    ),
    Mood.STARTLED: (
        WeightedAction(Action.FREEZE, 5.0),  # deer in headlights
        WeightedAction(Action.PERK_EARS, 4.0),
        WeightedAction(Action.CROUCH, 3.0),
        WeightedAction(Action.RETREAT, 2.5),
        WeightedAction(Action.WHIMPER, 2.0),
        WeightedAction(Action.FLEE, 1.5),
        WeightedAction(Action.FLATTEN_EARS, 2.0),
    ),
    Mood.FRIGHTENED: (
        WeightedAction(Action.FLEE, 5.0),
        WeightedAction(Action.CROUCH, 4.0),  # make self small
        WeightedAction(Action.WHIMPER, 4.0),
        WeightedAction(Action.FLATTEN_EARS, 3.5),
        WeightedAction(Action.RETREAT, 3.0),
        WeightedAction(Action.PEEK, 2.0),  # is it gone?
        WeightedAction(Action.FREEZE, 1.5),
    ),
    Mood.CAUTIOUS: (
        WeightedAction(Action.PEEK, 4.0),
        WeightedAction(Action.PERK_EARS, 4.0),
        WeightedAction(Action.FREEZE, 3.0),
        WeightedAction(Action.STAY, 3.0),
        WeightedAction(Action.RETREAT, 2.5),
        WeightedAction(Action.GROWL, 2.0),  # warning sound
        WeightedAction(Action.FLATTEN_EARS, 1.5),
        WeightedAction(Action.WHIMPER, 1.0),
    ),
    Mood.SLEEPY: (
        WeightedAction(Action.CURL, 5.0),
        WeightedAction(Action.YAWN, 4.0),
        WeightedAction(Action.STAY, 3.5),  # too tired to move
        WeightedAction(Action.PURR, 2.0),
    ),
}


@dataclass(frozen=True)
class EchoEffect:
    """How long a past mood lingers and what it adds to later moods."""

    decay_time: float  # seconds until the echo is gone
    effects: Dict[Mood, Tuple[WeightedAction, ...]] = field(default_factory=dict)

    def actions_for(self, current_mood: Mood) -> Tuple[WeightedAction, ...]:
        return self.effects.get(current_mood, ())


ECHO_EFFECTS: Dict[Mood, EchoEffect] = {
    # Stays jumpy for a while
    Mood.FRIGHTENED: EchoEffect(
        decay_time=45.0,
        effects={
            Mood.CURIOUS: (
                WeightedAction(Action.PEEK, 2.0),  # still peeking nervously
                WeightedAction(Action.FLATTEN_EARS, 1.5),
                WeightedAction(Action.FREEZE, 1.0),
            ),
            Mood.CAUTIOUS: (
                WeightedAction(Action.WHIMPER, 1.5),
                WeightedAction(Action.CROUCH, 1.0),
            ),
            Mood.HAPPY: (
                WeightedAction(Action.PEEK, 1.0),  # checking everything's really okay
            ),
        },
    ),
    Mood.STARTLED: EchoEffect(
        decay_time=20.0,
        effects={
            Mood.CURIOUS: (
                WeightedAction(Action.PERK_EARS, 2.0),
                WeightedAction(Action.FREEZE, 1.0),
            ),
            Mood.CAUTIOUS: (
                WeightedAction(Action.FLINCH, 1.5),
            ),
        },
    ),
    Mood.EXCITED: EchoEffect(
        decay_time=30.0,
        effects={
            Mood.HAPPY: (
                WeightedAction(Action.BOUNCE, 2.0),
                WeightedAction(Action.WAG_TAIL, 1.5),
            ),
            Mood.CURIOUS: (
                WeightedAction(Action.BOUNCE, 1.0),
            ),
        },
    ),
    Mood.HAPPY: EchoEffect(
        decay_time=60.0,
        effects={
            Mood.CURIOUS: (
                WeightedAction(Action.WAG_TAIL, 1.5),
                WeightedAction(Action.CHIRP, 1.0),
            ),
        },
    ),
}


def weighted_actions_for(mood: Mood) -> List[WeightedAction]:
    """Return a fresh copy of a mood's table, using the baseline table when missing."""

    table = WEIGHTED_MOOD_ACTIONS.get(mood)
    if table is None:
        table = WEIGHTED_MOOD_ACTIONS[Mood.CURIOUS]
    return list(table)
