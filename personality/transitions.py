"""Hand-authored mood transition table and decay policy.

Lookups are explicit two-level dictionaries: ``event -> mood -> transition``.
A missing entry at either level means "no rule" and is reported with the
``NO_TRANSITION`` sentinel, which callers must keep distinct from a rule that
maps a mood onto itself.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Union

from personality.events import Event
from personality.mood import BASELINE_MOOD, IntensityTier, Mood

HIGH = IntensityTier.HIGH
MEDIUM = IntensityTier.MEDIUM
LOW = IntensityTier.LOW


class MoodTransition(NamedTuple):
    new_mood: Mood
    intensity: IntensityTier


class _NoTransition:
    """Sentinel for "no rule matches this event in this mood"."""

    _instance: Optional["_NoTransition"] = None

    def __new__(cls) -> "_NoTransition":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_TRANSITION"


NO_TRANSITION = _NoTransition()


TRANSITION_TABLE: Dict[Event, Dict[Mood, MoodTransition]] = {
    # Loud noise startles, escalates if already on edge
    Event.LOUD_NOISE: {
        Mood.CURIOUS: MoodTransition(Mood.STARTLED, HIGH),
        Mood.HAPPY: MoodTransition(Mood.STARTLED, MEDIUM),
        Mood.SLEEPY: MoodTransition(Mood.FRIGHTENED, HIGH),  # rude awakening
        Mood.STARTLED: MoodTransition(Mood.FRIGHTENED, HIGH),  # escalate
        Mood.CAUTIOUS: MoodTransition(Mood.FRIGHTENED, HIGH),  # already wary
        Mood.EXCITED: MoodTransition(Mood.STARTLED, MEDIUM),
        Mood.FRIGHTENED: MoodTransition(Mood.FRIGHTENED, HIGH),
    },
    # Music makes happy, helps recover from fear
    Event.MUSIC: {
        Mood.CURIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.SLEEPY: MoodTransition(Mood.CURIOUS, LOW),  # gentle wake
        Mood.CAUTIOUS: MoodTransition(Mood.CURIOUS, MEDIUM),
        Mood.STARTLED: MoodTransition(Mood.CAUTIOUS, MEDIUM),  # helps, but still wary
        Mood.FRIGHTENED: MoodTransition(Mood.CAUTIOUS, MEDIUM),
        Mood.HAPPY: MoodTransition(Mood.HAPPY, HIGH),
        Mood.EXCITED: MoodTransition(Mood.HAPPY, HIGH),
    },
    Event.RHYTHM: {
        Mood.CURIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.HAPPY: MoodTransition(Mood.EXCITED, HIGH),  # let's dance
        Mood.EXCITED: MoodTransition(Mood.EXCITED, HIGH),
    },
    Event.FAMILIAR_FACE: {
        Mood.CURIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.CAUTIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.FRIGHTENED: MoodTransition(Mood.CAUTIOUS, MEDIUM),  # calming but still shaken
        Mood.STARTLED: MoodTransition(Mood.CAUTIOUS, LOW),  # oh it's just you
        Mood.SLEEPY: MoodTransition(Mood.HAPPY, LOW),
        Mood.HAPPY: MoodTransition(Mood.EXCITED, HIGH),
        Mood.EXCITED: MoodTransition(Mood.EXCITED, HIGH),
    },
    Event.UNKNOWN_FACE: {
        Mood.CURIOUS: MoodTransition(Mood.CAUTIOUS, MEDIUM),
        Mood.HAPPY: MoodTransition(Mood.CAUTIOUS, LOW),
        Mood.SLEEPY: MoodTransition(Mood.CAUTIOUS, MEDIUM),
        Mood.CAUTIOUS: MoodTransition(Mood.CAUTIOUS, HIGH),
        Mood.FRIGHTENED: MoodTransition(Mood.FRIGHTENED, HIGH),  # stranger danger
        Mood.STARTLED: MoodTransition(Mood.FRIGHTENED, HIGH),
        Mood.EXCITED: MoodTransition(Mood.CAUTIOUS, MEDIUM),
    },
    Event.MOTION_DETECTED: {
        Mood.CURIOUS: MoodTransition(Mood.EXCITED, MEDIUM),
        Mood.SLEEPY: MoodTransition(Mood.CURIOUS, LOW),
        Mood.HAPPY: MoodTransition(Mood.EXCITED, MEDIUM),
    },
    Event.UNKNOWN_OBJECT: {
        Mood.CURIOUS: MoodTransition(Mood.EXCITED, HIGH),
        Mood.HAPPY: MoodTransition(Mood.EXCITED, HIGH),
        Mood.SLEEPY: MoodTransition(Mood.CURIOUS, MEDIUM),  # perks up
        Mood.EXCITED: MoodTransition(Mood.EXCITED, HIGH),
        Mood.CAUTIOUS: MoodTransition(Mood.CURIOUS, MEDIUM),
        Mood.STARTLED: MoodTransition(Mood.CAUTIOUS, HIGH),  # is that what scared me?
        Mood.FRIGHTENED: MoodTransition(Mood.CAUTIOUS, HIGH),
    },
    Event.PETTED: {
        Mood.CURIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.CAUTIOUS: MoodTransition(Mood.HAPPY, MEDIUM),
        Mood.FRIGHTENED: MoodTransition(Mood.CAUTIOUS, LOW),
        Mood.STARTLED: MoodTransition(Mood.CAUTIOUS, LOW),
        Mood.HAPPY: MoodTransition(Mood.HAPPY, HIGH),
        Mood.EXCITED: MoodTransition(Mood.HAPPY, HIGH),
        Mood.SLEEPY: MoodTransition(Mood.SLEEPY, MEDIUM),
    },
    Event.POKED: {
        Mood.CURIOUS: MoodTransition(Mood.STARTLED, MEDIUM),
        Mood.SLEEPY: MoodTransition(Mood.STARTLED, HIGH),  # rude
        Mood.HAPPY: MoodTransition(Mood.CURIOUS, MEDIUM),
        Mood.CAUTIOUS: MoodTransition(Mood.STARTLED, MEDIUM),
    },
    Event.SILENCE: {
        Mood.CURIOUS: MoodTransition(Mood.SLEEPY, LOW),
        Mood.HAPPY: MoodTransition(Mood.CURIOUS, LOW),  # winding down
        Mood.CAUTIOUS: MoodTransition(Mood.CURIOUS, LOW),
        Mood.EXCITED: MoodTransition(Mood.HAPPY, MEDIUM),
    },
    Event.TIME_PASSED_LONG: {
        Mood.CURIOUS: MoodTransition(Mood.SLEEPY, MEDIUM),
        Mood.CAUTIOUS: MoodTransition(Mood.CURIOUS, MEDIUM),  # coast is clear
        Mood.HAPPY: MoodTransition(Mood.CURIOUS, MEDIUM),
        Mood.EXCITED: MoodTransition(Mood.HAPPY, MEDIUM),
    },
}

# Each mood steps toward the baseline; the baseline maps onto itself.
DECAY_PATHS: Dict[Mood, Mood] = {
    Mood.FRIGHTENED: Mood.CAUTIOUS,
    Mood.CAUTIOUS: Mood.CURIOUS,
    Mood.STARTLED: Mood.CAUTIOUS,
    Mood.EXCITED: Mood.HAPPY,
    Mood.HAPPY: Mood.CURIOUS,
    Mood.SLEEPY: Mood.CURIOUS,
    Mood.CURIOUS: Mood.CURIOUS,
}

# Seconds a mood must be held before it decays.
DECAY_TIMES: Dict[Mood, float] = {
    Mood.FRIGHTENED: 15.0,
    Mood.STARTLED: 5.0,
    Mood.CAUTIOUS: 20.0,
    Mood.EXCITED: 30.0,
    Mood.HAPPY: 45.0,
    Mood.SLEEPY: 60.0,
}


def lookup_transition(event: Union[Event, str], mood: Mood) -> Union[MoodTransition, _NoTransition]:
    """Return the rule for ``event`` in ``mood`` or ``NO_TRANSITION``."""

    known_event = Event.coerce(event)
    if known_event is None:
        return NO_TRANSITION
    by_mood = TRANSITION_TABLE.get(known_event)
    if by_mood is None:
        return NO_TRANSITION
    return by_mood.get(mood, NO_TRANSITION)


def decay_dwell_time(mood: Mood) -> Optional[float]:
    return DECAY_TIMES.get(mood)


def decay_successor(mood: Mood) -> Mood:
    return DECAY_PATHS.get(mood, mood)


def decay_path(mood: Mood) -> List[Mood]:
    """Moods visited when decaying from ``mood`` until the path stops moving."""

    path = [mood]
    seen = {mood}
    current = mood
    while current != BASELINE_MOOD:
        successor = decay_successor(current)
        if successor in seen:
            break
        path.append(successor)
        seen.add(successor)
        current = successor
    return path
