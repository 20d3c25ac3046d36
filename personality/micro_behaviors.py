"""Small idle animations played between event-driven actions."""

from __future__ import annotations

from typing import Dict, NamedTuple, Tuple

from personality.mood import Mood


class MicroBehavior(NamedTuple):
    name: str
    duration: float  # seconds


class WeightedMicroBehavior(NamedTuple):
    behavior: MicroBehavior
    weight: float


def _mb(name: str, millis: int, weight: float) -> WeightedMicroBehavior:
    return WeightedMicroBehavior(MicroBehavior(name, millis / 1000.0), weight)


MICRO_BEHAVIORS: Dict[Mood, Tuple[WeightedMicroBehavior, ...]] = {
    Mood.CURIOUS: (
        _mb("ear_twitch", 200, 3.0),
        _mb("look_around", 500, 2.0),
        _mb("sniff", 300, 2.0),
        _mb("weight_shift", 400, 1.5),
        _mb("tail_flick", 150, 1.0),
    ),
    Mood.HAPPY: (
        _mb("tail_wag_small", 300, 4.0),
        _mb("ear_perk", 200, 2.0),
        _mb("wiggle", 400, 2.0),
        _mb("happy_sigh", 500, 1.0),
    ),
    Mood.EXCITED: (
        _mb("bounce_small", 250, 4.0),
        _mb("tail_wag_fast", 200, 3.0),
        _mb("spin_partial", 400, 2.0),
        _mb("eager_lean", 300, 2.0),
    ),
    Mood.SLEEPY: (
        _mb("slow_blink", 800, 4.0),
        _mb("yawn_small", 600, 2.0),
        _mb("head_droop", 700, 2.0),
        _mb("sleepy_sigh", 500, 1.5),
        _mb("ear_droop", 300, 1.0),
    ),
    Mood.CAUTIOUS: (
        _mb("ear_swivel", 250, 4.0),
        _mb("freeze_brief", 400, 2.0),
        _mb("low_crouch", 350, 2.0),
        _mb("nervous_glance", 300, 3.0),
        _mb("tail_tuck_partial", 200, 1.5),
    ),
    Mood.STARTLED: (
        _mb("flinch", 150, 4.0),
        _mb("ears_back_quick", 100, 3.0),
        _mb("gasp", 200, 2.0),
        _mb("freeze_tense", 300, 2.0),
    ),
    Mood.FRIGHTENED: (
        _mb("tremble", 400, 4.0),
        _mb("whimper_soft", 300, 3.0),
        _mb("shrink", 350, 2.0),
        _mb("eyes_dart", 250, 2.0),
        _mb("tail_between_legs", 200, 1.5),
    ),
}
