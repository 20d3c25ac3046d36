"""Physical action vocabulary and the per-mood action sets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from personality.mood import BASELINE_MOOD, Mood


class Action(str, Enum):
    """Something Koji can physically do."""

    # Movement
    STAY = "stay"
    EXPLORE = "explore"
    FLEE = "flee"
    APPROACH = "approach"
    RETREAT = "retreat"  # back away slowly
    FREEZE = "freeze"  # stop and assess

    # Expression
    WAG_TAIL = "wag_tail"
    PERK_EARS = "perk_ears"
    FLATTEN_EARS = "flatten_ears"
    TILT_HEAD = "tilt_head"
    CROUCH = "crouch"
    BOUNCE = "bounce"
    SPIN = "spin"
    CURL = "curl"
    PEEK = "peek"
    NUZZLE = "nuzzle"

    # Sound
    WHIMPER = "whimper"
    CHIRP = "chirp"
    BARK = "bark"
    GROWL = "growl"
    YAWN = "yawn"
    PURR = "purr"
    HEAD_BOB = "head_bob"  # bobbing to music

    # Only reachable through weighted tables and echoes, never offered to a strategy.
    FLINCH = "flinch"
    SNIFF = "sniff"


NEUTRAL_ACTION = Action.STAY


@dataclass(frozen=True)
class ActionSet:
    """A movement, an expression and a sound performed together."""

    movement: Action
    expression: Action
    sound: Action

    def as_dict(self) -> Dict[str, str]:
        return {
            "movement": self.movement.value,
            "expression": self.expression.value,
            "sound": self.sound.value,
        }


# Vocabulary offered to an external strategy for each mood.
MOOD_ACTIONS: Dict[Mood, Tuple[Action, ...]] = {
    Mood.CURIOUS: (
        Action.EXPLORE, Action.APPROACH, Action.STAY,
        Action.PERK_EARS, Action.TILT_HEAD,
        Action.CHIRP,
    ),
    Mood.EXCITED: (
        Action.APPROACH, Action.EXPLORE, Action.SPIN,
        Action.WAG_TAIL, Action.BOUNCE, Action.PERK_EARS,
        Action.CHIRP, Action.BARK,
    ),
    Mood.HAPPY: (
        Action.STAY, Action.APPROACH, Action.EXPLORE,
        Action.WAG_TAIL, Action.NUZZLE, Action.HEAD_BOB,
        Action.CHIRP, Action.PURR,
    ),
    Mood.STARTLED: (
        Action.FREEZE, Action.RETREAT, Action.FLEE,
        Action.PERK_EARS, Action.CROUCH,
        Action.WHIMPER,
    ),
    Mood.FRIGHTENED: (
        Action.FLEE, Action.RETREAT, Action.FREEZE,
        Action.FLATTEN_EARS, Action.CROUCH, Action.PEEK,
        Action.WHIMPER,
    ),
    Mood.CAUTIOUS: (
        Action.FREEZE, Action.RETREAT, Action.STAY, Action.PEEK,
        Action.PERK_EARS, Action.FLATTEN_EARS,
        Action.GROWL, Action.WHIMPER,
    ),
    Mood.SLEEPY: (
        Action.STAY, Action.CURL,
        Action.YAWN,
        Action.PURR,
    ),
}

DEFAULT_ACTION_SETS: Dict[Mood, ActionSet] = {
    Mood.CURIOUS: ActionSet(Action.EXPLORE, Action.PERK_EARS, Action.CHIRP),
    Mood.EXCITED: ActionSet(Action.APPROACH, Action.WAG_TAIL, Action.CHIRP),
    Mood.HAPPY: ActionSet(Action.STAY, Action.WAG_TAIL, Action.PURR),
    Mood.STARTLED: ActionSet(Action.FREEZE, Action.PERK_EARS, Action.WHIMPER),
    Mood.FRIGHTENED: ActionSet(Action.FLEE, Action.FLATTEN_EARS, Action.WHIMPER),
    Mood.CAUTIOUS: ActionSet(Action.FREEZE, Action.PERK_EARS, Action.GROWL),
    Mood.SLEEPY: ActionSet(Action.CURL, Action.CURL, Action.YAWN),
}

FALLBACK_ACTION_SET = ActionSet(Action.STAY, Action.PERK_EARS, Action.CHIRP)


def available_actions(mood: Mood) -> Tuple[Action, ...]:
    """Actions appropriate for a mood, falling back to the baseline vocabulary."""

    actions = MOOD_ACTIONS.get(mood)
    if actions is None:
        return MOOD_ACTIONS[BASELINE_MOOD]
    return actions


def default_action_set(mood: Mood) -> ActionSet:
    """Deterministic reaction used for immediate responses and strategy fallback."""

    return DEFAULT_ACTION_SETS.get(mood, FALLBACK_ACTION_SET)
