"""Koji's emotional state machine and behavior selection."""

from personality.actions import Action, ActionSet
from personality.events import Event, EventContext
from personality.emotional_state import EmotionalState, StateSnapshot, TransitionOutcome
from personality.mood import IntensityTier, Mood
from personality.variation import ActionModifier, ModifiedAction, MoodEcho, VariationEngine

__all__ = [
    "Action",
    "ActionModifier",
    "ActionSet",
    "EmotionalState",
    "Event",
    "EventContext",
    "IntensityTier",
    "ModifiedAction",
    "Mood",
    "StateSnapshot",
    "TransitionOutcome",
    "MoodEcho",
    "VariationEngine",
]
