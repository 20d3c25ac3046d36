"""Mood and intensity vocabularies."""

from __future__ import annotations

from enum import Enum


class Mood(str, Enum):
    """Koji's discrete emotional states."""

    CURIOUS = "curious"  # baseline
    EXCITED = "excited"  # new person, play time
    STARTLED = "startled"  # sudden stimulus, brief
    FRIGHTENED = "frightened"  # escalated fear
    HAPPY = "happy"  # music, familiar faces
    SLEEPY = "sleepy"  # quiet environment
    CAUTIOUS = "cautious"  # wary, recovering from fear


BASELINE_MOOD = Mood.CURIOUS


class IntensityTier(float, Enum):
    """Quantized strength of a mood (0.0 to 1.0)."""

    LOW = 0.3
    MEDIUM = 0.6
    HIGH = 0.9

    @classmethod
    def nearest(cls, value: float) -> "IntensityTier":
        """Return the tier closest to a continuous intensity value."""

        return min(cls, key=lambda tier: abs(tier.value - value))

    @property
    def label(self) -> str:
        return self.name.lower()
