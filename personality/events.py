"""Environmental stimuli and the context that travels with them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple


class Event(str, Enum):
    """Something that happened in the environment."""

    # Sound
    LOUD_NOISE = "loud_noise"
    MUSIC = "music"
    SPEECH = "speech"
    SILENCE = "silence"
    RHYTHM = "rhythm"  # beat detected

    # Vision
    FAMILIAR_FACE = "familiar_face"
    UNKNOWN_FACE = "unknown_face"
    MOTION_DETECTED = "motion_detected"
    NO_MOTION = "no_motion"
    UNKNOWN_OBJECT = "unknown_object"

    # Physical
    PETTED = "petted"  # touch sensor triggered gently
    POKED = "poked"  # touch sensor triggered sharply
    PICKED_UP = "picked_up"  # accelerometer detects lift

    # Time-based
    TIME_PASSED_SHORT = "time_passed_short"  # ~10s of nothing
    TIME_PASSED_MEDIUM = "time_passed_medium"  # ~30s of nothing
    TIME_PASSED_LONG = "time_passed_long"  # ~2min of nothing

    @classmethod
    def coerce(cls, value: object) -> Optional["Event"]:
        """Return the matching member, or None for values outside the vocabulary."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


DEFAULT_EVENT_INTENSITY = 0.5


@dataclass(frozen=True)
class EventContext:
    """An event plus how strong it was and where it came from."""

    event: Event
    intensity: float = DEFAULT_EVENT_INTENSITY  # 0.0 to 1.0, how strong/loud/fast
    source: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def with_intensity(self, intensity: float) -> "EventContext":
        return replace(self, intensity=intensity)

    def with_source(self, source: str) -> "EventContext":
        return replace(self, source=source)

    def with_metadata(self, **metadata: str) -> "EventContext":
        merged = dict(self.metadata)
        merged.update(metadata)
        return replace(self, metadata=merged)


# Keyword table for free-text event entry. Order matters: the first match wins,
# so "unknown face" is checked before the generic "face".
_EVENT_KEYWORDS: Tuple[Tuple[Event, Tuple[str, ...]], ...] = (
    (Event.LOUD_NOISE, ("loud", "bang", "noise", "crash")),
    (Event.MUSIC, ("music", "song")),
    (Event.RHYTHM, ("rhythm", "beat", "bop")),
    (Event.FAMILIAR_FACE, ("familiar", "owner", "friend")),
    (Event.UNKNOWN_FACE, ("stranger", "unknown face", "who")),
    (Event.FAMILIAR_FACE, ("face",)),
    (Event.MOTION_DETECTED, ("motion", "movement", "moving")),
    (Event.UNKNOWN_OBJECT, ("object", "thing", "new", "whats that")),
    (Event.PETTED, ("pet", "petted", "stroke")),
    (Event.POKED, ("poke", "poked", "tap")),
    (Event.SILENCE, ("silence", "quiet", "nothing")),
    (Event.TIME_PASSED_LONG, ("wait", "time", "pass")),
)

HIGH_HINT = 0.9
LOW_HINT = 0.2


def parse_event(text: str) -> Optional[Event]:
    """Map loosely typed input such as ``"bang!"`` to an event."""

    cleaned = text.lower().replace("!", "").strip()
    if not cleaned:
        return None
    for event, keywords in _EVENT_KEYWORDS:
        if any(keyword in cleaned for keyword in keywords):
            return event
    return None


def parse_intensity_hint(text: str) -> float:
    """Derive an intensity hint from emphasis in typed input."""

    lowered = text.lower()
    if "!" in lowered or "loud" in lowered:
        return HIGH_HINT
    if "soft" in lowered or "quiet" in lowered:
        return LOW_HINT
    return DEFAULT_EVENT_INTENSITY


def parse_event_context(text: str) -> Optional[EventContext]:
    event = parse_event(text)
    if event is None:
        return None
    return EventContext(event).with_intensity(parse_intensity_hint(text)).with_source("keyboard")
