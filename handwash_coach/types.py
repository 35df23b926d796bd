"""
Type definitions for the hand-washing technique classifier.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Protocol, Sequence, Tuple, runtime_checkable

LANDMARKS_PER_HAND = 21

# MediaPipe hand landmark indices used by the evaluators
WRIST = 0
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
PINKY_MCP = 17


@dataclass(frozen=True)
class Landmark:
    """A 3D point in normalized image/depth space."""
    x: float
    y: float
    z: float = 0.0

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


@dataclass(frozen=True)
class HandFrame:
    """Landmarks for one tracked hand, in detector order."""
    landmarks: Tuple[Landmark, ...]

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "HandFrame":
        """Build a frame from (x, y) or (x, y, z) tuples."""
        return cls(tuple(Landmark(*p) for p in points))

    def landmark(self, index: int) -> Optional[Landmark]:
        """Return the landmark at index, or None if absent or non-finite."""
        if index < 0 or index >= len(self.landmarks):
            return None
        lm = self.landmarks[index]
        return lm if lm.is_finite else None

    def __len__(self) -> int:
        return len(self.landmarks)


@dataclass(frozen=True)
class Observation:
    """Detector output for a single tick."""
    timestamp_ms: float
    hands: Tuple[HandFrame, ...] = ()


class HandPresence(str, Enum):
    NO_HANDS = "no_hands"
    ONE_HAND = "one_hand"
    TWO_HANDS = "two_hands"


class Criterion(str, Enum):
    """Technique criteria, declared in guidance priority order."""
    CONTACT = "contact"
    CIRCULAR_MOTION = "circularMotion"
    ORIENTATION = "orientation"


class SessionPhase(str, Enum):
    IDLE = "idle"
    ARMING = "arming"
    TIMING = "timing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class AnnounceRequest:
    """Text to hand to the speech sink, tagged with the session generation."""
    text: str
    generation: int


@dataclass(frozen=True)
class SpeechDone:
    """Speech sink completion message for one AnnounceRequest."""
    generation: int


@dataclass(frozen=True)
class HandsLost:
    timestamp_ms: float


@dataclass(frozen=True)
class WashCompleted:
    timestamp_ms: float
    elapsed_ms: float


@dataclass
class StateSnapshot:
    """Per-tick state published for checklist/progress/debug rendering."""
    contact_score: int = 0
    criteria: Dict[Criterion, bool] = field(default_factory=lambda: {c: False for c in Criterion})
    session_state: SessionPhase = SessionPhase.IDLE
    percent_complete: float = 0.0
    seconds_remaining: float = 0.0
    guidance_message: str = ""
    presence: HandPresence = HandPresence.NO_HANDS
    counts: Dict[Criterion, int] = field(default_factory=lambda: {c: 0 for c in Criterion})

    def to_dict(self) -> dict:
        return {
            "contactScore": self.contact_score,
            "criteria": {c.value: v for c, v in self.criteria.items()},
            "sessionState": self.session_state.value,
            "percentComplete": self.percent_complete,
            "secondsRemaining": self.seconds_remaining,
            "guidanceMessage": self.guidance_message,
        }


@runtime_checkable
class SpeechSinkProto(Protocol):
    """Abstract protocol for speech backends that vocalize announcements."""

    def announce(self, request: AnnounceRequest, on_done: Callable[[SpeechDone], None]) -> None:
        """Start speaking request.text and call on_done exactly once when finished."""
        ...
