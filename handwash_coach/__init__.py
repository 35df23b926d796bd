"""
Hand Washing Technique Coach

Classifies, frame by frame, whether two tracked hands perform compliant
hand-washing technique and drives a coaching session: progress timer,
prioritized spoken prompts and a completion event.
"""

__version__ = "0.1.0"

from .types import (
    Landmark,
    HandFrame,
    Observation,
    Criterion,
    SessionPhase,
    HandPresence,
    AnnounceRequest,
    SpeechDone,
    HandsLost,
    WashCompleted,
    StateSnapshot,
    SpeechSinkProto,
)
from .config import load_config, Cfg
from .classifier import HandWashClassifier, TickResult
from .speech_mock import MockSpeaker

__all__ = [
    "Landmark",
    "HandFrame",
    "Observation",
    "Criterion",
    "SessionPhase",
    "HandPresence",
    "AnnounceRequest",
    "SpeechDone",
    "HandsLost",
    "WashCompleted",
    "StateSnapshot",
    "SpeechSinkProto",
    "load_config",
    "Cfg",
    "HandWashClassifier",
    "TickResult",
    "MockSpeaker",
]
