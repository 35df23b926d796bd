"""
Priority-ordered coaching prompts with announcement deduplication.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .types import AnnounceRequest, Criterion, SpeechDone

logger = logging.getLogger(__name__)

ISSUE_MESSAGES: Dict[Criterion, str] = {
    Criterion.CONTACT: "Bring your hands together and rub your palms",
    Criterion.CIRCULAR_MOTION: "Make circular motions",
    Criterion.ORIENTATION: "Turn your palms to face each other",
}
GREAT_TECHNIQUE = "Great technique, keep going"
SHOW_BOTH_HANDS = "Please show both hands"
SHOW_HANDS_TO_CAMERA = "Show both hands to the camera"
WASH_COMPLETE = "Excellent! You have completed 20 seconds of proper hand washing"


def top_issue(unmet: List[Criterion]) -> Optional[Criterion]:
    """Highest-priority unmet criterion, or None if everything is met."""
    for criterion in Criterion:
        if criterion in unmet:
            return criterion
    return None


def issue_message(issue: Optional[Criterion]) -> str:
    return GREAT_TECHNIQUE if issue is None else ISSUE_MESSAGES[issue]


@dataclass
class GuidanceState:
    """Deduplication and speaking-gate state of the coach voice."""
    current_priority_issue: Optional[Criterion] = None
    last_announced: Optional[str] = None
    is_speaking: bool = False
    pending: Optional[str] = None
    issue_seen: bool = False


class GuidancePrioritizer:
    """
    Chooses what to say and whether it is new.

    Issue prompts are requested only when the top-priority unmet criterion
    changes. Requests made while an utterance is in flight wait in a single
    pending slot, latest wins.
    """

    def __init__(self, generation: int = 0):
        self.generation = generation
        self.state = GuidanceState()

    def update_issues(self, unmet: List[Criterion]) -> Optional[AnnounceRequest]:
        """
        Track the top unmet criterion of a two-hand tick.
        
        Args:
            unmet: Unstable criteria, in any order
            
        Returns:
            AnnounceRequest if a new prompt should be spoken now
        """
        issue = top_issue(unmet)
        changed = not self.state.issue_seen or issue != self.state.current_priority_issue
        self.state.current_priority_issue = issue
        self.state.issue_seen = True
        if not changed:
            return self.flush()
        return self.request(issue_message(issue))

    def request(self, text: str) -> Optional[AnnounceRequest]:
        """Ask to speak text; returns the request to forward, if any."""
        if self.state.is_speaking:
            self.state.pending = text if text != self.state.last_announced else None
            return None
        if text == self.state.last_announced:
            return None
        return self._emit(text)

    def flush(self) -> Optional[AnnounceRequest]:
        """Release the pending prompt once the speaker is free."""
        if self.state.is_speaking or self.state.pending is None:
            return None
        text, self.state.pending = self.state.pending, None
        if text == self.state.last_announced:
            return None
        return self._emit(text)

    def discard(self, text: str) -> None:
        """Drop a pending prompt that no longer applies."""
        if self.state.pending == text:
            self.state.pending = None

    def on_speech_done(self, message: SpeechDone) -> bool:
        """Open the speaking gate; returns False for a stale message."""
        if message.generation != self.generation:
            logger.debug(f"Dropping stale speech completion (generation {message.generation} != {self.generation})")
            return False
        self.state.is_speaking = False
        return True

    @property
    def current_message(self) -> str:
        if not self.state.issue_seen:
            return ""
        return issue_message(self.state.current_priority_issue)

    def reset(self, generation: int) -> None:
        self.generation = generation
        self.state = GuidanceState()

    def _emit(self, text: str) -> AnnounceRequest:
        self.state.is_speaking = True
        self.state.last_announced = text
        self.state.pending = None
        logger.info(f"🔊 Announce: {text}")
        return AnnounceRequest(text=text, generation=self.generation)
