"""
Per-tick hand-washing technique classifier.

Data flows one way each tick: validator -> evaluators -> stabilizer ->
session machine -> guidance and progress. All state lives on the
HandWashClassifier instance owned by the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .config import ClassifierConfig
from .criteria import CircularMotionDetector, hands_in_contact, palms_facing
from .guidance import GuidancePrioritizer, SHOW_BOTH_HANDS, SHOW_HANDS_TO_CAMERA, WASH_COMPLETE
from .session import SessionStateMachine
from .stabilizer import HysteresisStabilizer
from .types import (
    AnnounceRequest,
    Criterion,
    HandPresence,
    HandsLost,
    Observation,
    SessionPhase,
    SpeechDone,
    StateSnapshot,
    WashCompleted,
)
from .validator import FrameValidator

logger = logging.getLogger(__name__)

ClassifierEvent = Union[HandsLost, WashCompleted]


@dataclass
class TickResult:
    """Everything the collaborators need from one tick."""
    snapshot: StateSnapshot
    announcements: List[AnnounceRequest] = field(default_factory=list)
    events: List[ClassifierEvent] = field(default_factory=list)


class HandWashClassifier:
    """Classifier context: validator, evaluators, stabilizer, session and guidance."""

    def __init__(self, cfg: ClassifierConfig):
        self.cfg = cfg
        self.generation = 0
        self.validator = FrameValidator(cfg.session.occlusion_timeout_ms)
        self.motion = CircularMotionDetector(cfg.motion)
        self.stabilizer = HysteresisStabilizer(cfg.stabilizer.stable_frames)
        self.session = SessionStateMachine(cfg.session)
        self.guidance = GuidancePrioritizer(self.generation)
        self.latest_snapshot = StateSnapshot()
        self._inbox: Optional[SpeechDone] = None
        self._contact_score = 0

    def post_speech_done(self, message: SpeechDone) -> None:
        """Single-slot inbox for speech completion, consumed on the next tick."""
        self._inbox = message

    def tick(self, observation: Observation) -> TickResult:
        """
        Process one observation.
        
        Args:
            observation: Detector output with zero, one or two hands
            
        Returns:
            TickResult with the published snapshot, new announcements and events
        """
        now = observation.timestamp_ms
        result = TickResult(snapshot=self.latest_snapshot)
        self._drain_inbox()

        frame = self.validator.validate(observation)

        if frame.hands_lost:
            self._reset_session()
            result.events.append(HandsLost(timestamp_ms=now))
            self._announce(result, self.guidance.request(SHOW_HANDS_TO_CAMERA))
        elif frame.hands_returned:
            # Tracking continuity cannot be assumed across an occlusion gap
            self._reset_session()

        if frame.presence == HandPresence.TWO_HANDS:
            message = self._classify(frame.hands[0], frame.hands[1], now, result)
        else:
            self.session.refresh(now)
            if frame.presence == HandPresence.ONE_HAND:
                self._announce(result, self.guidance.request(SHOW_BOTH_HANDS))
                message = SHOW_BOTH_HANDS
            elif self.validator.hands_lost_latched:
                message = SHOW_HANDS_TO_CAMERA
            else:
                message = ""

        if not result.announcements:
            self._announce(result, self.guidance.flush())

        result.snapshot = self._publish(frame.presence, message)
        return result

    def stop(self, now_ms: Optional[float] = None) -> None:
        """External stop command: synchronously clear all session state."""
        logger.info("⏹️ Classifier stopped")
        self._reset_session()
        self.validator.reset(now_ms)
        self.latest_snapshot = StateSnapshot()

    def _classify(self, hand_a, hand_b, now: float, result: TickResult) -> str:
        if self.session.phase == SessionPhase.COMPLETE:
            self.session.refresh(now)
            if self.session.phase == SessionPhase.COMPLETE:
                return WASH_COMPLETE

        score, contact = hands_in_contact(hand_a, hand_b, self.cfg.contact)
        circular = self.motion.update(hand_a, hand_b, now)
        facing = palms_facing(hand_a, hand_b, self.cfg.orientation)
        self._contact_score = score

        self.stabilizer.update_all({
            Criterion.CONTACT: contact,
            Criterion.CIRCULAR_MOTION: circular,
            Criterion.ORIENTATION: facing,
        })
        logger.debug(f"Raw contact={score} circular={circular} facing={facing}; "
                     f"passed={self.stabilizer.passed_count()}")

        completed = self.session.update(self.stabilizer.passed_count(), self.stabilizer.accumulating(), now)
        if completed is not None:
            result.events.append(completed)
            self.stabilizer.reset()
            self.motion.reset()
            self._announce(result, self.guidance.request(WASH_COMPLETE))
            return WASH_COMPLETE

        self.guidance.discard(SHOW_BOTH_HANDS)
        self._announce(result, self.guidance.update_issues(self.stabilizer.unmet()))
        return self.guidance.current_message

    def _publish(self, presence: HandPresence, message: str) -> StateSnapshot:
        progress = self.session.progress()
        snapshot = StateSnapshot(
            contact_score=self._contact_score if presence == HandPresence.TWO_HANDS else 0,
            criteria=self.stabilizer.stable_values(),
            session_state=self.session.phase,
            percent_complete=progress.percent_complete,
            seconds_remaining=progress.seconds_remaining,
            guidance_message=message,
            presence=presence,
            counts=self.stabilizer.counts(),
        )
        self.latest_snapshot = snapshot
        return snapshot

    def _drain_inbox(self) -> None:
        message, self._inbox = self._inbox, None
        if message is not None:
            self.guidance.on_speech_done(message)

    def _reset_session(self) -> None:
        self.generation += 1
        self.stabilizer.reset()
        self.motion.reset()
        self.session.reset()
        self.guidance.reset(self.generation)
        self._inbox = None
        self._contact_score = 0
        logger.info(f"🔄 Session reset (generation {self.generation})")

    @staticmethod
    def _announce(result: TickResult, request: Optional[AnnounceRequest]) -> None:
        if request is not None:
            result.announcements.append(request)
