"""
Ingestion gate for detector output: hand counting and occlusion tracking.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .types import HandFrame, HandPresence, Observation, LANDMARKS_PER_HAND

logger = logging.getLogger(__name__)


@dataclass
class ValidatedFrame:
    """Result of gating one observation."""
    presence: HandPresence
    hands: Tuple[HandFrame, ...] = ()
    hands_lost: bool = False  # occlusion timeout crossed on this tick
    hands_returned: bool = False  # first hands after a latched occlusion


class FrameValidator:
    """
    Classifies observations as NoHands / OneHand / TwoHands.

    Features:
    - Drops malformed hand frames (wrong landmark count)
    - Tracks the timestamp of the last two-hand observation
    - Latches a single hands-lost signal after the occlusion timeout
    """

    def __init__(self, occlusion_timeout_ms: float = 2000.0):
        self.occlusion_timeout_ms = occlusion_timeout_ms
        self.last_two_hands_ms: Optional[float] = None
        self.hands_lost_latched = False

    def validate(self, observation: Observation) -> ValidatedFrame:
        now = observation.timestamp_ms
        if self.last_two_hands_ms is None:
            # Nothing seen yet: measure occlusion from the first tick
            self.last_two_hands_ms = now

        hands = tuple(h for h in observation.hands if self._is_well_formed(h))[:2]

        if not hands:
            hands_lost = False
            gap = now - self.last_two_hands_ms
            if gap > self.occlusion_timeout_ms and not self.hands_lost_latched:
                self.hands_lost_latched = True
                hands_lost = True
                logger.info(f"🙌 Hands lost for {gap:.0f}ms")
            return ValidatedFrame(HandPresence.NO_HANDS, (), hands_lost=hands_lost)

        returned = self.hands_lost_latched
        if returned:
            self.hands_lost_latched = False
            logger.info("🙌 Hands reappeared")

        if len(hands) == 1:
            return ValidatedFrame(HandPresence.ONE_HAND, hands, hands_returned=returned)

        self.last_two_hands_ms = now
        return ValidatedFrame(HandPresence.TWO_HANDS, hands, hands_returned=returned)

    def reset(self, now_ms: Optional[float] = None) -> None:
        self.last_two_hands_ms = now_ms
        self.hands_lost_latched = False

    @staticmethod
    def _is_well_formed(hand: HandFrame) -> bool:
        if len(hand) != LANDMARKS_PER_HAND:
            logger.warning(f"Dropping hand frame with {len(hand)} landmarks (expected {LANDMARKS_PER_HAND})")
            return False
        return True
