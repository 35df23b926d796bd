"""
Hysteresis for raw per-frame criterion booleans.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

from .types import Criterion

logger = logging.getLogger(__name__)


@dataclass
class CriterionState:
    """Debounce state of one criterion."""
    raw_value: bool = False
    consecutive_count: int = 0
    stable: bool = False


class HysteresisStabilizer:
    """
    Slow-to-arm, instant-to-disarm debouncing for every criterion.

    A criterion becomes stable once its raw value has been true for more
    than stable_frames consecutive ticks, and drops on the first false tick.
    """

    def __init__(self, stable_frames: int = 15):
        self.stable_frames = stable_frames
        self.states: Dict[Criterion, CriterionState] = {c: CriterionState() for c in Criterion}

    def update(self, criterion: Criterion, raw: bool) -> bool:
        state = self.states[criterion]
        state.raw_value = raw
        if not raw:
            if state.stable:
                logger.debug(f"{criterion.value} disarmed")
            state.consecutive_count = 0
            state.stable = False
            return False

        state.consecutive_count += 1
        if not state.stable and state.consecutive_count > self.stable_frames:
            state.stable = True
            logger.debug(f"{criterion.value} stable after {state.consecutive_count} frames")
        return state.stable

    def update_all(self, raw: Dict[Criterion, bool]) -> Dict[Criterion, bool]:
        return {c: self.update(c, raw.get(c, False)) for c in Criterion}

    def is_stable(self, criterion: Criterion) -> bool:
        return self.states[criterion].stable

    def stable_values(self) -> Dict[Criterion, bool]:
        return {c: s.stable for c, s in self.states.items()}

    def passed_count(self) -> int:
        return sum(1 for s in self.states.values() if s.stable)

    def accumulating(self) -> bool:
        """True if any criterion is counting toward stability."""
        return any(s.consecutive_count > 0 for s in self.states.values())

    def unmet(self) -> List[Criterion]:
        """Unstable criteria in priority order."""
        return [c for c in Criterion if not self.states[c].stable]

    def counts(self) -> Dict[Criterion, int]:
        return {c: s.consecutive_count for c, s in self.states.items()}

    def reset(self) -> None:
        for state in self.states.values():
            state.raw_value = False
            state.consecutive_count = 0
            state.stable = False
