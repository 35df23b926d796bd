"""
Washing session timer and progress reporting.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .config import SessionConfig
from .types import SessionPhase, WashCompleted

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Timer state of the current washing session."""
    timer_active: bool = False
    start_time_ms: Optional[float] = None
    elapsed_ms: float = 0.0
    completed_this_session: bool = False


@dataclass
class Progress:
    """Percent complete and time remaining for the progress display."""
    percent_complete: float
    seconds_remaining: float


def compute_progress(elapsed_ms: float, target_ms: float) -> Progress:
    """Clamp elapsed time into a 0-100% / non-negative seconds pair."""
    if target_ms <= 0:
        return Progress(100.0, 0.0)
    percent = min(100.0, max(0.0, elapsed_ms / target_ms * 100.0))
    remaining = max(0.0, (target_ms - elapsed_ms) / 1000.0)
    return Progress(percent, remaining)


class SessionStateMachine:
    """
    Idle -> Arming -> Timing -> Complete -> Idle.

    Features:
    - Timer starts once per session, tolerating dips in individual criteria
    - Timer is cancelled only when no stabilized criterion remains
    - Completion fires once, then holds the Complete phase for the display duration
    """

    def __init__(self, cfg: SessionConfig):
        self.cfg = cfg
        self.state = SessionState()
        self.phase = SessionPhase.IDLE
        self.complete_until_ms: Optional[float] = None

    def update(self, passed_count: int, accumulating: bool, t_now_ms: float) -> Optional[WashCompleted]:
        """
        Advance the machine with the stabilized criteria of a two-hand tick.
        
        Args:
            passed_count: Number of stable criteria
            accumulating: Whether any criterion is counting toward stability
            t_now_ms: Observation timestamp in milliseconds
            
        Returns:
            WashCompleted on the tick the session reaches the target, else None
        """
        self.refresh(t_now_ms)

        if self.phase == SessionPhase.COMPLETE:
            return None

        if self.phase == SessionPhase.TIMING:
            if passed_count == 0:
                self._cancel_timer()
                self._transition(SessionPhase.IDLE)
                return None
            if self.state.elapsed_ms >= self.cfg.target_ms and not self.state.completed_this_session:
                return self._complete(t_now_ms)
            return None

        if passed_count >= 1:
            self.state = SessionState(timer_active=True, start_time_ms=t_now_ms)
            self._transition(SessionPhase.TIMING)
        elif accumulating:
            self._transition(SessionPhase.ARMING)
        else:
            self._transition(SessionPhase.IDLE)
        return None

    def refresh(self, t_now_ms: float) -> None:
        """Keep elapsed time current and end the completion display when due."""
        if self.state.timer_active and self.state.start_time_ms is not None:
            self.state.elapsed_ms = t_now_ms - self.state.start_time_ms
        if self.phase == SessionPhase.COMPLETE and self.complete_until_ms is not None:
            if t_now_ms >= self.complete_until_ms:
                self.complete_until_ms = None
                self._transition(SessionPhase.IDLE)

    def progress(self) -> Progress:
        if self.phase == SessionPhase.COMPLETE:
            return Progress(100.0, 0.0)
        if self.phase != SessionPhase.TIMING:
            return Progress(0.0, self.cfg.target_ms / 1000.0)
        return compute_progress(self.state.elapsed_ms, self.cfg.target_ms)

    def reset(self) -> None:
        self._cancel_timer()
        self.state.completed_this_session = False
        self.complete_until_ms = None
        self._transition(SessionPhase.IDLE)

    def _complete(self, t_now_ms: float) -> WashCompleted:
        elapsed = self.state.elapsed_ms
        self.state.completed_this_session = True
        self.state.timer_active = False
        self.complete_until_ms = t_now_ms + self.cfg.completion_display_ms
        self._transition(SessionPhase.COMPLETE)
        logger.info(f"🎉 Hand washing complete after {elapsed / 1000.0:.1f}s")
        return WashCompleted(timestamp_ms=t_now_ms, elapsed_ms=elapsed)

    def _cancel_timer(self) -> None:
        if self.state.timer_active:
            logger.info(f"⏹️ Washing timer cancelled at {self.state.elapsed_ms / 1000.0:.1f}s")
        self.state.timer_active = False
        self.state.start_time_ms = None
        self.state.elapsed_ms = 0.0

    def _transition(self, phase: SessionPhase) -> None:
        if phase != self.phase:
            logger.info(f"Session {self.phase.value} -> {phase.value}")
            self.phase = phase
