"""
Test cases for the washing session state machine and progress reporting.
"""
import sys
import unittest
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handwash_coach.config import load_config
from handwash_coach.session import SessionStateMachine, compute_progress
from handwash_coach.types import SessionPhase, WashCompleted


class TestSessionStateMachine(unittest.TestCase):
    """Test timer arming, cancellation and completion."""

    def setUp(self):
        self.cfg = load_config().classifier.session
        self.machine = SessionStateMachine(self.cfg)

    def test_idle_until_criterion_stable(self):
        self.machine.update(0, False, 0.0)
        self.assertEqual(self.machine.phase, SessionPhase.IDLE)
        self.machine.update(0, True, 50.0)
        self.assertEqual(self.machine.phase, SessionPhase.ARMING)
        self.assertFalse(self.machine.state.timer_active)

    def test_timing_starts_once(self):
        self.machine.update(1, True, 1000.0)
        self.assertEqual(self.machine.phase, SessionPhase.TIMING)
        self.assertEqual(self.machine.state.start_time_ms, 1000.0)
        # Criteria fluctuate but one stays stable: clock keeps running
        self.machine.update(2, True, 1500.0)
        self.machine.update(1, True, 2000.0)
        self.assertEqual(self.machine.state.start_time_ms, 1000.0)
        self.assertEqual(self.machine.state.elapsed_ms, 1000.0)

    def test_all_criteria_lost_cancels_timer(self):
        self.machine.update(1, True, 0.0)
        self.machine.update(1, True, 4000.0)
        self.machine.update(0, True, 4050.0)
        self.assertEqual(self.machine.phase, SessionPhase.IDLE)
        self.assertIsNone(self.machine.state.start_time_ms)
        self.assertFalse(self.machine.state.timer_active)
        self.machine.update(0, True, 4100.0)
        self.assertEqual(self.machine.phase, SessionPhase.ARMING)

    def test_completion_fires_once_at_target(self):
        t0 = 500.0
        events = []
        t = t0
        while t <= t0 + 25000.0:
            event = self.machine.update(1, True, t)
            if event is not None:
                events.append(event)
            t += 50.0
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], WashCompleted)
        self.assertEqual(events[0].timestamp_ms, t0 + 20000.0)
        self.assertEqual(events[0].elapsed_ms, 20000.0)
        self.assertTrue(self.machine.state.completed_this_session)

    def test_complete_display_then_idle(self):
        self.machine.update(1, True, 0.0)
        event = self.machine.update(1, True, 20000.0)
        self.assertIsNotNone(event)
        self.assertEqual(self.machine.phase, SessionPhase.COMPLETE)
        self.assertIsNone(self.machine.update(1, True, 21000.0))
        self.assertEqual(self.machine.phase, SessionPhase.COMPLETE)
        self.machine.refresh(23000.0)
        self.assertEqual(self.machine.phase, SessionPhase.IDLE)

    def test_new_session_after_completion(self):
        self.machine.update(1, True, 0.0)
        self.machine.update(1, True, 20000.0)
        self.machine.update(0, False, 23000.0)
        self.assertEqual(self.machine.phase, SessionPhase.IDLE)
        self.machine.update(1, True, 24000.0)
        self.assertEqual(self.machine.phase, SessionPhase.TIMING)
        self.assertFalse(self.machine.state.completed_this_session)
        self.assertEqual(self.machine.state.start_time_ms, 24000.0)

    def test_reset(self):
        self.machine.update(1, True, 0.0)
        self.machine.update(1, True, 5000.0)
        self.machine.reset()
        self.assertEqual(self.machine.phase, SessionPhase.IDLE)
        self.assertEqual(self.machine.state.elapsed_ms, 0.0)
        self.assertIsNone(self.machine.state.start_time_ms)

    def test_progress_while_timing(self):
        self.machine.update(1, True, 0.0)
        self.machine.update(1, True, 5000.0)
        progress = self.machine.progress()
        self.assertAlmostEqual(progress.percent_complete, 25.0)
        self.assertAlmostEqual(progress.seconds_remaining, 15.0)


class TestComputeProgress(unittest.TestCase):
    """Test percent/time-remaining clamping."""

    def test_midway(self):
        progress = compute_progress(10000.0, 20000.0)
        self.assertEqual(progress.percent_complete, 50.0)
        self.assertEqual(progress.seconds_remaining, 10.0)

    def test_clamped_past_target(self):
        progress = compute_progress(25000.0, 20000.0)
        self.assertEqual(progress.percent_complete, 100.0)
        self.assertEqual(progress.seconds_remaining, 0.0)

    def test_clamped_negative(self):
        progress = compute_progress(-10.0, 20000.0)
        self.assertEqual(progress.percent_complete, 0.0)


if __name__ == '__main__':
    unittest.main()
