"""
Test cases for the MediaPipe tracker wrapper and the OpenCV overlay.
"""
import importlib.util
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

HAS_VISION = all(importlib.util.find_spec(name) is not None for name in ("cv2", "mediapipe", "numpy"))

if HAS_VISION:
    import numpy as np
    from handwash_coach.landmarks import HandsTracker, draw_overlay
    from handwash_coach.types import Criterion, HandPresence, SessionPhase, StateSnapshot


def fake_landmark_list(offset):
    return SimpleNamespace(landmark=[SimpleNamespace(x=0.1 * offset, y=0.5, z=0.0) for _ in range(21)])


@unittest.skipUnless(HAS_VISION, "OpenCV and MediaPipe are required")
class TestHandsTracker(unittest.TestCase):

    def setUp(self):
        patcher = patch("handwash_coach.landmarks.mp")
        self.mp = patcher.start()
        self.addCleanup(patcher.stop)
        self.hands = MagicMock()
        self.mp.solutions.hands.Hands.return_value = self.hands
        self.frame = np.zeros((48, 64, 3), dtype=np.uint8)

    def test_no_hands(self):
        self.hands.process.return_value = SimpleNamespace(multi_hand_landmarks=None)
        tracker = HandsTracker()
        self.assertIsNone(tracker.last_inference_ms)

        observation = tracker.process(self.frame, 1234.0)

        self.assertEqual(observation.timestamp_ms, 1234.0)
        self.assertEqual(observation.hands, ())
        self.assertIsNotNone(tracker.last_inference_ms)
        self.assertGreaterEqual(tracker.last_inference_ms, 0.0)

    def test_at_most_two_hands_kept(self):
        self.hands.process.return_value = SimpleNamespace(
            multi_hand_landmarks=[fake_landmark_list(i) for i in range(3)])
        tracker = HandsTracker()

        observation = tracker.process(self.frame, 0.0)

        self.assertEqual(len(observation.hands), 2)
        self.assertEqual(len(observation.hands[0].landmarks), 21)
        self.assertAlmostEqual(observation.hands[1].landmarks[0].x, 0.1)

    def test_close_releases_model(self):
        HandsTracker().close()
        self.hands.close.assert_called_once()


@unittest.skipUnless(HAS_VISION, "OpenCV and MediaPipe are required")
class TestDrawOverlay(unittest.TestCase):

    def setUp(self):
        self.snapshot = StateSnapshot(
            contact_score=5,
            criteria={Criterion.CONTACT: True},
            session_state=SessionPhase.TIMING,
            percent_complete=40.0,
            seconds_remaining=12.0,
            guidance_message="Make circular motions",
            presence=HandPresence.TWO_HANDS,
            counts={Criterion.CONTACT: 3},
        )

    def test_inference_time_drawn_with_debug(self):
        blank = np.zeros((240, 320, 3), dtype=np.uint8)
        without = draw_overlay(blank.copy(), self.snapshot, show_debug=True)
        with_time = draw_overlay(blank.copy(), self.snapshot, show_debug=True, inference_ms=12.5)

        self.assertEqual(with_time.shape, blank.shape)
        # Inference line sits below the counts line
        self.assertFalse(np.array_equal(without[140:155], with_time[140:155]))

    def test_inference_time_hidden_without_debug(self):
        blank = np.zeros((240, 320, 3), dtype=np.uint8)
        without = draw_overlay(blank.copy(), self.snapshot, show_debug=False)
        with_time = draw_overlay(blank.copy(), self.snapshot, show_debug=False, inference_ms=12.5)

        self.assertTrue(np.array_equal(without, with_time))


if __name__ == "__main__":
    unittest.main()
