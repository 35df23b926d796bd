"""
Test cases for YAML configuration loading.
"""
import math
import sys
import tempfile
import unittest
from pathlib import Path

import yaml

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handwash_coach.config import Cfg, load_config


class TestLoadConfig(unittest.TestCase):
    """Test default and custom configuration files."""

    def test_defaults(self):
        cfg = load_config()
        self.assertIsInstance(cfg, Cfg)
        self.assertEqual(cfg.mediapipe.max_num_hands, 2)
        self.assertEqual(cfg.classifier.contact.distance_threshold, 0.15)
        self.assertEqual(cfg.classifier.contact.min_pairs, 3)
        self.assertEqual(cfg.classifier.motion.window_ms, 1000)
        self.assertEqual(cfg.classifier.motion.min_samples, 6)
        self.assertAlmostEqual(cfg.classifier.motion.min_angle_rad, math.pi / 3)
        self.assertEqual(cfg.classifier.orientation.max_dot, -0.2)
        self.assertEqual(cfg.classifier.stabilizer.stable_frames, 15)
        self.assertEqual(cfg.classifier.session.target_ms, 20000)
        self.assertEqual(cfg.classifier.session.occlusion_timeout_ms, 2000)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_custom_file(self):
        default_path = Path(__file__).parent.parent / "handwash_coach" / "config.default.yaml"
        with open(default_path) as f:
            data = yaml.safe_load(f)
        data["classifier"]["stabilizer"]["stable_frames"] = 5
        data["speech"]["enabled"] = False

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.yaml"
            with open(path, "w") as f:
                yaml.safe_dump(data, f)
            cfg = load_config(str(path))

        self.assertEqual(cfg.classifier.stabilizer.stable_frames, 5)
        self.assertFalse(cfg.speech.enabled)

    def test_missing_key(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.yaml"
            with open(path, "w") as f:
                yaml.safe_dump({"camera": {"index": 0}}, f)
            with self.assertRaises(KeyError):
                load_config(str(path))


if __name__ == '__main__':
    unittest.main()
