"""
Per-frame technique evaluators: contact, circular motion and palm orientation.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

import numpy as np

from .config import ContactConfig, MotionConfig, OrientationConfig
from .types import HandFrame, Landmark, WRIST, INDEX_MCP, INDEX_TIP, MIDDLE_MCP, PINKY_MCP

logger = logging.getLogger(__name__)

# (index on hand A, index on hand B): wrists, knuckles and fingertip-to-wrist
CONTACT_PAIRS: Tuple[Tuple[int, int], ...] = (
    (WRIST, WRIST),
    (INDEX_MCP, INDEX_MCP),
    (MIDDLE_MCP, MIDDLE_MCP),
    (INDEX_TIP, WRIST),
    (WRIST, INDEX_TIP),
    (INDEX_MCP, PINKY_MCP),
    (PINKY_MCP, INDEX_MCP),
)


def distance(a: Landmark, b: Landmark) -> float:
    """3D Euclidean distance between two landmarks."""
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)


def contact_score(hand_a: HandFrame, hand_b: HandFrame, distance_threshold: float = 0.15) -> int:
    """
    Count the contact pairs whose landmarks are closer than the threshold.
    
    Args:
        hand_a: First tracked hand (slot 0)
        hand_b: Second tracked hand (slot 1)
        distance_threshold: Maximum distance, in normalized units, for a pair to touch
        
    Returns:
        Number of pairs in contact (0-7). Pairs with a missing landmark do not count.
    """
    count = 0
    for ia, ib in CONTACT_PAIRS:
        a = hand_a.landmark(ia)
        b = hand_b.landmark(ib)
        if a is None or b is None:
            continue
        if distance(a, b) < distance_threshold:
            count += 1
    return count


def hands_in_contact(hand_a: HandFrame, hand_b: HandFrame, cfg: ContactConfig) -> Tuple[int, bool]:
    """Return (contact score, raw contact criterion)."""
    score = contact_score(hand_a, hand_b, cfg.distance_threshold)
    return score, score >= cfg.min_pairs


def palm_normal(hand: HandFrame, min_norm: float = 1e-6) -> Optional[np.ndarray]:
    """
    Approximate the palm-facing unit normal of a hand.

    The normal is the cross product of the wrist->index-knuckle and
    wrist->pinky-knuckle edges. Returns None for missing landmarks or a
    degenerate (near-zero) normal.
    """
    wrist = hand.landmark(WRIST)
    index = hand.landmark(INDEX_MCP)
    pinky = hand.landmark(PINKY_MCP)
    if wrist is None or index is None or pinky is None:
        return None

    origin = np.array([wrist.x, wrist.y, wrist.z])
    to_index = np.array([index.x, index.y, index.z]) - origin
    to_pinky = np.array([pinky.x, pinky.y, pinky.z]) - origin

    normal = np.cross(to_index, to_pinky)
    norm = float(np.linalg.norm(normal))
    if norm < min_norm:
        return None
    return normal / norm


def palms_facing(hand_a: HandFrame, hand_b: HandFrame, cfg: OrientationConfig) -> bool:
    """True if the two palm normals point substantially toward each other."""
    normal_a = palm_normal(hand_a, cfg.min_normal_norm)
    normal_b = palm_normal(hand_b, cfg.min_normal_norm)
    if normal_a is None or normal_b is None:
        return False
    return float(np.dot(normal_a, normal_b)) < cfg.max_dot


def angle_between(a: float, b: float) -> float:
    """Absolute difference between two headings, wrapped into [0, pi]."""
    diff = abs(a - b) % (2 * math.pi)
    return 2 * math.pi - diff if diff > math.pi else diff


@dataclass
class MotionSample:
    """Heading of the wrist midpoint displacement at a specific time."""
    timestamp_ms: float
    angle: float
    dx: float
    dy: float

    @property
    def magnitude(self) -> float:
        return abs(self.dx) + abs(self.dy)


class CircularMotionDetector:
    """
    Detects rubbing motion from direction changes of the wrist midpoint.

    Features:
    - Sliding time window of midpoint headings
    - Minimum sample count before evaluating
    - Motion floor that ignores jitter from a stationary pair of hands
    """

    def __init__(self, cfg: MotionConfig):
        self.cfg = cfg
        self.samples: Deque[MotionSample] = deque()
        self.last_center: Optional[Tuple[float, float]] = None

    def update(self, hand_a: HandFrame, hand_b: HandFrame, t_now_ms: float) -> bool:
        """
        Add the midpoint of the two wrists and evaluate the window.
        
        Args:
            hand_a: First tracked hand
            hand_b: Second tracked hand
            t_now_ms: Observation timestamp in milliseconds
            
        Returns:
            True if enough direction changes occurred within the window
        """
        wrist_a = hand_a.landmark(WRIST)
        wrist_b = hand_b.landmark(WRIST)
        if wrist_a is None or wrist_b is None:
            return False

        cx = (wrist_a.x + wrist_b.x) / 2
        cy = (wrist_a.y + wrist_b.y) / 2

        if self.last_center is None:
            self.last_center = (cx, cy)
            return False

        dx = cx - self.last_center[0]
        dy = cy - self.last_center[1]
        self.last_center = (cx, cy)
        self.samples.append(MotionSample(t_now_ms, math.atan2(dy, dx), dx, dy))

        self._prune(t_now_ms)

        if len(self.samples) < self.cfg.min_samples:
            return False

        changes = self.direction_changes()
        logger.debug(f"Circular motion: {changes} direction changes in {len(self.samples)} samples")
        return changes >= self.cfg.min_direction_changes

    def direction_changes(self) -> int:
        """Count heading changes above the angle threshold with real displacement."""
        changes = 0
        previous: Optional[MotionSample] = None
        for sample in self.samples:
            if previous is not None:
                if (angle_between(sample.angle, previous.angle) > self.cfg.min_angle_rad
                        and sample.magnitude > self.cfg.min_displacement):
                    changes += 1
            previous = sample
        return changes

    def _prune(self, t_now_ms: float) -> None:
        cutoff = t_now_ms - self.cfg.window_ms
        while self.samples and self.samples[0].timestamp_ms <= cutoff:
            self.samples.popleft()

    def reset(self) -> None:
        self.samples.clear()
        self.last_center = None
