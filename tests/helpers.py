"""
Synthetic landmark builders for classifier tests.
"""
import math
from typing import List

from handwash_coach.types import HandFrame, Observation

TICK_MS = 50.0


def make_hand(wx: float, wy: float, wz: float = 0.0, facing: int = 1) -> HandFrame:
    """
    Build a 21-point hand around a wrist position.

    The palm normal (wrist->index knuckle x wrist->pinky knuckle) points
    along -x for facing=1 and +x for facing=-1.
    """
    points = [(wx, wy - 0.15, wz)] * 21
    points[0] = (wx, wy, wz)  # wrist
    points[5] = (wx, wy - 0.1, wz)  # index knuckle
    points[8] = (wx, wy - 0.2, wz)  # index tip
    points[9] = (wx + 0.01, wy - 0.1, wz)  # middle knuckle
    points[17] = (wx, wy, wz + 0.1 * facing)  # pinky knuckle
    return HandFrame.from_points(points)


def washing_pair(cx: float = 0.5, cy: float = 0.5, facing: bool = True):
    """Two hands in contact; palms facing each other unless facing=False."""
    hand_a = make_hand(cx, cy, facing=1)
    hand_b = make_hand(cx + 0.02, cy, facing=-1 if facing else 1)
    return hand_a, hand_b


def two_hands(t_ms: float, cx: float = 0.5, cy: float = 0.5, facing: bool = True) -> Observation:
    return Observation(timestamp_ms=t_ms, hands=washing_pair(cx, cy, facing))


def one_hand(t_ms: float) -> Observation:
    return Observation(timestamp_ms=t_ms, hands=(make_hand(0.5, 0.5),))


def no_hands(t_ms: float) -> Observation:
    return Observation(timestamp_ms=t_ms, hands=())


def circle_point(t_ms: float, period_ms: float = 333.0, radius: float = 0.05,
                 cx: float = 0.5, cy: float = 0.5):
    theta = 2 * math.pi * t_ms / period_ms
    return cx + radius * math.cos(theta), cy + radius * math.sin(theta)


def circular_stream(count: int, start_ms: float = 0.0, tick_ms: float = 66.0) -> List[Observation]:
    """Two washing hands whose wrist midpoint traces a fast circle."""
    observations = []
    for i in range(count):
        t = start_ms + i * tick_ms
        x, y = circle_point(t)
        observations.append(two_hands(t, cx=x, cy=y))
    return observations
