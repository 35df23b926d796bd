"""
Hand landmark detection using MediaPipe, and OpenCV overlay rendering.
"""
import time

import cv2
import mediapipe as mp
import numpy as np
from typing import List, Optional, Tuple

from .types import Criterion, HandFrame, Landmark, Observation, SessionPhase, StateSnapshot

CRITERION_LABELS = {
    Criterion.CONTACT: "Hands together",
    Criterion.CIRCULAR_MOTION: "Circular motion",
    Criterion.ORIENTATION: "Palms facing",
}


class HandsTracker:
    """Two-hand landmark tracker using MediaPipe Hands."""
    
    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.5, min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.
        
        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
        self.last_inference_ms: Optional[float] = None
    
    def process(self, frame_bgr: np.ndarray, timestamp_ms: float) -> Observation:
        """
        Process a frame and return the tracked hands.
        
        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonic capture time in milliseconds
            
        Returns:
            Observation with up to two hands of 21 (x, y, z) landmarks each
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        started = time.perf_counter()
        results = self.hands.process(frame_rgb)
        self.last_inference_ms = (time.perf_counter() - started) * 1000.0
        
        hands = []
        for hand_landmarks in (results.multi_hand_landmarks or [])[:2]:
            hands.append(HandFrame(tuple(
                Landmark(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark
            )))
        
        return Observation(timestamp_ms=timestamp_ms, hands=tuple(hands))
    
    def close(self) -> None:
        self.hands.close()


def to_pixel_points(observation: Observation, frame_wh: Tuple[int, int]) -> List[List[Tuple[int, int]]]:
    """
    Convert normalized landmarks to pixel coordinates for drawing.
    
    Args:
        observation: Tracked hands
        frame_wh: Frame dimensions (width, height)
        
    Returns:
        One list of (px, py) points per hand
    """
    width, height = frame_wh
    return [
        [(int(lm.x * width), int(lm.y * height)) for lm in hand.landmarks]
        for hand in observation.hands
    ]


def draw_landmarks(frame: np.ndarray, observation: Observation) -> np.ndarray:
    """Draw every tracked landmark as a dot."""
    height, width = frame.shape[:2]
    for points in to_pixel_points(observation, (width, height)):
        for px, py in points:
            cv2.circle(frame, (px, py), 4, (0, 255, 0), -1)
    return frame


def draw_overlay(frame: np.ndarray, snapshot: StateSnapshot, show_debug: bool = True,
                 inference_ms: Optional[float] = None) -> np.ndarray:
    """
    Draw checklist, progress and guidance for the current snapshot.
    
    Args:
        frame: Input frame
        snapshot: Latest published classifier state
        show_debug: Also draw contact score and stabilizer counts
        inference_ms: Last landmark inference time, drawn with the debug info
        
    Returns:
        Frame with the overlay drawn
    """
    height, width = frame.shape[:2]
    
    # Checklist
    for i, criterion in enumerate(Criterion):
        met = snapshot.criteria.get(criterion, False)
        mark = "[x]" if met else "[ ]"
        color = (0, 255, 0) if met else (0, 0, 255)
        cv2.putText(frame, f"{mark} {CRITERION_LABELS[criterion]}", (10, 30 + i * 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
    
    # Progress bar while timing
    if snapshot.session_state == SessionPhase.TIMING:
        bar_w = int((width - 20) * snapshot.percent_complete / 100.0)
        cv2.rectangle(frame, (10, height - 50), (width - 10, height - 30), (255, 255, 255), 1)
        cv2.rectangle(frame, (10, height - 50), (10 + bar_w, height - 30), (0, 200, 0), -1)
        cv2.putText(frame, f"{snapshot.percent_complete:.0f}% complete - {snapshot.seconds_remaining:.1f}s remaining",
                    (10, height - 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
    
    if snapshot.guidance_message:
        cv2.putText(frame, snapshot.guidance_message, (10, height - 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 255), 2)
    
    if snapshot.session_state == SessionPhase.COMPLETE:
        cv2.putText(frame, "Good Job!", (width // 2 - 120, height // 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 2.0, (0, 255, 0), 4)
    
    if show_debug:
        counts = " ".join(f"{c.value}={n}" for c, n in snapshot.counts.items())
        cv2.putText(frame, f"Contact: {snapshot.contact_score}/7 | {snapshot.session_state.value}",
                    (10, 110), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, counts, (10, 130), cv2.FONT_HERSHEY_SIMPLEX, 0.45, (200, 200, 200), 1)
        if inference_ms is not None:
            cv2.putText(frame, f"Inference: {inference_ms:.1f}ms", (10, 150),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, (200, 200, 200), 1)
    
    return frame
