"""
Main application for hand-washing technique coaching.
"""
import argparse
import asyncio
import logging
from typing import Optional

import cv2
import numpy as np

from .classifier import HandWashClassifier, TickResult
from .config import load_config
from .landmarks import HandsTracker, draw_landmarks, draw_overlay
from .scheduler import PeriodicObservationSource
from .speech_mock import MockSpeaker
from .types import Observation, SpeechSinkProto, WashCompleted

logger = logging.getLogger(__name__)

RENDER_INTERVAL_S = 1.0 / 60.0


class HandWashApp:
    """Main application class for hand-washing coaching."""
    
    def __init__(self, config_path: Optional[str] = None, mock_speech: bool = False):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )
        self.classifier = HandWashClassifier(self.config.classifier)
        self.speaker = self._create_speaker(mock_speech)
        
        self.latest_frame: Optional[np.ndarray] = None
        self.latest_observation: Optional[Observation] = None
        self.stop_event = asyncio.Event()
        
        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)
        
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")
    
    def _create_speaker(self, mock_speech: bool) -> SpeechSinkProto:
        if mock_speech or not self.config.speech.enabled:
            return MockSpeaker()
        from .speech import ElevenLabsSpeaker
        return ElevenLabsSpeaker(self.config.speech)
    
    def detect(self, timestamp_ms: float) -> Optional[Observation]:
        """Read one camera frame and run the landmark detector on it."""
        ret, frame = self.cap.read()
        if not ret:
            print("Failed to read frame from camera")
            return None
        self.latest_frame = frame
        self.latest_observation = self.tracker.process(frame, timestamp_ms)
        return self.latest_observation
    
    def on_observation(self, observation: Observation) -> TickResult:
        """Tick the classifier and forward its output to the collaborators."""
        result = self.classifier.tick(observation)
        for request in result.announcements:
            self.speaker.announce(request, self.classifier.post_speech_done)
        for event in result.events:
            if isinstance(event, WashCompleted):
                print(f"🎉 Good Job! Washed for {event.elapsed_ms / 1000.0:.1f}s")
        return result
    
    async def render(self):
        """Draw the latest frame and snapshot until the user quits."""
        while not self.stop_event.is_set():
            if self.latest_frame is not None:
                frame = self.latest_frame.copy()
                if self.config.display.show_landmarks and self.latest_observation is not None:
                    frame = draw_landmarks(frame, self.latest_observation)
                frame = draw_overlay(frame, self.classifier.latest_snapshot, self.config.display.show_debug,
                                     self.tracker.last_inference_ms)
                cv2.imshow(self.config.display.window_name, frame)
            
            # Check for quit key
            if cv2.waitKey(1) & 0xFF == ord('q'):
                self.stop_event.set()
            await asyncio.sleep(RENDER_INTERVAL_S)
    
    async def run(self):
        """Run the tick loop and the render loop side by side."""
        print(f"Starting {self.config.display.window_name}")
        print("🧼 Hand washing coach:")
        print("  - Show both hands to the camera")
        print(f"  - Rub your hands together for {self.config.classifier.session.target_ms / 1000:.0f} seconds")
        print("Press 'q' to quit")
        
        source = PeriodicObservationSource(self.detect, self.config.classifier.session.tick_interval_ms)
        ticks = asyncio.create_task(source.run(self.on_observation, self.stop_event))
        try:
            await self.render()
        finally:
            self.stop_event.set()
            await ticks
            self.classifier.stop()
            self.close()
    
    def close(self):
        """Release camera, tracker and windows."""
        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()


async def main(argv: Optional[list] = None):
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Hand washing technique coach")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--mock-speech", action="store_true", help="Print announcements instead of speaking")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    
    app = HandWashApp(config_path=args.config, mock_speech=args.mock_speech)
    try:
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
