"""
Configuration management for the hand-washing technique classifier.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ContactConfig:
    """Contact scorer thresholds."""
    distance_threshold: float
    min_pairs: int


@dataclass
class MotionConfig:
    """Circular-motion detector thresholds."""
    window_ms: int
    min_samples: int
    min_angle_rad: float
    min_displacement: float
    min_direction_changes: int


@dataclass
class OrientationConfig:
    """Palm-orientation detector thresholds."""
    max_dot: float
    min_normal_norm: float


@dataclass
class StabilizerConfig:
    """Hysteresis stabilizer settings."""
    stable_frames: int


@dataclass
class SessionConfig:
    """Washing session timing."""
    target_ms: int
    completion_display_ms: int
    occlusion_timeout_ms: int
    tick_interval_ms: int


@dataclass
class ClassifierConfig:
    """Technique classifier configuration."""
    contact: ContactConfig
    motion: MotionConfig
    orientation: OrientationConfig
    stabilizer: StabilizerConfig
    session: SessionConfig


@dataclass
class SpeechConfig:
    """Eleven Labs speech settings."""
    enabled: bool
    voice_id: str
    model_id: str
    output_format: str


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_debug: bool
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    classifier: ClassifierConfig
    speech: SpeechConfig
    display: DisplayConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.
    
    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml
        
    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"
    
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)
    
    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )
    
    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )
    
    clf_data = data['classifier']
    contact = ContactConfig(
        distance_threshold=clf_data['contact']['distance_threshold'],
        min_pairs=clf_data['contact']['min_pairs']
    )
    motion = MotionConfig(
        window_ms=clf_data['motion']['window_ms'],
        min_samples=clf_data['motion']['min_samples'],
        min_angle_rad=clf_data['motion']['min_angle_rad'],
        min_displacement=clf_data['motion']['min_displacement'],
        min_direction_changes=clf_data['motion']['min_direction_changes']
    )
    orientation = OrientationConfig(
        max_dot=clf_data['orientation']['max_dot'],
        min_normal_norm=clf_data['orientation']['min_normal_norm']
    )
    stabilizer = StabilizerConfig(
        stable_frames=clf_data['stabilizer']['stable_frames']
    )
    session = SessionConfig(
        target_ms=clf_data['session']['target_ms'],
        completion_display_ms=clf_data['session']['completion_display_ms'],
        occlusion_timeout_ms=clf_data['session']['occlusion_timeout_ms'],
        tick_interval_ms=clf_data['session']['tick_interval_ms']
    )
    classifier = ClassifierConfig(
        contact=contact,
        motion=motion,
        orientation=orientation,
        stabilizer=stabilizer,
        session=session
    )
    
    speech_data = data['speech']
    speech = SpeechConfig(
        enabled=speech_data['enabled'],
        voice_id=speech_data['voice_id'],
        model_id=speech_data['model_id'],
        output_format=speech_data['output_format']
    )
    
    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_debug=display_data['show_debug'],
        window_name=display_data['window_name']
    )
    
    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        speech=speech,
        display=display
    )
