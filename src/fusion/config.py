"""
Config loader for GestureLab.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 2
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7


@dataclass
class GestureConfig:
    pinch_threshold: float = 0.05
    fist_threshold: float = 0.12       # Mean fingertip-to-palm distance below = fist
    open_threshold: float = 0.35       # Mean fingertip-to-palm distance above = open palm

    # Index-finger circular rotation
    pointing_min_extension: float = 0.12
    rotate_gain: float = 3.0
    rotate_max_step: float = 1.0       # Radians; larger jumps are tracking glitches

    # Pinch translation (normalized image space -> scene units)
    pinch_move_gain: float = 12.0
    pinch_tilt_gain: float = 0.05

    zoom_gain: float = 6.0
    open_palm_spin: float = 0.0        # rad/tick while a single palm is open (0 = off)
    primary_hand: str = "first"        # "first" or "nearest"


@dataclass
class AnimationConfig:
    bounce_duration: float = 1.0
    bounce_frequency: float = 22.0
    bounce_decay: float = 4.0
    bounce_amplitude: float = 1.3
    bounce_scale_amplitude: float = 0.18
    spin_slow: float = 0.03            # rad/tick
    spin_fast: float = 0.1


@dataclass
class SmoothingConfig:
    position_alpha: float = 0.2
    rotation_alpha: float = 0.15
    scale_alpha: float = 0.25


@dataclass
class CommandConfig:
    scale_up: float = 1.5
    scale_down: float = 0.7
    move_step: float = 1.0


@dataclass
class EngineConfig:
    tick_rate: int = 60
    min_scale: float = 0.1
    max_scale: float = 10.0


@dataclass
class UIConfig:
    debug_overlay: bool = False
    print_interval: float = 0.5        # Seconds between console transform prints


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    commands: CommandConfig = field(default_factory=CommandConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        animation=_dict_to_dataclass(AnimationConfig, data.get('animation')),
        smoothing=_dict_to_dataclass(SmoothingConfig, data.get('smoothing')),
        commands=_dict_to_dataclass(CommandConfig, data.get('commands')),
        engine=_dict_to_dataclass(EngineConfig, data.get('engine')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
