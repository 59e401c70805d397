"""
Authoritative spatial state of the manipulated object and the per-tick output record.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Tuple

from .geometry import clamp

MIN_SCALE = 0.1
MAX_SCALE = 10.0

Triple = Tuple[float, float, float]


class Animation(Enum):
    """Procedural animation most recently requested."""
    NONE = auto()
    BOUNCE = auto()
    SPIN = auto()


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def set(self, x: float, y: float, z: float) -> None:
        self.x, self.y, self.z = float(x), float(y), float(z)

    def as_tuple(self) -> Triple:
        return (self.x, self.y, self.z)


# Rotation in radians about x, y, z
Euler3 = Vector3


@dataclass
class TargetState:
    """
    Where the user (by hand or by voice) wants the object to be.

    Mutated in place by the gesture and command paths; the engine serializes
    all writes. Scale is clamped on every write through `set_scale`.
    """
    position: Vector3 = field(default_factory=Vector3)
    rotation: Euler3 = field(default_factory=Euler3)
    scale: float = 1.0
    color: Optional[str] = None
    animation: Animation = Animation.NONE
    bounce_trigger_time: Optional[float] = None
    rotation_velocity: float = 0.0

    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE

    def set_scale(self, value: float) -> None:
        self.scale = clamp(float(value), self.min_scale, self.max_scale)

    def reset(self) -> None:
        """Back to identity pose, no tint, no animation."""
        self.position.set(0.0, 0.0, 0.0)
        self.rotation.set(0.0, 0.0, 0.0)
        self.scale = 1.0
        self.color = None
        self.animation = Animation.NONE
        self.bounce_trigger_time = None
        self.rotation_velocity = 0.0

    def copy(self) -> "TargetState":
        return TargetState(
            position=Vector3(*self.position.as_tuple()),
            rotation=Euler3(*self.rotation.as_tuple()),
            scale=self.scale,
            color=self.color,
            animation=self.animation,
            bounce_trigger_time=self.bounce_trigger_time,
            rotation_velocity=self.rotation_velocity,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
        )


@dataclass(frozen=True)
class RenderedTransform:
    """Smoothed transform handed to the renderer each tick."""
    position: Triple = (0.0, 0.0, 0.0)
    rotation: Triple = (0.0, 0.0, 0.0)
    scale: float = 1.0
    color: Optional[str] = None
    asset: Any = None

    @classmethod
    def identity(cls, asset: Any = None) -> "RenderedTransform":
        return cls(asset=asset)
