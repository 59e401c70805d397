"""
Procedural animation layered on top of the target state.
"""
from dataclasses import dataclass
import math

from .config import AnimationConfig
from .target_state import Animation, TargetState


@dataclass(frozen=True)
class AnimationOffset:
    """Transient offset added to the target before smoothing."""
    position_y: float = 0.0
    scale: float = 0.0


ZERO_OFFSET = AnimationOffset()


class Animator:
    """
    Bounce: damped |sin| hop with a small scale squash, over a fixed duration.
    Spin: rotation velocity integrated into rotation.y every step.
    """

    def __init__(self, config: AnimationConfig):
        self._config = config

    def bounce_offset(self, elapsed: float) -> AnimationOffset:
        """Envelope value `elapsed` seconds after the trigger."""
        cfg = self._config
        if elapsed < 0.0 or elapsed >= cfg.bounce_duration:
            return ZERO_OFFSET

        wave = math.sin(elapsed * cfg.bounce_frequency)
        decay = math.exp(-elapsed * cfg.bounce_decay)
        return AnimationOffset(
            position_y=abs(wave) * cfg.bounce_amplitude * decay,
            scale=wave * cfg.bounce_scale_amplitude * decay,
        )

    def step(self, state: TargetState, now: float) -> AnimationOffset:
        """
        Advance animations by one tick.

        Integrates spin into `state.rotation` in place and returns the bounce
        offset; a finished bounce clears its trigger.
        """
        if state.rotation_velocity:
            state.rotation.y += state.rotation_velocity

        if state.bounce_trigger_time is None:
            return ZERO_OFFSET

        elapsed = now - state.bounce_trigger_time
        if elapsed >= self._config.bounce_duration:
            state.bounce_trigger_time = None
            if state.animation == Animation.BOUNCE:
                state.animation = Animation.SPIN if state.rotation_velocity else Animation.NONE
            return ZERO_OFFSET

        return self.bounce_offset(elapsed)
