"""
Smoothing of the rendered transform.

The rendered pose eases towards the animated target one tick at a time;
only a recenter jumps straight to the goal.
"""
from dataclasses import replace
import math
from typing import Any, Optional, Tuple

from .config import SmoothingConfig
from .geometry import clamp, lerp
from .target_state import MAX_SCALE, MIN_SCALE, RenderedTransform

Triple = Tuple[float, float, float]


class Smoother:
    """
    Exponential smoothing of the rendered transform towards a goal.

    Each channel (position, rotation, scale) has its own fixed alpha;
    colour and asset pass straight through.
    """

    def __init__(self, config: SmoothingConfig, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE):
        """
        Args:
            config: Per-channel alphas in (0, 1]. Higher = snappier, lower = steadier.
            min_scale: Lower bound applied to the goal scale
            max_scale: Upper bound applied to the goal scale
        """
        self._config = config
        self._min_scale = min_scale
        self._max_scale = max_scale
        self.current = RenderedTransform.identity()

    def _exponential_smoothing(self, a: float, x: float, x_prev: float) -> float:
        return lerp(x_prev, x, a)

    def _smooth_triple(self, a: float, goal: Triple, prev: Triple) -> Triple:
        return tuple(self._exponential_smoothing(a, g, p) for g, p in zip(goal, prev))

    def step(
        self,
        position: Triple,
        rotation: Triple,
        scale: float,
        color: Optional[str] = None,
        asset: Any = None,
    ) -> RenderedTransform:
        """Move one tick closer to the goal and return the new transform."""
        cfg = self._config
        prev = self.current
        goal_scale = clamp(scale, self._min_scale, self._max_scale)

        self.current = RenderedTransform(
            position=self._smooth_triple(cfg.position_alpha, position, prev.position),
            rotation=self._smooth_triple(cfg.rotation_alpha, rotation, prev.rotation),
            scale=self._exponential_smoothing(cfg.scale_alpha, goal_scale, prev.scale),
            color=color,
            asset=asset,
        )
        return self.current

    def snap(self, transform: RenderedTransform) -> None:
        """Hard-set the rendered transform, skipping interpolation."""
        self.current = transform

    def fold_rotation(self, axis: int, amount: float) -> None:
        """Shift one rendered rotation axis by `amount` (a whole turn) without a visible change."""
        rotation = list(self.current.rotation)
        rotation[axis] -= amount
        self.current = replace(self.current, rotation=tuple(rotation))


def transform_distance(a: RenderedTransform, position: Triple, rotation: Triple, scale: float) -> float:
    """Euclidean distance over all channels between a rendered transform and a goal."""
    diffs = [x - y for x, y in zip(a.position, position)]
    diffs += [x - y for x, y in zip(a.rotation, rotation)]
    diffs.append(a.scale - scale)
    return math.sqrt(sum(d * d for d in diffs))
