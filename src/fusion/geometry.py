"""
Landmark geometry helpers.
All functions are pure and operate on (x, y, z) tuples in normalized image space.
"""
import math
from typing import Iterable, Sequence, Tuple

Point3D = Tuple[float, float, float]


def distance(p1: Point3D, p2: Point3D) -> float:
    """2D distance between two landmarks (ignoring z, which is relative depth)."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return math.sqrt(dx*dx + dy*dy)


def angle_between(origin: Point3D, target: Point3D) -> float:
    """Angle (radians, atan2) of the vector from origin to target in the image plane."""
    return math.atan2(target[1] - origin[1], target[0] - origin[0])


def normalize_angle(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    wrapped = math.atan2(math.sin(angle), math.cos(angle))
    if wrapped <= -math.pi:
        wrapped += 2 * math.pi
    return wrapped


def average_distance(landmarks: Sequence[Point3D], indices: Iterable[int], reference: int) -> float:
    """Mean 2D distance from each landmark in `indices` to landmark `reference`."""
    ref = landmarks[reference]
    dists = [distance(landmarks[i], ref) for i in indices]
    if not dists:
        return 0.0
    return sum(dists) / len(dists)


def is_finite_point(p) -> bool:
    return len(p) == 3 and all(math.isfinite(c) for c in p)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def lerp(current: float, target: float, alpha: float) -> float:
    return current + (target - current) * alpha
