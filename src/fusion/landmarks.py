"""
Hand landmark input types.

A HandSample is one detected hand (21 normalized MediaPipe landmarks);
a HandFrame is everything the vision pipeline saw in one capture.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .geometry import Point3D, is_finite_point

NUM_LANDMARKS = 21
MAX_HANDS = 2


@dataclass
class HandSample:
    """
    Normalized hand landmarks for a single hand.

    Attributes:
        landmarks: List of 21 (x, y, z) tuples, x/y normalized 0-1
        handedness: 'Left' or 'Right'
        confidence: Detection confidence 0-1
    """
    landmarks: List[Point3D]
    handedness: str = "Unknown"
    confidence: float = 1.0

    # MediaPipe landmark indices for convenience
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    FINGERTIPS = (INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)

    @classmethod
    def from_points(cls, points, handedness: str = "Unknown", confidence: float = 1.0) -> "HandSample":
        """
        Build a sample from tuples, {x, y, z} mappings or objects with
        x/y/z attributes (MediaPipe NormalizedLandmark). Unreadable points
        become NaN so validation rejects the sample later.
        """
        try:
            landmarks = [_to_point(p) for p in (points or [])]
        except TypeError:
            landmarks = []
        try:
            confidence = float(confidence)
        except (TypeError, ValueError):
            confidence = 0.0
        return cls(landmarks=landmarks, handedness=str(handedness), confidence=confidence)

    def is_valid(self) -> bool:
        """Exactly 21 landmarks, all coordinates finite."""
        if len(self.landmarks) != NUM_LANDMARKS:
            return False
        return all(is_finite_point(p) for p in self.landmarks)

    def get(self, index: int) -> Point3D:
        """Get landmark by index."""
        return self.landmarks[index]

    @property
    def thumb_tip(self) -> Point3D:
        return self.landmarks[self.THUMB_TIP]

    @property
    def index_tip(self) -> Point3D:
        return self.landmarks[self.INDEX_TIP]

    @property
    def middle_base(self) -> Point3D:
        """Middle-finger MCP, the stable anchor used for translation and zoom."""
        return self.landmarks[self.MIDDLE_MCP]

    @property
    def wrist(self) -> Point3D:
        return self.landmarks[self.WRIST]


@dataclass
class HandFrame:
    """Zero, one or two hands seen in one capture."""
    hands: List[HandSample] = field(default_factory=list)
    timestamp: Optional[float] = None

    @classmethod
    def from_dict(cls, payload: Optional[dict]) -> "HandFrame":
        """Parse a `{"hands": [{"landmarks": [...], "handedness": ...}]}` payload."""
        if not isinstance(payload, dict):
            return cls()
        raw_hands = payload.get("hands")
        if not isinstance(raw_hands, (list, tuple)):
            raw_hands = []
        hands = []
        for hand in raw_hands:
            if not isinstance(hand, dict):
                hands.append(HandSample(landmarks=[]))
                continue
            hands.append(HandSample.from_points(
                hand.get("landmarks"),
                handedness=hand.get("handedness", "Unknown"),
                confidence=hand.get("confidence", 1.0),
            ))
        timestamp = payload.get("timestamp")
        if not isinstance(timestamp, (int, float)):
            timestamp = None
        return cls(hands=hands, timestamp=timestamp)

    @property
    def hand_count(self) -> int:
        return min(len(self.hands), MAX_HANDS)

    def considered_hands(self) -> List[HandSample]:
        """The hands the classifier looks at (first two)."""
        return self.hands[:MAX_HANDS]


def _to_point(p: Any) -> Point3D:
    nan = float("nan")
    try:
        if isinstance(p, dict):
            return (float(p["x"]), float(p["y"]), float(p.get("z", 0.0)))
        if hasattr(p, "x") and hasattr(p, "y"):
            return (float(p.x), float(p.y), float(getattr(p, "z", 0.0)))
        x, y, z = p
        return (float(x), float(y), float(z))
    except (KeyError, TypeError, ValueError):
        return (nan, nan, nan)
