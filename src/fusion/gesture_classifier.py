"""
Gesture classification from hand landmarks.
Detects pinch, fist, open palm, index-finger rotation and two-hand zoom/recenter.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple
import logging

from .config import GestureConfig
from .geometry import angle_between, average_distance, distance, normalize_angle
from .landmarks import HandFrame, HandSample

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]


class Gesture(Enum):
    """Detected gesture types."""
    NONE = auto()

    # Single (primary) hand
    PINCH = auto()              # Thumb tip on index tip, drags the object
    FIST = auto()               # Just closed the fist (edge)
    FIST_HOLD = auto()          # Fist still closed, must not re-trigger
    OPEN_PALM = auto()
    POINTING_ROTATE = auto()    # Index finger circling

    # Two hands
    TWO_HAND_ZOOM = auto()
    TWO_HAND_RECENTER = auto()


@dataclass(frozen=True)
class GestureClassification:
    """One classified gesture with its continuous payload."""
    kind: Gesture = Gesture.NONE
    anchor: Optional[Point2D] = None    # PINCH: middle-finger base in image space
    angle_delta: float = 0.0            # POINTING_ROTATE: gain-scaled radians
    separation: float = 0.0             # TWO_HAND_ZOOM: distance between hands
    tilt: float = 0.0                   # PINCH: wrist-to-palm horizontal offset


NO_GESTURE = GestureClassification()


@dataclass
class HandReading:
    """Everything the classifier derived from one HandFrame."""
    primary: GestureClassification = NO_GESTURE
    two_hand: Optional[GestureClassification] = None
    hand_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.primary.kind == Gesture.NONE and self.two_hand is None


@dataclass
class ClassifierSession:
    """Memory carried from one tick to the next."""
    is_fist_prev: bool = False
    last_angle: Optional[float] = None
    last_primary_anchor: Optional[Point2D] = None

    def reset(self) -> None:
        self.is_fist_prev = False
        self.last_angle = None
        self.last_primary_anchor = None


class GestureClassifier:
    """
    Classifies hand frames into discrete gestures.

    Gestures detected:
    - Pinch: Thumb tip close to index tip, anchored on the middle-finger base
    - Fist: All fingertips curled onto the palm (edge-triggered)
    - Open palm: All fingertips spread away from the palm
    - Pointing rotate: Index extended, middle/ring curled; circling rotates
    - Two-hand zoom: Distance between both palms
    - Two-hand recenter: Both palms open at once
    """

    def __init__(self, config: GestureConfig, session: Optional[ClassifierSession] = None):
        """
        Initialize gesture classifier.

        Args:
            config: Gesture detection thresholds
            session: Retained per-tick memory (a fresh one if omitted)
        """
        self._config = config
        self.session = session or ClassifierSession()

    def classify(self, frame: Optional[HandFrame]) -> HandReading:
        """
        Classify one frame. Never raises; missing or malformed
        input yields an empty reading.
        """
        if frame is None or frame.hand_count == 0:
            # Hand gone: the next fist is a fresh edge, the next point a fresh angle
            self.session.is_fist_prev = False
            self.session.last_angle = None
            return HandReading()

        hands = frame.considered_hands()
        if not all(hand.is_valid() for hand in hands):
            logger.debug("Discarding malformed hand frame (%d hands)", len(hands))
            return HandReading(hand_count=len(hands))

        primary, secondary = self._select_primary(hands)
        self.session.last_primary_anchor = _xy(primary.middle_base)

        reading = HandReading(
            primary=self._classify_primary(primary),
            hand_count=len(hands),
        )
        if secondary is not None:
            reading.two_hand = self._classify_two_hands(primary, secondary)
        return reading

    def reset(self) -> None:
        """Reset retained gesture memory."""
        self.session.reset()

    def _select_primary(self, hands) -> Tuple[HandSample, Optional[HandSample]]:
        if len(hands) == 1:
            return hands[0], None

        first, second = hands[0], hands[1]
        anchor = self.session.last_primary_anchor
        if self._config.primary_hand == "nearest" and anchor is not None:
            d_first = distance(first.middle_base, anchor)
            d_second = distance(second.middle_base, anchor)
            if d_second < d_first:
                return second, first
        return first, second

    def _classify_primary(self, hand: HandSample) -> GestureClassification:
        """Determine primary gesture from all detected features."""
        spread = self._finger_spread(hand)
        is_fist = spread < self._config.fist_threshold
        is_open = spread > self._config.open_threshold
        is_pinching = distance(hand.thumb_tip, hand.index_tip) < self._config.pinch_threshold

        was_fist = self.session.is_fist_prev
        self.session.is_fist_prev = is_fist

        rotation = None
        if self._is_pointing(hand) and not is_pinching and not is_fist:
            rotation = self._track_rotation(hand)
        else:
            self.session.last_angle = None

        if is_fist:
            return GestureClassification(Gesture.FIST_HOLD if was_fist else Gesture.FIST)

        if is_pinching:
            base = hand.middle_base
            return GestureClassification(
                Gesture.PINCH,
                anchor=_xy(base),
                tilt=hand.wrist[0] - base[0],
            )

        if rotation is not None:
            return GestureClassification(Gesture.POINTING_ROTATE, angle_delta=rotation)

        if is_open:
            return GestureClassification(Gesture.OPEN_PALM)

        return NO_GESTURE

    def _classify_two_hands(self, first: HandSample, second: HandSample) -> GestureClassification:
        open_threshold = self._config.open_threshold
        if self._finger_spread(first) > open_threshold and self._finger_spread(second) > open_threshold:
            return GestureClassification(Gesture.TWO_HAND_RECENTER)

        return GestureClassification(
            Gesture.TWO_HAND_ZOOM,
            separation=distance(first.middle_base, second.middle_base),
        )

    def _track_rotation(self, hand: HandSample) -> float:
        """
        Follow the index fingertip around the palm and return the
        gain-scaled angle change since the previous tick (0 when unusable).
        """
        base = hand.middle_base
        tip = hand.index_tip
        angle = angle_between(base, tip)

        last = self.session.last_angle
        self.session.last_angle = angle
        if last is None:
            return 0.0

        # Too close to the palm, direction is mostly noise
        if distance(base, tip) <= self._config.pointing_min_extension:
            return 0.0

        delta = normalize_angle(angle - last)
        if abs(delta) >= self._config.rotate_max_step:
            return 0.0
        return delta * self._config.rotate_gain

    @staticmethod
    def _is_pointing(hand: HandSample) -> bool:
        """Index extended upwards, middle and ring curled (image y grows downwards)."""
        index_up = hand.get(HandSample.INDEX_TIP)[1] < hand.get(HandSample.INDEX_PIP)[1]
        middle_down = hand.get(HandSample.MIDDLE_TIP)[1] > hand.get(HandSample.MIDDLE_PIP)[1]
        ring_down = hand.get(HandSample.RING_TIP)[1] > hand.get(HandSample.RING_PIP)[1]
        return index_up and middle_down and ring_down

    @staticmethod
    def _finger_spread(hand: HandSample) -> float:
        return average_distance(hand.landmarks, HandSample.FINGERTIPS, HandSample.MIDDLE_MCP)


def _xy(point) -> Point2D:
    return (point[0], point[1])
