import dataclasses
import math

import pytest

from fusion.config import GestureConfig
from fusion.gesture_classifier import Gesture, GestureClassification, GestureClassifier, HandReading
from fusion.landmarks import HandFrame, HandSample


@pytest.fixture
def classifier():
    config = GestureConfig()
    return GestureClassifier(config)


def test_no_hands_is_none(classifier):
    reading = classifier.classify(HandFrame())
    assert reading.primary.kind == Gesture.NONE
    assert reading.two_hand is None
    assert reading.is_empty

    assert classifier.classify(None).is_empty


def test_relaxed_hand_is_none(classifier, make_hand, make_frame):
    reading = classifier.classify(make_frame(make_hand("relaxed")))
    assert reading.primary.kind == Gesture.NONE
    assert reading.hand_count == 1


def test_pinch_anchors_on_middle_base(classifier, make_hand, make_frame):
    reading = classifier.classify(make_frame(make_hand("pinch", base=(0.3, 0.6))))
    assert reading.primary.kind == Gesture.PINCH
    assert reading.primary.anchor == pytest.approx((0.3, 0.6))


def test_fist_is_edge_triggered(classifier, make_hand, make_frame):
    fist = make_frame(make_hand("fist"))

    assert classifier.classify(fist).primary.kind == Gesture.FIST
    assert classifier.session.is_fist_prev is True
    assert classifier.classify(fist).primary.kind == Gesture.FIST_HOLD
    assert classifier.classify(fist).primary.kind == Gesture.FIST_HOLD

    # Opening the hand re-arms the trigger
    classifier.classify(make_frame(make_hand("relaxed")))
    assert classifier.classify(fist).primary.kind == Gesture.FIST


def test_hand_lost_rearms_fist(classifier, make_hand, make_frame):
    fist = make_frame(make_hand("fist"))
    classifier.classify(fist)
    classifier.classify(HandFrame())
    assert classifier.classify(fist).primary.kind == Gesture.FIST


def test_open_palm(classifier, make_hand, make_frame):
    reading = classifier.classify(make_frame(make_hand("open")))
    assert reading.primary.kind == Gesture.OPEN_PALM


def test_pointing_first_tick_only_records_angle(classifier, make_hand, make_frame):
    reading = classifier.classify(make_frame(make_hand("pointing", angle=-1.0)))
    assert reading.primary.kind == Gesture.POINTING_ROTATE
    assert reading.primary.angle_delta == 0.0
    assert classifier.session.last_angle == pytest.approx(-1.0)


def test_pointing_rotation_is_gain_scaled(classifier, make_hand, make_frame):
    classifier.classify(make_frame(make_hand("pointing", angle=-1.0)))
    reading = classifier.classify(make_frame(make_hand("pointing", angle=-0.9)))
    assert reading.primary.kind == Gesture.POINTING_ROTATE
    assert reading.primary.angle_delta == pytest.approx(0.1 * 3.0, abs=1e-6)


def test_pointing_wraparound_is_small_rotation(classifier, make_hand, make_frame):
    classifier.classify(make_frame(make_hand("pointing", angle=3.13)))
    reading = classifier.classify(make_frame(make_hand("pointing", angle=-3.13)))

    expected = (2 * math.pi - 6.26) * 3.0
    assert reading.primary.angle_delta == pytest.approx(expected, abs=1e-6)
    assert abs(reading.primary.angle_delta) < 0.1


def test_pointing_rejects_tracking_jumps(classifier, make_hand, make_frame):
    classifier.classify(make_frame(make_hand("pointing", angle=-2.5)))
    reading = classifier.classify(make_frame(make_hand("pointing", angle=-0.5)))
    assert reading.primary.angle_delta == 0.0


def test_leaving_pointing_clears_angle(classifier, make_hand, make_frame):
    classifier.classify(make_frame(make_hand("pointing", angle=-1.0)))
    classifier.classify(make_frame(make_hand("relaxed")))
    assert classifier.session.last_angle is None


def test_two_hand_zoom_separation(classifier, make_hand, make_frame):
    frame = make_frame(make_hand("relaxed", base=(0.35, 0.5)), make_hand("pinch", base=(0.65, 0.5)))
    reading = classifier.classify(frame)
    assert reading.two_hand.kind == Gesture.TWO_HAND_ZOOM
    assert reading.two_hand.separation == pytest.approx(0.3)


def test_two_open_palms_recenter_over_zoom(classifier, make_hand, make_frame):
    frame = make_frame(make_hand("open", base=(0.3, 0.5)), make_hand("open", base=(0.7, 0.5)))
    reading = classifier.classify(frame)
    assert reading.two_hand.kind == Gesture.TWO_HAND_RECENTER


def test_only_first_two_hands_considered(classifier, make_hand, make_frame):
    frame = make_frame(make_hand(), make_hand(), make_hand("fist"))
    reading = classifier.classify(frame)
    assert reading.hand_count == 2
    assert reading.primary.kind == Gesture.NONE


@pytest.mark.parametrize("landmarks", [
    [(0.5, 0.5, 0.0)] * 20,
    [(0.5, 0.5, 0.0)] * 20 + [(float("nan"), 0.5, 0.0)],
    [],
])
def test_malformed_hand_is_discarded(classifier, make_hand, make_frame, landmarks):
    classifier.classify(make_frame(make_hand("fist")))

    reading = classifier.classify(make_frame(HandSample(landmarks=landmarks)))
    assert reading.primary.kind == Gesture.NONE
    assert reading.two_hand is None
    # Memory untouched by a discarded tick
    assert classifier.session.is_fist_prev is True


def test_malformed_second_hand_discards_tick(classifier, make_hand, make_frame):
    frame = make_frame(make_hand("pinch"), HandSample(landmarks=[(0.1, 0.1, 0.0)] * 5))
    reading = classifier.classify(frame)
    assert reading.primary.kind == Gesture.NONE
    assert reading.two_hand is None


def test_nearest_policy_keeps_primary_identity(make_hand, make_frame):
    classifier = GestureClassifier(GestureConfig(primary_hand="nearest"))
    left = make_hand("pinch", base=(0.3, 0.5))
    right = make_hand("relaxed", base=(0.7, 0.5))

    classifier.classify(make_frame(left, right))
    # Detector swapped the list order; primary stays the pinching hand
    reading = classifier.classify(make_frame(right, left))
    assert reading.primary.kind == Gesture.PINCH
    assert reading.primary.anchor == pytest.approx((0.3, 0.5))


def test_first_policy_follows_list_order(classifier, make_hand, make_frame):
    left = make_hand("pinch", base=(0.3, 0.5))
    right = make_hand("relaxed", base=(0.7, 0.5))

    classifier.classify(make_frame(left, right))
    reading = classifier.classify(make_frame(right, left))
    assert reading.primary.kind == Gesture.NONE


def test_reset_clears_memory(classifier, make_hand, make_frame):
    classifier.classify(make_frame(make_hand("fist")))
    classifier.reset()
    assert classifier.session.is_fist_prev is False
    assert classifier.session.last_angle is None


def test_readings_do_not_share_a_mutable_default():
    first, second = HandReading(), HandReading()
    assert first.primary == GestureClassification()
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.primary.kind = Gesture.FIST
    assert second.primary.kind == Gesture.NONE
