import math

import pytest

from fusion.animator import Animator, ZERO_OFFSET
from fusion.config import AnimationConfig
from fusion.target_state import Animation, TargetState


@pytest.fixture
def animator():
    return Animator(AnimationConfig())


def test_bounce_envelope_formula(animator):
    t = 0.05
    offset = animator.bounce_offset(t)
    decay = math.exp(-t * 4.0)
    assert offset.position_y == pytest.approx(abs(math.sin(t * 22.0)) * 1.3 * decay)
    assert offset.scale == pytest.approx(math.sin(t * 22.0) * 0.18 * decay)
    assert offset.position_y > 0


def test_bounce_is_zero_at_and_after_duration(animator):
    assert animator.bounce_offset(1.0) == ZERO_OFFSET
    assert animator.bounce_offset(1.5) == ZERO_OFFSET
    assert animator.bounce_offset(-0.1) == ZERO_OFFSET


def test_bounce_decays(animator):
    # Compare peaks of successive hops
    period = math.pi / 22.0
    first_peak = animator.bounce_offset(period / 2).position_y
    later_peak = animator.bounce_offset(period * 4 + period / 2).position_y
    assert later_peak < first_peak


def test_step_finishes_bounce(animator):
    state = TargetState(bounce_trigger_time=10.0, animation=Animation.BOUNCE)

    assert animator.step(state, 10.05).position_y > 0
    assert animator.step(state, 11.0) == ZERO_OFFSET
    assert state.bounce_trigger_time is None
    assert state.animation == Animation.NONE
    assert animator.step(state, 11.01) == ZERO_OFFSET


def test_retrigger_restarts_envelope(animator):
    state = TargetState(bounce_trigger_time=0.0)
    animator.step(state, 0.5)

    state.bounce_trigger_time = 0.5
    offset = animator.step(state, 0.55)
    fresh = animator.bounce_offset(0.05)
    assert offset.position_y == pytest.approx(fresh.position_y)
    assert offset.scale == pytest.approx(fresh.scale)


def test_bounce_never_touches_base_pose(animator):
    state = TargetState(bounce_trigger_time=0.0)
    state.position.set(1.0, 2.0, 0.0)
    state.set_scale(3.0)

    for i in range(60):
        animator.step(state, i / 60)

    assert state.position.as_tuple() == (1.0, 2.0, 0.0)
    assert state.scale == 3.0


def test_spin_integrates_velocity(animator):
    state = TargetState(rotation_velocity=0.1, animation=Animation.SPIN)
    for _ in range(5):
        animator.step(state, 0.0)
    assert state.rotation.y == pytest.approx(0.5)


def test_finished_bounce_keeps_spin_animation(animator):
    state = TargetState(bounce_trigger_time=0.0, rotation_velocity=0.03, animation=Animation.BOUNCE)
    animator.step(state, 2.0)
    assert state.animation == Animation.SPIN
