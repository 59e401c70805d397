import math

import pytest

from fusion.config import SmoothingConfig
from fusion.smoothing import Smoother, transform_distance
from fusion.target_state import RenderedTransform


@pytest.fixture
def smoother():
    return Smoother(SmoothingConfig())


def test_first_step_moves_partway(smoother):
    out = smoother.step(position=(1.0, 0.0, 0.0), rotation=(0.0, 1.0, 0.0), scale=2.0)
    assert out.position[0] == pytest.approx(0.2)
    assert out.rotation[1] == pytest.approx(0.15)
    assert out.scale == pytest.approx(1.25)


def test_converges_monotonically(smoother):
    goal = dict(position=(3.0, -1.0, 0.5), rotation=(0.2, 2.0, 0.0), scale=4.0)
    previous = transform_distance(smoother.current, goal["position"], goal["rotation"], goal["scale"])

    ticks = 0
    while previous > 1e-3:
        smoother.step(**goal)
        current = transform_distance(smoother.current, goal["position"], goal["rotation"], goal["scale"])
        assert current < previous
        previous = current
        ticks += 1

    # Slowest channel (rotation, alpha 0.15) bounds the tick count
    bound = math.ceil(math.log(1e-3 / 5.0) / math.log(1 - 0.15))
    assert ticks <= bound


def test_goal_scale_is_clamped(smoother):
    for _ in range(200):
        out = smoother.step(position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=50.0)
        assert out.scale <= 10.0
    assert out.scale == pytest.approx(10.0)

    for _ in range(200):
        out = smoother.step(position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=-3.0)
        assert out.scale >= 0.1


def test_color_and_asset_pass_through(smoother):
    out = smoother.step(position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=1.0,
                        color="red", asset="duck.glb")
    assert out.color == "red"
    assert out.asset == "duck.glb"


def test_snap_skips_interpolation(smoother):
    smoother.step(position=(5.0, 5.0, 5.0), rotation=(0.0, 0.0, 0.0), scale=3.0)
    smoother.snap(RenderedTransform.identity("a"))
    assert smoother.current == RenderedTransform.identity("a")


def test_fold_rotation_shifts_one_axis(smoother):
    smoother.snap(RenderedTransform(rotation=(0.0, 7.0, 0.0)))
    smoother.fold_rotation(1, 2 * math.pi)
    assert smoother.current.rotation == pytest.approx((0.0, 7.0 - 2 * math.pi, 0.0))
