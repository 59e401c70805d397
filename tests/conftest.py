import math

import pytest

from fusion.config import Config
from fusion.landmarks import HandFrame, HandSample


def build_hand(pose="relaxed", base=(0.5, 0.5), angle=-math.pi / 2, handedness="Right"):
    """
    Synthetic 21-point hand around the middle-finger base.

    Poses: relaxed, open, fist, pinch, pointing (index tip at `angle`
    around the base, 0.2 away).
    """
    cx, cy = base
    points = [(cx, cy, 0.0)] * 21

    def put(index, x, y):
        points[index] = (x, y, 0.0)

    put(HandSample.WRIST, cx, cy + 0.15)
    put(HandSample.THUMB_CMC, cx - 0.08, cy + 0.1)
    put(HandSample.THUMB_MCP, cx - 0.11, cy + 0.06)
    put(HandSample.THUMB_IP, cx - 0.13, cy + 0.03)
    put(HandSample.THUMB_TIP, cx - 0.15, cy)

    mcps = {
        HandSample.INDEX_MCP: cx - 0.04,
        HandSample.MIDDLE_MCP: cx,
        HandSample.RING_MCP: cx + 0.04,
        HandSample.PINKY_MCP: cx + 0.08,
    }

    if pose == "open":
        pip_dy, tip_dy = -0.25, -0.45
    elif pose == "fist":
        pip_dy, tip_dy = -0.05, 0.03
    elif pose == "pointing":
        pip_dy, tip_dy = -0.02, 0.12
    else:
        pip_dy, tip_dy = -0.1, -0.2

    for mcp, x in mcps.items():
        put(mcp, x, cy)
        put(mcp + 1, x, cy + pip_dy)                   # PIP
        put(mcp + 2, x, cy + (pip_dy + tip_dy) / 2)    # DIP
        put(mcp + 3, x, cy + tip_dy)                   # TIP

    if pose == "pointing":
        tip_x = cx + 0.2 * math.cos(angle)
        tip_y = cy + 0.2 * math.sin(angle)
        put(HandSample.INDEX_TIP, tip_x, tip_y)
        put(HandSample.INDEX_DIP, tip_x, tip_y + 0.02)
        put(HandSample.INDEX_PIP, tip_x, tip_y + 0.05)
        put(HandSample.THUMB_TIP, cx - 0.15, cy + 0.05)
    elif pose == "pinch":
        ix, iy, _ = points[HandSample.INDEX_TIP]
        put(HandSample.THUMB_TIP, ix + 0.01, iy)
    elif pose == "fist":
        put(HandSample.THUMB_TIP, cx - 0.06, cy + 0.02)

    return HandSample(landmarks=list(points), handedness=handedness)


@pytest.fixture
def make_hand():
    return build_hand


@pytest.fixture
def make_frame():
    def _make_frame(*hands):
        return HandFrame(hands=list(hands))
    return _make_frame


@pytest.fixture
def config():
    return Config()
