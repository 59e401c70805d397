import pytest

pytest.importorskip("PyQt5")
pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

from fusion.engine import FusionEngine
from webcam import worker as worker_module
from webcam.worker import WebcamWorker


class DeadCamera:
    """Tracker whose reads always fail."""

    def __init__(self, worker_ref, reads=3):
        self.worker_ref = worker_ref
        self.reads = reads
        self.calls = 0

    def get_frame(self):
        self.calls += 1
        if self.calls >= self.reads:
            self.worker_ref[0]._is_running = False
        return None


def test_capture_loop_backs_off_on_failed_reads(config, monkeypatch):
    sleeps = []
    monkeypatch.setattr(worker_module.time, "sleep", sleeps.append)

    ref = []
    camera = DeadCamera(ref)
    engine = FusionEngine(config)
    worker = WebcamWorker(config, engine, tracker=camera)
    ref.append(worker)

    worker._is_running = True
    worker._capture_loop()

    assert camera.calls == 3
    assert len(sleeps) == 3
    assert all(s > 0 for s in sleeps)
