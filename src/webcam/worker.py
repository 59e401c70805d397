"""
Background worker for hand tracking and the fusion tick loop.
Runs in a separate QThread to avoid blocking the UI.
"""
import logging
import time
import threading
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from fusion.engine import FusionEngine
from .hand_tracker import HandTracker

logger = logging.getLogger(__name__)


class WebcamWorker(QObject):
    """
    Worker class that feeds camera frames into the fusion engine and ticks it
    at the render rate. Emits signals for UI updates.
    """
    # Signals
    transform_ready = pyqtSignal(object)   # Emits RenderedTransform
    gesture_detected = pyqtSignal(object)  # Emits HandReading
    hand_lost = pyqtSignal()
    frame_ready = pyqtSignal(object)  # Emits numpy array (BGR frame with landmarks)
    error = pyqtSignal(str)

    def __init__(self, config, engine: FusionEngine, parent=None, tracker: Optional[HandTracker] = None):
        super().__init__(parent)
        self._config = config
        self._engine = engine
        self._tracker = tracker
        self._is_running = False
        self._capture_thread: Optional[threading.Thread] = None

        # Latest frame for the preview, written by the capture thread
        self._preview_frame = None
        self._preview_lock = threading.Lock()

    def _capture_loop(self):
        """Background thread to pull camera frames as fast as possible."""
        while self._is_running:
            try:
                hand_frame = self._tracker.get_frame()
            except Exception as e:
                logger.warning("Capture thread error: %s", e)
                time.sleep(0.1)  # Cool down on error
                continue

            if hand_frame is None:
                time.sleep(0.01)  # Camera read failed, do not spin
                continue
            self._engine.submit_frame(hand_frame)
            with self._preview_lock:
                self._preview_frame = hand_frame

    def start_process(self):
        """Main tick loop. Runs in worker thread at the configured tick rate."""
        if self._engine.tracking_active:
            if self._tracker is None:
                self._tracker = HandTracker(self._config)

            if self._tracker.start():
                self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
            else:
                # The engine keeps animating and smoothing without hand input
                self.error.emit("Could not open camera")
                self._engine.set_tracking_active(False)

        self._is_running = True
        if self._capture_thread is not None:
            self._capture_thread.start()

        min_interval = 1.0 / max(1, self._config.engine.tick_rate)
        frame_interval = 0.2  # 5 FPS landmarks preview
        last_frame_time = 0.0
        had_hands = False

        try:
            while self._is_running:
                loop_start = time.perf_counter()

                transform = self._engine.tick(loop_start)
                if transform is not None:
                    self.transform_ready.emit(transform)

                reading = self._engine.last_reading
                if reading.hand_count > 0:
                    had_hands = True
                    if not reading.is_empty:
                        self.gesture_detected.emit(reading)
                elif had_hands:
                    had_hands = False
                    self.hand_lost.emit()

                if (self._capture_thread is not None and self._config.ui.debug_overlay
                        and loop_start - last_frame_time >= frame_interval):
                    with self._preview_lock:
                        hand_frame = self._preview_frame
                    frame = self._tracker.get_frame_with_landmarks(hand_frame, black_background=True)
                    if frame is not None:
                        self.frame_ready.emit(frame)
                    last_frame_time = loop_start

                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except Exception as e:
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            if self._capture_thread:
                self._capture_thread.join(timeout=1.0)
            if self._tracker:
                self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False
