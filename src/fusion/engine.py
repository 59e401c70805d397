"""
Gesture & command fusion engine.

Merges hand frames and voice commands into one TargetState and produces a
smoothed RenderedTransform per tick. All state changes go through one lock:
frames are parked and consumed at tick start, commands are applied as soon as
they arrive.
"""
import logging
import math
import threading
import time
from typing import Any, Callable, Optional

from .animator import Animator
from .commands import CommandDispatcher, VoiceCommand
from .config import Config
from .gesture_classifier import Gesture, GestureClassifier, HandReading
from .landmarks import HandFrame
from .smoothing import Smoother
from .target_state import RenderedTransform, TargetState

logger = logging.getLogger(__name__)

FULL_TURN = 2 * math.pi
_AXES = ('x', 'y', 'z')


class FusionEngine:
    """
    Owns the target state of the loaded object.

    Usage:
        engine = FusionEngine(config)
        engine.load_object("model.glb")
        # vision thread:  engine.submit_frame(frame)
        # voice callback: engine.submit_command(VoiceCommand("scale", "bigger"))
        # render loop:    transform = engine.tick()
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.perf_counter):
        self._config = config
        self._clock = clock
        self._lock = threading.Lock()

        self._classifier = GestureClassifier(config.gestures)
        self._dispatcher = CommandDispatcher(
            config.commands, config.animation, on_recenter=self._after_recenter,
        )
        self._animator = Animator(config.animation)
        self._smoother = Smoother(
            config.smoothing, config.engine.min_scale, config.engine.max_scale,
        )

        self._target: Optional[TargetState] = None
        self._asset: Any = None
        self._latest_frame: Optional[HandFrame] = None
        self._tracking_active = True
        self._voice_active = True
        self.last_reading = HandReading()

    # Object lifecycle

    def load_object(self, asset: Any) -> None:
        """Start manipulating `asset` from the default pose. Replaces any loaded object."""
        with self._lock:
            self._target = TargetState(
                min_scale=self._config.engine.min_scale,
                max_scale=self._config.engine.max_scale,
            )
            self._asset = asset
            self._latest_frame = None
            self._classifier.reset()
            self._smoother.snap(RenderedTransform.identity(asset))
            self.last_reading = HandReading()
        logger.info("Loaded object %r", asset)

    def unload_object(self) -> None:
        with self._lock:
            self._target = None
            self._asset = None
            self._latest_frame = None
            self._classifier.reset()
            self.last_reading = HandReading()

    # Producers

    def submit_frame(self, frame: Optional[HandFrame]) -> bool:
        """
        Park the latest hand frame for the next tick. Older unconsumed
        frames are dropped. Returns False if tracking is inactive.
        """
        with self._lock:
            if not self._tracking_active:
                return False
            self._latest_frame = frame if frame is not None else HandFrame()
            return True

    def submit_command(self, command: VoiceCommand, now: Optional[float] = None) -> bool:
        """Apply a voice command right away. Returns False if it was discarded."""
        if now is None:
            now = self._clock()
        with self._lock:
            if not self._voice_active:
                logger.debug("Voice inactive, dropping %s", command)
                return False
            if self._target is None:
                logger.debug("No object loaded, dropping %s", command)
                return False
            return self._dispatcher.dispatch(self._target, command, now)

    def recenter(self) -> None:
        """Reset the object to the default pose immediately."""
        with self._lock:
            if self._target is not None:
                self._recenter_locked("request")

    def set_tracking_active(self, active: bool) -> None:
        """Enable/disable hand input. Disabling drops the pending frame and gesture memory."""
        with self._lock:
            if not active:
                self._latest_frame = None
                self._classifier.reset()
                self.last_reading = HandReading()
            self._tracking_active = bool(active)

    def set_voice_active(self, active: bool) -> None:
        """Enable/disable voice input. Commands arriving while disabled are discarded."""
        with self._lock:
            self._voice_active = bool(active)

    # Render loop

    def tick(self, now: Optional[float] = None) -> Optional[RenderedTransform]:
        """
        Advance one frame: consume the latest hand frame, animate, smooth.

        Returns:
            The new RenderedTransform, or None if no object is loaded.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            frame = self._latest_frame
            self._latest_frame = None

            target = self._target
            if target is None:
                return None

            # No fresh frame means nothing new to classify
            if frame is not None:
                self.last_reading = self._classifier.classify(frame)
                self._apply_reading(self.last_reading)

            offset = self._animator.step(target, now)
            self._fold_rotation(target)

            position = target.position
            return self._smoother.step(
                position=(position.x, position.y + offset.position_y, position.z),
                rotation=target.rotation.as_tuple(),
                scale=target.scale + offset.scale,
                color=target.color,
                asset=self._asset,
            )

    # Accessors

    @property
    def target(self) -> Optional[TargetState]:
        """Snapshot of the current target state."""
        with self._lock:
            return self._target.copy() if self._target is not None else None

    @property
    def rendered(self) -> RenderedTransform:
        with self._lock:
            return self._smoother.current

    @property
    def asset(self) -> Any:
        return self._asset

    @property
    def tracking_active(self) -> bool:
        return self._tracking_active

    @property
    def voice_active(self) -> bool:
        return self._voice_active

    # Internals (lock held)

    def _apply_reading(self, reading: HandReading) -> None:
        target = self._target
        cfg = self._config.gestures
        primary = reading.primary

        if primary.kind == Gesture.FIST:
            # Nothing else in this frame may move the freshly reset object
            self._recenter_locked("fist")
            return
        if primary.kind == Gesture.PINCH and primary.anchor is not None:
            ax, ay = primary.anchor
            target.position.set(
                (0.5 - ax) * cfg.pinch_move_gain,
                (0.5 - ay) * cfg.pinch_move_gain,
                target.position.z,
            )
            target.rotation.y += primary.tilt * cfg.pinch_tilt_gain
        elif primary.kind == Gesture.POINTING_ROTATE:
            target.rotation.y += primary.angle_delta
        elif primary.kind == Gesture.OPEN_PALM and reading.two_hand is None:
            target.rotation.y += cfg.open_palm_spin

        two_hand = reading.two_hand
        if two_hand is None:
            return
        if two_hand.kind == Gesture.TWO_HAND_RECENTER:
            self._recenter_locked("two open palms")
        elif two_hand.kind == Gesture.TWO_HAND_ZOOM:
            target.set_scale(two_hand.separation * cfg.zoom_gain)

    def _recenter_locked(self, reason: str) -> None:
        self._target.reset()
        self._after_recenter()
        logger.debug("Recentered (%s)", reason)

    def _after_recenter(self) -> None:
        # Explicit reset skips smoothing so the object does not drift back
        self._smoother.snap(RenderedTransform.identity(self._asset))
        self._classifier.session.last_angle = None

    def _fold_rotation(self, target: TargetState) -> None:
        """Keep target rotation within one turn; rendered rotation is shifted by the same amount."""
        for index, axis in enumerate(_AXES):
            value = getattr(target.rotation, axis)
            if abs(value) > FULL_TURN:
                amount = math.copysign(FULL_TURN, value)
                setattr(target.rotation, axis, value - amount)
                self._smoother.fold_rotation(index, amount)
