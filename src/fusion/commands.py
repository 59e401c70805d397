"""
Voice command dispatch.

Commands arrive as `(action, value)` pairs from the language backend. The
free-text `value` is reduced to a small set of intents by keyword matching;
all of that string handling lives here.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, FrozenSet, Optional, Tuple
import logging

from .config import AnimationConfig, CommandConfig
from .target_state import Animation, TargetState

logger = logging.getLogger(__name__)

ACTIONS = ('scale', 'color', 'bounce', 'recenter', 'rotate', 'move', 'animate')


class Intent(Enum):
    """What a command value asks for, independent of the action."""
    INCREASE = auto()
    DECREASE = auto()
    FAST = auto()
    SLOW = auto()
    STOP = auto()


INTENT_KEYWORDS: Dict[Intent, Tuple[str, ...]] = {
    Intent.INCREASE: ("big", "larger", "up", "more"),
    Intent.DECREASE: ("small", "little", "less", "shrink", "down"),
    Intent.FAST: ("fast", "quick"),
    Intent.SLOW: ("slow", "gentle"),
    Intent.STOP: ("stop", "none"),
}

DIRECTION_KEYWORDS: Tuple[Tuple[str, Tuple[float, float, float]], ...] = (
    ("left", (-1.0, 0.0, 0.0)),
    ("right", (1.0, 0.0, 0.0)),
    ("up", (0.0, 1.0, 0.0)),
    ("down", (0.0, -1.0, 0.0)),
    ("forward", (0.0, 0.0, 1.0)),
    ("closer", (0.0, 0.0, 1.0)),
    ("back", (0.0, 0.0, -1.0)),
    ("away", (0.0, 0.0, -1.0)),
)


@dataclass(frozen=True)
class VoiceCommand:
    action: str
    value: Optional[str] = None


def match_intents(value: Optional[str]) -> FrozenSet[Intent]:
    """Keyword intents contained in `value` (empty set = unspecified)."""
    if not value:
        return frozenset()
    text = value.lower()
    return frozenset(
        intent for intent, words in INTENT_KEYWORDS.items()
        if any(word in text for word in words)
    )


def match_direction(value: Optional[str]) -> Optional[Tuple[float, float, float]]:
    """Unit direction for the first direction keyword found, if any."""
    if not value:
        return None
    words = value.lower().split()
    for word in words:
        for keyword, direction in DIRECTION_KEYWORDS:
            if word.startswith(keyword):
                return direction
    return None


class CommandDispatcher:
    """
    Applies voice commands to a TargetState.

    The dispatcher does not lock; the engine calls it while holding its
    state lock, so every command lands as one atomic update.
    """

    def __init__(
        self,
        commands: CommandConfig,
        animation: AnimationConfig,
        on_recenter: Optional[Callable[[], None]] = None,
    ):
        self._commands = commands
        self._animation = animation
        self._on_recenter = on_recenter
        self._handlers: Dict[str, Callable[[TargetState, Optional[str], float], None]] = {
            'scale': self._scale,
            'color': self._color,
            'bounce': self._bounce,
            'recenter': self._recenter,
            'rotate': self._rotate,
            'move': self._move,
            'animate': self._animate,
        }

    def dispatch(self, state: TargetState, command: VoiceCommand, now: float) -> bool:
        """
        Apply one command. Returns True if it changed anything it was meant to,
        False if it was ignored.
        """
        action = command.action.strip().lower() if isinstance(command.action, str) else None
        handler = self._handlers.get(action)
        if handler is None:
            logger.debug("Ignoring unknown command action %r", command.action)
            return False

        value = command.value
        if value is not None and not isinstance(value, str):
            logger.debug("Ignoring non-text value %r for %s", value, action)
            value = None

        handler(state, value, now)
        return True

    def _scale(self, state: TargetState, value: Optional[str], now: float) -> None:
        intents = match_intents(value)
        if {Intent.INCREASE, Intent.DECREASE} <= intents:
            logger.debug("Conflicting scale value %r, growing", value)
        if Intent.INCREASE in intents:
            factor = self._commands.scale_up
        else:
            factor = self._commands.scale_down
        state.set_scale(state.scale * factor)

    def _color(self, state: TargetState, value: Optional[str], now: float) -> None:
        # Unrecognized colour names are kept; the renderer picks a fallback
        state.color = value.strip() if value and value.strip() else None

    def _bounce(self, state: TargetState, value: Optional[str], now: float) -> None:
        state.bounce_trigger_time = now
        state.animation = Animation.BOUNCE

    def _recenter(self, state: TargetState, value: Optional[str], now: float) -> None:
        state.reset()
        if self._on_recenter is not None:
            self._on_recenter()

    def _rotate(self, state: TargetState, value: Optional[str], now: float) -> None:
        intents = match_intents(value)
        if {Intent.FAST, Intent.SLOW} <= intents:
            logger.debug("Conflicting rotate value %r, spinning fast", value)
        if Intent.STOP in intents:
            velocity = 0.0
        elif Intent.FAST in intents:
            velocity = self._animation.spin_fast
        else:
            velocity = self._animation.spin_slow
        state.rotation_velocity = velocity
        if velocity:
            state.animation = Animation.SPIN
        elif state.animation == Animation.SPIN:
            state.animation = Animation.NONE

    def _move(self, state: TargetState, value: Optional[str], now: float) -> None:
        direction = match_direction(value)
        if direction is None:
            logger.debug("Move command without a direction: %r", value)
            return
        step = self._commands.move_step
        dx, dy, dz = direction
        p = state.position
        p.set(p.x + dx * step, p.y + dy * step, p.z + dz * step)

    def _animate(self, state: TargetState, value: Optional[str], now: float) -> None:
        text = (value or "").lower()
        if Intent.STOP in match_intents(value):
            state.rotation_velocity = 0.0
            state.bounce_trigger_time = None
            state.animation = Animation.NONE
        elif "bounce" in text or "jump" in text:
            self._bounce(state, value, now)
        elif "spin" in text or "rotat" in text:
            self._rotate(state, value, now)
        else:
            logger.debug("Unknown animation %r", value)
