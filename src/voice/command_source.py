"""
Voice command intake.

The language backend calls a `manipulateObject(action, value)` tool; its
arguments reach us as a mapping or a JSON string. For local use the same
commands can be typed as plain lines ("scale bigger", "color red").
"""
import json
import logging
import threading
from typing import Callable, Optional, TextIO

from fusion.commands import VoiceCommand

logger = logging.getLogger(__name__)


def parse_command(payload) -> Optional[VoiceCommand]:
    """
    Turn a tool-call payload or a text line into a VoiceCommand.

    Returns:
        The command, or None if nothing usable was found.
    """
    if isinstance(payload, VoiceCommand):
        return payload

    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")

    if isinstance(payload, str):
        text = payload.strip()
        if not text:
            return None
        if text.startswith("{"):
            try:
                payload = json.loads(text)
            except json.JSONDecodeError:
                logger.debug("Unparsable command JSON: %r", text)
                return None
        else:
            action, _, value = text.partition(" ")
            return VoiceCommand(action=action.lower(), value=value.strip() or None)

    if not isinstance(payload, dict):
        return None

    # Tool-call envelopes carry the arguments under "args"
    args = payload.get("args", payload)
    if not isinstance(args, dict):
        return None
    action = args.get("action")
    if not isinstance(action, str) or not action.strip():
        return None
    value = args.get("value")
    if value is not None and not isinstance(value, str):
        value = str(value)
    return VoiceCommand(action=action.strip().lower(), value=value)


class CommandSource:
    """
    Reads one command per line from a text stream in a daemon thread and
    hands each parsed command to `on_command`.
    """

    def __init__(self, stream: TextIO, on_command: Callable[[VoiceCommand], object]):
        self._stream = stream
        self._on_command = on_command
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop forwarding commands; lines read afterwards are dropped."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def run(self) -> None:
        """Read until EOF or stop()."""
        for line in self._stream:
            if self._stop_event.is_set():
                break
            command = parse_command(line)
            if command is None:
                continue
            try:
                self._on_command(command)
            except Exception as e:
                logger.error("Command handler failed for %s: %s", command, e)
