"""
GestureLab Voice Module

Parses manipulation commands from the language backend (or typed lines).
"""
from .command_source import CommandSource, parse_command

__all__ = [
    'CommandSource',
    'parse_command',
]
