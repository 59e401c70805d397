"""
GestureLab Fusion Module

Gesture classification, voice command dispatch, procedural animation and
smoothing for hand- and voice-driven object manipulation.
"""
from .config import Config, load_config
from .landmarks import HandSample, HandFrame
from .gesture_classifier import GestureClassifier, Gesture, GestureClassification, HandReading
from .target_state import TargetState, RenderedTransform, Animation
from .commands import CommandDispatcher, VoiceCommand, Intent, match_intents
from .animator import Animator
from .smoothing import Smoother
from .engine import FusionEngine

__all__ = [
    'Config',
    'load_config',
    'HandSample',
    'HandFrame',
    'GestureClassifier',
    'Gesture',
    'GestureClassification',
    'HandReading',
    'TargetState',
    'RenderedTransform',
    'Animation',
    'CommandDispatcher',
    'VoiceCommand',
    'Intent',
    'match_intents',
    'Animator',
    'Smoother',
    'FusionEngine',
]
