"""
GestureLab Webcam Module

Hand tracking with MediaPipe feeding the fusion engine.
"""
from .hand_tracker import HandTracker
from .worker import WebcamWorker

__all__ = [
    'HandTracker',
    'WebcamWorker',
]
