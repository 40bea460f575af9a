"""
Detector plugins for the native swaps strategy.
"""

from swapwatch.strategies.native_swaps.detectors.base import BaseDetector
from swapwatch.strategies.native_swaps.detectors.threshold import ThresholdDetector

__all__ = [
    "BaseDetector",
    "ThresholdDetector",
]
