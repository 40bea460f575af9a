"""
Base detector class for the native swaps strategy.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.strategies.native_swaps.models import NativeSwapAlert


class BaseDetector(ABC):
    """
    Base class for native swaps detectors.

    Detectors look at the state produced for a transaction and decide
    whether it warrants an alert.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize the detector with configuration parameters.

        Args:
            config: Configuration parameters for the detector
        """
        self.config = config or {}
        self.enabled = self.config.get("enabled", True)

    @abstractmethod
    async def detect(
        self, event: SwapTransactionEvent, context: Dict[str, Any]
    ) -> List[NativeSwapAlert]:
        """
        Analyze a transaction and generate alerts if a pattern is detected.

        Args:
            event: The transaction being analyzed
            context: Additional context information from the strategy

        Returns:
            List[NativeSwapAlert]: Alerts generated, if any
        """

    def is_enabled(self) -> bool:
        return self.enabled

    def set_enabled(self, enabled: bool):
        self.enabled = enabled
