"""
Base class for native receipt strategies.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import ClassVar

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.strategies.native_swaps.utils.network import ChainConfig


class NativeReceiptStrategy(ABC):
    """
    Measures how much native value a transaction's sender received.

    One strategy is chosen per chain when the network is resolved. A result
    of zero means the transaction carries no finding-relevant native receipt.
    Provider failures propagate as ProviderError.
    """

    mode: ClassVar[str]

    @abstractmethod
    async def native_received(
        self, event: SwapTransactionEvent, config: ChainConfig
    ) -> Decimal:
        """
        Compute the native value received by the sender

        Args:
            event: The transaction being evaluated
            config: Current chain configuration snapshot

        Returns:
            Decimal: Non-negative amount in native units
        """

    async def close(self) -> None:
        """Release clients held by the strategy."""
