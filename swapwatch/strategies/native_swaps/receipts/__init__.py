"""
Native receipt strategies for the native swaps detector.

Exactly one strategy is selected per chain from the resolved network
configuration.
"""
from typing import Optional

from swapwatch.core.errors import ConfigurationError
from swapwatch.core.web3.provider import ChainProvider
from swapwatch.strategies.native_swaps.receipts.balance_diff import BalanceDiffStrategy
from swapwatch.strategies.native_swaps.receipts.base import NativeReceiptStrategy
from swapwatch.strategies.native_swaps.receipts.burn_to_zero import BurnToZeroStrategy
from swapwatch.strategies.native_swaps.receipts.internal_tx import InternalTxStrategy
from swapwatch.strategies.native_swaps.receipts.unwrap_event import UnwrapEventStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode


def create_receipt_strategy(
    mode: str,
    provider: Optional[ChainProvider] = None,
    etherscan_client=None,
    timeout: float = 10.0,
) -> NativeReceiptStrategy:
    """
    Build the receipt strategy for a receipt mode

    Args:
        mode: One of ReceiptMode.ALL
        provider: Chain provider, required for balance_diff
        etherscan_client: aioetherscan client, required for internal_tx
        timeout: Explorer request timeout in seconds

    Returns:
        NativeReceiptStrategy: The strategy instance

    Raises:
        ConfigurationError: Unknown mode or missing collaborator
    """
    if mode == ReceiptMode.BALANCE_DIFF:
        if provider is None:
            raise ConfigurationError("balance_diff receipt mode requires a provider")
        return BalanceDiffStrategy(provider)
    if mode == ReceiptMode.UNWRAP_EVENT:
        return UnwrapEventStrategy()
    if mode == ReceiptMode.BURN_TO_ZERO:
        return BurnToZeroStrategy()
    if mode == ReceiptMode.INTERNAL_TX:
        if etherscan_client is None:
            raise ConfigurationError("internal_tx receipt mode requires an etherscan API key")
        return InternalTxStrategy(etherscan_client, timeout=timeout)
    raise ConfigurationError(f"Unknown receipt mode: {mode}")


__all__ = [
    "NativeReceiptStrategy",
    "BalanceDiffStrategy",
    "UnwrapEventStrategy",
    "BurnToZeroStrategy",
    "InternalTxStrategy",
    "create_receipt_strategy",
]
