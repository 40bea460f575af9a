from decimal import Decimal

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.strategies.native_swaps.receipts.base import NativeReceiptStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import from_wei
from swapwatch.strategies.native_swaps.utils.network import ChainConfig


class UnwrapEventStrategy(NativeReceiptStrategy):
    """Sum of Withdrawal events emitted by the wrapped-native contract."""

    mode = ReceiptMode.UNWRAP_EVENT

    async def native_received(
        self, event: SwapTransactionEvent, config: ChainConfig
    ) -> Decimal:
        if not config.wrapped_native_address:
            return Decimal(0)
        wrapped = config.wrapped_native_address.lower()
        unwrapped = sum(
            w.value for w in event.withdrawals if w.token.lower() == wrapped
        )
        return from_wei(unwrapped)
