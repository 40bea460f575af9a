from decimal import Decimal

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.core.web3.address_utils import AddressUtils
from swapwatch.strategies.native_swaps.receipts.base import NativeReceiptStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import from_wei
from swapwatch.strategies.native_swaps.utils.network import ChainConfig


class BurnToZeroStrategy(NativeReceiptStrategy):
    """
    For wrapped-native tokens that unwrap by transferring to the zero
    address instead of emitting Withdrawal.
    """

    mode = ReceiptMode.BURN_TO_ZERO

    async def native_received(
        self, event: SwapTransactionEvent, config: ChainConfig
    ) -> Decimal:
        if not config.wrapped_native_address:
            return Decimal(0)
        wrapped = config.wrapped_native_address.lower()
        burned = sum(
            t.value
            for t in event.transfers
            if t.token.lower() == wrapped and AddressUtils.is_zero_address(t.to_address)
        )
        return from_wei(burned)
