from decimal import Decimal

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.core.web3.provider import ChainProvider
from swapwatch.strategies.native_swaps.receipts.base import NativeReceiptStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import from_wei
from swapwatch.strategies.native_swaps.utils.network import ChainConfig


class BalanceDiffStrategy(NativeReceiptStrategy):
    """Native balance of the sender after the block minus before it."""

    mode = ReceiptMode.BALANCE_DIFF

    def __init__(self, provider: ChainProvider):
        self.provider = provider

    async def native_received(
        self, event: SwapTransactionEvent, config: ChainConfig
    ) -> Decimal:
        before = await self.provider.native_balance(event.sender, event.block_number - 1)
        after = await self.provider.native_balance(event.sender, event.block_number)
        if after <= before:
            return Decimal(0)
        return from_wei(after - before)
