import asyncio
from decimal import Decimal
from typing import Any, Dict, List

from aioetherscan import Client
from aioetherscan.exceptions import EtherscanClientApiError

from swapwatch.core.errors import ProviderError
from swapwatch.core.events import SwapTransactionEvent
from swapwatch.core.web3.address_utils import AddressUtils
from swapwatch.logger import logger
from swapwatch.strategies.native_swaps.receipts.base import NativeReceiptStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import from_wei
from swapwatch.strategies.native_swaps.utils.network import ChainConfig

NO_RESULTS_MESSAGES = ("No transactions found", "No records found")


class InternalTxStrategy(NativeReceiptStrategy):
    """
    Sum of successful internal transactions paying the sender, read from an
    Etherscan-compatible explorer.
    """

    mode = ReceiptMode.INTERNAL_TX

    def __init__(self, client: Client, timeout: float = 10.0):
        """
        Args:
            client: aioetherscan client for the chain's explorer
            timeout: Request timeout in seconds
        """
        self.client = client
        self.timeout = timeout

    async def _internal_txs(self, transaction_hash: str) -> List[Dict[str, Any]]:
        try:
            result = await asyncio.wait_for(
                self.client.account.internal_txs(txhash=transaction_hash),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(f"internal_txs({transaction_hash}) timed out") from e
        except EtherscanClientApiError as e:
            if any(message in str(e) for message in NO_RESULTS_MESSAGES):
                logger.debug(f"No internal transactions for {transaction_hash}")
                return []
            raise ProviderError(f"internal_txs({transaction_hash}) failed: {e}") from e
        except Exception as e:
            raise ProviderError(f"internal_txs({transaction_hash}) failed: {e}") from e

        if not isinstance(result, list):
            raise ProviderError(f"internal_txs({transaction_hash}) returned malformed data")
        return result

    async def native_received(
        self, event: SwapTransactionEvent, config: ChainConfig
    ) -> Decimal:
        received = 0
        for tx in await self._internal_txs(event.transaction_hash):
            if str(tx.get("isError", "0")) != "0":
                continue
            to_address = tx.get("to") or ""
            if not to_address or not AddressUtils.same_address(to_address, event.sender):
                continue
            try:
                received += int(tx.get("value", 0))
            except (TypeError, ValueError) as e:
                raise ProviderError(f"Malformed internal transaction value: {tx!r}") from e
        return from_wei(received)

    async def close(self) -> None:
        await self.client.close()
