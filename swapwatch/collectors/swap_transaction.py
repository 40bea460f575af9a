import asyncio
from typing import Any, AsyncGenerator, Dict, List, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.types import BlockData

from ..core.base import Collector
from ..core.events import SwapTransactionEvent, TransferLog, WithdrawalLog
from ..core.web3.base import parse_transfer_log, parse_withdrawal_log, to_hex_str
from ..logger import logger


class SwapTransactionCollector(Collector):
    """
    Swap Transaction Collector

    Walks new blocks, reads each transaction's receipt and yields one
    SwapTransactionEvent per transaction that emitted ERC20 Transfer or
    wrapped-native Withdrawal logs. Blocks are delivered in chain order.
    """

    __component_name__ = "swap_transaction"

    def __init__(
        self,
        rpc_url: str,
        chain_id: Optional[int] = None,
        start_block: Optional[int] = None,
        block_time: int = 12,
        max_blocks_per_batch: int = 100,
        retry_interval: int = 5,
        max_retries: int = 3,
    ):
        """
        Initialize the collector

        Args:
            rpc_url: RPC endpoint URL
            chain_id: Chain ID, read from the node when omitted
            start_block: First block to process, latest block when omitted
            block_time: Expected block time in seconds, used as poll interval
            max_blocks_per_batch: Maximum blocks processed per poll
            retry_interval: Seconds between retries
            max_retries: Attempts per RPC read
        """
        super().__init__()
        if not rpc_url:
            raise ValueError("RPC URL is required")

        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.chain_id = chain_id
        self.start_block = start_block
        self.block_time = block_time
        self.max_blocks_per_batch = max_blocks_per_batch
        self.retry_interval = retry_interval
        self.max_retries = max_retries
        self.last_processed_block: Optional[int] = None

    async def _start(self):
        if self.chain_id is None:
            self.chain_id = await self._with_retry("chain_id", lambda: self.w3.eth.chain_id)
        if self.start_block is None:
            self.start_block = await self._get_latest_block_with_retry()
            logger.info(f"Starting from latest block: {self.start_block}")

        self.last_processed_block = self.start_block - 1
        logger.info(
            f"Initialized SwapTransactionCollector for chain {self.chain_id} at block {self.last_processed_block}"
        )

    async def events(self) -> AsyncGenerator[SwapTransactionEvent, None]:
        """Generate the transaction event stream"""
        while self._running:
            try:
                async for event in self._process_new_blocks():
                    yield event
                await asyncio.sleep(self.block_time)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in events stream: {e}")
                await asyncio.sleep(self.retry_interval)

    async def _with_retry(self, description: str, call) -> Any:
        for attempt in range(self.max_retries):
            try:
                return await call()
            except Exception as e:
                if attempt == self.max_retries - 1:
                    raise
                logger.warning(f"Failed to {description} (attempt {attempt + 1}): {e}")
                await asyncio.sleep(self.retry_interval)

    async def _get_latest_block_with_retry(self) -> int:
        return await self._with_retry("get latest block number", lambda: self.w3.eth.block_number)

    async def _get_block_with_retry(self, block_number: int) -> Optional[BlockData]:
        try:
            return await self._with_retry(
                f"get block {block_number}",
                lambda: self.w3.eth.get_block(block_number, full_transactions=True),
            )
        except Exception as e:
            logger.error(f"Failed to get block {block_number} after {self.max_retries} attempts: {e}")
            return None

    async def _get_receipt_with_retry(self, transaction_hash: Any) -> Optional[Dict[str, Any]]:
        try:
            return await self._with_retry(
                f"get receipt {to_hex_str(transaction_hash)}",
                lambda: self.w3.eth.get_transaction_receipt(transaction_hash),
            )
        except Exception as e:
            logger.error(f"Failed to get receipt {to_hex_str(transaction_hash)}: {e}")
            return None

    async def _process_new_blocks(self) -> AsyncGenerator[SwapTransactionEvent, None]:
        latest_block = await self._get_latest_block_with_retry()

        if latest_block <= self.last_processed_block:
            return

        start_block = self.last_processed_block + 1
        end_block = min(latest_block, start_block + self.max_blocks_per_batch - 1)

        logger.debug(f"Processing blocks {start_block} to {end_block}")

        for block_num in range(start_block, end_block + 1):
            block = await self._get_block_with_retry(block_num)
            if block:
                async for event in self._process_block(block):
                    yield event
            else:
                logger.warning(f"Skipping block {block_num} due to retrieval failure")
            self.last_processed_block = block_num

    async def _process_block(self, block: BlockData) -> AsyncGenerator[SwapTransactionEvent, None]:
        logger.debug(f"Processing block {block['number']} ({len(block['transactions'])} transactions)")

        for tx in block["transactions"]:
            receipt = await self._get_receipt_with_retry(tx["hash"])
            if receipt is None:
                continue
            event = self.build_event(tx, receipt, block)
            if event is not None:
                yield event

    def build_event(
        self, tx: Dict[str, Any], receipt: Dict[str, Any], block: Dict[str, Any]
    ) -> Optional[SwapTransactionEvent]:
        """
        Turn a transaction and its receipt into an event

        Args:
            tx: Transaction data
            receipt: Transaction receipt
            block: Block the transaction was included in

        Returns:
            Optional[SwapTransactionEvent]: None for transactions without
            token logs
        """
        transfers: List[TransferLog] = []
        withdrawals: List[WithdrawalLog] = []

        for log in receipt.get("logs", []):
            try:
                transfer = parse_transfer_log(log)
                if transfer is not None:
                    transfers.append(TransferLog(**transfer))
                    continue
                withdrawal = parse_withdrawal_log(log)
                if withdrawal is not None:
                    withdrawals.append(WithdrawalLog(**withdrawal))
            except ValueError as e:
                logger.debug(f"Skipping undecodable log in {to_hex_str(tx['hash'])}: {e}")

        if not transfers and not withdrawals:
            return None

        return SwapTransactionEvent(
            chain_id=self.chain_id,
            transaction_hash=to_hex_str(tx["hash"]),
            sender=tx["from"],
            block_number=block["number"],
            block_timestamp=int(block["timestamp"]),
            transfers=tuple(transfers),
            withdrawals=tuple(withdrawals),
        )
