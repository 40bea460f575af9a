"""
Core strategy class for the native swaps detector.
"""
from decimal import Decimal
from typing import Any, List, Optional, Union

from aioetherscan import Client

from swapwatch.core.actions import Action
from swapwatch.core.base import Strategy
from swapwatch.core.errors import ConfigurationError, ProviderError
from swapwatch.core.events import Event, SwapTransactionEvent
from swapwatch.core.web3.provider import ChainProvider
from swapwatch.logger import logger
from swapwatch.strategies.native_swaps.core.aggregator import WindowedAggregator
from swapwatch.strategies.native_swaps.core.cadence import BlockCadence
from swapwatch.strategies.native_swaps.core.classifier import SwapClassifier
from swapwatch.strategies.native_swaps.core.counters import SwapCounters
from swapwatch.strategies.native_swaps.core.lag_queue import ConfirmationLagQueue
from swapwatch.strategies.native_swaps.detectors.threshold import ThresholdDetector
from swapwatch.strategies.native_swaps.models import (
    ALERT_ACTION_TYPE,
    NativeSwapAlert,
    SwapRecord,
)
from swapwatch.strategies.native_swaps.receipts import (
    NativeReceiptStrategy,
    create_receipt_strategy,
)
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import to_decimal
from swapwatch.strategies.native_swaps.utils.network import NetworkManager


class NativeSwapsStrategy(Strategy):
    """
    Native Swaps Strategy

    Detects addresses with a low transaction count that repeatedly swap
    ERC20 tokens for the chain's native asset within a short time span and
    accumulate more native value than the chain's threshold.

    Per transaction:
    1. qualifying transfers are selected by the swap classifier; without
       any, processing stops before any provider query
    2. the transaction is counted as an observed native swap
    3. native value received is measured by the chain's receipt strategy
    4. the sender's nonce must not exceed ``low_nonce_threshold``
    5. the swap is merged into the sender's window
    6. the window is evaluated against the current chain threshold

    Every stage before the merge fails closed: provider errors are logged
    and the transaction is dropped without touching state.
    """

    __component_name__ = "native_swaps"

    def __init__(
        self,
        # Chain identification
        chain_id: int,
        rpc_url: Optional[str] = None,
        provider_timeout: float = 10.0,
        # Detection settings
        low_nonce_threshold: int = 150,
        min_swap_count: int = 2,
        max_minutes_between_swaps: int = 30,
        nonce_at_block: bool = True,
        # Confirmation lag, 0 disables the queue
        block_delay: int = 0,
        max_pending_transactions: int = 10000,
        # Maintenance
        sweep_interval_blocks: int = 10000,
        min_usd_threshold: Optional[Union[str, int]] = None,
        # Native receipt measurement
        receipt_mode: Optional[str] = None,
        etherscan_api_key: Optional[str] = None,
        etherscan_api_kind: str = "eth",
        etherscan_network: str = "main",
        # Injectable collaborators
        provider: Optional[ChainProvider] = None,
        counters: Optional[SwapCounters] = None,
        network_manager: Optional[NetworkManager] = None,
        receipt_strategy: Optional[NativeReceiptStrategy] = None,
    ):
        """
        Initialize Native Swaps Strategy for a single blockchain

        Args:
            chain_id: ID of the chain this strategy handles
            rpc_url: RPC endpoint, required unless a provider is injected
            provider_timeout: Timeout in seconds for each provider query
            low_nonce_threshold: Highest nonce for which a sender counts as new
            min_swap_count: Swaps required in a window before alerting
            max_minutes_between_swaps: Largest gap between swaps of one window
            nonce_at_block: Query the nonce at the transaction's block rather
                than at the latest block
            block_delay: Distinct blocks to wait before processing a transaction
            max_pending_transactions: Capacity of the confirmation queue
            sweep_interval_blocks: Blocks between eviction sweeps
            min_usd_threshold: USD threshold; enables periodic conversion of
                the native threshold from the chain's price feed
            receipt_mode: Overrides the chain's default receipt mode
            etherscan_api_key: Explorer API key for the internal_tx mode
            etherscan_api_kind: aioetherscan api kind (eth, bsc, polygon, ...)
            etherscan_network: aioetherscan network name
        """
        super().__init__()

        self.chain_id = chain_id
        self.network = network_manager or NetworkManager()
        chain_config = self.network.set_network(chain_id, receipt_mode=receipt_mode)

        if provider is None:
            if not rpc_url:
                raise ConfigurationError("rpc_url is required for the native_swaps strategy")
            provider = ChainProvider.from_rpc_url(rpc_url, timeout=provider_timeout)
        self.provider = provider

        if receipt_strategy is None:
            etherscan_client = None
            if chain_config.receipt_mode == ReceiptMode.INTERNAL_TX and etherscan_api_key:
                etherscan_client = Client(
                    etherscan_api_key, api_kind=etherscan_api_kind, network=etherscan_network
                )
            receipt_strategy = create_receipt_strategy(
                chain_config.receipt_mode,
                provider=provider,
                etherscan_client=etherscan_client,
                timeout=provider_timeout,
            )
        self.receipt_strategy = receipt_strategy

        self.low_nonce_threshold = low_nonce_threshold
        self.nonce_at_block = nonce_at_block
        self.min_usd_threshold = (
            to_decimal(str(min_usd_threshold)) if min_usd_threshold is not None else None
        )

        self.counters = counters or SwapCounters()
        self.classifier = SwapClassifier()
        self.aggregator = WindowedAggregator(max_interval=max_minutes_between_swaps * 60)
        self.detector = ThresholdDetector(self.counters, {"min_swap_count": min_swap_count})
        self.lag_queue: Optional[ConfirmationLagQueue[SwapTransactionEvent]] = (
            ConfirmationLagQueue(block_delay, max_pending_transactions)
            if block_delay > 0
            else None
        )

        self.cadence = BlockCadence(sweep_interval_blocks)
        self.cadence.register("sweep", self.aggregator.sweep)
        if self.min_usd_threshold is not None:
            self.cadence.register("threshold_refresh", self._refresh_threshold)
        self.cadence.register("stats", self._log_stats)

        logger.info(
            f"NativeSwapsStrategy initialized for {chain_config.chain_name} (ID: {chain_id}), "
            f"receipt mode {chain_config.receipt_mode}, threshold "
            f"{chain_config.min_native_threshold}, block delay {block_delay}"
        )

    async def _refresh_threshold(self, timestamp: int) -> None:
        await self.network.refresh_threshold(self.provider, self.min_usd_threshold)

    def _log_stats(self, timestamp: int) -> None:
        logger.info(f"Native swaps stats at {timestamp}: {self.stats()}")

    async def process_event(self, event: Event) -> List[Action]:
        """
        Process an incoming event and generate alert actions if applicable.

        Args:
            event: The event to process

        Returns:
            List[Action]: Alert actions generated from this event
        """
        if not isinstance(event, SwapTransactionEvent):
            return []

        if event.chain_id != self.chain_id:
            logger.warning(
                f"Received event from chain {event.chain_id}, but this strategy handles chain {self.chain_id}"
            )
            return []

        if self.lag_queue is not None:
            event = self.lag_queue.admit(event)
            if event is None:
                return []

        # Maintenance follows the processing timeline, not the receive timeline
        await self.cadence.tick(event.block_number, event.block_timestamp)

        alerts = await self.analyze_transaction(event)
        return [Action(type=ALERT_ACTION_TYPE, data=alert.to_dict()) for alert in alerts]

    async def analyze_transaction(self, event: SwapTransactionEvent) -> List[NativeSwapAlert]:
        """
        Run one transaction through classification, aggregation and evaluation.

        Args:
            event: A transaction eligible for processing

        Returns:
            List[NativeSwapAlert]: Alerts raised by this transaction
        """
        qualifying = self.classifier.classify(event.transfers, event.sender)
        if not qualifying:
            logger.debug(f"No qualifying token transfers from sender in {event.transaction_hash}")
            return []

        if not self.counters.record_native_swap(event.transaction_hash):
            logger.debug(f"Transaction {event.transaction_hash} already processed, skipping")
            return []

        try:
            native_value = await self.receipt_strategy.native_received(event, self.network.current)
            if native_value <= 0:
                logger.debug(f"No native value received by {event.sender} in {event.transaction_hash}")
                return []

            nonce = await self.provider.transaction_count(
                event.sender, event.block_number if self.nonce_at_block else "latest"
            )
        except ProviderError as e:
            logger.warning(f"Skipping {event.transaction_hash}: {e}")
            return []

        if nonce > self.low_nonce_threshold:
            logger.debug(f"Sender {event.sender} has nonce {nonce}, not a new address")
            return []

        record = SwapRecord(
            block_number=event.block_number,
            block_timestamp=event.block_timestamp,
            transaction_hash=event.transaction_hash,
            native_value=native_value,
            movements=self.classifier.to_movements(qualifying, event.transaction_hash),
        )
        result = self.aggregator.merge(event.sender, native_value, record)

        context = {
            "address_state": result.state,
            "merge_outcome": result.outcome,
            "chain_config": self.network.current,
        }
        alerts: List[NativeSwapAlert] = []
        if self.detector.is_enabled():
            alerts.extend(await self.detector.detect(event, context))
        return alerts

    @property
    def native_threshold(self) -> Decimal:
        return self.network.current.min_native_threshold

    def stats(self) -> dict:
        """Snapshot of engine counters for logging."""
        return {
            "tracked_addresses": len(self.aggregator),
            "native_swaps": self.counters.native_swaps,
            "alerts": self.counters.alerts,
            "anomaly_score": self.counters.anomaly_score(),
            "pending_transactions": len(self.lag_queue) if self.lag_queue is not None else 0,
            "native_threshold": str(self.native_threshold),
        }

    async def close(self):
        await self.receipt_strategy.close()
