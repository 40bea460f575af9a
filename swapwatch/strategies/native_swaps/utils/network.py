"""
Network configuration snapshots and their periodic price refresh.
"""
import threading
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel

from swapwatch.core.errors import ConfigurationError, ProviderError, UnsupportedNetworkError
from swapwatch.core.web3.provider import ChainProvider
from swapwatch.logger import logger
from swapwatch.strategies.native_swaps.utils.chain_info import NETWORK_MAP, ChainInfo, ReceiptMode
from swapwatch.strategies.native_swaps.utils.decimal_utils import divide, round_places, to_decimal


class ChainConfig(BaseModel):
    """Immutable, versioned view of one chain's detection settings"""

    chain_id: int
    chain_name: str
    min_native_threshold: Decimal  # Native units
    wrapped_native_address: Optional[str] = None
    native_usd_aggregator: Optional[str] = None
    receipt_mode: str = ReceiptMode.BALANCE_DIFF
    version: int = 0

    class Config:
        frozen = True


class NetworkManager:
    """
    Resolves and publishes ChainConfig snapshots.

    Readers always go through ``current`` so that a refreshed threshold takes
    effect on the next evaluation. A failed refresh keeps the previous
    snapshot in place.
    """

    def __init__(self, network_map: Optional[Dict[int, Dict[str, str]]] = None):
        self._network_map = dict(network_map or NETWORK_MAP)
        self._current: Optional[ChainConfig] = None
        self._lock = threading.Lock()

    def set_network(self, chain_id: int, receipt_mode: Optional[str] = None) -> ChainConfig:
        """
        Resolve the configuration of a chain and make it current

        Args:
            chain_id: Chain to run on
            receipt_mode: Overrides the chain's default receipt mode

        Returns:
            ChainConfig: The published snapshot

        Raises:
            UnsupportedNetworkError: If the chain is unknown
            ConfigurationError: If the receipt mode is unknown
        """
        data = self._network_map.get(chain_id)
        if data is None:
            raise UnsupportedNetworkError(chain_id)

        mode = receipt_mode or data.get("receipt_mode", ReceiptMode.BALANCE_DIFF)
        if mode not in ReceiptMode.ALL:
            raise ConfigurationError(f"Unknown receipt mode: {mode}")

        with self._lock:
            version = self._current.version + 1 if self._current else 0
            self._current = ChainConfig(
                chain_id=chain_id,
                chain_name=ChainInfo.get_chain_name(chain_id),
                min_native_threshold=to_decimal(data["min_native_threshold"]),
                wrapped_native_address=data.get("wrapped_native_address"),
                native_usd_aggregator=data.get("native_usd_aggregator"),
                receipt_mode=mode,
                version=version,
            )
            return self._current

    @property
    def current(self) -> ChainConfig:
        snapshot = self._current
        if snapshot is None:
            raise ConfigurationError("No network has been set")
        return snapshot

    def publish_threshold(self, min_native_threshold: Decimal) -> ChainConfig:
        """Publish a new snapshot that only differs by its threshold."""
        with self._lock:
            current = self.current
            self._current = current.model_copy(
                update={
                    "min_native_threshold": min_native_threshold,
                    "version": current.version + 1,
                }
            )
            return self._current

    async def refresh_threshold(
        self, provider: ChainProvider, min_usd_threshold: Decimal
    ) -> Optional[ChainConfig]:
        """
        Convert a USD threshold to native units using the chain's price feed

        Args:
            provider: Provider used to query the aggregator
            min_usd_threshold: Alert threshold in USD

        Returns:
            Optional[ChainConfig]: The new snapshot, or None if the refresh
            failed and the previous snapshot is still in effect
        """
        current = self.current
        if not current.native_usd_aggregator:
            logger.warning(f"No price feed configured for {current.chain_name}, keeping threshold")
            return None

        try:
            price = await provider.latest_price(current.native_usd_aggregator)
        except ProviderError as e:
            logger.warning(f"Error while fetching latest price for {current.chain_name}: {e}")
            return None

        if price <= 0:
            logger.warning(f"Ignoring non-positive price {price} for {current.chain_name}")
            return None

        threshold = round_places(divide(min_usd_threshold, price), 2)
        if threshold <= 0:
            logger.warning(
                f"Ignoring threshold {threshold} for {current.chain_name} "
                f"(USD {min_usd_threshold} at price {price} rounds to zero)"
            )
            return None

        snapshot = self.publish_threshold(threshold)
        logger.info(
            f"Native threshold for {current.chain_name} refreshed to {threshold} "
            f"{ChainInfo.get_native_symbol(current.chain_id)} (price {price})"
        )
        return snapshot
