"""
Threshold evaluator and alert builder.
"""
from typing import Any, Dict, List

from swapwatch.core.events import SwapTransactionEvent
from swapwatch.logger import logger
from swapwatch.strategies.native_swaps.core.counters import SwapCounters
from swapwatch.strategies.native_swaps.detectors.base import BaseDetector
from swapwatch.strategies.native_swaps.models import AddressState, NativeSwapAlert
from swapwatch.strategies.native_swaps.utils.chain_info import ChainInfo
from swapwatch.strategies.native_swaps.utils.network import ChainConfig


class ThresholdDetector(BaseDetector):
    """
    Raises an alert when an address window has received at least the chain's
    native threshold over at least ``min_swap_count`` swaps.

    The window is left untouched after alerting, so later swaps in the same
    window raise further alerts.
    """

    def __init__(self, counters: SwapCounters, config: Dict[str, Any] = None):
        """
        Args:
            counters: Global swap and alert counters
            config: Detector configuration, supports ``min_swap_count``
        """
        super().__init__(config)
        self.counters = counters
        self.min_swap_count = self.config.get("min_swap_count", 2)

    def crosses_threshold(self, state: AddressState, chain_config: ChainConfig) -> bool:
        return (
            state.cumulative_native >= chain_config.min_native_threshold
            and state.swap_count >= self.min_swap_count
        )

    async def detect(
        self, event: SwapTransactionEvent, context: Dict[str, Any]
    ) -> List[NativeSwapAlert]:
        """
        Evaluate the state produced by this transaction's merge

        Args:
            event: The transaction that was merged
            context: Must hold ``address_state`` and ``chain_config``

        Returns:
            List[NativeSwapAlert]: One alert or none
        """
        state: AddressState = context["address_state"]
        chain_config: ChainConfig = context["chain_config"]

        if not self.crosses_threshold(state, chain_config):
            return []

        anomaly_score = self.counters.record_alert()
        alert = NativeSwapAlert.from_state(
            chain_id=chain_config.chain_id,
            attacker=event.sender,
            state=state,
            anomaly_score=anomaly_score,
        )
        logger.info(
            f"Unusual native swaps by {event.sender} on {chain_config.chain_name}: "
            f"{state.cumulative_native} {ChainInfo.get_native_symbol(chain_config.chain_id)} "
            f"over {state.swap_count} swaps (score {anomaly_score:.4f})"
        )
        return [alert]
