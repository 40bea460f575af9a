from swapwatch.strategies.native_swaps.core.aggregator import WindowedAggregator
from swapwatch.strategies.native_swaps.core.cadence import BlockCadence
from swapwatch.strategies.native_swaps.core.classifier import SwapClassifier
from swapwatch.strategies.native_swaps.core.counters import SwapCounters
from swapwatch.strategies.native_swaps.core.lag_queue import ConfirmationLagQueue

__all__ = [
    "WindowedAggregator",
    "BlockCadence",
    "SwapClassifier",
    "SwapCounters",
    "ConfirmationLagQueue",
]
