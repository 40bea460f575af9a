"""
Process-wide counters behind the anomaly score.
"""
import threading
from collections import OrderedDict


class SwapCounters:
    """
    Total native swaps observed and total alerts raised.

    Both counters only grow. A transaction hash is counted at most once so
    that redelivery of the same transaction cannot inflate the swap total;
    the set of remembered hashes is bounded.
    """

    def __init__(self, dedup_window: int = 10000):
        self._lock = threading.Lock()
        self._native_swaps = 0
        self._alerts = 0
        self._dedup_window = dedup_window
        self._counted: "OrderedDict[str, None]" = OrderedDict()

    @property
    def native_swaps(self) -> int:
        return self._native_swaps

    @property
    def alerts(self) -> int:
        return self._alerts

    def record_native_swap(self, transaction_hash: str) -> bool:
        """
        Count a transaction that reached native receipt detection

        Returns:
            bool: False if the transaction had already been counted
        """
        with self._lock:
            if transaction_hash in self._counted:
                return False
            self._counted[transaction_hash] = None
            if len(self._counted) > self._dedup_window:
                self._counted.popitem(last=False)
            self._native_swaps += 1
            return True

    def record_alert(self) -> float:
        """
        Count an alert and return the anomaly score including it

        Returns:
            float: alerts / native swaps
        """
        with self._lock:
            self._alerts += 1
            return self._score()

    def anomaly_score(self) -> float:
        with self._lock:
            return self._score()

    def _score(self) -> float:
        if self._native_swaps == 0:
            return 0.0
        return self._alerts / self._native_swaps
