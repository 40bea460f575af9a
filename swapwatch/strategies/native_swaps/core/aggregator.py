"""
Windowed per-address aggregation of native swaps.
"""
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from swapwatch.logger import logger
from swapwatch.strategies.native_swaps.models import (
    AddressState,
    MergeOutcome,
    MergeResult,
    SwapRecord,
)


class WindowedAggregator:
    """
    State store mapping each address to its current swap window.

    Locking uses a fixed set of stripe locks: a merge holds the stripe of its
    address, so merges for the same address never interleave while merges
    for other stripes proceed in parallel. A sweep holds every stripe,
    always acquired in index order, which makes it exclusive with all merges.
    No lock is held across an await.
    """

    def __init__(self, max_interval: int, stripes: int = 64):
        """
        Initialize the aggregator

        Args:
            max_interval: Maximum gap, in seconds, between two consecutive
                swaps of one window
            stripes: Number of stripe locks
        """
        if max_interval < 0:
            raise ValueError("max_interval must not be negative")
        if stripes < 1:
            raise ValueError("stripes must be positive")
        self.max_interval = max_interval
        self._states: Dict[str, AddressState] = {}
        self._stripes = [threading.Lock() for _ in range(stripes)]

    def _stripe(self, address: str) -> threading.Lock:
        return self._stripes[hash(address) % len(self._stripes)]

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        acquired: List[threading.Lock] = []
        try:
            for lock in self._stripes:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def merge(self, address: str, native_value: Decimal, record: SwapRecord) -> MergeResult:
        """
        Fold one qualifying swap into the address's window

        Args:
            address: Swapping address, checksummed
            native_value: Native units received in the transaction
            record: The transaction's swap record

        Returns:
            MergeResult: The branch taken and the resulting state snapshot
        """
        with self._stripe(address):
            current = self._states.get(address)
            if current is None:
                outcome = MergeOutcome.CREATED
                state = AddressState.start(native_value, record)
            elif record.block_timestamp - current.last_timestamp <= self.max_interval:
                outcome = MergeOutcome.EXTENDED
                state = current.extend(native_value, record)
            else:
                outcome = MergeOutcome.RESET
                state = AddressState.start(native_value, record)
            self._states[address] = state

        logger.debug(
            f"Merged swap {record.transaction_hash} for {address}: {outcome.value}, "
            f"{state.swap_count} swaps, {state.cumulative_native} native"
        )
        return MergeResult(outcome, state)

    def sweep(self, current_timestamp: int) -> int:
        """
        Drop every window whose last swap is older than the interval

        Args:
            current_timestamp: Timestamp the expiry is measured from

        Returns:
            int: Number of addresses removed
        """
        cutoff = current_timestamp - self.max_interval
        with self._exclusive():
            expired = [
                address
                for address, state in self._states.items()
                if state.last_timestamp < cutoff
            ]
            for address in expired:
                del self._states[address]
            remaining = len(self._states)

        logger.info(f"Swept {len(expired)} expired address windows, {remaining} remaining")
        return len(expired)

    def get(self, address: str) -> Optional[AddressState]:
        return self._states.get(address)

    def __contains__(self, address: str) -> bool:
        return address in self._states

    def __len__(self) -> int:
        return len(self._states)
