"""
Confirmation lag queue.
"""
import threading
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

from swapwatch.logger import logger

T = TypeVar("T")


class ConfirmationLagQueue(Generic[T]):
    """
    FIFO that holds transactions back until a number of distinct blocks has
    been observed.

    Once ``block_delay`` distinct blocks have been seen, each admitted
    transaction releases the oldest pending one. Order is preserved and
    nothing is dropped: when ``max_pending`` is exceeded the head is released
    early instead.
    """

    def __init__(self, block_delay: int, max_pending: int = 10000):
        """
        Initialize the queue

        Args:
            block_delay: Distinct blocks to observe before releasing
            max_pending: Capacity of the queue
        """
        if block_delay < 0:
            raise ValueError("block_delay must not be negative")
        if max_pending < 1:
            raise ValueError("max_pending must be positive")
        self.block_delay = block_delay
        self.max_pending = max_pending
        self.current_block: Optional[int] = None
        self.blocks_seen = 0
        self._pending: Deque[T] = deque()
        self._lock = threading.Lock()

    def admit(self, event: T) -> Optional[T]:
        """
        Queue a transaction and release the one now eligible, if any

        Args:
            event: Transaction event with a ``block_number`` attribute

        Returns:
            Optional[T]: The transaction released from the head, or None
            while still buffering
        """
        with self._lock:
            self._pending.append(event)
            if self.blocks_seen >= self.block_delay:
                return self._pending.popleft()

            if event.block_number != self.current_block:
                self.blocks_seen += 1
                self.current_block = event.block_number

            if len(self._pending) > self.max_pending:
                logger.warning(
                    f"Confirmation queue exceeded {self.max_pending} pending transactions, "
                    f"releasing head early"
                )
                return self._pending.popleft()
            return None

    def __len__(self) -> int:
        return len(self._pending)
