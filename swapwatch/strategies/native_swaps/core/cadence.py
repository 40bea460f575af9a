"""
Block-number cadence shared by periodic maintenance tasks.
"""
import inspect
from typing import Any, Callable, List, Optional, Tuple

from swapwatch.logger import logger

CadenceTask = Callable[[int], Any]


class BlockCadence:
    """
    Fires registered tasks every ``interval_blocks`` blocks.

    The first observed block fires. A later block fires once it is at least
    ``interval_blocks`` past the last firing and carries a different
    timestamp, so several transactions of one block never fire twice. Tasks
    receive the block timestamp; a failing task is logged and does not keep
    the others from running.
    """

    def __init__(self, interval_blocks: int = 10000):
        if interval_blocks < 1:
            raise ValueError("interval_blocks must be positive")
        self.interval_blocks = interval_blocks
        self.last_fired_block: Optional[int] = None
        self.last_fired_timestamp: Optional[int] = None
        self._tasks: List[Tuple[str, CadenceTask]] = []

    def register(self, name: str, task: CadenceTask) -> None:
        self._tasks.append((name, task))

    def is_due(self, block_number: int, timestamp: int) -> bool:
        if self.last_fired_block is None:
            return True
        return (
            block_number >= self.last_fired_block + self.interval_blocks
            and timestamp != self.last_fired_timestamp
        )

    async def tick(self, block_number: int, timestamp: int) -> bool:
        """
        Run all tasks if the cadence is due

        Returns:
            bool: Whether the tasks ran
        """
        if not self.is_due(block_number, timestamp):
            return False

        self.last_fired_block = block_number
        self.last_fired_timestamp = timestamp
        logger.debug(f"Cadence fired at block {block_number}")

        for name, task in self._tasks:
            try:
                result = task(timestamp)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Periodic task {name} failed at block {block_number}: {e}")
        return True
