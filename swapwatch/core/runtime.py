import asyncio
import time
from typing import Any, AsyncIterable, Awaitable, Callable, List, Optional, Union

from ..logger import logger
from .actions import Action
from .base import (
    Collector,
    Executor,
    FunctionCollector,
    FunctionExecutor,
    FunctionStrategy,
    Strategy,
)
from .events import Event

# Timeout for queue reads so the loops notice a stop request promptly
QUEUE_POLL_TIMEOUT = 2.0


class SwapWatch:
    """
    Main application class that manages the event processing pipeline

    Handles:
    - Component lifecycle management
    - Event collection and processing
    - Action execution
    - Error handling and recovery

    Queues are in memory; nothing survives a restart.
    """

    def __init__(self, max_queue_size: int = 0):
        """
        Initialize SwapWatch instance

        Args:
            max_queue_size: Bound of the event and action queues, 0 for unbounded
        """
        self.collectors: List[Collector] = []
        self.strategies: List[Strategy] = []
        self.executors: List[Executor] = []
        self.running: bool = False
        self.max_queue_size = max_queue_size

        # Queues are created in start() so they bind to the running loop
        self.collector_queue: Optional["asyncio.Queue[Event]"] = None
        self.executor_queue: Optional["asyncio.Queue[Action]"] = None

        self._tasks: Optional[List[asyncio.Task[Any]]] = None
        self.events_processed = 0
        self.actions_executed = 0

    def add_collector(
        self, collector: Union[Collector, Callable[[], AsyncIterable[Event]]]
    ):
        """
        Add event collector to the pipeline

        Args:
            collector: Collector instance or async generator function
        """
        if isinstance(collector, Collector):
            self.collectors.append(collector)
        else:
            self.collectors.append(FunctionCollector(collector))
        logger.info(f"Added collector: {self.collectors[-1].name}")

    def add_strategy(
        self, strategy: Union[Strategy, Callable[[Event], Awaitable[List[Action]]]]
    ):
        """
        Add event processing strategy to the pipeline

        Args:
            strategy: Strategy instance or async function
        """
        if isinstance(strategy, Strategy):
            self.strategies.append(strategy)
        else:
            self.strategies.append(FunctionStrategy(strategy))
        logger.info(f"Added strategy: {self.strategies[-1].name}")

    def add_executor(
        self, executor: Union[Executor, Callable[[Action], Awaitable[None]]]
    ):
        """
        Add action executor to the pipeline

        Args:
            executor: Executor instance or async function
        """
        if isinstance(executor, Executor):
            self.executors.append(executor)
        else:
            self.executors.append(FunctionExecutor(executor))
        logger.info(f"Added executor: {self.executors[-1].name}")

    async def start(self):
        """
        Start all components and begin processing

        Raises:
            Exception: If any component fails to start
        """
        self.running = True

        try:
            self.collector_queue = asyncio.Queue(maxsize=self.max_queue_size)
            self.executor_queue = asyncio.Queue(maxsize=self.max_queue_size)

            await asyncio.gather(*(collector.start() for collector in self.collectors))

            self._tasks = [
                asyncio.create_task(self._run_collector(collector), name=f"collector_{i}")
                for i, collector in enumerate(self.collectors)
            ]
            self._tasks.extend(
                [
                    asyncio.create_task(self._run_strategies(), name="strategies"),
                    asyncio.create_task(self._run_executors(), name="executors"),
                ]
            )

            logger.info(
                f"Started {len(self.collectors)} collectors, {len(self.strategies)} strategies, {len(self.executors)} executors"
            )

        except Exception as e:
            logger.error(f"Error starting components: {e}")
            await self.stop()
            raise

    async def stop(self, grace_period: float = 5.0, force_timeout: float = 15.0):
        """
        Stop all components, letting queued work drain within a bounded time

        Args:
            grace_period: Time in seconds to wait for queued work to complete
            force_timeout: Maximum time to wait before forcing shutdown
        """
        if not self.running:
            logger.info("Stop called on already stopped SwapWatch")
            return

        logger.info("Stopping SwapWatch...")

        try:
            await asyncio.wait_for(self._graceful_shutdown(grace_period), timeout=force_timeout)
            logger.info("Graceful shutdown completed")
        except asyncio.TimeoutError:
            logger.warning(
                f"Graceful shutdown timed out after {force_timeout}s, forcing immediate shutdown"
            )

        self.running = False

        if self._tasks:
            for task in self._tasks:
                if not task.done():
                    task.cancel()
            try:
                await asyncio.wait_for(
                    asyncio.gather(*self._tasks, return_exceptions=True), timeout=1.0
                )
            except asyncio.TimeoutError:
                logger.warning("Some tasks did not terminate within timeout period")
            self._tasks = None

        for strategy in self.strategies:
            try:
                await strategy.close()
            except Exception as e:
                logger.error(f"Error closing strategy {strategy.name}: {e}")

        logger.info(
            f"SwapWatch shutdown complete: {self.events_processed} events processed, "
            f"{self.actions_executed} actions executed"
        )

    async def join(self):
        """
        Wait until a core task ends

        Used by the entry point to keep running until a signal arrives. Tests
        should call start(), wait, then stop().
        """
        if not self._tasks:
            logger.warning("SwapWatch.join() called before start() or after stop()")
            return

        core_tasks = [
            task for task in self._tasks if task.get_name() in ("strategies", "executors")
        ]
        done, _ = await asyncio.wait(core_tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            if not task.cancelled() and task.exception():
                logger.error(f"Task {task.get_name()} failed with exception: {task.exception()}")

    async def _graceful_shutdown(self, grace_period: float):
        if self.collectors:
            logger.info(f"Stopping {len(self.collectors)} collectors...")
            await asyncio.gather(
                *(collector.stop() for collector in self.collectors), return_exceptions=True
            )

        shutdown_start = time.time()
        while time.time() - shutdown_start < grace_period:
            if self.collector_queue.empty() and self.executor_queue.empty():
                logger.info("All queued work completed")
                break
            await asyncio.sleep(0.2)

        logger.info(
            f"Shutdown progress: {self.collector_queue.qsize()} events and "
            f"{self.executor_queue.qsize()} actions remaining"
        )

    async def _run_collector(self, collector: Collector):
        logger.info(f"Starting collector: {collector.name}")
        try:
            async for event in collector.events():
                if not self.running:
                    break
                await self.collector_queue.put(event)
            if self.running:
                logger.warning(f"Collector {collector.name} events stream ended")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in collector {collector.name}: {e}")

    async def _run_strategies(self):
        """Run event processing strategies"""
        logger.info("Starting strategy processor")
        try:
            while self.running:
                try:
                    event = await asyncio.wait_for(
                        self.collector_queue.get(), timeout=QUEUE_POLL_TIMEOUT
                    )
                except asyncio.TimeoutError:
                    continue

                start_time = time.time()
                for strategy in self.strategies:
                    try:
                        actions = await strategy.process_event(event)
                    except Exception as e:
                        logger.opt(exception=e).error(f"Error in strategy {strategy.name}: {e}")
                        continue
                    for action in actions:
                        await self.executor_queue.put(action)

                self.events_processed += 1
                self.collector_queue.task_done()

                latency = time.time() - start_time
                if latency > 1.0:
                    logger.warning(f"Slow event processing: {latency:.2f}s")
        except asyncio.CancelledError:
            logger.info("Strategy processor task cancelled, shutting down...")
        finally:
            logger.info("Strategy processor stopped")

    async def _run_executors(self):
        """Run action executors"""
        logger.info("Starting action executor")
        try:
            while self.running:
                try:
                    action = await asyncio.wait_for(
                        self.executor_queue.get(), timeout=QUEUE_POLL_TIMEOUT
                    )
                except asyncio.TimeoutError:
                    continue

                results = await asyncio.gather(
                    *(executor.execute(action) for executor in self.executors),
                    return_exceptions=True,
                )
                for executor, result in zip(self.executors, results):
                    if isinstance(result, Exception):
                        logger.error(f"Error in executor {executor.name}: {result}")

                self.actions_executed += 1
                self.executor_queue.task_done()
        except asyncio.CancelledError:
            logger.info("Action executor task cancelled, shutting down...")
        finally:
            logger.info("Action executor stopped")
