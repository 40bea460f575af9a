from typing import List

from ..config import Config
from ..logger import logger
from .base import Collector, Executor, Strategy
from .runtime import SwapWatch


class SwapWatchBuilder:
    """Builds a SwapWatch instance from configuration"""

    def __init__(self, config: Config):
        self.config = config

        queue_config = config.get("queues", {})
        self.swapwatch = SwapWatch(max_queue_size=queue_config.get("max_size", 0))

        self.collectors: List[Collector] = []
        self.strategies: List[Strategy] = []
        self.executors: List[Executor] = []

    def build_collectors(self) -> "SwapWatchBuilder":
        """Build all enabled collectors"""
        collectors = self.config.collectors
        if not isinstance(collectors, list):
            raise ValueError("enabled collectors must be a list")

        for name in collectors:
            collector = Collector.create(name, **self.config.get_collector_config(name))
            self.collectors.append(collector)
            logger.info(f"Built collector: {name}")
        return self

    def build_strategies(self) -> "SwapWatchBuilder":
        """Build all enabled strategies"""
        strategies = self.config.strategies
        if not isinstance(strategies, list):
            raise ValueError("enabled strategies must be a list")

        for name in strategies:
            strategy = Strategy.create(name, **self.config.get_strategy_config(name))
            self.strategies.append(strategy)
            logger.info(f"Built strategy: {name}")
        return self

    def build_executors(self) -> "SwapWatchBuilder":
        """Build all enabled executors"""
        executors = self.config.executors
        if not isinstance(executors, list):
            raise ValueError("enabled executors must be a list")

        for name in executors:
            executor = Executor.create(name, **self.config.get_executor_config(name))
            self.executors.append(executor)
            logger.info(f"Built executor: {name}")
        return self

    def build(self) -> SwapWatch:
        """Assemble the final SwapWatch instance"""
        for collector in self.collectors:
            self.swapwatch.add_collector(collector)

        for strategy in self.strategies:
            self.swapwatch.add_strategy(strategy)

        for executor in self.executors:
            self.swapwatch.add_executor(executor)

        return self.swapwatch
