"""
Basic test suite for SwapWatch

Tests:
- Basic event flow
- Configuration loading
- Event and action creation
- Building a pipeline from configuration
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import tomli_w

from swapwatch.config import Config
from swapwatch.core.actions import Action
from swapwatch.core.base import Collector, Executor, Strategy
from swapwatch.core.builder import SwapWatchBuilder
from swapwatch.core.events import Event, SwapTransactionEvent, TransferLog, WithdrawalLog
from swapwatch.core.runtime import SwapWatch
from swapwatch.core.web3.provider import ChainProvider
from swapwatch.executors import LoggerExecutor
from swapwatch.strategies.native_swaps import NativeSwapsStrategy
from swapwatch.strategies.native_swaps.models import ALERT_ACTION_TYPE

SENDER = "0x1111111111111111111111111111111111111111"
ROUTER = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


def swap(block_number, native_wei):
    return SwapTransactionEvent(
        chain_id=1,
        transaction_hash=f"0x{block_number:064x}",
        sender=SENDER,
        block_number=block_number,
        block_timestamp=1000 + (block_number - 100) * 12,
        transfers=(TransferLog(token=TOKEN, from_address=SENDER, to_address=ROUTER, value=100),),
        withdrawals=(WithdrawalLog(token=WETH, source=ROUTER, value=native_wei),),
    )


async def wait_for_count(items, count, timeout=5.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while len(items) < count and asyncio.get_running_loop().time() < deadline:
        await asyncio.sleep(0.05)


@pytest.mark.asyncio
async def test_basic_flow():
    """Events flow from a collector through a strategy to an executor"""
    executed = []

    async def simple_collector():
        for i in range(3):
            yield Event(type="tick")

    async def echo_strategy(event):
        return [Action(type="echo", data={"event_type": event.type})]

    async def record_executor(action):
        executed.append(action)

    swapwatch = SwapWatch()
    swapwatch.add_collector(simple_collector)
    swapwatch.add_strategy(echo_strategy)
    swapwatch.add_executor(record_executor)

    await asyncio.wait_for(swapwatch.start(), timeout=2.0)
    await wait_for_count(executed, 3)
    await asyncio.wait_for(swapwatch.stop(grace_period=0.5), timeout=5.0)

    assert len(executed) == 3
    assert all(action.data["event_type"] == "tick" for action in executed)
    assert swapwatch.events_processed == 3


@pytest.mark.asyncio
async def test_failing_strategy_and_executor_do_not_stop_pipeline():
    executed = []

    async def collector():
        for _ in range(2):
            yield Event(type="tick")

    async def broken_strategy(event):
        raise RuntimeError("strategy bug")

    async def working_strategy(event):
        return [Action(type="ok", data={})]

    async def broken_executor(action):
        raise RuntimeError("executor bug")

    async def record_executor(action):
        executed.append(action)

    swapwatch = SwapWatch()
    swapwatch.add_collector(collector)
    swapwatch.add_strategy(broken_strategy)
    swapwatch.add_strategy(working_strategy)
    swapwatch.add_executor(broken_executor)
    swapwatch.add_executor(record_executor)

    await swapwatch.start()
    await wait_for_count(executed, 2)
    await swapwatch.stop(grace_period=0.5)

    assert len(executed) == 2


@pytest.mark.asyncio
async def test_detection_pipeline_raises_alert():
    """Swap events run through the native swaps strategy into an alert"""
    alerts = []
    provider = MagicMock(spec=ChainProvider)
    provider.transaction_count = AsyncMock(return_value=3)

    async def collector():
        yield swap(100, 20 * 10**18)
        yield swap(101, 15 * 10**18)

    async def record_executor(action):
        alerts.append(action)

    swapwatch = SwapWatch()
    swapwatch.add_collector(collector)
    swapwatch.add_strategy(NativeSwapsStrategy(chain_id=1, provider=provider))
    swapwatch.add_executor(record_executor)

    await swapwatch.start()
    await wait_for_count(alerts, 1)
    await swapwatch.stop(grace_period=0.5)

    assert len(alerts) == 1
    assert alerts[0].type == ALERT_ACTION_TYPE
    assert alerts[0].data["attacker"] == SENDER
    assert alerts[0].data["swap_count"] == 2


def test_config_loading(tmp_path):
    config_data = {
        "logging": {"level": "DEBUG"},
        "collectors": {
            "enabled": ["swap_transaction"],
            "swap_transaction": {"rpc_url": "https://eth.llamarpc.com", "chain_id": 1},
        },
        "strategies": {
            "enabled": ["native_swaps"],
            "native_swaps": {"chain_id": 1, "low_nonce_threshold": 100},
        },
        "executors": {"enabled": ["logger"]},
    }
    config_path = tmp_path / "config.toml"
    with open(config_path, "wb") as f:
        tomli_w.dump(config_data, f)

    config = Config(str(config_path))

    assert config.collectors == ["swap_transaction"]
    assert config.strategies == ["native_swaps"]
    assert config.executors == ["logger"]
    assert config.get("strategies.native_swaps.low_nonce_threshold") == 100
    assert config.get("strategies.native_swaps.missing", 7) == 7
    assert config.get_collector_config("swap_transaction")["chain_id"] == 1
    assert config.get_executor_config("logger") == {}


def test_missing_config_is_empty(tmp_path):
    config = Config(str(tmp_path / "absent.toml"))

    assert config.config == {}
    assert config.collectors == []


def test_invalid_config_is_empty(tmp_path):
    config_path = tmp_path / "broken.toml"
    config_path.write_text("[strategies\nenabled = 1")

    assert Config(str(config_path)).config == {}


def test_builder_creates_enabled_components(tmp_path):
    config_path = tmp_path / "config.toml"
    with open(config_path, "wb") as f:
        tomli_w.dump(
            {
                "queues": {"max_size": 50},
                "strategies": {
                    "enabled": ["native_swaps"],
                    "native_swaps": {
                        "chain_id": 56,
                        "rpc_url": "http://localhost:8545",
                        "block_delay": 3,
                    },
                },
                "executors": {"enabled": ["logger"]},
            },
            f,
        )

    swapwatch = (
        SwapWatchBuilder(Config(str(config_path)))
        .build_collectors()
        .build_strategies()
        .build_executors()
        .build()
    )

    assert swapwatch.max_queue_size == 50
    assert swapwatch.collectors == []
    strategy = swapwatch.strategies[0]
    assert isinstance(strategy, NativeSwapsStrategy)
    assert strategy.chain_id == 56
    assert strategy.lag_queue.block_delay == 3
    assert isinstance(swapwatch.executors[0], LoggerExecutor)


def test_registry_lookup():
    assert Strategy._registry["native_swaps"] is NativeSwapsStrategy
    assert Executor._registry["logger"] is LoggerExecutor
    assert "native_swaps" not in Collector._registry

    with pytest.raises(ValueError):
        Strategy.create("unknown")


def test_event_creation():
    event = swap(100, 10**18)

    assert event.type == "swap_transaction"
    assert event.sender == SENDER
    assert event.to_dict()["withdrawals"][0]["value"] == str(10**18)
    assert "Hash:" in str(event)


def test_event_addresses_are_checksummed():
    event = SwapTransactionEvent(
        chain_id=1,
        transaction_hash="0x01",
        sender=WETH.lower(),
        block_number=1,
        block_timestamp=1,
        withdrawals=(WithdrawalLog(token=WETH.lower(), source=ROUTER, value=1),),
    )

    assert event.sender == WETH
    assert event.withdrawals[0].token == WETH


def test_event_is_immutable():
    event = swap(100, 1)
    with pytest.raises(Exception):
        event.block_number = 5


def test_action_creation():
    action = Action(type="test", data={"key": "value"})

    assert action.type == "test"
    assert action.data["key"] == "value"
