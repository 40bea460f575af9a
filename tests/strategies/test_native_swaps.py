from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from swapwatch.core.errors import ConfigurationError, ProviderError, UnsupportedNetworkError
from swapwatch.core.events import Event, SwapTransactionEvent
from swapwatch.strategies.native_swaps import NativeSwapsStrategy
from swapwatch.strategies.native_swaps.models import ALERT_ACTION_TYPE, MergeOutcome
from swapwatch.strategies.native_swaps.receipts import BalanceDiffStrategy, UnwrapEventStrategy
from swapwatch.strategies.native_swaps.utils.chain_info import ReceiptMode
from tests.strategies.factories import (
    ETHER,
    OTHER,
    ROUTER,
    SENDER,
    TOKEN_X,
    TOKEN_Y,
    TOKEN_Z,
    ZERO,
    swap_event,
    transfer,
)


def build_strategy(provider, counters, **kwargs):
    params = {"chain_id": 1, "provider": provider, "counters": counters}
    params.update(kwargs)
    return NativeSwapsStrategy(**params)


@pytest.mark.asyncio
async def test_three_swaps_cross_threshold_once(provider, counters):
    strategy = build_strategy(provider, counters, min_swap_count=3)

    first = await strategy.process_event(swap_event(100, 1000, TOKEN_X, native_wei=15 * ETHER))
    second = await strategy.process_event(swap_event(101, 1012, TOKEN_Y, native_wei=10 * ETHER))
    third = await strategy.process_event(swap_event(102, 1024, TOKEN_Z, native_wei=10 * ETHER))

    assert first == [] and second == []
    assert len(third) == 1
    action = third[0]
    assert action.type == ALERT_ACTION_TYPE
    assert action.data["attacker"] == SENDER
    assert Decimal(action.data["total_native_received"]) == Decimal(35)
    assert action.data["swap_count"] == 3
    assert action.data["window_start_block"] == 100
    assert action.data["window_end_block"] == 102
    assert [m["token"] for m in action.data["token_movements"]] == [TOKEN_X, TOKEN_Y, TOKEN_Z]
    assert action.data["anomaly_score"] == pytest.approx(1 / 3)


@pytest.mark.asyncio
async def test_gap_resets_window(provider, counters):
    strategy = build_strategy(provider, counters, min_swap_count=3)

    await strategy.process_event(swap_event(100, 1000, TOKEN_X, native_wei=15 * ETHER))
    await strategy.process_event(swap_event(101, 1012, TOKEN_Y, native_wei=10 * ETHER))
    actions = await strategy.process_event(
        swap_event(102, 1012 + 30 * 60 + 1, TOKEN_Z, native_wei=10 * ETHER)
    )

    assert actions == []
    state = strategy.aggregator.get(SENDER)
    assert state.cumulative_native == Decimal(10)
    assert state.swap_count == 1


@pytest.mark.asyncio
async def test_window_keeps_alerting_after_threshold(provider, counters):
    strategy = build_strategy(provider, counters, min_swap_count=2)

    await strategy.process_event(swap_event(100, 1000, native_wei=20 * ETHER))
    second = await strategy.process_event(swap_event(101, 1012, native_wei=20 * ETHER))
    third = await strategy.process_event(swap_event(102, 1024, native_wei=1 * ETHER))

    assert len(second) == 1 and len(third) == 1
    assert third[0].data["swap_count"] == 3
    assert third[0].data["anomaly_score"] >= second[0].data["anomaly_score"]
    assert counters.alerts == 2


@pytest.mark.asyncio
async def test_burned_transfer_is_not_a_swap(provider, counters):
    strategy = build_strategy(provider, counters, receipt_strategy=BalanceDiffStrategy(provider))
    event = SwapTransactionEvent(
        chain_id=1,
        transaction_hash="0x01",
        sender=SENDER,
        block_number=100,
        block_timestamp=1000,
        transfers=(
            transfer(TOKEN_X, SENDER, ROUTER, 50),
            transfer(TOKEN_X, ROUTER, ZERO, 50),
        ),
    )

    assert await strategy.process_event(event) == []
    assert len(strategy.aggregator) == 0
    assert counters.native_swaps == 0
    provider.native_balance.assert_not_awaited()
    provider.transaction_count.assert_not_awaited()


@pytest.mark.asyncio
async def test_transaction_without_sender_transfers_skips_provider(provider, counters):
    strategy = build_strategy(provider, counters, receipt_strategy=BalanceDiffStrategy(provider))
    event = SwapTransactionEvent(
        chain_id=1,
        transaction_hash="0x01",
        sender=SENDER,
        block_number=100,
        block_timestamp=1000,
        transfers=(transfer(TOKEN_X, OTHER, ROUTER, 50),),
    )

    await strategy.process_event(event)

    provider.native_balance.assert_not_awaited()
    assert counters.native_swaps == 0


@pytest.mark.asyncio
async def test_swap_without_native_receipt_is_counted_but_not_merged(provider, counters):
    strategy = build_strategy(provider, counters)

    assert await strategy.process_event(swap_event(100, 1000, native_wei=0)) == []
    assert counters.native_swaps == 1
    assert SENDER not in strategy.aggregator
    provider.transaction_count.assert_not_awaited()


@pytest.mark.asyncio
async def test_established_sender_is_counted_but_not_merged(provider, counters):
    provider.transaction_count.return_value = 151
    strategy = build_strategy(provider, counters)

    assert await strategy.process_event(swap_event(100, 1000, native_wei=50 * ETHER)) == []
    assert counters.native_swaps == 1
    assert SENDER not in strategy.aggregator


@pytest.mark.asyncio
async def test_nonce_at_threshold_is_new(provider, counters):
    provider.transaction_count.return_value = 150
    strategy = build_strategy(provider, counters)

    await strategy.process_event(swap_event(100, 1000, native_wei=1 * ETHER))

    assert SENDER in strategy.aggregator


@pytest.mark.asyncio
async def test_nonce_block_identifier(provider, counters):
    strategy = build_strategy(provider, counters)
    await strategy.process_event(swap_event(100, 1000, native_wei=1 * ETHER))
    provider.transaction_count.assert_awaited_with(SENDER, 100)

    latest = build_strategy(provider, counters, nonce_at_block=False)
    await latest.process_event(swap_event(101, 1012, native_wei=1 * ETHER))
    provider.transaction_count.assert_awaited_with(SENDER, "latest")


@pytest.mark.asyncio
async def test_provider_failure_fails_closed(provider, counters):
    provider.transaction_count.side_effect = ProviderError("timed out")
    strategy = build_strategy(provider, counters)

    assert await strategy.process_event(swap_event(100, 1000, native_wei=50 * ETHER)) == []
    assert len(strategy.aggregator) == 0
    assert counters.native_swaps == 1


@pytest.mark.asyncio
async def test_receipt_failure_fails_closed(provider, counters):
    provider.native_balance.side_effect = ProviderError("malformed")
    strategy = build_strategy(provider, counters, receipt_mode=ReceiptMode.BALANCE_DIFF)

    assert await strategy.process_event(swap_event(100, 1000)) == []
    assert len(strategy.aggregator) == 0
    provider.transaction_count.assert_not_awaited()


@pytest.mark.asyncio
async def test_redelivered_transaction_is_processed_once(provider, counters):
    strategy = build_strategy(provider, counters)
    event = swap_event(100, 1000, native_wei=5 * ETHER)

    await strategy.process_event(event)
    await strategy.process_event(event)

    assert counters.native_swaps == 1
    assert strategy.aggregator.get(SENDER).swap_count == 1


@pytest.mark.asyncio
async def test_merge_outcome_passed_to_detector(provider, counters):
    strategy = build_strategy(provider, counters)
    strategy.detector.detect = AsyncMock(return_value=[])

    await strategy.process_event(swap_event(100, 1000, native_wei=1 * ETHER))
    await strategy.process_event(swap_event(101, 1012, native_wei=1 * ETHER))

    outcomes = [c.args[1]["merge_outcome"] for c in strategy.detector.detect.await_args_list]
    assert outcomes == [MergeOutcome.CREATED, MergeOutcome.EXTENDED]


@pytest.mark.asyncio
async def test_confirmation_lag_delays_processing(provider, counters):
    strategy = build_strategy(provider, counters, block_delay=1, min_swap_count=1)
    big = 40 * ETHER

    assert await strategy.process_event(swap_event(100, 1000, native_wei=big)) == []
    assert counters.native_swaps == 0

    actions = await strategy.process_event(swap_event(101, 1012, TOKEN_Y, native_wei=1 * ETHER))

    assert len(actions) == 1
    assert actions[0].data["window_end_block"] == 100
    assert len(strategy.lag_queue) == 1


@pytest.mark.asyncio
async def test_sweep_runs_on_cadence(provider, counters):
    strategy = build_strategy(provider, counters, sweep_interval_blocks=10)

    await strategy.process_event(swap_event(100, 1000, native_wei=1 * ETHER))
    assert SENDER in strategy.aggregator

    await strategy.process_event(
        swap_event(110, 1000 + 30 * 60 + 1, sender=OTHER, native_wei=1 * ETHER)
    )

    assert SENDER not in strategy.aggregator
    assert OTHER in strategy.aggregator


@pytest.mark.asyncio
async def test_threshold_refresh_on_cadence(provider, counters):
    provider.latest_price.return_value = Decimal("2500")
    strategy = build_strategy(provider, counters, min_usd_threshold="50000", min_swap_count=2)

    await strategy.process_event(swap_event(100, 1000, native_wei=10 * ETHER))
    assert strategy.native_threshold == Decimal("20.00")

    actions = await strategy.process_event(swap_event(101, 1012, native_wei=10 * ETHER))
    assert len(actions) == 1


@pytest.mark.asyncio
async def test_no_refresh_without_usd_threshold(provider, counters):
    strategy = build_strategy(provider, counters)

    await strategy.process_event(swap_event(100, 1000, native_wei=1 * ETHER))

    provider.latest_price.assert_not_awaited()
    assert strategy.native_threshold == Decimal("30")


@pytest.mark.asyncio
async def test_ignores_other_events_and_chains(provider, counters):
    strategy = build_strategy(provider, counters)

    assert await strategy.process_event(Event(type="other")) == []
    assert await strategy.process_event(swap_event(100, 1000, chain_id=56, native_wei=ETHER)) == []
    assert counters.native_swaps == 0


def test_default_receipt_strategy_follows_chain(provider, counters):
    assert isinstance(build_strategy(provider, counters).receipt_strategy, UnwrapEventStrategy)
    assert isinstance(
        build_strategy(provider, counters, receipt_mode="balance_diff").receipt_strategy,
        BalanceDiffStrategy,
    )


def test_unsupported_chain_is_fatal(provider, counters):
    with pytest.raises(UnsupportedNetworkError):
        build_strategy(provider, counters, chain_id=31337)


def test_rpc_url_required_without_provider():
    with pytest.raises(ConfigurationError):
        NativeSwapsStrategy(chain_id=1)


def test_stats(provider, counters):
    strategy = build_strategy(provider, counters, block_delay=3)
    stats = strategy.stats()

    assert stats["tracked_addresses"] == 0
    assert stats["pending_transactions"] == 0
    assert stats["anomaly_score"] == 0.0
    assert stats["native_threshold"] == "30"


@pytest.mark.asyncio
async def test_close_releases_receipt_strategy(provider, counters):
    receipt_strategy = UnwrapEventStrategy()
    receipt_strategy.close = AsyncMock()
    strategy = build_strategy(provider, counters, receipt_strategy=receipt_strategy)

    await strategy.close()

    receipt_strategy.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_sweep_measures_expiry_from_released_transactions(provider, counters):
    strategy = build_strategy(
        provider, counters, block_delay=1, sweep_interval_blocks=10, min_swap_count=2
    )

    await strategy.process_event(swap_event(100, 1000, native_wei=20 * ETHER))
    await strategy.process_event(swap_event(101, 1012, sender=OTHER, native_wei=1 * ETHER))
    await strategy.process_event(swap_event(102, 2790, TOKEN_Y, native_wei=20 * ETHER))
    # Received at block 110, whose timestamp is past SENDER's window, while the
    # block 102 swap is still waiting in the queue
    actions = await strategy.process_event(
        swap_event(110, 2810, sender=OTHER, native_wei=1 * ETHER)
    )

    assert len(actions) == 1
    assert actions[0].data["swap_count"] == 2
    assert Decimal(actions[0].data["total_native_received"]) == Decimal(40)

    await strategy.process_event(swap_event(111, 2822, sender=OTHER, native_wei=1 * ETHER))

    assert strategy.cadence.last_fired_block == 110
    assert strategy.aggregator.get(SENDER).swap_count == 2
