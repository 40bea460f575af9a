from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from swapwatch.core.web3.provider import ChainProvider
from swapwatch.strategies.native_swaps.core.counters import SwapCounters
from swapwatch.strategies.native_swaps.utils.network import NetworkManager


@pytest.fixture
def provider():
    """Chain provider with every query mocked, nonce 5 by default"""
    mock = MagicMock(spec=ChainProvider)
    mock.transaction_count = AsyncMock(return_value=5)
    mock.native_balance = AsyncMock(return_value=0)
    mock.latest_price = AsyncMock(return_value=Decimal("2000"))
    mock.chain_id = AsyncMock(return_value=1)
    return mock


@pytest.fixture
def counters():
    return SwapCounters()


@pytest.fixture
def ethereum_config():
    return NetworkManager().set_network(1)


@pytest.fixture
def fantom_config():
    return NetworkManager().set_network(250)
