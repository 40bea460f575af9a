from unittest.mock import AsyncMock, MagicMock

import pytest

from swapwatch.core.web3.provider import ChainProvider


@pytest.fixture
def mock_web3():
    """Create a mock AsyncWeb3 instance."""
    mock = MagicMock()
    mock.eth = MagicMock()
    mock.eth.get_transaction_count = AsyncMock(return_value=0)
    mock.eth.get_balance = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def chain_provider(mock_web3):
    return ChainProvider(mock_web3, timeout=0.05)
