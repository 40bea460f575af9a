import asyncio
from decimal import Decimal
from typing import Any, Awaitable, Union

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from ...logger import logger
from ..errors import ProviderError
from .base import AGGREGATOR_V3_ABI

BlockIdentifier = Union[int, str]


class ChainProvider:
    """
    Timeout-bounded access to the chain queries the detection engine needs.

    Each query is a single attempt: a timeout or any RPC failure surfaces as
    ProviderError so callers can treat the transaction as a miss instead of
    stalling the event stream. Nothing here retries, which keeps per
    transaction side effects (such as counters) from being applied twice.
    """

    def __init__(self, web3: AsyncWeb3, timeout: float = 10.0):
        """
        Initialize the provider wrapper

        Args:
            web3: Connected AsyncWeb3 instance
            timeout: Per-query timeout in seconds
        """
        self.web3 = web3
        self.timeout = timeout

    @classmethod
    def from_rpc_url(cls, rpc_url: str, timeout: float = 10.0) -> "ChainProvider":
        if not rpc_url:
            raise ValueError("RPC URL is required")
        web3 = AsyncWeb3(
            AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        )
        return cls(web3, timeout=timeout)

    async def _call(self, description: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.debug(f"{description} timed out after {self.timeout}s")
            raise ProviderError(f"{description} timed out after {self.timeout}s") from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"{description} failed: {e}") from e

    @staticmethod
    def _expect_int(description: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ProviderError(f"{description} returned malformed value: {value!r}")
        return value

    async def transaction_count(
        self, address: str, block_identifier: BlockIdentifier = "latest"
    ) -> int:
        """
        Get the nonce of an address

        Args:
            address: Account address
            block_identifier: Block number or tag such as "latest"

        Returns:
            int: Number of transactions sent by the address
        """
        description = f"get_transaction_count({address}, {block_identifier})"
        count = await self._call(
            description,
            self.web3.eth.get_transaction_count(address, block_identifier),
        )
        return self._expect_int(description, count)

    async def native_balance(
        self, address: str, block_identifier: BlockIdentifier
    ) -> int:
        """
        Get the native balance of an address in wei

        Args:
            address: Account address
            block_identifier: Block number or tag

        Returns:
            int: Balance in wei
        """
        description = f"get_balance({address}, {block_identifier})"
        balance = await self._call(
            description, self.web3.eth.get_balance(address, block_identifier)
        )
        return self._expect_int(description, balance)

    async def chain_id(self) -> int:
        value = await self._call("chain_id", self.web3.eth.chain_id)
        return self._expect_int("chain_id", value)

    async def latest_price(self, aggregator_address: str) -> Decimal:
        """
        Read the latest answer of a Chainlink price aggregator

        Args:
            aggregator_address: AggregatorV3 contract address

        Returns:
            Decimal: Price scaled by the aggregator's decimals
        """
        contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(aggregator_address),
            abi=AGGREGATOR_V3_ABI,
        )
        description = f"latestRoundData({aggregator_address})"
        round_data, decimals = await self._call(
            description,
            asyncio.gather(
                contract.functions.latestRoundData().call(),
                contract.functions.decimals().call(),
            ),
        )
        try:
            answer = int(round_data[1])
        except (TypeError, ValueError, IndexError) as e:
            raise ProviderError(
                f"{description} returned malformed round data: {round_data!r}"
            ) from e
        decimals = self._expect_int(description, decimals)
        return Decimal(answer) / (Decimal(10) ** decimals)
