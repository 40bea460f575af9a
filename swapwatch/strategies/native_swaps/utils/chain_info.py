"""
Per-chain network data for the native swaps detector.
"""
from typing import Dict


class ReceiptMode:
    """How native value received by a sender is measured on a chain."""

    BALANCE_DIFF = "balance_diff"
    UNWRAP_EVENT = "unwrap_event"
    BURN_TO_ZERO = "burn_to_zero"
    INTERNAL_TX = "internal_tx"

    ALL = (BALANCE_DIFF, UNWRAP_EVENT, BURN_TO_ZERO, INTERNAL_TX)


# min_native_threshold is expressed in native units and is replaced at runtime
# by min_usd_threshold / price when price refresh is enabled
NETWORK_MAP: Dict[int, Dict[str, str]] = {
    1: {
        "native_usd_aggregator": "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419",
        "min_native_threshold": "30",
        "wrapped_native_address": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
    137: {
        "native_usd_aggregator": "0xAB594600376Ec9fD91F8e885dADF0CE036862dE0",
        "min_native_threshold": "49139",
        "wrapped_native_address": "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
    42161: {
        "native_usd_aggregator": "0x639Fe6ab55C921f74e7fac1ee960C0B6293ba612",
        "min_native_threshold": "30",
        "wrapped_native_address": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
    10: {
        "native_usd_aggregator": "0x13e3Ee699D1909E989722E753853AE30b17e08c5",
        "min_native_threshold": "30",
        "wrapped_native_address": "0x4200000000000000000000000000000000000006",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
    43114: {
        "native_usd_aggregator": "0x0A77230d17318075983913bC2145DB16C7366156",
        "min_native_threshold": "3096",
        "wrapped_native_address": "0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
    250: {
        "native_usd_aggregator": "0xf4766552D15AE4d256Ad41B6cf2933482B0680dc",
        "min_native_threshold": "115045",
        "wrapped_native_address": "0x21be370D5312f44cB42ce377BC9b8a0cEF1A4C83",
        "receipt_mode": ReceiptMode.BURN_TO_ZERO,
    },
    56: {
        "native_usd_aggregator": "0x0567F2323251f0Aab15c8dFb1967E4e8A7D42aeE",
        "min_native_threshold": "173",
        "wrapped_native_address": "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
        "receipt_mode": ReceiptMode.UNWRAP_EVENT,
    },
}


class ChainInfo:
    """
    Utility class for chain-related information.
    """

    CHAIN_NAMES = {
        1: "Ethereum",
        56: "Binance Smart Chain",
        137: "Polygon",
        10: "Optimism",
        42161: "Arbitrum",
        43114: "Avalanche",
        250: "Fantom",
    }

    NATIVE_SYMBOLS = {
        1: "ETH",
        56: "BNB",
        137: "MATIC",
        10: "ETH",
        42161: "ETH",
        43114: "AVAX",
        250: "FTM",
    }

    @classmethod
    def get_chain_name(cls, chain_id: int) -> str:
        return cls.CHAIN_NAMES.get(chain_id, f"Chain {chain_id}")

    @classmethod
    def get_native_symbol(cls, chain_id: int) -> str:
        return cls.NATIVE_SYMBOLS.get(chain_id, "Native")
