"""
Utility functions and classes for the native swaps strategy.
"""

from swapwatch.strategies.native_swaps.utils.chain_info import NETWORK_MAP, ChainInfo, ReceiptMode
from swapwatch.strategies.native_swaps.utils.network import ChainConfig, NetworkManager

__all__ = [
    "ChainInfo",
    "ChainConfig",
    "NetworkManager",
    "NETWORK_MAP",
    "ReceiptMode",
]
