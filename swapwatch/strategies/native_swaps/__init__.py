"""
Native Swaps Strategy Package

Detects newly created addresses that repeatedly convert ERC20 tokens into
the chain's native asset within a short time span, accumulating more native
value than a chain-specific threshold.
"""

from swapwatch.strategies.native_swaps.core.strategy import NativeSwapsStrategy

__all__ = ["NativeSwapsStrategy"]
