from .native_swaps import NativeSwapsStrategy

__all__ = ["NativeSwapsStrategy"]
