from .swap_transaction import SwapTransactionCollector

__all__ = ["SwapTransactionCollector"]
