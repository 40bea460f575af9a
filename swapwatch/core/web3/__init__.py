from .address_utils import ZERO_ADDRESS, AddressUtils
from .base import (
    AGGREGATOR_V3_ABI,
    TRANSFER_EVENT_TOPIC,
    WITHDRAWAL_EVENT_TOPIC,
    parse_transfer_log,
    parse_withdrawal_log,
    to_hex_str,
)
from .provider import ChainProvider

__all__ = [
    "AddressUtils",
    "ZERO_ADDRESS",
    "ChainProvider",
    "AGGREGATOR_V3_ABI",
    "TRANSFER_EVENT_TOPIC",
    "WITHDRAWAL_EVENT_TOPIC",
    "parse_transfer_log",
    "parse_withdrawal_log",
    "to_hex_str",
]
