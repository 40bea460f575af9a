from typing import Any, Dict, Optional

from hexbytes import HexBytes
from web3 import Web3

from .address_utils import AddressUtils

# Event signatures consumed by the engine
TRANSFER_EVENT_SIGNATURE = "Transfer(address,address,uint256)"
WITHDRAWAL_EVENT_SIGNATURE = "Withdrawal(address,uint256)"
TRANSFER_EVENT_TOPIC = HexBytes(Web3.keccak(text=TRANSFER_EVENT_SIGNATURE))
WITHDRAWAL_EVENT_TOPIC = HexBytes(Web3.keccak(text=WITHDRAWAL_EVENT_SIGNATURE))

# Chainlink AggregatorV3Interface, only the calls used for price refresh
AGGREGATOR_V3_ABI = [
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "latestRoundData",
        "outputs": [
            {"internalType": "uint80", "name": "roundId", "type": "uint80"},
            {"internalType": "int256", "name": "answer", "type": "int256"},
            {"internalType": "uint256", "name": "startedAt", "type": "uint256"},
            {"internalType": "uint256", "name": "updatedAt", "type": "uint256"},
            {"internalType": "uint80", "name": "answeredInRound", "type": "uint80"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]


def to_hex_str(value: Any) -> str:
    """Render bytes-like or hex string values as a 0x-prefixed hex string."""
    return "0x" + bytes(HexBytes(value)).hex()


def _topic_address(topic: Any) -> str:
    return AddressUtils.to_checksum("0x" + bytes(HexBytes(topic))[-20:].hex())


def _data_uint(data: Any) -> int:
    raw = bytes(HexBytes(data))
    if len(raw) < 32:
        raise ValueError("log data shorter than one word")
    return int.from_bytes(raw[:32], "big")


def parse_transfer_log(log: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Decode an ERC20 Transfer log from a transaction receipt.

    ERC721 transfers share the signature but index the token id as a fourth
    topic; those are ignored.

    Args:
        log: Raw receipt log

    Returns:
        Optional[Dict[str, Any]]: token, from_address, to_address, value and
        log_index, or None if the log is not an ERC20 Transfer
    """
    topics = log.get("topics") or []
    if len(topics) != 3 or HexBytes(topics[0]) != TRANSFER_EVENT_TOPIC:
        return None
    return {
        "token": log["address"],
        "from_address": _topic_address(topics[1]),
        "to_address": _topic_address(topics[2]),
        "value": _data_uint(log["data"]),
        "log_index": log.get("logIndex"),
    }


def parse_withdrawal_log(log: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Decode a wrapped-native Withdrawal log from a transaction receipt.

    Args:
        log: Raw receipt log

    Returns:
        Optional[Dict[str, Any]]: token, source, value and log_index, or None
        if the log is not a Withdrawal
    """
    topics = log.get("topics") or []
    if len(topics) != 2 or HexBytes(topics[0]) != WITHDRAWAL_EVENT_TOPIC:
        return None
    return {
        "token": log["address"],
        "source": _topic_address(topics[1]),
        "value": _data_uint(log["data"]),
        "log_index": log.get("logIndex"),
    }
