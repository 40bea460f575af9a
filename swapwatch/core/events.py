from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .web3.address_utils import AddressUtils


class Event(BaseModel):
    """Base class for all events"""

    type: str = Field(...)  # Required field

    class Config:
        """Pydantic configuration"""

        frozen = True
        arbitrary_types_allowed = True


class TransferLog(BaseModel):
    """A decoded ERC20 ``Transfer(address,address,uint256)`` log"""

    token: str  # Emitting token contract
    from_address: str
    to_address: str
    value: int  # Raw token amount
    log_index: Optional[int] = None

    @field_validator("token", "from_address", "to_address")
    @classmethod
    def _canonical_address(cls, value: str) -> str:
        return AddressUtils.to_checksum(value)

    class Config:
        frozen = True


class WithdrawalLog(BaseModel):
    """A decoded wrapped-native ``Withdrawal(address,uint256)`` log"""

    token: str  # Wrapped-native contract that emitted the log
    source: str  # Address whose wrapped balance was unwrapped
    value: int  # Amount in wei
    log_index: Optional[int] = None

    @field_validator("token", "source")
    @classmethod
    def _canonical_address(cls, value: str) -> str:
        return AddressUtils.to_checksum(value)

    class Config:
        frozen = True


class SwapTransactionEvent(Event):
    """
    One transaction together with the token logs it emitted

    Addresses are normalized to their checksum form on construction so that
    every later comparison and map lookup is case-consistent.
    """

    type: str = "swap_transaction"
    chain_id: int
    transaction_hash: str
    sender: str  # msg.sender / tx.from
    block_number: int
    block_timestamp: int  # Unix seconds
    transfers: Tuple[TransferLog, ...] = ()
    withdrawals: Tuple[WithdrawalLog, ...] = ()

    @field_validator("sender")
    @classmethod
    def _canonical_sender(cls, value: str) -> str:
        return AddressUtils.to_checksum(value)

    def __str__(self) -> str:
        return (
            f"Swap Transaction Event:\n"
            f"  Chain: {self.chain_id}\n"
            f"  Hash: {self.transaction_hash}\n"
            f"  Block: {self.block_number}\n"
            f"  Sender: {self.sender}\n"
            f"  Transfers: {len(self.transfers)}\n"
            f"  Withdrawals: {len(self.withdrawals)}\n"
            f"  Timestamp: {self.block_timestamp}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary format

        Returns:
            Dict[str, Any]: Event data with integer amounts rendered as strings
        """
        return {
            "type": self.type,
            "chain_id": self.chain_id,
            "transaction_hash": self.transaction_hash,
            "sender": self.sender,
            "block_number": self.block_number,
            "block_timestamp": self.block_timestamp,
            "transfers": [
                {
                    "token": t.token,
                    "from": t.from_address,
                    "to": t.to_address,
                    "value": str(t.value),
                }
                for t in self.transfers
            ],
            "withdrawals": [
                {"token": w.token, "source": w.source, "value": str(w.value)}
                for w in self.withdrawals
            ],
        }
