"""
Data model of the native swaps detector.
"""
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Tuple

from pydantic import BaseModel

from swapwatch.strategies.native_swaps.utils.decimal_utils import add

ALERT_ID = "UNUSUAL-NATIVE-SWAPS"
ALERT_ACTION_TYPE = "unusual_native_swaps"


class TokenMovement(BaseModel):
    """One token leg sent away by the swapping address"""

    token: str
    amount: Decimal  # Raw token amount
    transaction_hash: str

    class Config:
        frozen = True


class SwapRecord(BaseModel):
    """One transaction's contribution to an address's window"""

    block_number: int
    block_timestamp: int
    transaction_hash: str
    native_value: Decimal  # Native units received in this transaction
    movements: Tuple[TokenMovement, ...]

    class Config:
        frozen = True


class AddressState(BaseModel):
    """
    Per-address aggregate over the current window.

    States are immutable: extending a window produces a new state, so a state
    handed to a reader is a consistent snapshot even while later merges for
    the same address go on.
    """

    cumulative_native: Decimal
    history: Tuple[SwapRecord, ...]

    class Config:
        frozen = True

    @classmethod
    def start(cls, native_value: Decimal, record: SwapRecord) -> "AddressState":
        return cls(cumulative_native=native_value, history=(record,))

    def extend(self, native_value: Decimal, record: SwapRecord) -> "AddressState":
        assert self.history, "address state without swap history"
        return AddressState(
            cumulative_native=add(self.cumulative_native, native_value),
            history=self.history + (record,),
        )

    @property
    def swap_count(self) -> int:
        return len(self.history)

    @property
    def first(self) -> SwapRecord:
        return self.history[0]

    @property
    def last(self) -> SwapRecord:
        return self.history[-1]

    @property
    def last_timestamp(self) -> int:
        return self.history[-1].block_timestamp

    @property
    def token_movements(self) -> List[TokenMovement]:
        return [movement for record in self.history for movement in record.movements]


class MergeOutcome(str, Enum):
    """Which branch a merge took"""

    CREATED = "created"  # no prior state for the address
    EXTENDED = "extended"
    RESET = "reset"  # prior window was closed and replaced


class MergeResult(NamedTuple):
    outcome: MergeOutcome
    state: AddressState


class NativeSwapAlert(BaseModel):
    """Alert raised for an address whose window crossed the thresholds"""

    alert_id: str = ALERT_ID
    name: str = "Unusual Native Swaps"
    description: str
    severity: str = "unknown"
    finding_type: str = "suspicious"
    chain_id: int
    attacker: str
    total_native_received: Decimal
    swap_count: int
    window_start_block: int
    window_start_timestamp: int
    window_end_block: int
    window_end_timestamp: int
    token_movements: Tuple[TokenMovement, ...]
    anomaly_score: float
    label: str = "Attacker"
    label_confidence: float = 0.3

    class Config:
        frozen = True

    @classmethod
    def from_state(
        cls, chain_id: int, attacker: str, state: AddressState, anomaly_score: float
    ) -> "NativeSwapAlert":
        return cls(
            description=f"Unusual native swap behavior by {attacker} has been detected",
            chain_id=chain_id,
            attacker=attacker,
            total_native_received=state.cumulative_native,
            swap_count=state.swap_count,
            window_start_block=state.first.block_number,
            window_start_timestamp=state.first.block_timestamp,
            window_end_block=state.last.block_number,
            window_end_timestamp=state.last.block_timestamp,
            token_movements=tuple(state.token_movements),
            anomaly_score=anomaly_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with decimals rendered as strings."""
        return self.model_dump(mode="json")
