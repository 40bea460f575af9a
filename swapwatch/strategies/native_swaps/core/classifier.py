"""
Selects the token transfers of a transaction that represent the sender
giving tokens away in a swap.
"""
from typing import Iterable, List, Sequence, Tuple

from swapwatch.core.events import TransferLog
from swapwatch.core.web3.address_utils import AddressUtils
from swapwatch.strategies.native_swaps.models import TokenMovement
from swapwatch.strategies.native_swaps.utils.decimal_utils import to_decimal


class SwapClassifier:
    """
    Swap classifier.

    A transfer qualifies when the sender sends tokens to a non-zero address
    and the recipient does not burn exactly that amount of the same token
    within the same transaction. The burn case covers liquidity removal and
    token-for-token swaps where the received token is destroyed right away.
    """

    def classify(self, transfers: Sequence[TransferLog], sender: str) -> List[TransferLog]:
        """
        Filter a transaction's transfers down to the qualifying ones

        Args:
            transfers: All decoded Transfer logs of the transaction
            sender: Transaction sender, checksummed

        Returns:
            List[TransferLog]: Qualifying transfers in log order
        """
        burns = [t for t in transfers if AddressUtils.is_zero_address(t.to_address)]
        return [
            transfer
            for transfer in transfers
            if transfer.from_address == sender
            and not AddressUtils.is_zero_address(transfer.to_address)
            and not self.is_canceled_by_burn(transfer, burns)
        ]

    @staticmethod
    def is_canceled_by_burn(transfer: TransferLog, burns: Iterable[TransferLog]) -> bool:
        return any(
            burn.token == transfer.token
            and burn.from_address == transfer.to_address
            and burn.value == transfer.value
            for burn in burns
        )

    @staticmethod
    def to_movements(
        transfers: Iterable[TransferLog], transaction_hash: str
    ) -> Tuple[TokenMovement, ...]:
        return tuple(
            TokenMovement(
                token=t.token,
                amount=to_decimal(t.value),
                transaction_hash=transaction_hash,
            )
            for t in transfers
        )
