"""
Address canonicalization helpers.
"""
from web3 import Web3

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class AddressUtils:
    """
    Utility class for address-related operations and checks.

    Every address that enters the engine is converted to its EIP-55 checksum
    form, so equality and dictionary lookups never depend on how the source
    encoded the hex digits.
    """

    @classmethod
    def to_checksum(cls, address: str) -> str:
        """
        Normalize an address to its checksum form.

        Args:
            address: Hex address in any letter case

        Returns:
            str: Checksummed address

        Raises:
            ValueError: If the value is not a 20-byte hex address
        """
        if not isinstance(address, str) or not Web3.is_address(address.lower()):
            raise ValueError(f"Invalid address: {address!r}")
        return Web3.to_checksum_address(address.lower())

    @classmethod
    def is_zero_address(cls, address: str) -> bool:
        return int(address, 16) == 0

    @classmethod
    def same_address(cls, left: str, right: str) -> bool:
        """Compare two addresses regardless of letter case."""
        return left.lower() == right.lower()
