"""
Exception hierarchy for SwapWatch.
"""


class SwapWatchError(Exception):
    """Base class for all SwapWatch errors"""


class ProviderError(SwapWatchError):
    """An RPC or explorer query failed, timed out or returned malformed data"""


class ConfigurationError(SwapWatchError):
    """Invalid or incomplete component configuration"""


class UnsupportedNetworkError(ConfigurationError):
    """No network data is known for the requested chain id"""

    def __init__(self, chain_id: int):
        super().__init__("Network not supported")
        self.chain_id = chain_id
