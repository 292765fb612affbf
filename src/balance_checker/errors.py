"""Error taxonomy for balance queries.

Every error is terminal for the current query. Nothing here is retried.
"""

from typing import Optional


class BalanceCheckerError(Exception):
    """Base class for all balance checker errors."""

    pass


class ConfigError(BalanceCheckerError):
    """Raised when the chain configuration is missing or malformed."""

    pass


class UnknownChain(BalanceCheckerError):
    """Raised when a chain name is not present in the configuration."""

    def __init__(self, chain_name: str):
        self.chain_name = chain_name
        super().__init__(f"Chain '{chain_name}' not found in configuration")


class UnsupportedChainType(BalanceCheckerError):
    """Raised when no provider is registered for a chain type."""

    def __init__(self, chain_type: str):
        self.chain_type = chain_type
        super().__init__(f"Unsupported chain type: {chain_type}")


class InvalidAddress(BalanceCheckerError):
    """Raised when an account, contract or mint address cannot be parsed."""

    def __init__(self, address: str, reason: Optional[str] = None):
        self.address = address
        self.reason = reason
        message = f"Invalid address: {address}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ProviderUnavailable(BalanceCheckerError):
    """Raised on RPC transport, HTTP or JSON-RPC level failures."""

    pass


class DecodeFailure(BalanceCheckerError):
    """Raised when an RPC response or account payload cannot be decoded."""

    pass
