"""Chain providers for balance queries."""

from balance_checker.providers.base import ChainProvider, get_all_balances
from balance_checker.providers.evm import EVMProvider
from balance_checker.providers.factory import get_provider, get_supported_chain_types
from balance_checker.providers.solana import SolanaProvider

__all__ = [
    "ChainProvider",
    "EVMProvider",
    "SolanaProvider",
    "get_all_balances",
    "get_provider",
    "get_supported_chain_types",
]
