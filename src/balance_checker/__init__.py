"""Read-only balance aggregator for EVM and Solana chains."""

from balance_checker.aggregator import BalanceAggregator, get_balances
from balance_checker.balances import Balance, FungibleToken, Token, format_units
from balance_checker.chains import ChainConfig, Config, TokenInfo, get_config, load_config
from balance_checker.errors import (
    BalanceCheckerError,
    ConfigError,
    DecodeFailure,
    InvalidAddress,
    ProviderUnavailable,
    UnknownChain,
    UnsupportedChainType,
)
from balance_checker.providers import ChainProvider, EVMProvider, SolanaProvider

__all__ = [
    "Balance",
    "BalanceAggregator",
    "BalanceCheckerError",
    "ChainConfig",
    "ChainProvider",
    "Config",
    "ConfigError",
    "DecodeFailure",
    "EVMProvider",
    "FungibleToken",
    "InvalidAddress",
    "ProviderUnavailable",
    "SolanaProvider",
    "Token",
    "TokenInfo",
    "UnknownChain",
    "UnsupportedChainType",
    "format_units",
    "get_balances",
    "get_config",
    "load_config",
]
