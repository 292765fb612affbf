"""Factory for creating chain providers.

Supported chain types:
- evm: Ethereum and EVM-compatible chains (JSON-RPC)
- solana: Solana clusters (JSON-RPC)
"""

import logging
from typing import Optional

import httpx

from balance_checker.chains import ChainConfig
from balance_checker.config import Settings, get_settings
from balance_checker.errors import UnsupportedChainType
from balance_checker.providers.base import ChainProvider
from balance_checker.providers.evm import EVMProvider
from balance_checker.providers.solana import SolanaProvider

logger = logging.getLogger(__name__)

# Registry: chain type -> provider class
PROVIDERS: dict[str, type[ChainProvider]] = {
    EVMProvider.chain_type: EVMProvider,
    SolanaProvider.chain_type: SolanaProvider,
}


def get_provider(
    chain: ChainConfig,
    chain_name: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChainProvider:
    """Get a provider bound to a chain's RPC endpoint.

    Args:
        chain: Chain configuration
        chain_name: Configured chain name, used for RPC URL overrides
        settings: Settings to use (default: cached settings)
        transport: Custom httpx transport

    Raises:
        UnsupportedChainType: If no provider is registered for the chain type
    """
    settings = settings or get_settings()

    provider_cls = PROVIDERS.get(chain.chain_type)
    if provider_cls is None:
        raise UnsupportedChainType(chain.chain_type)

    rpc_url = chain.rpc_endpoint
    if chain_name:
        rpc_url = settings.get_rpc_url(chain_name, rpc_url)

    kwargs = {}
    if provider_cls is SolanaProvider:
        kwargs = {
            "commitment": settings.solana_commitment,
            "account_encoding": settings.solana_account_encoding,
        }

    provider = provider_cls(
        rpc_url,
        native_symbol=chain.native_token.symbol,
        native_decimals=chain.native_token.decimals,
        timeout=settings.rpc_timeout,
        transport=transport,
        **kwargs,
    )
    logger.debug(f"Using {provider!r} for {chain.display_name}")
    return provider


def get_supported_chain_types() -> list[str]:
    """Get chain types with a registered provider."""
    return list(PROVIDERS)
