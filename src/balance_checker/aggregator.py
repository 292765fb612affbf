"""Balance aggregation across native currency and configured tokens.

Resolves the chain, picks the provider for its chain type and fans out over
the native balance plus every configured token with a contract address.
"""

import logging
from typing import Callable, Optional

from balance_checker.balances import Balance, FungibleToken
from balance_checker.chains import ChainConfig, Config, get_config
from balance_checker.config import Settings, get_settings
from balance_checker.errors import UnknownChain
from balance_checker.providers.base import ChainProvider, get_all_balances
from balance_checker.providers.factory import get_provider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ChainConfig, str], ChainProvider]


def configured_tokens(chain: ChainConfig) -> list[FungibleToken]:
    """Build the token list for a chain, in document order.

    Entries without a contract address are skipped. The map key is the
    reported symbol.
    """
    return [
        FungibleToken(
            contract_address=info.contract_address,
            symbol=symbol,
            decimals=info.decimals,
        )
        for symbol, info in chain.tokens.items()
        if info.contract_address
    ]


class BalanceAggregator:
    """Fetches all configured balances of an address on one chain."""

    def __init__(
        self,
        config: Optional[Config] = None,
        settings: Optional[Settings] = None,
        provider_factory: Optional[ProviderFactory] = None,
    ):
        """Initialize aggregator.

        Args:
            config: Chains configuration (default: cached bundled config)
            settings: Runtime settings (default: cached settings)
            provider_factory: Callable building a provider for a chain
        """
        self._config = config
        self.settings = settings or get_settings()
        self._provider_factory = provider_factory or self._default_provider

    @property
    def config(self) -> Config:
        """Chains configuration, loaded on first use."""
        if self._config is None:
            self._config = get_config()
        return self._config

    def _default_provider(self, chain: ChainConfig, chain_name: str) -> ChainProvider:
        return get_provider(chain, chain_name, settings=self.settings)

    async def get_balances(
        self,
        chain_name: str,
        address: str,
        concurrent: Optional[bool] = None,
    ) -> list[Balance]:
        """Get native and token balances of an address.

        Args:
            chain_name: Configured chain name (sepolia, solana-devnet, ...)
            address: Address to query
            concurrent: Fetch tokens concurrently (default: from settings)

        Returns:
            Native balance first, then token balances in config order

        Raises:
            UnknownChain: If the chain is not configured
            UnsupportedChainType: If no provider handles the chain type
            InvalidAddress, ProviderUnavailable, DecodeFailure: From the provider
        """
        chain = self.config.get_chain(chain_name)
        if chain is None:
            raise UnknownChain(chain_name)

        provider = self._provider_factory(chain, chain_name)
        tokens = configured_tokens(chain)

        if concurrent is None:
            concurrent = self.settings.concurrent_fetch

        logger.info(
            f"Fetching {len(tokens) + 1} balances for {address} on {chain_name}"
        )

        return await get_all_balances(provider, address, tokens, concurrent=concurrent)


async def get_balances(
    chain_name: str,
    address: str,
    config: Optional[Config] = None,
) -> list[Balance]:
    """Get balances for an address on a specific chain."""
    return await BalanceAggregator(config=config).get_balances(chain_name, address)
