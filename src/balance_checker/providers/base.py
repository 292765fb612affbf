"""Chain provider interface.

A provider translates balance queries into one chain family's RPC calls.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import httpx

from balance_checker.balances import Balance, Token
from balance_checker.providers.rpc import DEFAULT_TIMEOUT, JsonRpcClient

logger = logging.getLogger(__name__)


class ChainProvider(ABC):
    """Abstract base class for chain providers."""

    chain_type: str = ""
    default_native_symbol: str = ""
    default_native_decimals: int = 0

    def __init__(
        self,
        rpc_url: str,
        native_symbol: Optional[str] = None,
        native_decimals: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize provider.

        Args:
            rpc_url: JSON-RPC endpoint of the chain
            native_symbol: Symbol reported for the native balance
            native_decimals: Decimals of the native currency
            timeout: RPC timeout in seconds
            transport: Custom httpx transport
        """
        self.rpc = JsonRpcClient(rpc_url, timeout=timeout, transport=transport)
        self.native_symbol = native_symbol or self.default_native_symbol
        self.native_decimals = (
            self.default_native_decimals if native_decimals is None else native_decimals
        )

    @abstractmethod
    def validate_address(self, address: str) -> None:
        """Check an address, raising InvalidAddress if it cannot be used."""
        pass

    @abstractmethod
    async def get_native_balance(self, address: str) -> Balance:
        """Get the native currency balance of an address."""
        pass

    @abstractmethod
    async def get_token_balance(self, address: str, token: Token) -> Balance:
        """Get the balance of a token held by an address."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rpc_url={self.rpc.rpc_url!r})"


async def get_all_balances(
    provider: ChainProvider,
    address: str,
    tokens: Sequence[Token],
    concurrent: bool = False,
) -> list[Balance]:
    """Get native balance followed by each token balance, in token order.

    The first failure propagates and no partial list is returned. With
    ``concurrent`` set, token fetches run together and outstanding ones are
    cancelled as soon as one fails.

    Args:
        provider: Provider bound to the chain
        address: Address to query
        tokens: Tokens to query, in output order
        concurrent: Fetch token balances concurrently

    Returns:
        Native balance at index 0, then one balance per token
    """
    balances = [await provider.get_native_balance(address)]

    if not concurrent:
        for token in tokens:
            balances.append(await provider.get_token_balance(address, token))
        return balances

    tasks = [
        asyncio.ensure_future(provider.get_token_balance(address, token))
        for token in tokens
    ]
    try:
        token_balances = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    balances.extend(token_balances)
    return balances
