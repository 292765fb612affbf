"""Tests for balance aggregation and dispatch."""

import asyncio
from typing import Optional

import pytest

from balance_checker.aggregator import BalanceAggregator, configured_tokens, get_balances
from balance_checker.balances import Balance, FungibleToken
from balance_checker.chains import Config, load_config
from balance_checker.config import Settings
from balance_checker.errors import (
    ProviderUnavailable,
    UnknownChain,
    UnsupportedChainType,
)
from balance_checker.providers.base import ChainProvider, get_all_balances
from balance_checker.providers.factory import get_provider

OWNER = "0x78697a9cfc48c1e9d1040172d51833ef78083b10"


class StubProvider(ChainProvider):
    """Provider returning canned balances and recording calls."""

    default_native_symbol = "ETH"
    default_native_decimals = 18

    def __init__(self, fail_on: Optional[str] = None, delays: Optional[dict] = None):
        super().__init__("https://stub.invalid")
        self.fail_on = fail_on
        self.delays = delays or {}
        self.calls: list[str] = []

    def validate_address(self, address: str) -> None:
        pass

    async def get_native_balance(self, address: str) -> Balance:
        self.calls.append(self.native_symbol)
        return Balance(token=self.native_symbol, raw_amount="10", decimals=self.native_decimals)

    async def get_token_balance(self, address: str, token: FungibleToken) -> Balance:
        self.calls.append(token.symbol)
        await asyncio.sleep(self.delays.get(token.symbol, 0))
        if token.symbol == self.fail_on:
            raise ProviderUnavailable(f"{token.symbol} RPC down")
        return Balance(token=token.symbol, raw_amount="1", decimals=token.decimals)


def stub_factory(provider: StubProvider):
    return lambda chain, chain_name: provider


class TestConfiguredTokens:
    """Tests for token list construction."""

    def test_document_order_and_symbols(self, chains_config: Config):
        """Test tokens follow config order and use map keys as symbols."""
        tokens = configured_tokens(chains_config.get_chain("testnet"))

        assert [t.symbol for t in tokens] == ["USDC", "DAI", "WBTC"]
        assert tokens[0].decimals == 6

    def test_tokens_without_address_skipped(self):
        """Test entries without a contract address are ignored."""
        config = Config.model_validate(
            {
                "chains": {
                    "x": {
                        "type": "evm",
                        "name": "X",
                        "rpc": "https://x.invalid",
                        "nativeToken": {"symbol": "ETH", "decimals": 18},
                        "tokens": {
                            "NOADDR": {"decimals": 6},
                            "EMPTY": {"address": "", "decimals": 6},
                            "USDC": {"address": "0x" + "11" * 20, "decimals": 6},
                        },
                    }
                }
            }
        )

        tokens = configured_tokens(config.get_chain("x"))

        assert [t.symbol for t in tokens] == ["USDC"]


class TestBalanceAggregator:
    """Tests for BalanceAggregator.get_balances."""

    @pytest.mark.asyncio
    async def test_native_first_then_tokens(self, chains_config: Config):
        """Test native balance is first and tokens follow config order."""
        provider = StubProvider()
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        balances = await aggregator.get_balances("testnet", OWNER)

        assert [b.token for b in balances] == ["ETH", "USDC", "DAI", "WBTC"]
        assert provider.calls == ["ETH", "USDC", "DAI", "WBTC"]

    @pytest.mark.asyncio
    async def test_empty_token_map(self, chains_config: Config):
        """Test chain without tokens still reports its native balance."""
        provider = StubProvider()
        provider.native_symbol = "GAS"
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        balances = await aggregator.get_balances("bare", OWNER)

        assert [b.token for b in balances] == ["GAS"]

    @pytest.mark.asyncio
    async def test_unknown_chain(self, chains_config: Config):
        """Test unknown chain raises UnknownChain before any provider call."""
        provider = StubProvider()
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        with pytest.raises(UnknownChain) as exc_info:
            await aggregator.get_balances("not-a-real-chain", OWNER)

        assert exc_info.value.chain_name == "not-a-real-chain"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_unsupported_chain_type(self, chains_config: Config):
        """Test chain type without provider raises UnsupportedChainType."""
        aggregator = BalanceAggregator(config=chains_config, settings=Settings())

        with pytest.raises(UnsupportedChainType):
            await aggregator.get_balances("icp", "ryjl3-tyaaa-aaaaa-aaaba-cai")

    @pytest.mark.asyncio
    async def test_fail_fast_sequential(self, chains_config: Config):
        """Test a failing token aborts the query with no partial result."""
        provider = StubProvider(fail_on="DAI")
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        with pytest.raises(ProviderUnavailable):
            await aggregator.get_balances("testnet", OWNER)

        # Third token is never requested
        assert provider.calls == ["ETH", "USDC", "DAI"]

    @pytest.mark.asyncio
    async def test_concurrent_preserves_order(self, chains_config: Config):
        """Test concurrent fan-out reassembles results in token order."""
        provider = StubProvider(delays={"USDC": 0.05, "DAI": 0.02, "WBTC": 0})
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        balances = await aggregator.get_balances("testnet", OWNER, concurrent=True)

        assert [b.token for b in balances] == ["ETH", "USDC", "DAI", "WBTC"]

    @pytest.mark.asyncio
    async def test_concurrent_from_settings(self, chains_config: Config):
        """Test CONCURRENT_FETCH setting enables fan-out."""
        provider = StubProvider(delays={"USDC": 0.02})
        aggregator = BalanceAggregator(
            config=chains_config,
            settings=Settings(concurrent_fetch=True),
            provider_factory=stub_factory(provider),
        )

        balances = await aggregator.get_balances("testnet", OWNER)

        assert provider.calls == ["ETH", "USDC", "DAI", "WBTC"]
        assert [b.token for b in balances] == ["ETH", "USDC", "DAI", "WBTC"]

    @pytest.mark.asyncio
    async def test_concurrent_fail_fast(self, chains_config: Config):
        """Test concurrent failure propagates and discards other results."""
        provider = StubProvider(fail_on="DAI", delays={"USDC": 0.5})
        aggregator = BalanceAggregator(
            config=chains_config, settings=Settings(), provider_factory=stub_factory(provider)
        )

        with pytest.raises(ProviderUnavailable, match="DAI"):
            await asyncio.wait_for(
                aggregator.get_balances("testnet", OWNER, concurrent=True), timeout=0.4
            )

    @pytest.mark.asyncio
    async def test_end_to_end_evm(self, rpc_transport):
        """Test dispatch through the real EVM provider over a mock transport."""
        transport = rpc_transport(
            {
                "eth_getBalance": hex(10**18),
                "eth_call": "0x" + format(1_500_000, "064x"),
            }
        )
        settings = Settings()
        aggregator = BalanceAggregator(
            config=load_config(),
            settings=settings,
            provider_factory=lambda chain, name: get_provider(
                chain, name, settings=settings, transport=transport
            ),
        )

        balances = await aggregator.get_balances("sepolia", OWNER)

        assert [(b.token, b.formatted) for b in balances] == [
            ("ETH", "1"),
            ("USDC", "1.5"),
            ("EURC", "1.5"),
        ]
        assert [c["method"] for c in transport.calls] == ["eth_getBalance", "eth_call", "eth_call"]


class TestGetAllBalances:
    """Tests for the composite provider helper."""

    @pytest.mark.asyncio
    async def test_fail_on_second_of_three(self):
        """Test no balances are returned when the second token fails."""
        provider = StubProvider(fail_on="B")
        tokens = [
            FungibleToken(contract_address=f"0x{i}", symbol=s, decimals=0)
            for i, s in enumerate("ABC")
        ]

        with pytest.raises(ProviderUnavailable):
            await get_all_balances(provider, OWNER, tokens)

        assert "C" not in provider.calls


class TestGetBalances:
    """Tests for the module-level convenience coroutine."""

    @pytest.mark.asyncio
    async def test_unknown_chain_with_bundled_config(self):
        """Test unknown chain against the bundled configuration."""
        with pytest.raises(UnknownChain):
            await get_balances("not-a-real-chain", OWNER)

    @pytest.mark.asyncio
    async def test_injected_config(self, chains_config: Config):
        """Test an injected config is used instead of the bundled one."""
        with pytest.raises(UnsupportedChainType):
            await get_balances("icp", OWNER, config=chains_config)
