"""Pytest configuration and fixtures."""

import json
import os

import httpx
import pytest

# Set test environment
os.environ["DEBUG"] = "false"
os.environ["CONCURRENT_FETCH"] = "false"
os.environ.pop("CHAINS_CONFIG_PATH", None)
os.environ.pop("RPC_URL_OVERRIDES", None)

from balance_checker.chains import Config, reset_config_cache
from balance_checker.config import get_settings


@pytest.fixture(autouse=True)
def clear_caches():
    """Reset cached settings and chains config around each test."""
    get_settings.cache_clear()
    reset_config_cache()
    yield
    get_settings.cache_clear()
    reset_config_cache()


@pytest.fixture
def rpc_transport():
    """Build an httpx MockTransport answering JSON-RPC calls by method name.

    Values in ``responses`` may be a result, a callable taking the params and
    returning a result, or a ready ``httpx.Response``. Every request payload
    is recorded on ``transport.calls``.
    """

    def factory(responses: dict) -> httpx.MockTransport:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            calls.append(payload)
            reply = responses[payload["method"]]
            if callable(reply):
                reply = reply(payload["params"])
            if isinstance(reply, httpx.Response):
                return reply
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": payload["id"], "result": reply}
            )

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return factory


@pytest.fixture
def chains_config() -> Config:
    """Small in-memory chains configuration."""
    return Config.model_validate(
        {
            "chains": {
                "testnet": {
                    "type": "evm",
                    "name": "Test EVM",
                    "rpc": "https://rpc.test.invalid",
                    "chainId": 1337,
                    "nativeToken": {"symbol": "ETH", "decimals": 18},
                    "tokens": {
                        "USDC": {"address": "0x" + "11" * 20, "decimals": 6},
                        "DAI": {"address": "0x" + "22" * 20, "decimals": 18},
                        "WBTC": {"address": "0x" + "33" * 20, "decimals": 8},
                    },
                },
                "bare": {
                    "type": "evm",
                    "name": "No Tokens",
                    "rpc": "https://bare.test.invalid",
                    "nativeToken": {"symbol": "GAS", "decimals": 18},
                    "tokens": {},
                },
                "icp": {
                    "type": "icp",
                    "name": "Internet Computer",
                    "rpc": "https://icp.test.invalid",
                    "canisterId": "ryjl3-tyaaa-aaaaa-aaaba-cai",
                    "nativeToken": {"symbol": "ICP", "decimals": 8},
                    "tokens": {},
                },
            }
        }
    )
