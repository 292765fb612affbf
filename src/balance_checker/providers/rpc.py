"""Minimal JSON-RPC 2.0 client over httpx.

Maps transport failures to ``ProviderUnavailable`` and unusable payloads to
``DecodeFailure``. Timeouts are the only policy applied here.
"""

import itertools
import logging
from typing import Any, Optional

import httpx

from balance_checker.errors import ConfigError, DecodeFailure, ProviderUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class JsonRpcClient:
    """JSON-RPC client bound to a single endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            rpc_url: HTTP(S) JSON-RPC endpoint
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests inject a MockTransport)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def call(self, method: str, params: list) -> Any:
        """Call a JSON-RPC method and return its ``result`` member.

        Raises:
            ProviderUnavailable: On network, HTTP status or JSON-RPC errors
            ConfigError: If the RPC URL cannot be parsed
            DecodeFailure: If the response is not a JSON-RPC result
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug(f"RPC {method} -> {self.rpc_url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
        except httpx.InvalidURL as e:
            raise ConfigError(f"Invalid RPC URL {self.rpc_url!r}: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"RPC {method} failed at {self.rpc_url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeFailure(f"RPC {method} returned non-JSON response") from e

        if not isinstance(data, dict):
            raise DecodeFailure(f"RPC {method} returned unexpected payload: {data!r}")

        error = data.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ProviderUnavailable(f"RPC {method} error: {message}")

        if "result" not in data:
            raise DecodeFailure(f"RPC {method} response has no result")

        return data["result"]
