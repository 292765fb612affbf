"""Solana chain provider.

Native balance is the account's lamport count. SPL token balance is the sum
over every token account the owner holds for the mint; an owner may hold
several accounts for the same mint.
"""

import base64
import binascii
import logging
import struct
from typing import Any, Optional

import base58
import httpx

from balance_checker.balances import Balance, FungibleToken, Token
from balance_checker.errors import DecodeFailure, InvalidAddress
from balance_checker.providers.base import ChainProvider
from balance_checker.providers.rpc import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

PUBKEY_LENGTH = 32

# SPL token account layout: mint (32) | owner (32) | amount (u64 LE) | ...
TOKEN_ACCOUNT_AMOUNT_OFFSET = 64
TOKEN_ACCOUNT_MIN_LENGTH = TOKEN_ACCOUNT_AMOUNT_OFFSET + 8


def decode_token_account_amount(data: Any) -> int:
    """Extract the token amount from one account's ``data`` field.

    Handles ``[<base64>, "base64"]`` binary data, legacy base58 strings and
    ``jsonParsed`` structures.
    """
    if isinstance(data, dict):
        try:
            amount = data["parsed"]["info"]["tokenAmount"]["amount"]
            return int(str(amount))
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeFailure(f"Malformed parsed token account: {data!r}") from e

    if isinstance(data, list) and len(data) == 2:
        encoded, encoding = data
        if encoding != "base64":
            raise DecodeFailure(f"Unsupported account data encoding: {encoding}")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise DecodeFailure("Invalid base64 token account data") from e
    elif isinstance(data, str):
        try:
            raw = base58.b58decode(data)
        except ValueError as e:
            raise DecodeFailure("Invalid base58 token account data") from e
    else:
        raise DecodeFailure(f"Unrecognized token account data: {data!r}")

    if len(raw) < TOKEN_ACCOUNT_MIN_LENGTH:
        raise DecodeFailure(f"Token account data too short: {len(raw)} bytes")

    (amount,) = struct.unpack_from("<Q", raw, TOKEN_ACCOUNT_AMOUNT_OFFSET)
    return amount


def _result_value(result: Any, method: str) -> Any:
    if not isinstance(result, dict) or "value" not in result:
        raise DecodeFailure(f"{method} result has no value: {result!r}")
    return result["value"]


class SolanaProvider(ChainProvider):
    """Provider for Solana clusters."""

    chain_type = "solana"
    default_native_symbol = "SOL"
    default_native_decimals = 9

    def __init__(
        self,
        rpc_url: str,
        native_symbol: Optional[str] = None,
        native_decimals: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        commitment: str = "confirmed",
        account_encoding: str = "jsonParsed",
    ):
        super().__init__(rpc_url, native_symbol, native_decimals, timeout, transport)
        self.commitment = commitment
        self.account_encoding = account_encoding

    def validate_address(self, address: str) -> None:
        """Validate a base58 public key."""
        try:
            decoded = base58.b58decode(address) if address else b""
        except ValueError as e:
            raise InvalidAddress(address, "not base58") from e

        if len(decoded) != PUBKEY_LENGTH:
            raise InvalidAddress(address, f"expected {PUBKEY_LENGTH}-byte public key")

    async def get_native_balance(self, address: str) -> Balance:
        """Get lamport balance."""
        self.validate_address(address)

        result = await self.rpc.call(
            "getBalance", [address, {"commitment": self.commitment}]
        )
        lamports = _result_value(result, "getBalance")
        if not isinstance(lamports, int) or isinstance(lamports, bool) or lamports < 0:
            raise DecodeFailure(f"Invalid lamport balance: {lamports!r}")

        return Balance(
            token=self.native_symbol,
            raw_amount=str(lamports),
            decimals=self.native_decimals,
        )

    async def get_token_balance(self, address: str, token: Token) -> Balance:
        """Get SPL token balance summed across all token accounts for the mint."""
        if not isinstance(token, FungibleToken):
            raise TypeError(f"Unsupported token variant: {type(token).__name__}")

        self.validate_address(address)
        self.validate_address(token.contract_address)

        result = await self.rpc.call(
            "getTokenAccountsByOwner",
            [
                address,
                {"mint": token.contract_address},
                {"encoding": self.account_encoding, "commitment": self.commitment},
            ],
        )
        accounts = _result_value(result, "getTokenAccountsByOwner")
        if not isinstance(accounts, list):
            raise DecodeFailure(f"Expected token account list, got {accounts!r}")

        total = 0
        for entry in accounts:
            try:
                data = entry["account"]["data"]
            except (KeyError, TypeError) as e:
                raise DecodeFailure(f"Malformed token account entry: {entry!r}") from e
            total += decode_token_account_amount(data)

        logger.debug(
            f"{token.symbol} across {len(accounts)} token accounts of {address}: {total}"
        )

        return Balance(
            token=token.symbol,
            raw_amount=str(total),
            decimals=token.decimals,
        )
