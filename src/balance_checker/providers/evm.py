"""EVM chain provider.

Native balance via eth_getBalance, ERC-20 balances via an eth_call of
balanceOf(address) against the token contract.
"""

import logging

from eth_utils import is_address, is_hex_address, remove_0x_prefix, to_normalized_address

from balance_checker.balances import Balance, FungibleToken, Token
from balance_checker.errors import DecodeFailure, InvalidAddress
from balance_checker.providers.base import ChainProvider

logger = logging.getLogger(__name__)

# ERC-20 balanceOf(address) function selector
BALANCE_OF_SELECTOR = "0x70a08231"

UINT256_HEX_LENGTH = 64


def encode_balance_of(owner: str) -> str:
    """Encode calldata for balanceOf(owner)."""
    owner_hex = remove_0x_prefix(to_normalized_address(owner))
    return f"{BALANCE_OF_SELECTOR}{owner_hex.zfill(UINT256_HEX_LENGTH)}"


def decode_quantity(value) -> int:
    """Decode a hex quantity such as an eth_getBalance result."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise DecodeFailure(f"Expected hex quantity, got {value!r}")
    try:
        return int(value, 16)
    except ValueError as e:
        raise DecodeFailure(f"Invalid hex quantity {value!r}") from e


def decode_uint256(value) -> int:
    """Decode the first 32-byte word of an eth_call result as uint256."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise DecodeFailure(f"Expected hex call result, got {value!r}")

    word = value[2:2 + UINT256_HEX_LENGTH]
    if len(word) < UINT256_HEX_LENGTH:
        # "0x" usually means the target has no contract code
        raise DecodeFailure(f"Call result too short for uint256: {value!r}")
    try:
        return int(word, 16)
    except ValueError as e:
        raise DecodeFailure(f"Invalid uint256 word {word!r}") from e


class EVMProvider(ChainProvider):
    """Provider for Ethereum-compatible chains."""

    chain_type = "evm"
    default_native_symbol = "ETH"
    default_native_decimals = 18

    def validate_address(self, address: str) -> None:
        """Validate an account address (checksum enforced for mixed case)."""
        if not address or not is_address(address):
            raise InvalidAddress(address, "expected 20-byte hex address")

    def normalize_address(self, address: str) -> str:
        """Validate an account address and return it 0x-prefixed and lowercase."""
        self.validate_address(address)
        return to_normalized_address(address)

    def _validate_contract(self, contract_address: str) -> None:
        # Contract addresses come from the trusted chains document; shape only
        if not contract_address or not is_hex_address(contract_address):
            raise InvalidAddress(contract_address, "invalid token contract address")

    async def get_native_balance(self, address: str) -> Balance:
        """Get native balance at the latest block."""
        owner = self.normalize_address(address)

        result = await self.rpc.call("eth_getBalance", [owner, "latest"])
        wei = decode_quantity(result)

        return Balance(
            token=self.native_symbol,
            raw_amount=str(wei),
            decimals=self.native_decimals,
        )

    async def get_token_balance(self, address: str, token: Token) -> Balance:
        """Get ERC-20 balance via balanceOf."""
        if not isinstance(token, FungibleToken):
            raise TypeError(f"Unsupported token variant: {type(token).__name__}")

        owner = self.normalize_address(address)
        self._validate_contract(token.contract_address)

        result = await self.rpc.call(
            "eth_call",
            [
                {"to": token.contract_address, "data": encode_balance_of(owner)},
                "latest",
            ],
        )
        amount = decode_uint256(result)
        logger.debug(f"{token.symbol} balanceOf {owner}: {amount}")

        return Balance(
            token=token.symbol,
            raw_amount=str(amount),
            decimals=token.decimals,
        )
