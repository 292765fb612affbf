"""Balance value object and fixed-point formatting.

Raw on-chain amounts are integers in the token's smallest unit (wei,
lamports, ...). ``format_units`` renders them as an exact decimal string.
"""

import logging
import re
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def parse_raw_amount(raw_amount: str) -> int:
    """Parse a base-10 unsigned integer string.

    Unparsable input degrades to zero. This only applies to the final
    formatting step, after a successful fetch.
    """
    text = str(raw_amount).strip()
    if _DIGITS.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # Exceeds the interpreter's int string conversion limit
            pass
    logger.warning(f"Unparsable raw amount {text[:32]!r}, formatting as 0")
    return 0


def format_units(raw_amount: str, decimals: int) -> str:
    """Format a raw integer amount as an exact decimal string.

    Args:
        raw_amount: Amount in smallest units, as a decimal string
        decimals: Number of decimal places of the token

    Returns:
        ``"1"`` for 10**18 with 18 decimals, ``"1.5"`` for 1500000 with 6.
        No separators, no rounding.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    value = parse_raw_amount(raw_amount)
    whole, fractional = divmod(value, 10**decimals)

    if fractional == 0:
        return str(whole)

    fractional_str = str(fractional).zfill(decimals).rstrip("0")
    return f"{whole}.{fractional_str}"


class Balance(BaseModel):
    """Balance of one token for one address."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Token symbol (ETH, USDC, etc.)")
    raw_amount: str = Field(..., description="Raw balance in smallest units")
    decimals: int = Field(..., ge=0, le=255, description="Token decimals")

    @field_validator("raw_amount", mode="before")
    @classmethod
    def _stringify_amount(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @computed_field
    @property
    def formatted(self) -> str:
        """Human-readable amount derived from raw_amount and decimals."""
        return format_units(self.raw_amount, self.decimals)


class FungibleToken(BaseModel):
    """Interchangeable asset identified by a contract or mint address."""

    model_config = ConfigDict(frozen=True)

    contract_address: str
    symbol: str
    decimals: int = Field(..., ge=0, le=255)


# Closed set of token variants. Providers match on it explicitly.
Token = Union[FungibleToken]
