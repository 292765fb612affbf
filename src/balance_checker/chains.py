"""Chain registry loaded from a static JSON document.

The bundled ``chains.json`` describes every supported chain:

    {"chains": {"sepolia": {"type": "evm", "name": ..., "rpc": ...,
                            "chainId": ..., "nativeToken": {...},
                            "tokens": {"USDC": {"address": ..., "decimals": 6}}}}}

The document is trusted and read once per process.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from balance_checker.config import get_settings
from balance_checker.errors import ConfigError

logger = logging.getLogger(__name__)

BUNDLED_CONFIG_PATH = Path(__file__).parent / "chains.json"


class TokenInfo(BaseModel):
    """Token metadata from the chains document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_address: Optional[str] = Field(default=None, alias="address")
    symbol: Optional[str] = None
    decimals: int = Field(..., ge=0, le=255)


class ChainConfig(BaseModel):
    """Configuration for a single chain."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Kept as a plain string so unknown types fail at dispatch, not at load
    chain_type: str = Field(..., alias="type")
    display_name: str = Field(..., alias="name")
    rpc_endpoint: str = Field(..., alias="rpc")
    chain_id: Optional[int] = Field(default=None, alias="chainId", ge=0)
    canister_id: Optional[str] = Field(default=None, alias="canisterId")
    native_token: TokenInfo = Field(..., alias="nativeToken")
    tokens: dict[str, TokenInfo] = Field(default_factory=dict)


class Config(BaseModel):
    """All configured chains, keyed by chain name."""

    model_config = ConfigDict(frozen=True)

    chains: dict[str, ChainConfig]

    def get_chain(self, chain_name: str) -> Optional[ChainConfig]:
        """Get a chain configuration by name."""
        return self.chains.get(chain_name)

    def chain_names(self) -> list[str]:
        """Get configured chain names in document order."""
        return list(self.chains)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load and validate a chains document.

    Args:
        path: JSON file to read (default: the bundled document)

    Raises:
        ConfigError: If the file is missing, not JSON, or not shaped like a Config
    """
    config_path = Path(path) if path else BUNDLED_CONFIG_PATH

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read chains config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Chains config {config_path} is not valid JSON: {e}") from e

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Chains config {config_path} is malformed: {e}") from e

    logger.debug(f"Loaded {len(config.chains)} chains from {config_path}")
    return config


@lru_cache
def get_config() -> Config:
    """Get the cached process-wide chains configuration."""
    return load_config(get_settings().chains_config_path)


def reset_config_cache() -> None:
    """Clear the cached configuration (useful for testing)."""
    get_config.cache_clear()
