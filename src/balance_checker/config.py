"""Runtime settings using pydantic-settings.

Chain metadata lives in the bundled chains document (see ``chains.py``);
these settings only tune how it is loaded and how RPC endpoints are reached.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from balance_checker.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Chains document
    # ======================
    chains_config_path: Optional[str] = Field(
        default=None, description="Path to a chains JSON document (default: bundled)"
    )
    default_chain: str = Field(default="sepolia", description="Chain queried when none is given")

    # ======================
    # RPC
    # ======================
    rpc_timeout: float = Field(default=30.0, description="RPC request timeout in seconds")
    rpc_url_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="JSON object mapping chain name to an RPC URL replacing the configured one",
    )
    concurrent_fetch: bool = Field(
        default=False, description="Fetch token balances concurrently"
    )

    # ======================
    # Solana
    # ======================
    solana_commitment: str = Field(default="confirmed", description="Solana commitment level")
    solana_account_encoding: Literal["jsonParsed", "base64"] = Field(
        default="jsonParsed", description="Encoding requested for token accounts"
    )

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    def get_rpc_url(self, chain_name: str, default: str) -> str:
        """Get RPC URL for a chain, honouring overrides."""
        return self.rpc_url_overrides.get(chain_name, default)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except (SettingsError, ValidationError) as e:
        raise ConfigError(f"Invalid settings: {e}") from e
