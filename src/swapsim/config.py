"""Application configuration using pydantic-settings.

Settings are read once from the environment (and an optional .env file) and
turned into an immutable PipelineConfig that is passed to every component.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from swapsim.errors import ConfigError
from swapsim.routing.base import SwapIntent
from swapsim.signing.keys import keypair_from_secret, keypair_from_seed_phrase

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_JUPITER_API_URL = "https://lite-api.jup.ag/swap/v1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # ======================
    # Swap intent
    # ======================
    input_mint: str = Field(default="", description="Mint address of the token to sell")
    output_mint: str = Field(default="", description="Mint address of the token to buy")
    amount_ui: str = Field(default="", description="Human-readable amount of the input token")
    input_decimals: int = Field(default=9, ge=0, description="Decimals of the input token")
    slippage_bps: int = Field(default=50, ge=0, description="Slippage tolerance in basis points")
    restrict_intermediate: bool = Field(
        default=True, description="Restrict intermediate tokens to highly liquid ones"
    )
    only_direct_routes: bool = Field(default=False, description="Only consider single-hop routes")
    max_accounts: Optional[int] = Field(
        default=None, gt=0, description="Rough cap on accounts used by the route"
    )

    # ======================
    # Identity / key material
    # ======================
    private_key: Optional[str] = Field(
        default=None, description="Signer secret (JSON byte array or base58, 32 or 64 bytes)"
    )
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 seed phrase, Solana account 0 is used for signing"
    )
    public_key: Optional[str] = Field(
        default=None, description="Public key for unsigned simulation when no secret is set"
    )

    # ======================
    # Endpoints
    # ======================
    rpc_url: str = Field(default=DEFAULT_RPC_URL, description="Solana RPC URL")
    jupiter_api_url: str = Field(default=DEFAULT_JUPITER_API_URL, description="Jupiter swap API base URL")
    jupiter_api_key: Optional[str] = Field(default=None, description="Optional Jupiter API key")
    http_timeout: Optional[float] = Field(
        default=30.0, gt=0, description="Seconds before an aggregator or RPC call is abandoned"
    )

    # ======================
    # Environment
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def has_key_material(self) -> bool:
        """Check if any signing secret is configured."""
        return bool((self.private_key or "").strip() or (self.wallet_seed_phrase or "").strip())

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "input_mint": self.input_mint or "(not set)",
            "output_mint": self.output_mint or "(not set)",
            "amount_ui": self.amount_ui or "(not set)",
            "input_decimals": self.input_decimals,
            "slippage_bps": self.slippage_bps,
            "restrict_intermediate": self.restrict_intermediate,
            "only_direct_routes": self.only_direct_routes,
            "max_accounts": self.max_accounts,
            "private_key": "***" if (self.private_key or "").strip() else "(not set)",
            "wallet_seed_phrase": "***" if (self.wallet_seed_phrase or "").strip() else "(not set)",
            "public_key": self.public_key or "(not set)",
            "rpc_url": self.rpc_url,
            "jupiter_api_url": self.jupiter_api_url,
            "jupiter_api_key": "***" if self.jupiter_api_key else "(not set)",
            "http_timeout": self.http_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable run configuration, built once at start-up."""

    intent: SwapIntent
    user_public_key: str
    keypair: Optional[Keypair] = None
    rpc_url: str = DEFAULT_RPC_URL
    jupiter_api_url: str = DEFAULT_JUPITER_API_URL
    jupiter_api_key: Optional[str] = None
    http_timeout: Optional[float] = 30.0

    @property
    def signing_enabled(self) -> bool:
        return self.keypair is not None


def build_settings(**overrides) -> Settings:
    """Create settings with explicit overrides taking priority over the environment.

    Raises:
        ConfigError: If a value cannot be parsed or violates a constraint
    """
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(settings: Optional[Settings] = None) -> PipelineConfig:
    """Validate settings and resolve key material into a PipelineConfig.

    Raises:
        ConfigError: If required inputs are missing or invalid
    """
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    missing = [
        name
        for name, value in (
            ("INPUT_MINT", settings.input_mint),
            ("OUTPUT_MINT", settings.output_mint),
            ("AMOUNT_UI", settings.amount_ui),
        )
        if not value.strip()
    ]
    if missing:
        raise ConfigError(f"Please set {', '.join(missing)} in the environment or .env")

    keypair = _resolve_keypair(settings)
    if keypair is not None:
        user_public_key = str(keypair.pubkey())
    else:
        user_public_key = (settings.public_key or "").strip()
        if not user_public_key:
            raise ConfigError(
                "No PRIVATE_KEY, WALLET_SEED_PHRASE or PUBLIC_KEY provided. Provide a secret "
                "(to sign) or PUBLIC_KEY (to simulate unsigned)."
            )
        try:
            Pubkey.from_string(user_public_key)
        except ValueError as e:
            raise ConfigError(f"PUBLIC_KEY is not a valid Solana address: {user_public_key}") from e

    intent = SwapIntent(
        input_mint=settings.input_mint.strip(),
        output_mint=settings.output_mint.strip(),
        ui_amount=settings.amount_ui.strip(),
        decimals=settings.input_decimals,
        slippage_bps=settings.slippage_bps,
        restrict_intermediate_tokens=settings.restrict_intermediate,
        only_direct_routes=settings.only_direct_routes,
        max_accounts=settings.max_accounts,
    )

    logger.debug(f"Loaded configuration: {settings.get_safe_dict()}")

    return PipelineConfig(
        intent=intent,
        user_public_key=user_public_key,
        keypair=keypair,
        rpc_url=settings.rpc_url,
        jupiter_api_url=settings.jupiter_api_url.rstrip("/"),
        jupiter_api_key=settings.jupiter_api_key,
        http_timeout=settings.http_timeout,
    )


def _resolve_keypair(settings: Settings) -> Optional[Keypair]:
    """PRIVATE_KEY wins over WALLET_SEED_PHRASE."""
    secret = (settings.private_key or "").strip()
    if secret:
        return keypair_from_secret(secret)

    phrase = (settings.wallet_seed_phrase or "").strip()
    if phrase:
        return keypair_from_seed_phrase(phrase)

    return None
