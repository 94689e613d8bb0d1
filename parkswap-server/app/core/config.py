"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./parkswap.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7


class StripeSettings(BaseModel):
    secret_key: str = ""
    webhook_secret: str = ""
    return_url: str = "https://parkswap.app"
    fee_percent: float = 1.4
    fee_fixed: float = 0.25
    api_version: str = "2024-04-10"
    webhook_tolerance: int = 300


class SpotSettings(BaseModel):
    # Seconds between sweeps that expire lapsed listings; 0 disables the sweeper.
    expiry_sweep_seconds: int = 60


class WalletSettings(BaseModel):
    currency: str = "eur"
    topup_min_cents: int = 100
    topup_max_cents: int = 10000
    premium_parks_max: int = 5


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "ParkSwap Server"
    project_id: str = "parkswap-36bb2"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    stripe: StripeSettings = StripeSettings()
    wallet: WalletSettings = WalletSettings()
    spots: SpotSettings = SpotSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def stripe_enabled(self) -> bool:
        return bool(self.stripe.secret_key)

    @property
    def premium_parks_max(self) -> int:
        return self.wallet.premium_parks_max


@lru_cache()
def get_settings() -> Settings:
    return Settings()
