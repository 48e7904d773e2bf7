from __future__ import annotations

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="", case_sensitive=False)

    LOG_LEVEL: str = Field(default="INFO")

    # Account the coordinator acts as (collects attached value, spends token allowances)
    MARKET_ACCOUNT: str = Field(default="bazaar-market")

    # Royalty configuration; basis points, 1000 = 10%
    DEFAULT_ROYALTY_RECIPIENT: str = Field(default="bazaar-royalties")
    DEFAULT_ROYALTY_BPS: int = Field(default=1000, ge=0, le=10_000)

    # Optional remote royalty registry; static config is used when unset
    ROYALTY_REGISTRY_URL: AnyHttpUrl | None = None
    USER_AGENT: str = Field(default="Bazaar/0.1")
    REQUEST_TIMEOUT: float = Field(default=5.0, gt=0.0)
    RETRY_MAX: int = Field(default=3, ge=1)

    # Optional whitelist of accepted token addresses (comma-separated)
    ALLOWED_TOKENS: str | None = None

    def allowed_tokens(self) -> set[str] | None:
        if not self.ALLOWED_TOKENS:
            return None
        return {t.strip() for t in self.ALLOWED_TOKENS.split(",") if t.strip()}


settings = Settings()
