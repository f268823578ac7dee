"""
Application configuration.

Loads settings from environment variables (or a ``.env`` file). The signing
secret has no usable default: the app refuses to start without one.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from campaigns.auth.tokens import TokenSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "*"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret_key: str = ""
    jwt_issuer: str = "CampaignsAPI"
    jwt_audience: str = "CampaignsAPIClients"
    jwt_expiry_minutes: int = 60
    jwt_algorithm: str = "HS256"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    seed_demo_data: bool = False
    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def token_settings(self) -> TokenSettings:
        """Signing configuration handed to the TokenService."""
        return TokenSettings(
            secret_key=self.jwt_secret_key,
            issuer=self.jwt_issuer,
            audience=self.jwt_audience,
            expiry_minutes=self.jwt_expiry_minutes,
            algorithm=self.jwt_algorithm,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
