"""Dashboard API configuration using Pydantic Settings"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SESSION_MAX_AGE = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """Dashboard API settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord OAuth application
    client_id: str = Field(..., description="Discord OAuth Client ID")
    client_secret: str = Field(..., description="Discord OAuth Client Secret")
    discord_redirect_uri: str = Field(
        default="http://localhost:3001/api/auth/callback",
        description="OAuth redirect URI registered with Discord",
    )

    # Dashboard frontend, used for CORS and post-login redirects
    dashboard_url: str = Field(default="http://localhost:5173", description="Dashboard URL")

    # Database (optional, activity log only)
    database_url: str = Field(default="", description="PostgreSQL database URL")

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    api_host: str = Field(default="0.0.0.0", description="Server host")
    api_port: int = Field(default=3001, description="Server port")

    # Sessions
    session_max_age: int = Field(default=SESSION_MAX_AGE, description="Session lifetime in seconds")
    session_sweep_interval: int = Field(default=3600, description="Expired session sweep interval")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def cors_origins(self) -> list[str]:
        return [self.dashboard_url]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        """Session cookie is HTTPS-only in production"""
        return self.is_production


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()  # type: ignore[call-arg]
