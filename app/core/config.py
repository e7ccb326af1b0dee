"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (tokens, bridge URL, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # WhatsApp Cloud API
    WEBHOOK_VERIFY_TOKEN: Optional[str] = Field(
        default=None,
        description="Secret echoed back by Meta during webhook verification"
    )
    ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="Bearer token for the Graph API"
    )
    GRAPH_API_BASE_URL: str = Field(
        default="https://graph.facebook.com",
        description="Graph API base URL"
    )
    GRAPH_API_VERSION: str = Field(
        default="v22.0",
        description="Graph API version segment"
    )
    GRAPH_API_TIMEOUT: float = Field(
        default=10.0,
        description="Outbound message request timeout in seconds"
    )
    ECHO_MODE: bool = Field(
        default=False,
        description="Reply with 'Echo: <text>' instead of running the pairing flow"
    )

    # Baileys bridge (Node sidecar that owns the WhatsApp socket)
    BAILEYS_BRIDGE_URL: str = Field(
        default="http://localhost:8081",
        description="Baileys bridge base URL"
    )
    BAILEYS_BRIDGE_TIMEOUT: float = Field(
        default=30.0,
        description="Bridge request timeout in seconds (pairing can be slow)"
    )
    BAILEYS_AUTH_FOLDER: str = Field(
        default="auth_info_baileys",
        description="Folder holding the bridge's multi-file credential state"
    )
    BAILEYS_API_PREFIX: str = Field(
        default="/api/whatsapp/baileys",
        description="Route prefix for the direct control API"
    )
    FALLBACK_PAIRING_CODE: str = Field(
        default="TEST123",
        description="Code sent to the user when the bridge fails to issue one"
    )

    # Session Management
    SESSION_TTL_MINUTES: Optional[int] = Field(
        default=None,
        description="Idle minutes before a conversation resets (None = never)"
    )
    SESSION_BACKEND: Literal["memory", "mongo"] = Field(
        default="memory",
        description="Where conversation sessions are kept"
    )

    # MongoDB (only used when SESSION_BACKEND=mongo)
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="walink",
        description="MongoDB database name"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("SESSION_TTL_MINUTES")
    def validate_session_ttl(cls, v):
        """A TTL, when set, must be positive."""
        if v is not None and v <= 0:
            raise ValueError("SESSION_TTL_MINUTES must be a positive number of minutes")
        return v

    @validator("ACCESS_TOKEN")
    def validate_access_token(cls, v, values):
        """Ensure the Graph API token is set in production."""
        if values.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("ACCESS_TOKEN is required in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def session_ttl_seconds(self) -> Optional[int]:
        if self.SESSION_TTL_MINUTES is None:
            return None
        return self.SESSION_TTL_MINUTES * 60

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.GRAPH_API_BASE_URL:
        errors.append("GRAPH_API_BASE_URL is required")

    if not settings.BAILEYS_BRIDGE_URL:
        errors.append("BAILEYS_BRIDGE_URL is required")

    if settings.SESSION_BACKEND == "mongo" and not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required when SESSION_BACKEND=mongo")

    # Production-specific validations
    if settings.is_production:
        if not settings.WEBHOOK_VERIFY_TOKEN:
            errors.append("WEBHOOK_VERIFY_TOKEN is required in production")
        if not settings.ACCESS_TOKEN:
            errors.append("ACCESS_TOKEN is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
