"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with RELAY_ prefix.
No config files — just env vars (12-factor app style).

Learn: The listening port also honours plain PORT, which is what most
hosting platforms inject. RELAY_PORT wins when both are set.
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All relay configuration. Set via RELAY_* env vars."""

    # Server
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(3001, validation_alias=AliasChoices("RELAY_PORT", "PORT", "port"))
    log_level: str = "INFO"

    # CORS: Vite and Create React App dev servers
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Subscribers
    subscriber_queue_size: int = 100  # frames buffered per subscriber before it is dropped
    heartbeat_seconds: float = 15.0

    # Outbound sink for user-originated messages (empty = disabled)
    outbound_webhook_url: str = ""
    outbound_timeout_seconds: float = 10.0

    model_config = {"env_prefix": "RELAY_", "populate_by_name": True}

    @field_validator("subscriber_queue_size")
    @classmethod
    def queue_size_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("RELAY_SUBSCRIBER_QUEUE_SIZE must be greater than zero")
        return v

    @field_validator("heartbeat_seconds")
    @classmethod
    def heartbeat_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("RELAY_HEARTBEAT_SECONDS must be greater than zero")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


# Singleton, used by the CLI and the default app instance
settings = Settings()
