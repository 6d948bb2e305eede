"""
pgrest - Bootstrap Settings
===========================

What:  The few settings needed before the service configuration is loaded:
       which config file to read and how verbose logging should be.
Why:   These must be known before PrestConfig exists (the file location
       decides what PrestConfig contains), so they cannot live in it.
How:   Pydantic Settings reads PREST_CONF and PREST_LOG_LEVEL from the
       process environment and validates them on construction.
Who:   Read by `pgrest.main.create_app()` when no record is injected.

Everything else (ports, database, JWT, CORS ...) is resolved by
`pgrest.config.load_config()` with its own precedence rules.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """
    Process-level bootstrap settings.

    Both fields have defaults, so an empty environment is valid.
    """

    # What: Explicit config file path (PREST_CONF)
    # Empty: fall back to ./prest.toml when it exists, else no file at all
    conf: str = Field(default="", description="Path to the TOML config file")

    # What: Root logger level (PREST_LOG_LEVEL)
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # Other PREST_* variables belong to the service configuration.
    model_config = SettingsConfigDict(
        env_prefix="PREST_",
        case_sensitive=False,
        extra="ignore",
    )
