"""
Configuration settings for the Lagos cinema guide.

Centralized configuration using Pydantic Settings for type-safe environment
variable handling. All settings can be overridden via environment variables
with the LAGOS_CINEMA_GUIDE_ prefix.

Example:
    export LAGOS_CINEMA_GUIDE_LOG_LEVEL=DEBUG
    export LAGOS_CINEMA_GUIDE_DB_PATH=/srv/listings/lagos_cinema.db
    lagos-cinema-guide now-showing
"""

import logging
from pathlib import Path
from typing import Any
from typing import Dict
from zoneinfo import ZoneInfo
from zoneinfo import ZoneInfoNotFoundError

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    LAGOS_CINEMA_GUIDE_ prefix (e.g., LAGOS_CINEMA_GUIDE_TIMEZONE=UTC).
    """

    model_config = SettingsConfigDict(
        env_prefix="LAGOS_CINEMA_GUIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    db_path: Path = Field(
        default=Path("data/lagos_cinema.db"),
        description="Path to the listings database (opened read-only)"
    )

    timezone: str = Field(
        default="Africa/Lagos",
        description="Timezone used when displaying showtimes (WAT, UTC+1)"
    )

    site_name: str = Field(
        default="Lagos Cinema Guide",
        description="Display name printed in listing headers"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode with structured console logging"
    )

    log_file: Path = Field(
        default=Path("logs/lagos_cinema_guide.log"),
        description="Rotating log file location"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return upper_v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the zoneinfo database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Display timezone as a tzinfo object."""
        return ZoneInfo(self.timezone)

    @property
    def logging_config(self) -> Dict[str, Any]:
        """Get logging configuration dict."""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "structured": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": self.log_level,
                    "formatter": "structured" if self.debug_mode else "standard",
                    "stream": "ext://sys.stderr",
                },
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "level": "INFO",
                    "formatter": "structured",
                    "filename": str(self.log_file),
                    "maxBytes": 10485760,  # 10MB
                    "backupCount": 5,
                },
            },
            "loggers": {
                "lagos_cinema_guide": {
                    "level": self.log_level,
                    "handlers": ["console", "file"],
                    "propagate": False,
                },
                "aiosqlite": {
                    "level": "WARNING",
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def setup_logging(self) -> None:
        """Configure application logging based on current settings."""
        import logging.config

        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        logging.config.dictConfig(self.logging_config)

        # structlog goes through the stdlib handlers above; JSON outside debug mode
        import structlog

        renderer = (
            structlog.dev.ConsoleRenderer(colors=False)
            if self.debug_mode
            else structlog.processors.JSONRenderer()
        )
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                renderer,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.getLogger(__name__).debug(
            "Logging configured at %s (debug_mode=%s)", self.log_level, self.debug_mode
        )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
