"""Service settings loaded from environment variables."""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_GREETING = "Hello from Node.js app in Kubernetes!"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    # Network
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # Response for GET /
    greeting: str = DEFAULT_GREETING

    # Timeouts (seconds)
    request_timeout: float = 10.0
    keep_alive_timeout: int = 5
    graceful_timeout: float = 25.0

    # Logging
    log_level: str = "INFO"
    server_log_level: str = "WARNING"
    access_log: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True

    @field_validator("port", mode="before")
    @classmethod
    def _fallback_port(cls, value):
        """Use the default port when PORT is empty, non-numeric or out of range."""
        try:
            port = int(str(value).strip())
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid PORT={value!r}, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        if not 1 <= port <= 65535:
            logger.warning(f"PORT={port} is out of range, using {DEFAULT_PORT}")
            return DEFAULT_PORT
        return port

    @field_validator("log_level", "server_log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level
