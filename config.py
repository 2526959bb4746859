"""Breach solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from rules.rules import DEFAULT_BUFFER_SIZE

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class BreachConfig(BaseSettings):
    """Configuration settings for the breach solver entry points."""

    default_buffer_size: int = DEFAULT_BUFFER_SIZE
    """Buffer size used when a puzzle does not specify one. Default: 7."""

    trace_max_steps: int = 1000
    """Default cap on structured trace steps returned by the API."""

    cors_origins: list[str] = ["http://127.0.0.1:5173", "http://localhost:5173"]
    """Front-end origins allowed to call the API."""

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BREACH_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = BreachConfig()
