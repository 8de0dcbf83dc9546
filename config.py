"""
Configuration settings for the quiz server.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///quizzes.sqlite",
        description="SQLAlchemy connection string for the quiz store",
    )
    seed_on_start: bool = Field(
        default=True,
        description="Insert the default quizzes when the store is empty",
    )

    # ========================================
    # Server
    # ========================================
    server_host: str = Field(
        default="127.0.0.1",
        description="TCP server bind host",
    )
    server_port: int = Field(
        default=3030,
        description="TCP server bind port",
    )

    # ========================================
    # Session Output
    # ========================================
    prompt_text: str = Field(
        default="quiz > ",
        description="Prompt written whenever a session is ready for a command",
    )
    color_output: bool = Field(
        default=True,
        description="Send ANSI colors to clients",
    )
    output_width: int = Field(
        default=100,
        description="Render width used for session output",
    )
    credits_authors: list[str] = Field(
        default=["Alexander de la Torre Astanin", "Daniel Fuertes Coiras"],
        description="Names printed by the credits command",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/quiz_server.log",
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
