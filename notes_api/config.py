"""Service configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Storage
    notes_file: Path = Path("data") / "notes.json"

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["*"]

    # MCP server
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8001

    log_level: str = "INFO"


settings = Settings()
