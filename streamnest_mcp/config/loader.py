"""Configuration loading from environment and YAML files."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Content backend (e.g. http://localhost:8080)
    backend_url: str

    # Cache binding
    cache_namespace: str = "movie_cache"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Timeouts
    request_timeout: float = 30.0

    # Server info
    server_name: str = "StreamNestAI"
    server_version: str = "1.0.0"

    # Host and port
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class CacheTTLs:
    """Cache lifetimes in seconds for each cached tool."""

    all_movies: int = 36000  # 10 hours
    movie: int = 86400  # 24 hours
    genres: int = 86400  # 24 hours
    search: int = 6000  # 100 minutes


def load_tools_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load tool configuration from YAML file.

    Args:
        config_path: Path to the config file. If None, uses default location.

    Returns:
        Dictionary with configuration data.
    """
    if config_path is None:
        # Try to find config relative to project root
        possible_paths = [
            Path("config/tools.yaml"),
            Path(__file__).parent.parent.parent / "config" / "tools.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            return {}

    config_path = Path(config_path)
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return config


def load_cache_ttls(config: dict[str, Any] | None = None) -> CacheTTLs:
    """Build cache TTLs from the ``cache_ttls`` section, keeping defaults for missing keys."""
    if config is None:
        config = load_tools_config()
    section = config.get("cache_ttls") or {}
    known = CacheTTLs.__dataclass_fields__.keys()
    overrides = {key: int(value) for key, value in section.items() if key in known}
    return CacheTTLs(**overrides)
