"""Configuration loading and management."""

from streamnest_mcp.config.loader import (
    CacheTTLs,
    Settings,
    get_settings,
    load_cache_ttls,
    load_tools_config,
)

__all__ = ["CacheTTLs", "Settings", "get_settings", "load_cache_ttls", "load_tools_config"]
