"""Utility modules: logging, HTTP client."""

from streamnest_mcp.utils.logging import setup_logging, get_logger
from streamnest_mcp.utils.http import create_http_client

__all__ = [
    "setup_logging",
    "get_logger",
    "create_http_client",
]
