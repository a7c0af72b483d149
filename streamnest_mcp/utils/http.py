"""HTTP client factory for the content backend."""

import logging

import httpx

from streamnest_mcp.config.loader import Settings

logger = logging.getLogger(__name__)


def create_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create an async HTTP client bound to the content backend.

    The caller owns the client and must close it (the FastAPI lifespan does).

    Args:
        settings: Application settings; supplies base URL and timeout.
        transport: Optional transport override (tests pass httpx.MockTransport).

    Returns:
        Configured httpx.AsyncClient instance.
    """
    client = httpx.AsyncClient(
        base_url=settings.backend_url,
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=True,
        headers={
            "User-Agent": f"{settings.server_name}/{settings.server_version}",
            "Accept": "application/json",
        },
        limits=httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=30.0,
        ),
        transport=transport,
    )
    logger.debug(f"Created backend HTTP client for {settings.backend_url}")
    return client
