"""StreamNest content backend client."""

import json
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from streamnest_mcp.exceptions import (
    BackendHTTPError,
    BackendUnreachableError,
    MalformedResponseError,
)
from streamnest_mcp.utils.logging import get_logger

# Length of body excerpts carried in error messages
EXCERPT_LENGTH = 100


def excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    """Return the leading part of a body for diagnostics."""
    return text[:length]


class MovieBackendClient:
    """Client for the movie content backend.

    The wrapped httpx client must already be bound to the backend base URL;
    paths passed here are relative to it.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.http_client = http_client
        self.log = logger or get_logger("backend")

    async def fetch_text(self, path: str) -> str:
        """
        GET a backend path and return the raw body.

        Raises:
            BackendUnreachableError: On connection failure or timeout.
            BackendHTTPError: On a non-2xx status.
        """
        self.log.debug("backend_fetch_start", path=path)
        try:
            response = await self.http_client.get(path)
        except httpx.RequestError as e:
            self.log.warning("backend_unreachable", path=path, error=str(e))
            raise BackendUnreachableError(path, str(e) or type(e).__name__) from e

        self.log.debug(
            "backend_fetch_end",
            path=path,
            status=response.status_code,
            bytes=len(response.content),
        )
        if not response.is_success:
            raise BackendHTTPError(response.status_code, path, response.reason_phrase)
        return response.text

    async def fetch_json(self, path: str) -> Any:
        """
        GET a backend path and parse the body as JSON.

        Raises:
            BackendUnreachableError: On connection failure or timeout.
            BackendHTTPError: On a non-2xx status.
            MalformedResponseError: If the body is not valid JSON.
        """
        text = await self.fetch_text(path)
        return self.parse_json(path, text)

    @staticmethod
    def parse_json(path: str, text: str) -> Any:
        """Parse a body fetched from path, raising MalformedResponseError on failure."""
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(path, excerpt(text)) from e

    # Backend routes

    @staticmethod
    def movies_path() -> str:
        return "/movies"

    @staticmethod
    def movie_path(imdb_id: str) -> str:
        return f"/movies/{quote(imdb_id, safe='')}"

    @staticmethod
    def genres_path() -> str:
        return "/genres"
