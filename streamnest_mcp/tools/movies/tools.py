"""Movie tools: cache-or-fetch resolution for each tool and their registration."""

import json
from typing import Any

import structlog

from streamnest_mcp.cache.store import CacheStore
from streamnest_mcp.config.loader import CacheTTLs
from streamnest_mcp.exceptions import (
    BackendHTTPError,
    EmptyBackendResponseError,
    MissingArgumentError,
    MovieNotFoundError,
)
from streamnest_mcp.mcp.registry import ToolRegistry
from streamnest_mcp.tools.movies.client import MovieBackendClient
from streamnest_mcp.tools.movies.shaping import (
    filter_by_keyword,
    normalize_keyword,
    require_list,
    select_recommended,
)
from streamnest_mcp.utils.logging import get_logger

ALL_MOVIES_KEY = "all_movies"
GENRES_KEY = "genres"


def movie_key(imdb_id: str) -> str:
    return f"movie_{imdb_id}"


def search_key(keyword: str) -> str:
    return f"search_{normalize_keyword(keyword)}"


def _require_string(tool: str, arguments: dict[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise MissingArgumentError(tool, name)
    return value.strip()


class MovieToolExecutor:
    """Resolves movie tool calls against the cache and the content backend."""

    def __init__(
        self,
        backend: MovieBackendClient,
        cache: CacheStore,
        ttls: CacheTTLs | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.backend = backend
        self.cache = cache
        self.ttls = ttls or CacheTTLs()
        self.log = logger or get_logger("movies")

    # -------------------------------------------------------------------------
    # Cache helpers
    # -------------------------------------------------------------------------

    async def _cached(self, key: str) -> Any | None:
        raw = await self.cache.get(key)
        if raw is None:
            self.log.info("cache_miss", key=key)
            return None
        self.log.info("cache_hit", key=key)
        return json.loads(raw)

    async def _store(self, key: str, value: Any, ttl: int) -> None:
        await self.cache.put(key, json.dumps(value), ttl)
        self.log.info("cache_store", key=key, ttl=ttl)

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def search_all_movies(self, arguments: dict[str, Any]) -> list[Any]:
        """Every movie in the catalog."""
        cached = await self._cached(ALL_MOVIES_KEY)
        if cached is not None:
            return cached

        data = await self.backend.fetch_json(self.backend.movies_path())
        movies = require_list(data, "movies")

        await self._store(ALL_MOVIES_KEY, movies, self.ttls.all_movies)
        return movies

    async def get_movie_by_id(self, arguments: dict[str, Any]) -> Any:
        """A single movie by IMDb id."""
        imdb_id = _require_string("get_movie_by_id", arguments, "imdb_id")
        key = movie_key(imdb_id)

        cached = await self._cached(key)
        if cached is not None:
            return cached

        try:
            movie = await self.backend.fetch_json(self.backend.movie_path(imdb_id))
        except BackendHTTPError as e:
            raise MovieNotFoundError(imdb_id) from e

        if movie is None or (isinstance(movie, dict) and movie.get("error")):
            raise MovieNotFoundError(imdb_id)

        await self._store(key, movie, self.ttls.movie)
        return movie

    async def get_recommended_movies(self, arguments: dict[str, Any]) -> list[Any]:
        """Top-ranked movies; never cached."""
        path = self.backend.movies_path()
        text = await self.backend.fetch_text(path)
        movies = require_list(self.backend.parse_json(path, text), "movies")
        return select_recommended(movies)

    async def get_genres(self, arguments: dict[str, Any]) -> list[Any]:
        """Every genre."""
        cached = await self._cached(GENRES_KEY)
        if cached is not None:
            return cached

        data = await self.backend.fetch_json(self.backend.genres_path())
        genres = require_list(data, "genres")

        await self._store(GENRES_KEY, genres, self.ttls.genres)
        return genres

    async def search_by_keyword(self, arguments: dict[str, Any]) -> list[Any]:
        """Movies whose title, genre or review mentions the keyword."""
        keyword = _require_string("search_by_keyword", arguments, "keyword")
        key = search_key(keyword)

        cached = await self._cached(key)
        if cached is not None:
            return cached

        path = self.backend.movies_path()
        text = await self.backend.fetch_text(path)
        if not text.strip():
            raise EmptyBackendResponseError(path)

        movies = require_list(self.backend.parse_json(path, text), "movies")
        matches = filter_by_keyword(movies, keyword)
        self.log.info("keyword_search", keyword=keyword, scanned=len(movies), matched=len(matches))

        await self._store(key, matches, self.ttls.search)
        return matches


# =============================================================================
# Registration
# =============================================================================

NO_ARGUMENTS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {},
}


def register_tools(registry: ToolRegistry, executor: MovieToolExecutor) -> None:
    """Register all movie tools with the registry."""

    registry.register(
        name="search_all_movies",
        description="Get all movies in the database",
        input_schema=NO_ARGUMENTS_SCHEMA,
        handler=executor.search_all_movies,
    )

    registry.register(
        name="get_movie_by_id",
        description="Get movie details by IMDb ID",
        input_schema={
            "type": "object",
            "properties": {
                "imdb_id": {
                    "type": "string",
                    "description": "IMDb identifier, e.g. 'tt0111161'",
                },
            },
            "required": ["imdb_id"],
        },
        handler=executor.get_movie_by_id,
    )

    registry.register(
        name="get_recommended_movies",
        description="Get top-rated movies (ranking 3 or better), best first",
        input_schema=NO_ARGUMENTS_SCHEMA,
        handler=executor.get_recommended_movies,
    )

    registry.register(
        name="get_genres",
        description="Get all genres",
        input_schema=NO_ARGUMENTS_SCHEMA,
        handler=executor.get_genres,
    )

    registry.register(
        name="search_by_keyword",
        description="Search movies by keyword in title, genre names and admin review",
        input_schema={
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "Case-insensitive text to look for",
                },
            },
            "required": ["keyword"],
        },
        handler=executor.search_by_keyword,
    )
