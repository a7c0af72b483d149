"""Pytest configuration and fixtures."""

import copy
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from streamnest_mcp.cache.store import InMemoryCacheStore
from streamnest_mcp.config.loader import Settings
from streamnest_mcp.main import create_app
from streamnest_mcp.tools.movies.client import MovieBackendClient
from streamnest_mcp.tools.movies.tools import MovieToolExecutor

BACKEND_URL = "http://backend.test"

MOVIES = [
    {
        "imdb_id": "tt0000001",
        "title": "The Silent Harbor",
        "genre": [{"genre_id": 1, "genre_name": "Drama"}],
        "admin_review": "A slow but moving story.",
        "ranking": {"ranking_value": 5, "ranking_name": "Okay"},
    },
    {
        "imdb_id": "tt0000002",
        "title": "Laser Night",
        "genre": [{"genre_id": 2, "genre_name": "Science Fiction"}],
        "admin_review": "Dazzling effects.",
        "ranking": {"ranking_value": 1, "ranking_name": "Excellent"},
    },
    {
        "imdb_id": "tt0000003",
        "title": "Grin and Bear",
        "genre": [{"genre_id": 3, "genre_name": "Comedy"}],
        "admin_review": "Plenty of laughs and a great heist.",
        "ranking": {"ranking_value": 3, "ranking_name": "Good"},
    },
    {
        "imdb_id": "tt0000004",
        "title": "Harbor Lights",
        "genre": [
            {"genre_id": 1, "genre_name": "Drama"},
            {"genre_id": 4, "genre_name": "Romance"},
        ],
        "admin_review": "",
        "ranking": {"ranking_value": 2, "ranking_name": "Very Good"},
    },
]

GENRES = [
    {"genre_id": 1, "genre_name": "Drama"},
    {"genre_id": 2, "genre_name": "Science Fiction"},
    {"genre_id": 3, "genre_name": "Comedy"},
    {"genre_id": 4, "genre_name": "Romance"},
]


class FakeBackend:
    """Content backend stand-in, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.unreachable: set[str] = set()
        self.calls: list[str] = []

    def set_json(self, path: str, data, status_code: int = 200) -> None:
        self.routes[path] = (status_code, json.dumps(data).encode("utf-8"))

    def set_text(self, path: str, text: str, status_code: int = 200) -> None:
        self.routes[path] = (status_code, text.encode("utf-8"))

    def count(self, path: str) -> int:
        return self.calls.count(path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        if path in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if path not in self.routes:
            return httpx.Response(404, json={"error": "Movie not found"})
        status_code, body = self.routes[path]
        return httpx.Response(status_code, content=body)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake backend."""
    return Settings(backend_url=BACKEND_URL, log_format="json", log_level="WARNING")


@pytest.fixture
def movies():
    return copy.deepcopy(MOVIES)


@pytest.fixture
def fake_backend(movies) -> FakeBackend:
    """Fake backend seeded with the sample catalog."""
    backend = FakeBackend()
    backend.set_json("/movies", movies)
    backend.set_json("/genres", GENRES)
    for movie in movies:
        backend.set_json(f"/movies/{movie['imdb_id']}", movie)
    return backend


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> InMemoryCacheStore:
    return InMemoryCacheStore("test", clock=clock)


@pytest.fixture
def backend_client(fake_backend) -> MovieBackendClient:
    http_client = httpx.AsyncClient(
        base_url=BACKEND_URL,
        transport=httpx.MockTransport(fake_backend),
    )
    return MovieBackendClient(http_client)


@pytest.fixture
def executor(backend_client, cache) -> MovieToolExecutor:
    return MovieToolExecutor(backend_client, cache)


@pytest.fixture
def client(settings, cache, fake_backend):
    """Test client for the gateway, wired to the fake backend."""
    app = create_app(
        settings=settings,
        cache=cache,
        transport=httpx.MockTransport(fake_backend),
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_jsonrpc_request():
    """Sample JSON-RPC request factory."""
    def _make_request(method: str, params: dict = None, id: int = 1):
        return {
            "jsonrpc": "2.0",
            "id": id,
            "method": method,
            "params": params or {},
        }
    return _make_request


@pytest.fixture
def call_tool(client: TestClient, sample_jsonrpc_request):
    """POST a tools/call request and return the decoded response envelope."""
    def _call(name: str, arguments: dict | None = None, id: int = 1) -> dict:
        params = {"name": name, "arguments": arguments or {}}
        response = client.post("/", json=sample_jsonrpc_request("tools/call", params, id=id))
        assert response.status_code == 200
        return response.json()
    return _call
