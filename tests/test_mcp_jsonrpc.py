"""Tests for MCP JSON-RPC protocol handling."""

import json

import pytest
from fastapi.testclient import TestClient

from streamnest_mcp.mcp.errors import PARSE_ERROR, METHOD_NOT_FOUND, INTERNAL_ERROR

EXPECTED_TOOLS = [
    "search_all_movies",
    "get_movie_by_id",
    "get_recommended_movies",
    "get_genres",
    "search_by_keyword",
]


def tool_payload(data: dict):
    """Decode the JSON document embedded in a tools/call result."""
    return json.loads(data["result"]["content"][0]["text"])


class TestJsonRpcParsing:
    """Tests for JSON-RPC message parsing."""

    def test_invalid_json_returns_parse_error(self, client: TestClient):
        """Test that invalid JSON returns parse error with a null id."""
        response = client.post(
            "/",
            content="not valid json{",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["jsonrpc"] == "2.0"
        assert data["id"] is None
        assert data["error"]["code"] == PARSE_ERROR
        assert data["error"]["message"] == "Parse error"
        assert "invalid json" in data["error"]["data"].lower()
        assert "result" not in data

    @pytest.mark.parametrize(
        "body",
        [
            [1, 2, 3],
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "1.0", "id": 1, "method": "initialize"},
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": "nope"},
        ],
    )
    def test_non_envelope_returns_parse_error(self, client: TestClient, body):
        response = client.post("/", json=body)
        assert response.status_code == 400

        data = response.json()
        assert data["id"] is None
        assert data["error"]["code"] == PARSE_ERROR


class TestMcpMethods:
    """Tests for MCP protocol methods."""

    def test_unknown_method_returns_not_found(
        self, client: TestClient, sample_jsonrpc_request
    ):
        response = client.post(
            "/",
            json=sample_jsonrpc_request("resources/list"),
        )
        assert response.status_code == 200

        data = response.json()
        assert data["error"]["code"] == METHOD_NOT_FOUND
        assert data["error"]["message"] == "Method not found: resources/list"

    def test_initialize_returns_capabilities(
        self, client: TestClient, sample_jsonrpc_request
    ):
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "initialize",
                {
                    "protocolVersion": "2024-11-05",
                    "capabilities": {},
                    "clientInfo": {"name": "test", "version": "1.0"},
                },
            ),
        )
        assert response.status_code == 200

        result = response.json()["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["capabilities"] == {"tools": {}}
        assert result["serverInfo"] == {"name": "StreamNestAI", "version": "1.0.0"}

    def test_initialize_without_params(self, client: TestClient):
        response = client.post("/", json={"jsonrpc": "2.0", "id": 3, "method": "initialize"})
        assert response.json()["result"]["protocolVersion"] == "2024-11-05"

    def test_tools_list_returns_five_tools(
        self, client: TestClient, sample_jsonrpc_request, fake_backend
    ):
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list"),
        )
        tools = response.json()["result"]["tools"]

        assert [t["name"] for t in tools] == EXPECTED_TOOLS
        for tool in tools:
            assert tool["description"]
            assert tool["inputSchema"]["type"] == "object"
            assert isinstance(tool["inputSchema"]["properties"], dict)

        # Listing never touches the backend
        assert fake_backend.calls == []


class TestToolsCall:
    """Tests for tools/call dispatch and result wrapping."""

    def test_result_is_double_encoded(self, call_tool, movies):
        data = call_tool("search_all_movies")

        content = data["result"]["content"]
        assert len(content) == 1
        assert content[0]["type"] == "text"
        assert isinstance(content[0]["text"], str)
        assert tool_payload(data) == movies
        assert "error" not in data

    def test_get_movie_by_id(self, call_tool, movies):
        data = call_tool("get_movie_by_id", {"imdb_id": "tt0000002"})
        assert tool_payload(data) == movies[1]

    def test_get_movie_by_id_twice_uses_cache(self, call_tool, fake_backend):
        first = call_tool("get_movie_by_id", {"imdb_id": "tt0000004"})
        second = call_tool("get_movie_by_id", {"imdb_id": "tt0000004"})

        assert first["result"]["content"][0]["text"] == second["result"]["content"][0]["text"]
        assert fake_backend.count("/movies/tt0000004") == 1

    def test_recommended_order(self, call_tool):
        data = call_tool("get_recommended_movies")
        assert [m["ranking"]["ranking_value"] for m in tool_payload(data)] == [1, 2, 3]

    def test_genres(self, call_tool):
        data = call_tool("get_genres")
        assert len(tool_payload(data)) == 4

    def test_search_by_genre_name(self, call_tool):
        data = call_tool("search_by_keyword", {"keyword": "Romance"})
        assert [m["title"] for m in tool_payload(data)] == ["Harbor Lights"]

    def test_search_without_matches_is_empty_list(self, call_tool):
        data = call_tool("search_by_keyword", {"keyword": "western"})
        assert tool_payload(data) == []

    @pytest.mark.parametrize("name", ["unknown-tool", "search_movies", ""])
    def test_unknown_tool_is_internal_error(self, call_tool, name):
        data = call_tool(name)

        assert data["error"]["code"] == INTERNAL_ERROR
        assert data["error"]["message"] == "Internal error"
        assert data["error"]["data"] == f"Unknown tool: {name}"
        assert "result" not in data

    def test_missing_argument_is_internal_error(self, call_tool):
        data = call_tool("get_movie_by_id", {})

        assert data["error"]["code"] == INTERNAL_ERROR
        assert "imdb_id" in data["error"]["data"]

    def test_movie_not_found(self, call_tool):
        data = call_tool("get_movie_by_id", {"imdb_id": "tt7654321"})

        assert data["error"]["code"] == INTERNAL_ERROR
        assert data["error"]["data"] == "Movie not found: tt7654321"

    def test_backend_unreachable(self, call_tool, fake_backend):
        fake_backend.unreachable.add("/genres")
        data = call_tool("get_genres")

        assert data["error"]["code"] == INTERNAL_ERROR
        assert "unreachable" in data["error"]["data"].lower()

    def test_backend_http_error(self, call_tool, fake_backend):
        fake_backend.set_text("/movies", "oops", status_code=500)
        data = call_tool("search_all_movies")

        assert data["error"]["code"] == INTERNAL_ERROR
        assert "500" in data["error"]["data"]

    def test_missing_tool_name(self, client: TestClient, sample_jsonrpc_request):
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/call", {"arguments": {}}),
        )
        data = response.json()

        assert response.status_code == 200
        assert data["error"]["code"] == INTERNAL_ERROR
        assert "Invalid parameters" in data["error"]["data"]


class TestResponseFormat:
    """Tests for JSON-RPC response format compliance."""

    def test_response_has_jsonrpc_field(
        self, client: TestClient, sample_jsonrpc_request
    ):
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list"),
        )
        assert response.json()["jsonrpc"] == "2.0"

    @pytest.mark.parametrize("request_id", [42, "abc-1"])
    def test_response_has_matching_id(
        self, client: TestClient, sample_jsonrpc_request, request_id
    ):
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list", id=request_id),
        )
        assert response.json()["id"] == request_id

    def test_error_response_echoes_id(self, call_tool):
        data = call_tool("nope", id=7)
        assert data["id"] == 7

    def test_success_response_has_only_result(
        self, client: TestClient, sample_jsonrpc_request
    ):
        data = client.post("/", json=sample_jsonrpc_request("tools/list")).json()
        assert "result" in data
        assert "error" not in data

    def test_error_response_has_only_error(
        self, client: TestClient, sample_jsonrpc_request
    ):
        data = client.post("/", json=sample_jsonrpc_request("unknown/method")).json()
        assert data["error"]["code"] is not None
        assert data["error"]["message"] is not None
        assert "result" not in data


class TestNullParams:
    """Explicit JSON null where a mapping is optional."""

    def test_null_params_keeps_request_id(self, client: TestClient):
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 5, "method": "tools/list", "params": None},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == 5
        assert [t["name"] for t in data["result"]["tools"]] == EXPECTED_TOOLS

    def test_null_arguments_for_tool_without_arguments(self, client: TestClient):
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": 6,
                "method": "tools/call",
                "params": {"name": "get_genres", "arguments": None},
            },
        )
        data = response.json()

        assert data["id"] == 6
        assert "error" not in data
        assert len(tool_payload(data)) == 4

    def test_null_arguments_for_tool_with_required_argument(self, client: TestClient):
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": 8,
                "method": "tools/call",
                "params": {"name": "search_by_keyword", "arguments": None},
            },
        )
        data = response.json()

        assert data["id"] == 8
        assert data["error"]["code"] == INTERNAL_ERROR
        assert "keyword" in data["error"]["data"]
