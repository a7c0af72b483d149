"""FastAPI MCP gateway - main application entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from streamnest_mcp.cache.store import CacheStore, InMemoryCacheStore
from streamnest_mcp.config.loader import Settings, get_settings, load_cache_ttls
from streamnest_mcp.mcp.errors import PARSE_ERROR, make_error_data
from streamnest_mcp.mcp.handlers import MCPHandlers
from streamnest_mcp.mcp.jsonrpc import JsonRpcProcessor
from streamnest_mcp.mcp.models import JsonRpcError, JsonRpcResponse
from streamnest_mcp.mcp.registry import ToolRegistry
from streamnest_mcp.tools.movies.client import MovieBackendClient
from streamnest_mcp.tools.movies.tools import MovieToolExecutor, register_tools
from streamnest_mcp.utils.http import create_http_client
from streamnest_mcp.utils.logging import setup_logging, set_request_id, get_logger

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "StreamNestAI MCP Server is running! Use POST / for MCP requests"

CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}


def create_app(
    settings: Settings | None = None,
    cache: CacheStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the gateway application.

    Settings are resolved at startup, not at import. The backend HTTP
    client and the cache store live for the lifetime of the app.

    Args:
        settings: Settings override; defaults to environment settings.
        cache: Cache store override; defaults to an in-memory store.
        transport: httpx transport override for the backend client.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        app_settings = settings or get_settings()
        setup_logging(app_settings)
        log = get_logger("startup")

        log.info(
            "Starting MCP gateway",
            server_name=app_settings.server_name,
            version=app_settings.server_version,
            backend_url=app_settings.backend_url,
        )

        http_client = create_http_client(app_settings, transport=transport)
        store = cache if cache is not None else InMemoryCacheStore(app_settings.cache_namespace)
        executor = MovieToolExecutor(
            MovieBackendClient(http_client),
            store,
            load_cache_ttls(),
        )

        registry = ToolRegistry()
        register_tools(registry, executor)
        app.state.processor = JsonRpcProcessor(MCPHandlers(registry, app_settings))

        log.info("Tool registry ready", tool_count=registry.tool_count)

        try:
            yield
        finally:
            # Shutdown
            log.info("Shutting down MCP gateway")
            await http_client.aclose()

    app = FastAPI(
        title="StreamNestAI MCP Gateway",
        description="MCP gateway for the StreamNest movie catalog",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    # Added after CORSMiddleware, so it sees OPTIONS requests first
    @app.middleware("http")
    async def options_middleware(request: Request, call_next):
        """Answer every OPTIONS request with 200 and the fixed CORS headers."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        return await call_next(request)

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or set_request_id()
        set_request_id(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/")
    async def root() -> PlainTextResponse:
        """Liveness check."""
        return PlainTextResponse(LIVENESS_MESSAGE)

    @app.post("/")
    async def message_endpoint(request: Request) -> Response:
        """
        JSON-RPC endpoint.

        Every request gets a response envelope; parse errors are sent
        with status 400, everything else with 200.
        """
        processor: JsonRpcProcessor = request.app.state.processor

        try:
            body = await request.body()
        except Exception as e:
            logger.warning(f"Could not read request body: {e}")
            response = JsonRpcResponse(
                id=None,
                error=JsonRpcError(**make_error_data(PARSE_ERROR, data=f"Could not read request body: {e}")),
            )
        else:
            response = await processor.handle_message(body)

        is_parse_error = response.error is not None and response.error.code == PARSE_ERROR
        return Response(
            content=processor.serialize_response(response),
            status_code=400 if is_parse_error else 200,
            media_type="application/json",
        )

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def method_not_allowed(path: str) -> PlainTextResponse:
        return PlainTextResponse("Method not allowed", status_code=405)

    return app


app = create_app()


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "streamnest_mcp.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
