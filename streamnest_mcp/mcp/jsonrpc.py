"""JSON-RPC 2.0 message processing."""

import json
import logging

from pydantic import ValidationError

from streamnest_mcp.mcp.models import JsonRpcRequest, JsonRpcResponse, JsonRpcError
from streamnest_mcp.mcp.handlers import MCPHandlers
from streamnest_mcp.mcp.errors import PARSE_ERROR, make_error_data

logger = logging.getLogger(__name__)


class JsonRpcProcessor:
    """Process JSON-RPC 2.0 messages."""

    def __init__(self, handlers: MCPHandlers):
        self.handlers = handlers

    def parse_request(self, raw_data: str | bytes) -> tuple[JsonRpcRequest | None, dict | None]:
        """
        Parse a JSON-RPC request from raw data.

        Both undecodable JSON and JSON that is not a request envelope are
        parse errors. Returns (request, error) tuple. One will be None.
        """
        try:
            if isinstance(raw_data, bytes):
                raw_data = raw_data.decode("utf-8")
            data = json.loads(raw_data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return None, make_error_data(PARSE_ERROR, data=f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            return None, make_error_data(
                PARSE_ERROR, data=f"Expected a JSON object, got {type(data).__name__}"
            )

        try:
            return JsonRpcRequest(**data), None
        except ValidationError as e:
            return None, make_error_data(
                PARSE_ERROR,
                data=f"Invalid JSON-RPC request: {e.errors(include_url=False)}",
            )

    async def process_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Process a validated JSON-RPC request."""
        result, error = await self.handlers.dispatch(request.method, request.params)

        if error is not None:
            return JsonRpcResponse(
                id=request.id,
                error=JsonRpcError(**error),
            )
        return JsonRpcResponse(
            id=request.id,
            result=result,
        )

    async def handle_message(self, raw_data: str | bytes) -> JsonRpcResponse:
        """Handle a raw JSON-RPC message end-to-end."""
        request, parse_error = self.parse_request(raw_data)

        if parse_error is not None:
            # Parse errors don't have a request id
            logger.info(f"Rejected request: {parse_error.get('data')}")
            return JsonRpcResponse(
                id=None,
                error=JsonRpcError(**parse_error),
            )

        return await self.process_request(request)  # type: ignore

    def serialize_response(self, response: JsonRpcResponse) -> str:
        """Serialize a JSON-RPC response to JSON string."""
        return json.dumps(response.model_dump())
