"""Exceptions raised while resolving tool calls.

Everything here derives from GatewayError. The protocol layer catches
GatewayError at the tools/call boundary and reports it as a JSON-RPC
internal error, carrying ``str(exc)`` in ``error.data``.
"""


class GatewayError(Exception):
    """Base class for failures raised while executing a tool."""


# =============================================================================
# Backend failures
# =============================================================================


class BackendError(GatewayError):
    """The content backend could not produce a usable response."""


class BackendUnreachableError(BackendError):
    """The connection to the backend failed or timed out."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Backend unreachable for {path}: {reason}")


class BackendHTTPError(BackendError):
    """The backend answered with a non-2xx status."""

    def __init__(self, status: int, path: str, reason: str = ""):
        self.status = status
        self.path = path
        message = f"Backend returned {status} for {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedResponseError(BackendError):
    """The backend body could not be parsed as JSON."""

    def __init__(self, path: str, excerpt: str):
        self.path = path
        self.excerpt = excerpt
        super().__init__(f"Invalid JSON from backend ({path}): {excerpt}")


class EmptyBackendResponseError(BackendError):
    """The backend returned an empty body."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Backend returned empty response for {path}")


class InvalidBackendShapeError(BackendError):
    """The backend JSON does not have the shape the tool requires."""


class MovieNotFoundError(BackendError):
    """The backend has no movie for the requested IMDb id."""

    def __init__(self, imdb_id: str):
        self.imdb_id = imdb_id
        super().__init__(f"Movie not found: {imdb_id}")


# =============================================================================
# Caller mistakes
# =============================================================================


class UserError(GatewayError):
    """The tool call itself is invalid."""


class UnknownToolError(UserError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class MissingArgumentError(UserError):
    def __init__(self, tool: str, argument: str):
        self.tool = tool
        self.argument = argument
        super().__init__(f"Tool '{tool}' requires a non-empty '{argument}' argument")
