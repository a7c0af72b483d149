"""StreamNestAI MCP gateway: movie catalog tools over JSON-RPC."""

__version__ = "1.0.0"
