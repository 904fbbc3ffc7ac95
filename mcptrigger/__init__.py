"""HTTP server routing MCP JSON-RPC requests to in-process tool components."""

__version__ = "0.1.0"
__all__ = ["types", "jsonrpc", "handler", "server", "demo", "template"]