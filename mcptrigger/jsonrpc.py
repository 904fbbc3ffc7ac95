"""JSON-RPC 2.0 request parsing and response building."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"


class JsonRpcParseError(ValueError):
    """Raised when a request body is not a valid JSON-RPC request."""


@dataclass
class JsonRpcRequest:
    """A JSON-RPC request; ``id`` is None for notifications."""

    jsonrpc: str
    method: str
    params: Any = None
    id: Any = None


@dataclass
class JsonRpcError:
    """The error member of a JSON-RPC response."""

    code: int
    message: str
    data: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


@dataclass
class JsonRpcResponse:
    """A JSON-RPC response carrying either a result or an error."""

    id: Any
    result: Any = None
    error: JsonRpcError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the response as a JSON-ready dictionary."""
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is None:
            out["result"] = self.result
        else:
            out["error"] = self.error.to_dict()
        out["id"] = self.id
        return out

    def to_json(self) -> str:
        """Return the response as compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


def _fail(reason: str) -> JsonRpcParseError:
    return JsonRpcParseError(f"Failed to parse JSON-RPC request: {reason}")


def parse_request(body: bytes | str) -> JsonRpcRequest:
    """Parse a request body into a JsonRpcRequest."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise _fail(str(exc)) from exc
    if not isinstance(data, dict):
        raise _fail("expected a JSON object")
    for name in ("jsonrpc", "method"):
        if name not in data:
            raise _fail(f"missing field `{name}`")
        if not isinstance(data[name], str):
            raise _fail(f"field `{name}` must be a string")
    return JsonRpcRequest(
        jsonrpc=data["jsonrpc"],
        method=data["method"],
        params=data.get("params"),
        id=data.get("id"),
    )


def success_response(request_id: Any, result: Any) -> JsonRpcResponse:
    """Build a successful response."""
    return JsonRpcResponse(id=request_id, result=result)


def error_response(
    request_id: Any, code: int, message: str, data: str | None = None
) -> JsonRpcResponse:
    """Build an error response."""
    return JsonRpcResponse(id=request_id, error=JsonRpcError(code, message, data))