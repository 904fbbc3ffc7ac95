"""Dispatch of JSON-RPC requests to MCP components and back."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

from .jsonrpc import (
    JsonRpcParseError,
    JsonRpcRequest,
    JsonRpcResponse,
    error_response,
    success_response,
)
from .types import (
    BinaryResult,
    Component,
    ErrorResponse,
    ErrorResult,
    JsonResult,
    Ping,
    Pong,
    PromptsGet,
    PromptsGetResult,
    PromptsList,
    PromptsListResult,
    Request,
    ResourcesList,
    ResourcesListResult,
    ResourcesRead,
    ResourcesReadResult,
    Response,
    TextResult,
    ToolsCall,
    ToolsCallResult,
    ToolsList,
    ToolsListResult,
)

log = logging.getLogger(__name__)

METHOD_NOT_FOUND = -32601
PROTOCOL_VERSION = "2025-03-26"
SERVER_NAME = "spin-mcp-server"
SERVER_VERSION = "0.1.0"
BINARY_MIME_TYPE = "application/octet-stream"

# Methods the trigger answers itself with a fixed result.
_STUB_RESULTS: dict[str, tuple[str, Any]] = {
    "resources/templates/list": (
        "Resource templates list requested (not implemented)",
        {"resourceTemplates": []},
    ),
    "resources/subscribe": (
        "Resource subscription requested (not implemented)",
        {},
    ),
    "resources/unsubscribe": (
        "Resource subscription requested (not implemented)",
        {},
    ),
    "logging/setLevel": (
        "Logging level change requested (not implemented)",
        {},
    ),
    "completion/complete": (
        "Completion requested (not implemented)",
        {"completion": {"values": [], "total": 0, "hasMore": False}},
    ),
    "roots/list": (
        "Roots list requested (not implemented)",
        {"roots": []},
    ),
}


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def _params(method: str, params: Any, *fields: str) -> dict[str, Any]:
    if not isinstance(params, dict):
        raise JsonRpcParseError(f"Invalid params for {method}: expected an object")
    for name in fields:
        if name not in params:
            raise JsonRpcParseError(f"Invalid params for {method}: missing field `{name}`")
    return params


def _string_field(method: str, params: dict[str, Any], name: str) -> str:
    value = params[name]
    if not isinstance(value, str):
        raise JsonRpcParseError(f"Invalid params for {method}: field `{name}` must be a string")
    return value


def build_component_request(method: str, params: Any) -> Request | None:
    """Return the component request for ``method``, or None if the trigger answers it.

    Raises JsonRpcParseError when the parameters do not fit the method.
    """
    match method:
        case "tools/list":
            return ToolsList()
        case "tools/call":
            fields = _params(method, params, "name", "arguments")
            return ToolsCall(_string_field(method, fields, "name"), _dump(fields["arguments"]))
        case "resources/list":
            return ResourcesList()
        case "resources/read":
            fields = _params(method, params, "uri")
            return ResourcesRead(_string_field(method, fields, "uri"))
        case "prompts/list":
            return PromptsList()
        case "prompts/get":
            fields = _params(method, params, "name", "arguments")
            return PromptsGet(_string_field(method, fields, "name"), _dump(fields["arguments"]))
        case "ping":
            return Ping()
        case _:
            return None


def _text_content(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def _tool_call_result(result: Any) -> dict[str, Any]:
    match result:
        case TextResult(text=text):
            return _text_content(text)
        case JsonResult(json=json_text):
            json.loads(json_text)
            return _text_content(json_text)
        case BinaryResult(data=data):
            return {
                "content": [
                    {
                        "type": "image",
                        "data": base64.b64encode(data).decode("ascii"),
                        "mimeType": BINARY_MIME_TYPE,
                    }
                ]
            }
        case ErrorResult(error=error):
            return {**_text_content(error.message), "isError": True}
    raise TypeError(f"unsupported tool result: {result!r}")


def _input_schema(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return {}


def format_component_response(request_id: Any, response: Response) -> JsonRpcResponse:
    """Turn a component's response into the JSON-RPC response for ``request_id``."""
    match response:
        case ToolsListResult(tools=tools):
            result: Any = {
                "tools": [
                    {
                        "name": tool.name,
                        "description": tool.description,
                        "inputSchema": _input_schema(tool.input_schema),
                    }
                    for tool in tools
                ]
            }
        case ToolsCallResult(result=tool_result):
            result = _tool_call_result(tool_result)
        case ResourcesListResult(resources=resources):
            result = {
                "resources": [
                    {
                        "uri": res.uri,
                        "name": res.name,
                        "description": res.description,
                        "mimeType": res.mime_type,
                    }
                    for res in resources
                ]
            }
        case ResourcesReadResult(contents=contents):
            item: dict[str, Any] = {"uri": contents.uri, "mimeType": contents.mime_type}
            if contents.text is not None:
                item["text"] = contents.text
            elif contents.blob is not None:
                item["blob"] = base64.b64encode(contents.blob).decode("ascii")
            result = {"contents": [item]}
        case PromptsListResult(prompts=prompts):
            result = {
                "prompts": [
                    {
                        "name": prompt.name,
                        "description": prompt.description,
                        "arguments": [
                            {
                                "name": arg.name,
                                "description": arg.description,
                                "required": arg.required,
                            }
                            for arg in prompt.arguments
                        ],
                    }
                    for prompt in prompts
                ]
            }
        case PromptsGetResult(messages=messages):
            result = {
                "messages": [
                    {"role": msg.role, "content": msg.content} for msg in messages
                ]
            }
        case Pong():
            result = "pong"
        case ErrorResponse(error=error):
            return error_response(request_id, error.code, error.message, error.data)
        case _:
            result = {}
    return success_response(request_id, result)


def _handle_locally(request: JsonRpcRequest) -> JsonRpcResponse | None:
    method, request_id = request.method, request.id
    if method == "initialize":
        log.info("Handling initialize request")
        if request_id is None:
            return None
        return success_response(
            request_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            },
        )
    if method in _STUB_RESULTS:
        message, result = _STUB_RESULTS[method]
        log.info(message)
        if request_id is None:
            return None
        return success_response(request_id, json.loads(json.dumps(result)))
    if method == "sampling/createMessage":
        log.info("Sampling requested (not implemented)")
        if request_id is None:
            return None
        return error_response(request_id, METHOD_NOT_FOUND, "Sampling not implemented")
    if method.startswith("notifications/"):
        log.info("Received notification: %s", method)
        return None
    log.warning("Unknown method requested: %s", method)
    if request_id is None:
        return None
    return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


def handle_mcp_request(
    component: Component, request: JsonRpcRequest
) -> JsonRpcResponse | None:
    """Answer a JSON-RPC request, calling the component where needed.

    Returns None where no response is due, as for notifications.
    """
    component_request = build_component_request(request.method, request.params)
    if component_request is None:
        return _handle_locally(request)
    component.initialize()
    response = component.handle_request(component_request)
    if request.id is None:
        log.warning("Component method called without request ID")
        return None
    return format_component_response(request.id, response)