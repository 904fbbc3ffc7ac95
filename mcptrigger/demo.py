"""A demonstration component with a single echo tool."""

from __future__ import annotations

import json

from .types import (
    ErrorResponse,
    ErrorResult,
    McpError,
    Ping,
    Pong,
    PromptsList,
    PromptsListResult,
    ResourcesList,
    ResourcesListResult,
    Request,
    Response,
    TextResult,
    Tool,
    ToolsCall,
    ToolsCallResult,
    ToolsList,
    ToolsListResult,
    mcp_component,
)

_ECHO_SCHEMA = {
    "type": "object",
    "properties": {
        "message": {"type": "string", "description": "Message to echo"},
    },
    "required": ["message"],
}


def _echo(arguments: str) -> TextResult:
    try:
        args = json.loads(arguments)
    except json.JSONDecodeError:
        args = {}
    message = args.get("message") if isinstance(args, dict) else None
    if not isinstance(message, str):
        message = "No message provided"
    return TextResult(f"Echo: {message}")


@mcp_component
def handle_request(request: Request) -> Response:
    """Answer a request to the demo component."""
    match request:
        case ToolsList():
            return ToolsListResult(
                [
                    Tool(
                        name="example_tool",
                        description="An example tool that echoes input",
                        input_schema=json.dumps(
                            _ECHO_SCHEMA, separators=(",", ":"), sort_keys=True
                        ),
                    )
                ]
            )
        case ToolsCall(name="example_tool", arguments=arguments):
            return ToolsCallResult(_echo(arguments))
        case ToolsCall(name=name):
            return ToolsCallResult(
                ErrorResult(McpError(-32602, f"Unknown tool: {name}"))
            )
        case ResourcesList():
            return ResourcesListResult([])
        case PromptsList():
            return PromptsListResult([])
        case Ping():
            return Pong()
        case _:
            return ErrorResponse(McpError(-32601, "Method not found"))