"""Starting-point component with tools, resources and prompts split out."""

from __future__ import annotations

import json

from .types import (
    ErrorResponse,
    ErrorResult,
    McpError,
    Ping,
    Pong,
    Prompt,
    PromptsList,
    PromptsListResult,
    ResourceInfo,
    ResourcesList,
    ResourcesListResult,
    Request,
    Response,
    TextResult,
    Tool,
    ToolResult,
    ToolsCall,
    ToolsCallResult,
    ToolsList,
    ToolsListResult,
    mcp_component,
)


def get_tools_list() -> list[Tool]:
    """Return the tools this component offers."""
    schema = {
        "type": "object",
        "properties": {
            "message": {"type": "string", "description": "Message to echo"},
        },
        "required": ["message"],
    }
    return [
        Tool(
            name="example_tool",
            description="An example tool that echoes input",
            input_schema=json.dumps(schema, separators=(",", ":"), sort_keys=True),
        )
    ]


def _example_tool(arguments: str) -> ToolResult:
    try:
        args = json.loads(arguments)
    except json.JSONDecodeError:
        args = {}
    message = args.get("message") if isinstance(args, dict) else None
    if not isinstance(message, str):
        message = "No message provided"
    return TextResult(f"Echo: {message}")


def handle_tool_call(name: str, arguments: str) -> ToolResult:
    """Run the named tool with JSON-encoded arguments."""
    if name == "example_tool":
        return _example_tool(arguments)
    return ErrorResult(McpError(-32602, f"Unknown tool: {name}"))


def get_prompts_list() -> list[Prompt]:
    """Return the prompts this component offers."""
    return []


def get_resources_list() -> list[ResourceInfo]:
    """Return the resources this component offers."""
    return []


@mcp_component
def handle_request(request: Request) -> Response:
    """Answer a request to the component."""
    match request:
        case ToolsList():
            return ToolsListResult(get_tools_list())
        case ToolsCall(name=name, arguments=arguments):
            return ToolsCallResult(handle_tool_call(name, arguments))
        case ResourcesList():
            return ResourcesListResult(get_resources_list())
        case PromptsList():
            return PromptsListResult(get_prompts_list())
        case Ping():
            return Pong()
        case _:
            return ErrorResponse(McpError(-32601, "Method not found"))