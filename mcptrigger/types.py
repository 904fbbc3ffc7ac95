"""Data types exchanged between the trigger and MCP components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass(frozen=True)
class McpError:
    """An error reported by a component."""

    code: int
    message: str
    data: str | None = None


@dataclass
class Tool:
    """A tool offered by a component; ``input_schema`` is a JSON document."""

    name: str
    description: str
    input_schema: str


@dataclass
class PromptArgument:
    """One argument accepted by a prompt."""

    name: str
    description: str | None = None
    required: bool = False


@dataclass
class Prompt:
    """A prompt template offered by a component."""

    name: str
    description: str | None = None
    arguments: list[PromptArgument] = field(default_factory=list)


@dataclass
class PromptMessage:
    """One message of a rendered prompt."""

    role: str
    content: str


@dataclass
class ResourceInfo:
    """A resource listed by a component."""

    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = None


@dataclass
class ResourceContents:
    """The contents of a resource: text, a binary blob, or neither."""

    uri: str
    mime_type: str | None = None
    text: str | None = None
    blob: bytes | None = None


# Requests sent to a component.


@dataclass(frozen=True)
class ToolsList:
    """Ask for the list of tools."""


@dataclass(frozen=True)
class ToolsCall:
    """Call a tool; ``arguments`` is a JSON document."""

    name: str
    arguments: str


@dataclass(frozen=True)
class ResourcesList:
    """Ask for the list of resources."""


@dataclass(frozen=True)
class ResourcesRead:
    """Read one resource."""

    uri: str


@dataclass(frozen=True)
class PromptsList:
    """Ask for the list of prompts."""


@dataclass(frozen=True)
class PromptsGet:
    """Render a prompt; ``arguments`` is a JSON document."""

    name: str
    arguments: str


@dataclass(frozen=True)
class Ping:
    """Check that the component is alive."""


Request = Union[
    ToolsList, ToolsCall, ResourcesList, ResourcesRead, PromptsList, PromptsGet, Ping
]


# Results of a tool call.


@dataclass(frozen=True)
class TextResult:
    """Plain text produced by a tool."""

    text: str


@dataclass(frozen=True)
class JsonResult:
    """A JSON document produced by a tool."""

    json: str


@dataclass(frozen=True)
class BinaryResult:
    """Binary data produced by a tool."""

    data: bytes


@dataclass(frozen=True)
class ErrorResult:
    """A tool that failed."""

    error: McpError


ToolResult = Union[TextResult, JsonResult, BinaryResult, ErrorResult]


# Responses returned by a component.


@dataclass
class ToolsListResult:
    """The tools a component offers."""

    tools: list[Tool] = field(default_factory=list)


@dataclass
class ToolsCallResult:
    """The outcome of a tool call."""

    result: ToolResult


@dataclass
class ResourcesListResult:
    """The resources a component offers."""

    resources: list[ResourceInfo] = field(default_factory=list)


@dataclass
class ResourcesReadResult:
    """The contents of a resource that was read."""

    contents: ResourceContents


@dataclass
class PromptsListResult:
    """The prompts a component offers."""

    prompts: list[Prompt] = field(default_factory=list)


@dataclass
class PromptsGetResult:
    """The messages of a rendered prompt."""

    messages: list[PromptMessage] = field(default_factory=list)


@dataclass(frozen=True)
class Pong:
    """Answer to a ping."""


@dataclass(frozen=True)
class ErrorResponse:
    """A request the component could not serve."""

    error: McpError


Response = Union[
    ToolsListResult,
    ToolsCallResult,
    ResourcesListResult,
    ResourcesReadResult,
    PromptsListResult,
    PromptsGetResult,
    Pong,
    ErrorResponse,
]


@dataclass
class Component:
    """An MCP component built around a request handler."""

    handler: Callable[[Request], Response]

    def handle_request(self, request: Request) -> Response:
        """Pass a request to the handler and return its response."""
        return self.handler(request)

    def initialize(self) -> None:
        """Prepare the component; there is nothing to set up by default."""
        return None


def mcp_component(func: Callable[[Request], Response]) -> Component:
    """Turn a request handler into a component."""
    return Component(func)