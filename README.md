# mcptrigger

mcptrigger is a small HTTP server for the Model Context Protocol (MCP). It accepts
JSON-RPC 2.0 requests posted to a route and passes each one to the component
mounted at that route. The component's answer goes back to the client as an MCP
response.

The server answers some requests itself:

- the `initialize` handshake;
- notifications (`notifications/...`);
- the optional methods that have fixed answers: `resources/templates/list`,
  `resources/subscribe`, `resources/unsubscribe`, `logging/setLevel`,
  `completion/complete` and `roots/list`;
- `sampling/createMessage`, which returns a "not implemented" error;
- unknown methods, which return "Method not found".

Components handle only tools, resources, prompts and `ping`.

## Installing

```
pip install .
```

The package uses nothing outside the standard library. To run the tests with
pytest, install it with `pip install .[test]`.

## Writing a component

A component is a function that takes a request object from `mcptrigger.types`
and returns a response object. The `mcp_component` decorator turns the function
into a `Component`:

```python
from mcptrigger.types import (
    mcp_component, ToolsList, ToolsCall, Ping,
    Tool, ToolsListResult, ToolsCallResult, TextResult, Pong,
    ErrorResponse, McpError,
)

@mcp_component
def my_component(request):
    if isinstance(request, ToolsList):
        return ToolsListResult([Tool("hello", "Says hello", '{"type": "object"}')])
    if isinstance(request, ToolsCall):
        return ToolsCallResult(TextResult("Hello!"))
    if isinstance(request, Ping):
        return Pong()
    return ErrorResponse(McpError(-32601, "Method not found"))
```

**Requests** are:

- `ToolsList` and `ToolsCall`
- `ResourcesList` and `ResourcesRead`
- `PromptsList` and `PromptsGet`
- `Ping`

**Responses** are:

- `ToolsListResult` and `ToolsCallResult`
- `ResourcesListResult` and `ResourcesReadResult`
- `PromptsListResult` and `PromptsGetResult`
- `Pong`
- `ErrorResponse`

**Tool results** are `TextResult`, `JsonResult`, `BinaryResult` and `ErrorResult`:

- A `BinaryResult` is sent as base64 `image` content.
- An `ErrorResult` is sent as text content with `isError: true`.

The package includes two components:

- `mcptrigger.demo.handle_request` provides an echo tool named `example_tool`.
- `mcptrigger.template.handle_request` provides the same tool. Its parts are
  separate functions that you can extend: `get_tools_list`, `handle_tool_call`,
  `get_prompts_list` and `get_resources_list`.

## Running the server from code

`mcptrigger.server.load_trigger` takes three arguments:

- trigger configurations keyed by id, each a mapping with `component` and `route`;
- a mapping of component ids to components;
- optional metadata, as `{"address": "ip:port"}`, or an explicit address.

It returns an `McpTrigger`. Call `serve()` on it to serve until interrupted. To
run a `ThreadingHTTPServer` yourself, call `make_server()` instead. The default
address is `127.0.0.1:3000`.

```python
from mcptrigger import demo
from mcptrigger.server import load_trigger

trigger = load_trigger({"echo": {"component": "demo", "route": "/mcp"}},
                       {"demo": demo.handle_request})
trigger.serve()
```

An invalid configuration raises `ConfigError`. This covers unknown fields,
missing fields, a bad address, an unknown component and an empty set of routes.

## Running the server from the shell

```
mcptrigger --route /mcp=demo
mcptrigger --route /a=demo --route /b=template --listen 0.0.0.0:8080
mcptrigger --route /mcp=demo --test
```

- `--route ROUTE=COMPONENT` mounts one of the included components (`demo` or
  `template`) at a route. You must give it at least once.
- `--listen ADDR` sets the address to listen on. It defaults to the
  `SPIN_MCP_LISTEN_ADDR` environment variable if that is set, and otherwise to
  `127.0.0.1:3000`.
- `--test` sends a `ping` to each mounted component, prints the responses and
  exits without serving.

At startup the command logs a build string made from `SPIN_VERSION`,
`SPIN_COMMIT_SHA` and `SPIN_COMMIT_DATE`. Any of these that is not set shows as
`unknown`.

## HTTP behaviour

| Request | Result |
| --- | --- |
| `POST` to a mounted route | `200` and a JSON-RPC response body |
| A notification, or a component method without an id | `204 No Content` |
| Any method other than `POST` on a mounted route | `405 Method Not Allowed` |
| A request to an unmounted route | The connection is closed with no response |
| A body that is not a JSON-RPC request | The connection is closed with no response |

## Lower-level pieces

- `mcptrigger.jsonrpc`:
  - `parse_request` parses requests and raises `JsonRpcParseError` on bad input.
  - `success_response` and `error_response` build responses. Each has `to_dict()`
    and `to_json()`.
- `mcptrigger.handler`:
  - `build_component_request` turns JSON-RPC methods into component requests.
  - `format_component_response` turns component responses into MCP JSON.
  - `handle_mcp_request` does the whole exchange for one request.

## What it does not do

Components are Python callables running in the same process. The package cannot
load components from files or from an application manifest. From the shell you
can mount only the two included components; to mount your own, use
`load_trigger` from code. The server speaks plain HTTP/1.1 with one JSON
response per request. It has no streaming, no server-sent events and no TLS.