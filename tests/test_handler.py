import base64
import json

import pytest

from mcptrigger import demo, template
from mcptrigger.handler import (
    build_component_request,
    format_component_response,
    handle_mcp_request,
)
from mcptrigger.jsonrpc import JsonRpcParseError, JsonRpcRequest
from mcptrigger.types import (
    BinaryResult,
    ErrorResponse,
    ErrorResult,
    JsonResult,
    McpError,
    Ping,
    Pong,
    Prompt,
    PromptArgument,
    PromptMessage,
    PromptsGet,
    PromptsGetResult,
    PromptsList,
    PromptsListResult,
    ResourceContents,
    ResourceInfo,
    ResourcesList,
    ResourcesListResult,
    ResourcesRead,
    ResourcesReadResult,
    TextResult,
    Tool,
    ToolsCall,
    ToolsCallResult,
    ToolsList,
    ToolsListResult,
    mcp_component,
)


def _request(method, params=None, request_id=1):
    return JsonRpcRequest(jsonrpc="2.0", method=method, params=params, id=request_id)


def _recording_component(response):
    seen = []

    @mcp_component
    def handler(request):
        seen.append(request)
        return response

    return handler, seen


@pytest.mark.parametrize(
    "method, expected",
    [
        ("tools/list", ToolsList()),
        ("resources/list", ResourcesList()),
        ("prompts/list", PromptsList()),
        ("ping", Ping()),
    ],
)
def test_build_simple_requests(method, expected):
    assert build_component_request(method, None) == expected


def test_build_tools_call_round_trips_arguments():
    args = {"message": "hi", "nested": {"b": 2, "a": [1, 2]}}
    req = build_component_request("tools/call", {"name": "example_tool", "arguments": args})
    assert isinstance(req, ToolsCall)
    assert req.name == "example_tool"
    assert json.loads(req.arguments) == args


def test_build_tools_call_arguments_are_compact_and_sorted():
    req = build_component_request("tools/call", {"name": "t", "arguments": {"b": 1, "a": 2}})
    assert req.arguments == '{"a":2,"b":1}'


def test_build_resources_read():
    assert build_component_request("resources/read", {"uri": "file:///a"}) == ResourcesRead(
        "file:///a"
    )


def test_build_prompts_get():
    req = build_component_request("prompts/get", {"name": "p", "arguments": None})
    assert req == PromptsGet("p", "null")


@pytest.mark.parametrize(
    "method", ["initialize", "roots/list", "notifications/initialized", "unknown/thing"]
)
def test_build_returns_none_for_trigger_methods(method):
    assert build_component_request(method, {}) is None


@pytest.mark.parametrize(
    "method, params",
    [
        ("tools/call", None),
        ("tools/call", {"name": "x"}),
        ("tools/call", {"arguments": {}}),
        ("tools/call", {"name": 5, "arguments": {}}),
        ("resources/read", None),
        ("resources/read", {"uri": 3}),
        ("prompts/get", {"name": "p"}),
    ],
)
def test_build_rejects_bad_params(method, params):
    with pytest.raises(JsonRpcParseError):
        build_component_request(method, params)


def test_initialize_response():
    component, seen = _recording_component(Pong())
    response = handle_mcp_request(component, _request("initialize", request_id=7))
    body = response.to_dict()
    assert body["id"] == 7
    assert body["result"]["protocolVersion"] == "2025-03-26"
    assert body["result"]["serverInfo"] == {"name": "spin-mcp-server", "version": "0.1.0"}
    assert body["result"]["capabilities"] == {"tools": {}, "resources": {}, "prompts": {}}
    assert seen == []


def test_initialize_without_id_gets_no_response():
    component, _ = _recording_component(Pong())
    assert handle_mcp_request(component, _request("initialize", request_id=None)) is None


@pytest.mark.parametrize(
    "method", ["notifications/initialized", "notifications/tools/list_changed", "notifications/x"]
)
def test_notifications_get_no_response(method):
    component, seen = _recording_component(Pong())
    assert handle_mcp_request(component, _request(method, request_id=None)) is None
    assert seen == []


@pytest.mark.parametrize(
    "method, result",
    [
        ("resources/templates/list", {"resourceTemplates": []}),
        ("resources/subscribe", {}),
        ("resources/unsubscribe", {}),
        ("logging/setLevel", {}),
        ("completion/complete", {"completion": {"values": [], "total": 0, "hasMore": False}}),
        ("roots/list", {"roots": []}),
    ],
)
def test_stub_methods(method, result):
    component, seen = _recording_component(Pong())
    response = handle_mcp_request(component, _request(method, request_id="a"))
    assert response.to_dict() == {"jsonrpc": "2.0", "result": result, "id": "a"}
    assert handle_mcp_request(component, _request(method, request_id=None)) is None
    assert seen == []


def test_sampling_is_an_error():
    component, _ = _recording_component(Pong())
    response = handle_mcp_request(component, _request("sampling/createMessage"))
    assert response.to_dict()["error"] == {"code": -32601, "message": "Sampling not implemented"}


def test_unknown_method_is_an_error():
    component, _ = _recording_component(Pong())
    response = handle_mcp_request(component, _request("foo/bar"))
    assert response.to_dict()["error"] == {"code": -32601, "message": "Method not found: foo/bar"}
    assert handle_mcp_request(component, _request("foo/bar", request_id=None)) is None


def test_ping_goes_to_component():
    component, seen = _recording_component(Pong())
    response = handle_mcp_request(component, _request("ping", request_id=3))
    assert response.to_dict() == {"jsonrpc": "2.0", "result": "pong", "id": 3}
    assert seen == [Ping()]


def test_component_called_without_id_gives_no_response():
    component, seen = _recording_component(Pong())
    assert handle_mcp_request(component, _request("ping", request_id=None)) is None
    assert seen == [Ping()]


def test_demo_tools_list_schema_is_parsed():
    response = handle_mcp_request(demo.handle_request, _request("tools/list"))
    tools = response.to_dict()["result"]["tools"]
    assert [t["name"] for t in tools] == ["example_tool"]
    assert tools[0]["inputSchema"]["required"] == ["message"]


def test_demo_tool_call_echo():
    params = {"name": "example_tool", "arguments": {"message": "hi"}}
    response = handle_mcp_request(demo.handle_request, _request("tools/call", params))
    assert response.to_dict()["result"] == {"content": [{"type": "text", "text": "Echo: hi"}]}


def test_template_unknown_tool_is_error_content():
    params = {"name": "nope", "arguments": {}}
    response = handle_mcp_request(template.handle_request, _request("tools/call", params))
    result = response.to_dict()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Unknown tool: nope"


def test_component_error_response():
    component, _ = _recording_component(ErrorResponse(McpError(-32601, "Method not found")))
    response = handle_mcp_request(component, _request("resources/read", {"uri": "x"}))
    assert response.to_dict()["error"] == {"code": -32601, "message": "Method not found"}


def test_format_error_with_data():
    response = format_component_response(1, ErrorResponse(McpError(-1, "bad", "detail")))
    assert response.to_dict()["error"] == {"code": -1, "message": "bad", "data": "detail"}


def test_format_invalid_schema_becomes_empty_object():
    response = format_component_response(1, ToolsListResult([Tool("t", "d", "not json")]))
    assert response.to_dict()["result"]["tools"][0]["inputSchema"] == {}


def test_format_json_result_keeps_text():
    text = '{"a": 1}'
    response = format_component_response(1, ToolsCallResult(JsonResult(text)))
    assert response.to_dict()["result"]["content"][0]["text"] == text


def test_format_json_result_rejects_invalid_json():
    with pytest.raises(ValueError):
        format_component_response(1, ToolsCallResult(JsonResult("{oops")))


def test_format_binary_result():
    data = b"\x00\x01\xffabc"
    response = format_component_response(1, ToolsCallResult(BinaryResult(data)))
    item = response.to_dict()["result"]["content"][0]
    assert item["type"] == "image"
    assert item["mimeType"] == "application/octet-stream"
    assert base64.b64decode(item["data"]) == data


def test_format_error_result():
    response = format_component_response(1, ToolsCallResult(ErrorResult(McpError(5, "boom"))))
    assert response.to_dict()["result"] == {
        "content": [{"type": "text", "text": "boom"}],
        "isError": True,
    }


def test_format_text_result():
    response = format_component_response(1, ToolsCallResult(TextResult("hello")))
    assert response.to_dict()["result"]["content"] == [{"type": "text", "text": "hello"}]


def test_format_resources_list():
    resources = [ResourceInfo("u", "n", None, "text/plain")]
    response = format_component_response(1, ResourcesListResult(resources))
    assert response.to_dict()["result"]["resources"] == [
        {"uri": "u", "name": "n", "description": None, "mimeType": "text/plain"}
    ]


def test_format_resource_read_text():
    contents = ResourceContents("u", "text/plain", text="body")
    response = format_component_response(1, ResourcesReadResult(contents))
    assert response.to_dict()["result"]["contents"] == [
        {"uri": "u", "mimeType": "text/plain", "text": "body"}
    ]


def test_format_resource_read_blob():
    contents = ResourceContents("u", None, blob=b"\x10\x20")
    item = format_component_response(1, ResourcesReadResult(contents)).to_dict()["result"][
        "contents"
    ][0]
    assert "text" not in item
    assert base64.b64decode(item["blob"]) == b"\x10\x20"


def test_format_resource_read_empty():
    contents = ResourceContents("u")
    item = format_component_response(1, ResourcesReadResult(contents)).to_dict()["result"][
        "contents"
    ][0]
    assert item == {"uri": "u", "mimeType": None}


def test_format_prompts_list():
    prompt = Prompt("p", "desc", [PromptArgument("a", None, True)])
    response = format_component_response(1, PromptsListResult([prompt]))
    assert response.to_dict()["result"]["prompts"] == [
        {
            "name": "p",
            "description": "desc",
            "arguments": [{"name": "a", "description": None, "required": True}],
        }
    ]


def test_format_prompts_get():
    response = format_component_response(1, PromptsGetResult([PromptMessage("user", "hi")]))
    assert response.to_dict()["result"] == {"messages": [{"role": "user", "content": "hi"}]}


def test_formatted_response_serialises():
    response = format_component_response("x", Pong())
    assert json.loads(response.to_json()) == {"jsonrpc": "2.0", "result": "pong", "id": "x"}