"""Tests for the MCP protocol surface: list_tools and call_tool."""

import json

import pytest
from mcp import types

from mcp_github.server import build_server


@pytest.fixture
def app(handlers):
    return build_server(handlers)


async def list_tools(app):
    handler = app.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest(method="tools/list"))
    return result.root


async def call_tool(app, name, arguments):
    handler = app.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root


@pytest.mark.asyncio
async def test_list_tools_returns_full_catalog(app, handlers):
    result = await list_tools(app)
    assert [tool.name for tool in result.tools] == list(handlers)
    for tool in result.tools:
        assert tool.inputSchema == handlers[tool.name].schema.to_json_schema()


@pytest.mark.asyncio
async def test_call_tool_success(app, fake_client):
    fake_client.responses["get_content"] = {
        "type": "file", "name": "README.md", "path": "README.md", "encoding": "base64", "content": "aGVsbG8=",
    }
    result = await call_tool(app, "get_file_contents", {"owner": "acme", "repo": "widgets", "path": "README.md"})
    assert result.isError is False
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert json.loads(result.content[0].text)["content"] == "hello"


@pytest.mark.asyncio
async def test_call_tool_validation_error_is_reported_by_dispatcher(app, fake_client):
    result = await call_tool(app, "get_file_contents", {"owner": "acme", "repo": "widgets"})
    assert result.isError is True
    assert result.content[0].text.startswith("❌ ValidationError:")
    assert "path: is required" in result.content[0].text
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_call_unknown_tool_then_valid_tool(app, fake_client):
    unknown = await call_tool(app, "does_not_exist", {})
    assert unknown.isError is True
    assert unknown.content[0].text.startswith("❌ UnknownOperation:")

    fake_client.responses["get_authenticated_user"] = {"login": "octocat"}
    ok = await call_tool(app, "get_user", {})
    assert ok.isError is False
    assert json.loads(ok.content[0].text)["login"] == "octocat"


@pytest.mark.asyncio
async def test_call_tool_upstream_error(app, fake_client):
    result = await call_tool(app, "get_repository", {"owner": "acme", "repo": "missing"})
    assert result.isError is True
    assert result.content[0].text.startswith("❌ UpstreamError:")
