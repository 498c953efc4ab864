"""Tests for the FastMCP boundary built by `create_server`."""

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from ssh_mcp.config import Settings
from ssh_mcp.server import create_server


def _texts(result) -> list[str]:
    # FastMCP returns either content blocks or (content blocks, structured output)
    if isinstance(result, tuple):
        result = result[0]
    return [block.text for block in result]


@pytest.fixture
def server(factory):
    return create_server(Settings(), executor_factory=factory)


@pytest.mark.asyncio
async def test_list_tools_matches_registry(server):
    mcp, registry = server
    tools = {tool.name: tool for tool in await mcp.list_tools()}
    described = {tool["name"]: tool for tool in registry.describe()}

    assert set(tools) == set(described)
    for name, tool in tools.items():
        expected = described[name]["inputSchema"]
        assert set(tool.inputSchema.get("required", [])) == set(expected["required"])
        assert set(tool.inputSchema["properties"]) == set(expected["properties"])


@pytest.mark.asyncio
async def test_param_descriptions_come_from_registry(server):
    mcp, registry = server
    tools = {tool.name: tool for tool in await mcp.list_tools()}
    for described in registry.describe():
        published = tools[described["name"]].inputSchema["properties"]
        for name, prop in described["inputSchema"]["properties"].items():
            assert published[name]["description"] == prop["description"], (described["name"], name)


@pytest.mark.asyncio
async def test_connect_exec_disconnect_over_mcp(server, factory):
    mcp, registry = server

    connected = _texts(
        await mcp.call_tool(
            "ssh_connect", {"host": "h", "username": "u", "password": "p", "connectionId": "c1"}
        )
    )
    assert "Connection ID: c1" in connected[0]

    executed = _texts(await mcp.call_tool("ssh_exec", {"connectionId": "c1", "command": "echo hi"}))
    assert executed == ["Command: echo hi\nExit code: 0\nOutput:\nhi"]

    disconnected = _texts(await mcp.call_tool("ssh_disconnect", {"connectionId": "c1"}))
    assert disconnected == ["Disconnected from u@h:22"]

    with pytest.raises(ToolError, match="No active SSH connection with ID: c1"):
        await mcp.call_tool("ssh_exec", {"connectionId": "c1", "command": "echo hi"})


@pytest.mark.asyncio
async def test_error_result_raises_tool_error(server, factory):
    mcp, _ = server
    with pytest.raises(ToolError, match="Either password or privateKeyPath must be provided"):
        await mcp.call_tool("ssh_connect", {"host": "h", "username": "u"})
    assert factory.created == []


@pytest.mark.asyncio
async def test_exec_timeout_is_milliseconds(server, factory):
    mcp, _ = server
    await mcp.call_tool("ssh_connect", {"host": "h", "username": "u", "password": "p", "connectionId": "c1"})
    await mcp.call_tool("ssh_exec", {"connectionId": "c1", "command": "sleep 1", "timeout": 2500})
    assert factory.last.commands == [("sleep 1", None, 2.5)]


@pytest.mark.asyncio
async def test_list_files_over_mcp(server, factory):
    mcp, _ = server
    await mcp.call_tool("ssh_connect", {"host": "h", "username": "u", "password": "p", "connectionId": "c1"})
    [text] = _texts(await mcp.call_tool("ssh_list_files", {"connectionId": "c1", "remotePath": "/empty"}))
    assert text == "Files in /empty:\n\n[]"
