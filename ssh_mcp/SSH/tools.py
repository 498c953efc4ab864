"""MCP tools that expose SSH actions.

This module registers the SSH tools on a FastMCP server. Every tool is a thin
async wrapper around `ToolRegistry.dispatch`: the blocking paramiko work runs
in a worker thread, so one tool call is one suspension point for the event
loop and several calls may interleave. Error results are raised as
`ToolError`, which FastMCP reports back with `isError: true`.

Tools provided:
- `ssh_connect(host, username, ...)`: Open a session and store it under an id.
- `ssh_exec(connectionId, command, cwd?, timeout?)`: Run a command.
- `ssh_upload_file(connectionId, localPath, remotePath)`: SFTP put.
- `ssh_download_file(connectionId, remotePath, localPath)`: SFTP get.
- `ssh_list_files(connectionId, remotePath)`: SFTP directory listing.
- `ssh_disconnect(connectionId)`: Close a session.
"""

# ruff: noqa: N803
from typing import Annotated, Any

import anyio
import weave
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .registry import ToolRegistry

SECRET_PARAMS = ("password", "passphrase")


def redact_secrets(inputs: dict[str, Any]) -> dict[str, Any]:
    """Hide credentials from traced tool inputs."""
    return {k: ("***" if k in SECRET_PARAMS and v else v) for k, v in inputs.items()}


def register_tools(mcp: FastMCP, registry: ToolRegistry) -> None:
    """Register every tool of `registry` on `mcp`.

    Parameter descriptions are read from the registry's declarations, so the
    schema FastMCP publishes and the one `registry.describe()` returns agree.
    """

    async def call(name: str, arguments: dict[str, Any]) -> str:
        arguments = {k: v for k, v in arguments.items() if v is not None}
        result = await anyio.to_thread.run_sync(registry.dispatch, name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    def describe(name: str) -> str:
        return registry.get(name).description

    def field(tool: str, param: str) -> Any:
        return Field(description=registry.get(tool).param(param).description)

    @mcp.tool(
        name="ssh_connect",
        description=(
            describe("ssh_connect") + ". Provide either a password or a privateKeyPath (a leading '~' is "
            "expanded). Returns the connection ID to pass to the other tools."
        ),
    )
    @weave.op(postprocess_inputs=redact_secrets)
    async def ssh_connect(
        host: Annotated[str, field("ssh_connect", "host")],
        username: Annotated[str, field("ssh_connect", "username")],
        port: Annotated[int, field("ssh_connect", "port")] = 22,
        password: Annotated[str | None, field("ssh_connect", "password")] = None,
        privateKeyPath: Annotated[str | None, field("ssh_connect", "privateKeyPath")] = None,
        passphrase: Annotated[str | None, field("ssh_connect", "passphrase")] = None,
        connectionId: Annotated[str | None, field("ssh_connect", "connectionId")] = None,
    ) -> str:
        return await call(
            "ssh_connect",
            {
                "host": host,
                "username": username,
                "port": port,
                "password": password,
                "privateKeyPath": privateKeyPath,
                "passphrase": passphrase,
                "connectionId": connectionId,
            },
        )

    @mcp.tool(
        name="ssh_exec",
        description=(
            describe("ssh_exec") + ". Returns the exit code and output (stdout, or stderr when stdout is empty). "
            "A non-zero exit code is not an error."
        ),
    )
    @weave.op()
    async def ssh_exec(
        connectionId: Annotated[str, field("ssh_exec", "connectionId")],
        command: Annotated[str, field("ssh_exec", "command")],
        cwd: Annotated[str | None, field("ssh_exec", "cwd")] = None,
        timeout: Annotated[float | None, field("ssh_exec", "timeout")] = None,
    ) -> str:
        return await call(
            "ssh_exec",
            {"connectionId": connectionId, "command": command, "cwd": cwd, "timeout": timeout},
        )

    @mcp.tool(name="ssh_upload_file", description=describe("ssh_upload_file"))
    @weave.op()
    async def ssh_upload_file(
        connectionId: Annotated[str, field("ssh_upload_file", "connectionId")],
        localPath: Annotated[str, field("ssh_upload_file", "localPath")],
        remotePath: Annotated[str, field("ssh_upload_file", "remotePath")],
    ) -> str:
        return await call(
            "ssh_upload_file",
            {"connectionId": connectionId, "localPath": localPath, "remotePath": remotePath},
        )

    @mcp.tool(
        name="ssh_download_file",
        description=describe("ssh_download_file") + ". Missing local directories are created.",
    )
    @weave.op()
    async def ssh_download_file(
        connectionId: Annotated[str, field("ssh_download_file", "connectionId")],
        remotePath: Annotated[str, field("ssh_download_file", "remotePath")],
        localPath: Annotated[str, field("ssh_download_file", "localPath")],
    ) -> str:
        return await call(
            "ssh_download_file",
            {"connectionId": connectionId, "remotePath": remotePath, "localPath": localPath},
        )

    @mcp.tool(
        name="ssh_list_files",
        description=(
            describe("ssh_list_files") + ". Returns a JSON array of "
            "{ filename, isDirectory, size, lastModified }."
        ),
    )
    @weave.op()
    async def ssh_list_files(
        connectionId: Annotated[str, field("ssh_list_files", "connectionId")],
        remotePath: Annotated[str, field("ssh_list_files", "remotePath")],
    ) -> str:
        return await call("ssh_list_files", {"connectionId": connectionId, "remotePath": remotePath})

    @mcp.tool(name="ssh_disconnect", description=describe("ssh_disconnect"))
    @weave.op()
    async def ssh_disconnect(
        connectionId: Annotated[str, field("ssh_disconnect", "connectionId")],
    ) -> str:
        return await call("ssh_disconnect", {"connectionId": connectionId})
