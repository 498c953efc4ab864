"""Shared result contracts for SSH MCP tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypedDict

from mcp.types import CallToolResult, TextContent


@dataclass
class ToolResult:
    """Normalized envelope returned by every tool handler.

    Success and failure share the same shape; failures only set `is_error`.
    """

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(type="text", text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(type="text", text=text)], is_error=True)

    @property
    def text(self) -> str:
        """All text content items joined by newlines."""
        return "\n".join(item.text for item in self.content)

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(content=list(self.content), isError=self.is_error)


@dataclass
class ExecResult:
    """Outcome of one remote command that ran to completion."""

    exit_code: int
    stdout: str
    stderr: str


class FileEntry(TypedDict):
    filename: str
    isDirectory: bool
    size: int
    lastModified: str
