"""Utility helpers for SSH MCP tools.

This package groups small, focused helpers used by SSH tools:
- masking: safe value masking for logs
- paths: local path expansion and remote timestamp rendering
- types: shared result contracts for tool handlers
"""

from .masking import mask_value, masked_endpoint
from .paths import expand_home, iso_timestamp, is_directory_mode
from .types import ExecResult, FileEntry, ToolResult

__all__ = [
    "ExecResult",
    "FileEntry",
    "ToolResult",
    "expand_home",
    "iso_timestamp",
    "is_directory_mode",
    "mask_value",
    "masked_endpoint",
]
