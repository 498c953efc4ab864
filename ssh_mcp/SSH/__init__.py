"""
SSH connection table, operation handlers and MCP tools.

This package provides a paramiko-based session (`RemoteExecutor`), the
handlers that drive it for each tool, and the registry that maps tool names
to those handlers. `tools.register_tools` wires the registry onto FastMCP.
"""

from .connections import ConnectionRecord, ConnectionTable, Endpoint
from .handlers import SSHToolHandlers
from .registry import ToolRegistry, build_registry

__all__ = [
    "ConnectionRecord",
    "ConnectionTable",
    "Endpoint",
    "SSHToolHandlers",
    "ToolRegistry",
    "build_registry",
]
