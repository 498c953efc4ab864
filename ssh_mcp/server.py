"""MCP server bootstrap.

Builds the FastMCP server, the SSH handler context that owns the connection
table, and the tool registry that binds them. Nothing here is module-level
state: `main.py` calls `create_server` once and keeps the returned registry
around for the shutdown sweep.
"""

from __future__ import annotations

import logging
from typing import Any

import weave
from mcp.server.fastmcp import FastMCP

from ssh_mcp.audit import create_audit_log
from ssh_mcp.config import Settings
from ssh_mcp.SSH.handlers import ExecutorFactory, SSHToolHandlers
from ssh_mcp.SSH.registry import ToolRegistry, build_registry
from ssh_mcp.SSH.remote_executor import RemoteExecutor
from ssh_mcp.SSH.tools import register_tools

logger = logging.getLogger(__name__)


def create_server(
    settings: Settings | None = None,
    *,
    executor_factory: ExecutorFactory = RemoteExecutor,
    audit_log: Any = None,
) -> tuple[FastMCP, ToolRegistry]:
    """Create the FastMCP server and the registry behind its tools.

    Args:
        settings: Loaded configuration; defaults when omitted.
        executor_factory: Session factory handed to the handlers.
        audit_log: Audit sink; built from `settings.audit` when omitted.
    """
    settings = settings or Settings()

    if settings.weave_project:
        weave.init(settings.weave_project)

    mcp: FastMCP = FastMCP(
        settings.server.name,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level.upper(),
    )
    handlers = SSHToolHandlers(
        settings.ssh,
        executor_factory=executor_factory,
        audit_log=audit_log if audit_log is not None else create_audit_log(settings.audit),
    )
    registry = build_registry(handlers)
    register_tools(mcp, registry)
    logger.debug("Registered tools: %s", ", ".join(registry.names()))
    return mcp, registry
