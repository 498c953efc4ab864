"""Tool registry and dispatcher.

The registry owns the declared parameters of every SSH tool. It can describe
them (names, JSON types, which are required) without invoking anything, and
dispatch a tool name plus an argument bundle to the matching handler. Checks
here stop at presence and JSON type; everything else is the handler's job.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from .errors import InvalidArgument, MissingArgument, SSHToolError, UnknownTool
from .handlers import SSHToolHandlers
from .utils.types import ToolResult

logger = logging.getLogger(__name__)

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int, float),
    "number": (int, float),
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class ParamSpec:
    name: str
    type: str
    description: str
    required: bool = False

    @property
    def argument(self) -> str:
        """Handler keyword for this parameter (camelCase -> snake_case)."""
        return _CAMEL_RE.sub("_", self.name).lower()

    def check(self, value: Any) -> Any:
        # bool is an int subclass but never a valid JSON number here
        if isinstance(value, bool) or not isinstance(value, _JSON_TYPES[self.type]):
            raise InvalidArgument(f"Parameter '{self.name}' must be of type {self.type}")
        if self.type == "integer" and isinstance(value, float):
            if not value.is_integer():
                raise InvalidArgument(f"Parameter '{self.name}' must be of type integer")
            value = int(value)
        return value


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    handler: Callable[..., ToolResult]
    params: tuple[ParamSpec, ...] = ()

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                p.name: {"type": p.type, "description": p.description} for p in self.params
            },
            "required": self.required,
        }

    def param(self, name: str) -> ParamSpec:
        for param in self.params:
            if param.name == name:
                return param
        raise KeyError(name)

    def bind(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Map wire arguments onto handler keywords, checking presence and type."""
        kwargs: dict[str, Any] = {}
        for param in self.params:
            value = arguments.get(param.name)
            if value is None:
                if param.required:
                    raise MissingArgument(f"Missing required parameter: {param.name}")
                continue
            kwargs[param.argument] = param.check(value)
        return kwargs


class ToolRegistry:
    """Name -> `ToolSpec` mapping bound to one `SSHToolHandlers` context."""

    def __init__(self, handlers: SSHToolHandlers):
        self.handlers = handlers
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool '{spec.name}' is already registered")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        spec = self._tools.get(name)
        if spec is None:
            raise UnknownTool(name)
        return spec

    def names(self) -> list[str]:
        return list(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        """Return name, description and input schema of every registered tool."""
        return [
            {"name": s.name, "description": s.description, "inputSchema": s.input_schema()}
            for s in self._tools.values()
        ]

    def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        try:
            spec = self.get(name)
            kwargs = spec.bind(arguments or {})
        except SSHToolError as e:
            logger.warning("Rejected call to %s: %s", name, e)
            return ToolResult.error(str(e))
        return spec.handler(**kwargs)

    def close_all(self) -> int:
        closed = self.handlers.close_all()
        if closed:
            logger.info("Closed %d open SSH connection(s)", closed)
        return closed


CONNECTION_ID = ParamSpec("connectionId", "string", "ID of an active SSH connection", required=True)


def build_registry(handlers: SSHToolHandlers) -> ToolRegistry:
    """Create a registry with the six SSH tools bound to `handlers`."""
    registry = ToolRegistry(handlers)
    registry.register(
        ToolSpec(
            name="ssh_connect",
            description="Connect to a remote server via SSH",
            handler=handlers.connect,
            params=(
                ParamSpec("host", "string", "Hostname or IP address of the remote server", required=True),
                ParamSpec("port", "integer", "SSH port (default: 22)"),
                ParamSpec("username", "string", "SSH username", required=True),
                ParamSpec("password", "string", "SSH password (if not using key-based authentication)"),
                ParamSpec("privateKeyPath", "string", "Path to private key file (if using key-based authentication)"),
                ParamSpec("passphrase", "string", "Passphrase for private key (if needed)"),
                ParamSpec("connectionId", "string", "Unique identifier for this connection (to reference in future commands)"),
            ),
        )
    )
    registry.register(
        ToolSpec(
            name="ssh_exec",
            description="Execute a command on the remote server",
            handler=handlers.execute,
            params=(
                CONNECTION_ID,
                ParamSpec("command", "string", "Command to execute", required=True),
                ParamSpec("cwd", "string", "Working directory for the command"),
                ParamSpec("timeout", "number", "Command timeout in milliseconds (default: 60000)"),
            ),
        )
    )
    registry.register(
        ToolSpec(
            name="ssh_upload_file",
            description="Upload a file to the remote server",
            handler=handlers.upload,
            params=(
                CONNECTION_ID,
                ParamSpec("localPath", "string", "Path to the local file", required=True),
                ParamSpec("remotePath", "string", "Path where the file should be saved on the remote server", required=True),
            ),
        )
    )
    registry.register(
        ToolSpec(
            name="ssh_download_file",
            description="Download a file from the remote server",
            handler=handlers.download,
            params=(
                CONNECTION_ID,
                ParamSpec("remotePath", "string", "Path to the file on the remote server", required=True),
                ParamSpec("localPath", "string", "Path where the file should be saved locally", required=True),
            ),
        )
    )
    registry.register(
        ToolSpec(
            name="ssh_list_files",
            description="List files in a directory on the remote server",
            handler=handlers.list_files,
            params=(
                CONNECTION_ID,
                ParamSpec("remotePath", "string", "Path to the directory on the remote server", required=True),
            ),
        )
    )
    registry.register(
        ToolSpec(
            name="ssh_disconnect",
            description="Close an SSH connection",
            handler=handlers.disconnect,
            params=(CONNECTION_ID,),
        )
    )
    return registry
