"""Schema validation for the YAML server configuration.

Every section is optional; an empty file (or no file at all) yields the
defaults from `settings.py`. When a section is present its keys are checked
for type and allowed values so that a typo fails at startup rather than on
the first tool call.
"""

from __future__ import annotations

from typing import Any

from .settings import HOST_KEY_POLICIES, TRANSPORTS


class SchemaError(ValueError):
    """Raised when the YAML configuration structure is invalid."""


_SECTIONS: dict[str, dict[str, tuple[type, ...]]] = {
    "server": {
        "name": (str,),
        "transport": (str,),
        "host": (str,),
        "port": (int,),
        "log_level": (str,),
    },
    "ssh": {
        "connect_timeout": (int, float),
        "default_exec_timeout_ms": (int,),
        "host_key_policy": (str,),
        "look_for_keys": (bool,),
        "allow_agent": (bool,),
    },
    "audit": {
        "enabled": (bool,),
        "qdrant_url": (str, type(None)),
        "collection": (str,),
    },
    "weave": {
        "project": (str, type(None)),
    },
}


def _check_section(name: str, section: Any) -> None:
    if not isinstance(section, dict):
        raise SchemaError(f"'{name}' must be a mapping/object")
    allowed = _SECTIONS[name]
    for key, value in section.items():
        if key not in allowed:
            raise SchemaError(f"{name}.{key} is not a recognized setting")
        expected = allowed[key]
        # bool is an int subclass; only accept it where bool is expected
        if isinstance(value, bool) and bool not in expected:
            raise SchemaError(f"{name}.{key} must not be a boolean")
        if not isinstance(value, expected):
            names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
            raise SchemaError(f"{name}.{key} must be {names}")


def validate_config_schema(data: dict[str, Any] | None) -> None:
    """Validate the high-level config schema.

    Checks:
    - only known top-level sections (server, ssh, audit, weave)
    - each section is a mapping with known keys of the right type
    - server.transport and ssh.host_key_policy take one of their allowed values
    - timeouts and ports are positive

    Raises:
        SchemaError: on structural issues; the message contains human-friendly details.
    """
    if data is None:
        return
    if not isinstance(data, dict):
        raise SchemaError("Top-level YAML must be a mapping/object")

    for name, section in data.items():
        if name not in _SECTIONS:
            raise SchemaError(f"Unknown configuration section '{name}'")
        _check_section(name, section)

    server = data.get("server") or {}
    if "transport" in server and server["transport"] not in TRANSPORTS:
        raise SchemaError(f"server.transport must be one of {', '.join(TRANSPORTS)}")
    if "port" in server and not 0 < server["port"] < 65536:
        raise SchemaError("server.port must be between 1 and 65535")

    ssh = data.get("ssh") or {}
    if "host_key_policy" in ssh and ssh["host_key_policy"] not in HOST_KEY_POLICIES:
        raise SchemaError(f"ssh.host_key_policy must be one of {', '.join(HOST_KEY_POLICIES)}")
    for key in ("connect_timeout", "default_exec_timeout_ms"):
        if key in ssh and ssh[key] <= 0:
            raise SchemaError(f"ssh.{key} must be positive")
