"""Configuration loader for the SSH MCP server.

Reads an optional YAML file with `server`, `ssh`, `audit` and `weave`
sections and exposes them as typed `Settings`. Secrets (Qdrant and Mistral
API keys) never live in this file; they come from the environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import yaml

from .schema import validate_config_schema
from .settings import AuditSettings, ServerSettings, Settings, SSHSettings


class ConfigManager:
    """Manage access to server configuration defined in a YAML file.

    Every section and key is optional. Keys missing from the file keep the
    defaults declared on the settings dataclasses.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Raises:
        FileNotFoundError: If `config_path` is given but does not exist.
        SchemaError: If the YAML content does not match the expected schema.
    """

    def __init__(self, config_path: Union[str, Path, None] = None):
        self.config_path = Path(config_path) if config_path else None
        self.raw = self._load_raw()
        validate_config_schema(self.raw)
        self.settings = self._build_settings(self.raw)

    def _load_raw(self) -> dict[str, Any]:
        """Load the YAML mapping, or an empty one when no path was configured."""
        if self.config_path is None:
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else {}

    @staticmethod
    def _build_settings(data: dict[str, Any]) -> Settings:
        weave = data.get("weave") or {}
        ssh = dict(data.get("ssh") or {})
        if "connect_timeout" in ssh:
            ssh["connect_timeout"] = float(ssh["connect_timeout"])
        return Settings(
            server=ServerSettings(**(data.get("server") or {})),
            ssh=SSHSettings(**ssh),
            audit=AuditSettings(**(data.get("audit") or {})),
            weave_project=weave.get("project"),
        )
