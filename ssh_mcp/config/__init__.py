from .manager import ConfigManager
from .schema import SchemaError, validate_config_schema
from .settings import AuditSettings, ServerSettings, Settings, SSHSettings

__all__ = [
    "AuditSettings",
    "ConfigManager",
    "SSHSettings",
    "SchemaError",
    "ServerSettings",
    "Settings",
    "validate_config_schema",
]
