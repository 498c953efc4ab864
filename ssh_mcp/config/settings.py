from dataclasses import dataclass, field

TRANSPORTS = ("stdio", "streamable-http", "sse")
HOST_KEY_POLICIES = ("auto-add", "reject", "warn")


@dataclass
class ServerSettings:
    name: str = "SSH_MCP"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"


@dataclass
class SSHSettings:
    connect_timeout: float = 30.0
    default_exec_timeout_ms: int = 60000
    host_key_policy: str = "auto-add"
    look_for_keys: bool = False
    allow_agent: bool = False


@dataclass
class AuditSettings:
    enabled: bool = False
    qdrant_url: str | None = None
    collection: str = "ssh_commands"


@dataclass
class Settings:
    server: ServerSettings = field(default_factory=ServerSettings)
    ssh: SSHSettings = field(default_factory=SSHSettings)
    audit: AuditSettings = field(default_factory=AuditSettings)
    weave_project: str | None = None
