from .log_manager import CommandAuditLog, create_audit_log, hash_embedding

__all__ = ["CommandAuditLog", "create_audit_log", "hash_embedding"]
