"""Masking helpers for log lines that mention remote endpoints.

Hosts and usernames end up in error logs when a connection fails; they go
through these helpers first. Passwords and passphrases are never logged.
"""


def mask_value(value: str | int | None) -> str:
    """Mask a value by replacing every other character with "*".

    Args:
        value: A string (or port number) to mask, or None.

    Returns:
        A masked representation; empty string if value is falsy.
    """
    if not value:
        return ""
    return "".join("*" if i % 2 else c for i, c in enumerate(str(value)))


def masked_endpoint(username: str | None, host: str | None, port: int | None) -> str:
    """Return `user@host:port` with user and host masked."""
    return f"{mask_value(username)}@{mask_value(host)}:{port}"
