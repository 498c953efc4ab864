"""Operation handlers behind the SSH tools.

`SSHToolHandlers` owns the connection table and exposes one method per tool.
Each method performs exactly one remote call sequence through a
`RemoteExecutor` and always returns a `ToolResult`: handler errors from
`errors.py` become error results, and a non-zero remote exit code is still a
success.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import time
from typing import Any, Callable

import paramiko

from ssh_mcp.config import SSHSettings

from .connections import ConnectionRecord, ConnectionTable, Endpoint
from .errors import (
    DisconnectError,
    InvalidArgument,
    KeyReadError,
    ListError,
    LocalFileNotFound,
    MissingCredential,
    SSHToolError,
    TransferError,
)
from .remote_executor import RemoteExecutor
from .utils.masking import masked_endpoint
from .utils.paths import expand_home, is_directory_mode, iso_timestamp
from .utils.types import ExecResult, FileEntry, ToolResult

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[..., RemoteExecutor]

_TRANSFER_ERRORS = (OSError, EOFError, paramiko.SSHException)


def tool_handler(failure_prefix: str):
    """Turn a handler returning text into one returning a `ToolResult`.

    Handler errors are reported with `failure_prefix` unless they carry a
    message meant to be shown verbatim.
    """

    def decorator(fn: Callable[..., str]) -> Callable[..., ToolResult]:
        @functools.wraps(fn)
        def wrapper(self: "SSHToolHandlers", *args: Any, **kwargs: Any) -> ToolResult:
            try:
                return ToolResult.ok(fn(self, *args, **kwargs))
            except SSHToolError as e:
                message = str(e) if e.bare_message else f"{failure_prefix}: {e}"
                logger.warning("%s failed (%s): %s", fn.__name__, type(e).__name__, message)
                return ToolResult.error(message)
            except Exception as e:
                logger.exception("Unexpected error in %s", fn.__name__)
                return ToolResult.error(f"{failure_prefix}: {e}")

        return wrapper

    return decorator


def generate_connection_id() -> str:
    return f"ssh-{int(time.time() * 1000)}"


class SSHToolHandlers:
    """Connection table plus the six tool operations that use it.

    Args:
        settings: SSH defaults (connect timeout, exec timeout, host key policy).
        executor_factory: Builds a session object; tests pass a fake.
        audit_log: Optional sink with a `record(...)` method for executed commands.
        connections: Table to use; a fresh one by default.
    """

    def __init__(
        self,
        settings: SSHSettings | None = None,
        *,
        executor_factory: ExecutorFactory = RemoteExecutor,
        audit_log: Any = None,
        connections: ConnectionTable | None = None,
    ):
        self.settings = settings or SSHSettings()
        self.executor_factory = executor_factory
        self.audit_log = audit_log
        self.connections = connections if connections is not None else ConnectionTable()

    @tool_handler("Failed to connect")
    def connect(
        self,
        host: str,
        username: str,
        port: int = 22,
        password: str | None = None,
        private_key_path: str | None = None,
        passphrase: str | None = None,
        connection_id: str | None = None,
    ) -> str:
        if not password and not private_key_path:
            raise MissingCredential("Either password or privateKeyPath must be provided")

        connection_id = connection_id or generate_connection_id()
        key = None
        if private_key_path:
            key_path = expand_home(private_key_path)
            try:
                with open(key_path, "r", encoding="utf-8") as f:
                    key = f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise KeyReadError(f"Failed to read private key: {e}") from e

        endpoint = Endpoint(host=host, port=int(port), username=username)
        executor = self.executor_factory(
            host,
            username,
            port=endpoint.port,
            password=None if key is not None else password,
            key=key,
            passphrase=passphrase if key is not None else None,
            timeout=self.settings.connect_timeout,
            look_for_keys=self.settings.look_for_keys,
            allow_agent=self.settings.allow_agent,
            host_key_policy=self.settings.host_key_policy,
        )
        try:
            executor.connect()
        except SSHToolError:
            logger.error(
                "Connection %s to %s failed",
                connection_id,
                masked_endpoint(username, host, endpoint.port),
            )
            executor.close()
            raise

        previous = self.connections.put(
            ConnectionRecord(connection_id=connection_id, executor=executor, endpoint=endpoint)
        )
        if previous is not None:
            # Same id reused: the new session replaces the old one
            self._close_quietly(previous, reason="replaced")
        logger.info("Connection %s established", connection_id)
        return f"Successfully connected to {endpoint}\nConnection ID: {connection_id}"

    @tool_handler("Command execution failed")
    def execute(
        self,
        connection_id: str,
        command: str,
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> str:
        record = self.connections.get(connection_id)
        timeout_ms = self.settings.default_exec_timeout_ms if timeout is None else timeout
        if timeout_ms <= 0:
            raise InvalidArgument("timeout must be a positive number of milliseconds")

        logger.info("[%s] exec: %s", connection_id, command)
        result = record.executor.run(command, cwd=cwd, timeout=timeout_ms / 1000.0)
        self._audit(record, command, result)

        output = result.stdout.strip() or result.stderr.strip() or "(no output)"
        return f"Command: {command}\nExit code: {result.exit_code}\nOutput:\n{output}"

    @tool_handler("File upload failed")
    def upload(self, connection_id: str, local_path: str, remote_path: str) -> str:
        record = self.connections.get(connection_id)
        local_path = expand_home(local_path)
        if not os.path.exists(local_path):
            raise LocalFileNotFound(f"Local file does not exist: {local_path}")

        sftp = record.executor.open_sftp()
        try:
            sftp.put(local_path, remote_path)
        except _TRANSFER_ERRORS as e:
            raise TransferError(f"Failed to upload file: {e}") from e
        finally:
            sftp.close()
        logger.info("[%s] uploaded %s -> %s", connection_id, local_path, remote_path)
        return f"Successfully uploaded {local_path} to {remote_path}"

    @tool_handler("File download failed")
    def download(self, connection_id: str, remote_path: str, local_path: str) -> str:
        record = self.connections.get(connection_id)
        local_path = expand_home(local_path)
        parent = os.path.dirname(local_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        sftp = record.executor.open_sftp()
        try:
            sftp.get(remote_path, local_path)
        except _TRANSFER_ERRORS as e:
            raise TransferError(f"Failed to download file: {e}") from e
        finally:
            sftp.close()
        logger.info("[%s] downloaded %s -> %s", connection_id, remote_path, local_path)
        return f"Successfully downloaded {remote_path} to {local_path}"

    @tool_handler("Failed to list files")
    def list_files(self, connection_id: str, remote_path: str) -> str:
        record = self.connections.get(connection_id)
        sftp = record.executor.open_sftp()
        try:
            attrs = sftp.listdir_attr(remote_path)
        except _TRANSFER_ERRORS as e:
            raise ListError(str(e)) from e
        finally:
            sftp.close()

        entries: list[FileEntry] = [
            {
                "filename": attr.filename,
                "isDirectory": is_directory_mode(attr.st_mode),
                "size": attr.st_size or 0,
                "lastModified": iso_timestamp(attr.st_mtime),
            }
            for attr in attrs
        ]
        return f"Files in {remote_path}:\n\n{json.dumps(entries, indent=2)}"

    @tool_handler("Failed to disconnect")
    def disconnect(self, connection_id: str) -> str:
        # Removed before closing: a failed close must not leave it "connected"
        record = self.connections.remove(connection_id)
        try:
            record.executor.close()
        except _TRANSFER_ERRORS as e:
            raise DisconnectError(str(e)) from e
        logger.info("Connection %s closed", connection_id)
        return f"Disconnected from {record.endpoint}"

    def close_all(self) -> int:
        """Close every open connection, logging failures. Returns how many were open."""
        records = self.connections.pop_all()
        for record in records:
            self._close_quietly(record, reason="shutdown")
        return len(records)

    def _close_quietly(self, record: ConnectionRecord, reason: str) -> None:
        try:
            record.executor.close()
        except Exception as e:
            logger.error("Failed to close connection %s (%s): %s", record.connection_id, reason, e)

    def _audit(self, record: ConnectionRecord, command: str, result: ExecResult) -> None:
        if self.audit_log is None:
            return
        try:
            self.audit_log.record(
                connection_id=record.connection_id,
                endpoint=record.endpoint,
                command=command,
                result=result,
            )
        except Exception:
            logger.exception("Failed to write audit entry for %s", record.connection_id)
