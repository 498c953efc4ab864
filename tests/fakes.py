"""Fakes standing in for paramiko sessions in handler and server tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from ssh_mcp.SSH.errors import ChannelInitError, ConnectError
from ssh_mcp.SSH.utils.types import ExecResult


class FakeSFTP:
    def __init__(self, entries: list[Any] | None = None, error: Exception | None = None):
        self.entries = entries or []
        self.error = error
        self.puts: list[tuple[str, str]] = []
        self.gets: list[tuple[str, str]] = []
        self.closed = False

    def put(self, local_path: str, remote_path: str) -> None:
        if self.error:
            raise self.error
        self.puts.append((local_path, remote_path))

    def get(self, remote_path: str, local_path: str) -> None:
        if self.error:
            raise self.error
        with open(local_path, "w", encoding="utf-8") as f:
            f.write(f"contents of {remote_path}")
        self.gets.append((remote_path, local_path))

    def listdir_attr(self, path: str) -> list[Any]:
        if self.error:
            raise self.error
        return self.entries

    def close(self) -> None:
        self.closed = True


class FakeExecutor:
    def __init__(self, factory: "FakeExecutorFactory", hostname: str, username: str, **kwargs: Any):
        self.factory = factory
        self.hostname = hostname
        self.username = username
        self.kwargs = kwargs
        self.commands: list[tuple[str, str | None, float | None]] = []
        self.sftp_opened = 0
        self.close_calls = 0

    def connect(self) -> None:
        if self.factory.connect_error:
            raise ConnectError(self.factory.connect_error)

    def run(self, command: str, *, cwd: str | None = None, timeout: float | None = None) -> ExecResult:
        self.commands.append((command, cwd, timeout))
        if self.factory.run_error:
            raise self.factory.run_error
        if self.factory.run_result is not None:
            return self.factory.run_result
        if command.startswith("echo "):
            return ExecResult(exit_code=0, stdout=command[5:] + "\n", stderr="")
        return ExecResult(exit_code=0, stdout="", stderr="")

    def open_sftp(self) -> FakeSFTP:
        if self.factory.sftp_error:
            raise ChannelInitError(f"Failed to initialize SFTP: {self.factory.sftp_error}")
        self.sftp_opened += 1
        return self.factory.sftp

    def close(self) -> None:
        self.close_calls += 1
        if self.factory.close_error:
            raise self.factory.close_error


class FakeExecutorFactory:
    """Callable matching `RemoteExecutor(...)`; remembers every session it built."""

    def __init__(self) -> None:
        self.created: list[FakeExecutor] = []
        self.connect_error: str | None = None
        self.run_result: ExecResult | None = None
        self.run_error: Exception | None = None
        self.sftp = FakeSFTP()
        self.sftp_error: str | None = None
        self.close_error: Exception | None = None

    def __call__(self, hostname: str, username: str, **kwargs: Any) -> FakeExecutor:
        executor = FakeExecutor(self, hostname, username, **kwargs)
        self.created.append(executor)
        return executor

    @property
    def last(self) -> FakeExecutor:
        return self.created[-1]


def sftp_entry(filename: str, mode: int, size: int, mtime: int) -> SimpleNamespace:
    return SimpleNamespace(filename=filename, st_mode=mode, st_size=size, st_mtime=mtime)


