import io
import socket
from unittest.mock import MagicMock

import paramiko
import pytest

from ssh_mcp.SSH.errors import (
    ChannelInitError,
    CommandTimeout,
    ConnectError,
    ExecStartError,
    KeyReadError,
)
from ssh_mcp.SSH.remote_executor import RemoteExecutor


class ScriptedChannel:
    """Channel double that hands out canned output, then an exit status."""

    def __init__(self, stdout=b"", stderr=b"", exit_code=0, finishes=True):
        self._stdout = stdout
        self._stderr = stderr
        self.exit_code = exit_code
        self.finishes = finishes
        self.command = None
        self.closed = False

    def exec_command(self, command):
        self.command = command

    def shutdown_write(self):
        pass

    def recv_ready(self):
        return bool(self._stdout)

    def recv(self, n):
        chunk, self._stdout = self._stdout[:n], self._stdout[n:]
        return chunk

    def recv_stderr_ready(self):
        return bool(self._stderr)

    def recv_stderr(self, n):
        chunk, self._stderr = self._stderr[:n], self._stderr[n:]
        return chunk

    def exit_status_ready(self):
        return self.finishes

    def recv_exit_status(self):
        return self.exit_code

    def close(self):
        self.closed = True


class LateOutputChannel(ScriptedChannel):
    """Channel whose last chunk and exit status land right after the first empty read."""

    def __init__(self, late_stdout):
        super().__init__(finishes=False)
        self.pending = late_stdout

    def recv_ready(self):
        if not self.finishes:
            # Transport thread delivers data, then the exit status, in order
            self._stdout, self.pending = self.pending, b""
            self.finishes = True
            return False
        return bool(self._stdout)

    def recv(self, n):
        chunk = super().recv(n)
        self.pending = self._stdout
        return chunk


def executor_with_channel(channel) -> RemoteExecutor:
    rx = RemoteExecutor("h", "u", password="p")
    rx._client = MagicMock()
    rx._client.get_transport.return_value.is_active.return_value = True
    rx._client.get_transport.return_value.open_session.return_value = channel
    return rx


def rsa_key_text(passphrase=None) -> str:
    buffer = io.StringIO()
    paramiko.RSAKey.generate(2048).write_private_key(buffer, password=passphrase)
    return buffer.getvalue()


class TestRun:
    def test_collects_streams_separately(self):
        channel = ScriptedChannel(stdout=b"hello\n", stderr=b"warning\n", exit_code=3)
        result = executor_with_channel(channel).run("do-it")
        assert result.exit_code == 3
        assert result.stdout == "hello\n"
        assert result.stderr == "warning\n"
        assert channel.command == "do-it"
        assert channel.closed

    def test_cwd_is_quoted(self):
        channel = ScriptedChannel()
        executor_with_channel(channel).run("ls", cwd="/srv/my app")
        assert channel.command == "cd '/srv/my app' && ls"

    def test_timeout_closes_channel(self):
        channel = ScriptedChannel(finishes=False)
        with pytest.raises(CommandTimeout, match="timed out after 100ms"):
            executor_with_channel(channel).run("sleep 60", timeout=0.1)
        assert channel.closed

    def test_inactive_session(self):
        rx = RemoteExecutor("h", "u", password="p")
        rx._client = MagicMock()
        rx._client.get_transport.return_value = None
        with pytest.raises(ExecStartError):
            rx.run("ls")

    def test_output_arriving_with_exit_status_is_kept(self):
        channel = LateOutputChannel(b"hi\n")
        result = executor_with_channel(channel).run("echo hi", timeout=5)
        assert result.stdout == "hi\n"
        assert result.exit_code == 0
        assert channel.pending == b""

    def test_exec_failure(self):
        rx = executor_with_channel(ScriptedChannel())
        rx._client.get_transport.return_value.open_session.side_effect = paramiko.SSHException("no session")
        with pytest.raises(ExecStartError, match="no session"):
            rx.run("ls")


class TestConnect:
    def test_authentication_failure(self):
        rx = RemoteExecutor("h", "u", password="bad")
        rx._client = MagicMock()
        rx._client.connect.side_effect = paramiko.AuthenticationException("Authentication failed.")
        with pytest.raises(ConnectError, match="authentication failed for u@h"):
            rx.connect()
        assert not rx.connected

    def test_timeout(self):
        rx = RemoteExecutor("h", "u", password="p", timeout=30)
        rx._client = MagicMock()
        rx._client.connect.side_effect = socket.timeout("timed out")
        with pytest.raises(ConnectError, match="timed out after 30s"):
            rx.connect()

    def test_password_is_dropped_when_key_given(self):
        rx = RemoteExecutor("h", "u", password="p", key=rsa_key_text())
        rx._client = MagicMock()
        rx.connect()
        kwargs = rx._client.connect.call_args.kwargs
        assert kwargs["password"] is None
        assert isinstance(kwargs["pkey"], paramiko.RSAKey)
        assert rx.connected

    def test_timeout_bounds_each_handshake_phase(self):
        rx = RemoteExecutor("h", "u", password="p", timeout=12.5)
        rx._client = MagicMock()
        rx.connect()
        kwargs = rx._client.connect.call_args.kwargs
        assert kwargs["timeout"] == kwargs["banner_timeout"] == kwargs["auth_timeout"] == 12.5


class TestParsePrivateKey:
    def test_rsa_key(self):
        assert isinstance(RemoteExecutor._parse_private_key(rsa_key_text()), paramiko.RSAKey)

    def test_encrypted_key_with_passphrase(self):
        key = RemoteExecutor._parse_private_key(rsa_key_text("s3cret"), "s3cret")
        assert isinstance(key, paramiko.RSAKey)

    def test_encrypted_key_without_passphrase(self):
        with pytest.raises(KeyReadError, match="passphrase"):
            RemoteExecutor._parse_private_key(rsa_key_text("s3cret"))

    def test_garbage(self):
        with pytest.raises(KeyReadError, match="unsupported or unrecognized format"):
            RemoteExecutor._parse_private_key("not a key")


def test_open_sftp_failure():
    rx = RemoteExecutor("h", "u", password="p")
    rx._client = MagicMock()
    rx._client.open_sftp.side_effect = paramiko.SSHException("subsystem request failed")
    with pytest.raises(ChannelInitError, match="Failed to initialize SFTP: subsystem request failed"):
        rx.open_sftp()
