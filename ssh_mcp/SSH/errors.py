"""Error taxonomy for SSH tool handlers.

Every failure a handler can detect is one of these exceptions. Handlers raise
them internally and convert them to an error `ToolResult` before returning, so
none of them ever reaches the MCP boundary as an uncaught fault.
"""


class SSHToolError(Exception):
    """Base class for all handler-level failures."""

    # Reported verbatim, without the handler's failure prefix
    bare_message = False


class MissingCredential(SSHToolError):
    """Neither a password nor a private key path was supplied."""

    bare_message = True


class KeyReadError(SSHToolError):
    """The private key file could not be read or parsed."""

    bare_message = True


class ConnectError(SSHToolError):
    """The SSH connection could not be established."""


class UnknownConnection(SSHToolError):
    """No connection is registered under the requested id."""

    bare_message = True

    def __init__(self, connection_id: str):
        super().__init__(f"No active SSH connection with ID: {connection_id}")
        self.connection_id = connection_id


class CommandTimeout(SSHToolError):
    """The remote command did not finish before the timeout elapsed."""


class ExecStartError(SSHToolError):
    """The transport failed to start the remote command."""


class LocalFileNotFound(SSHToolError):
    """The local file to upload does not exist."""

    bare_message = True


class ChannelInitError(SSHToolError):
    """The SFTP channel could not be opened on the session."""


class TransferError(SSHToolError):
    """A whole-file SFTP put or get failed."""


class ListError(SSHToolError):
    """A remote directory could not be read."""


class DisconnectError(SSHToolError):
    """Closing the SSH session failed."""


class UnknownTool(SSHToolError):
    """No tool is registered under the requested name."""

    bare_message = True

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class MissingArgument(SSHToolError):
    """A required tool parameter was not supplied."""

    bare_message = True


class InvalidArgument(SSHToolError):
    """A tool parameter has the wrong type."""

    bare_message = True
