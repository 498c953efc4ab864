"""SSH tools for MCP clients: connect, exec, upload, download, list, disconnect."""

__version__ = "1.0.0"
