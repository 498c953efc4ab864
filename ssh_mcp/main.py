"""Command-line entry point for the SSH MCP server."""

import argparse
import json
import logging
import os
import sys

import yaml
from dotenv import load_dotenv

from ssh_mcp.config import ConfigManager, SchemaError
from ssh_mcp.config.settings import TRANSPORTS
from ssh_mcp.server import create_server

logger = logging.getLogger("ssh_mcp")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="MCP server exposing SSH connect/exec/upload/download/list/disconnect tools"
    )
    parser.add_argument("--config", default=os.getenv("CONFIG"), help="Path to the YAML config (overrides CONFIG env)")
    parser.add_argument("--transport", choices=TRANSPORTS, help="MCP transport (overrides server.transport)")
    parser.add_argument("--list-tools", action="store_true", help="Print the tool schemas as JSON and exit")
    args = parser.parse_args(argv)

    # stdout carries the stdio MCP channel; logs go to stderr
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config_manager = ConfigManager(args.config)
    except (OSError, yaml.YAMLError, SchemaError) as e:
        logger.error("Failed to start SSH MCP server: invalid configuration: %s", e)
        return 1

    settings = config_manager.settings
    if args.transport:
        settings.server.transport = args.transport
    logging.getLogger().setLevel(settings.server.log_level.upper())

    mcp, registry = create_server(settings)
    if args.list_tools:
        print(json.dumps(registry.describe(), indent=2))
        return 0

    logger.info(
        "SSH MCP server started (transport=%s). Waiting for requests...",
        settings.server.transport,
    )
    try:
        mcp.run(transport=settings.server.transport)
    except KeyboardInterrupt:
        logger.info("Shutting down SSH MCP server...")
    finally:
        registry.close_all()
    return 0


if __name__ == "__main__":
    sys.exit(main())
