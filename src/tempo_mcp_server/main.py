#!/usr/bin/env python3
"""Main entrypoint for the Tempo MCP server."""

import argparse
import logging
import sys
from typing import List, Optional

from tempo_mcp_server.config import ENV_MAPPINGS, load_config
from tempo_mcp_server.factories.client_factory import ClientFactory
from tempo_mcp_server.server import create_server
from tempo_mcp_server.services.worklog_service import WorklogService
from tempo_mcp_server.utils.logging import StructuredLogger, setup_console_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser listing the environment variables."""
    env_lines = "\n".join(f"  {env_key}" for env_key, _ in ENV_MAPPINGS.values())
    return argparse.ArgumentParser(
        prog="tempo-mcp-server",
        description="MCP server for managing Tempo worklogs over stdio.",
        epilog=f"Configuration is read from the environment (or .env):\n{env_lines}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    build_parser().parse_args(argv)

    config = load_config()
    setup_console_logging(config.server.log_level)

    is_valid, errors = config.validate()
    if not is_valid:
        logger.error("Environment validation failed:")
        for error in errors:
            logger.error(f"  - {error}")
        sys.exit(1)

    try:
        tempo_client = ClientFactory.create_tempo_client(config)
        jira_client = ClientFactory.create_jira_client(config)
        service = WorklogService(
            tempo_client, jira_client, StructuredLogger(config.server.log_dir)
        )
        server = create_server(service, config.server)
    except Exception as e:
        logger.exception(f"Failed to start MCP Server: {e}")
        sys.exit(1)

    logger.info(f"Starting {config.server.name} {config.server.version} on stdio")
    server.run()


if __name__ == "__main__":
    main()
