"""mcp-github: Model Context Protocol server for the GitHub REST API."""

import asyncio
import logging
import sys

from .audit import AuditLogger
from .aut_client import TaskLogClient
from .errors import ConfigurationError
from .github_client import GitHubClient
from .server import build_server, create_tool_handlers
from .session import GitHubSession

logger = logging.getLogger(__name__)


async def main(session: GitHubSession):
    """
    Main entry point for mcp-github server.

    Sets up stdio-based MCP server and runs it until the transport closes.
    """
    from mcp.server.stdio import stdio_server

    handlers = create_tool_handlers(
        GitHubClient(session),
        TaskLogClient(session),
        AuditLogger(session.audit_log_path),
    )
    app = build_server(handlers)
    logger.info("GitHub MCP Server running on stdio (%d tools)", len(handlers))

    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options()
        )


def run():
    """Synchronous wrapper for main() to use as console script entry point."""
    try:
        session = GitHubSession.from_environment()
    except ConfigurationError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)

    # stdout carries the protocol
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, session.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(main(session))
    except KeyboardInterrupt:
        print("\nmcp-github server stopped.", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


__version__ = "1.0.0"
__all__ = ["main", "run", "build_server", "create_tool_handlers"]
