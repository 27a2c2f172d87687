#!/usr/bin/env python3
"""
Recursive Thinking MCP Server
Token-efficient iterative refinement: start → iterate → complete

CRITICAL: This server uses stdio transport for MCP protocol communication.
- stdout is reserved for MCP JSON-RPC messages
- All logging/debug output must go to stderr or files
"""

import asyncio
import logging
import os
import sys

from .config import config

# Configure logging to stderr only - NEVER stdout in MCP servers
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.WARNING),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

from .core.server import get_mcp_server  # noqa: E402

__all__ = ["create_server", "http_main", "main", "run_from_env"]

DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 8087


def create_server(host: str | None = None, port: int | None = None):
    """Create and return the MCP server instance.

    Returns:
        The configured MCP server instance with all tools registered.
    """
    # Import tools LAZILY (only when creating server) to avoid circular import deadlock
    # Tools register with the mcp instance via decorators when imported
    from .tools import (  # noqa: F401
        get_thinking_status,
        list_thinking_sessions,
        recursive_thinking,
    )

    return get_mcp_server(host=host, port=port)


def main() -> None:
    """Run the MCP server with stdio transport (default)"""
    logger.info("Recursive Thinking MCP server running on stdio")

    try:
        server = create_server()
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


def http_main(host: str = DEFAULT_HTTP_HOST, port: int = DEFAULT_HTTP_PORT) -> None:
    """Run the MCP server with FastMCP's streamable HTTP transport.

    Args:
        host: Host to bind to (default: 127.0.0.1 for localhost only)
        port: Port to bind to (default: 8087)
    """
    logger.info(f"Starting Recursive Thinking MCP server (HTTP) on {host}:{port}")

    try:
        server = create_server(host=host, port=port)
        asyncio.run(server.run_streamable_http_async())
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception:
        logger.exception("Server error")
        raise


def run_from_env() -> None:
    """Pick the transport from MCP_TRANSPORT (stdio or http)."""
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "http":
        host = os.environ.get("MCP_HTTP_HOST", DEFAULT_HTTP_HOST)
        port = int(os.environ.get("MCP_HTTP_PORT", str(DEFAULT_HTTP_PORT)))
        http_main(host=host, port=port)
    else:
        main()


if __name__ == "__main__":
    run_from_env()
