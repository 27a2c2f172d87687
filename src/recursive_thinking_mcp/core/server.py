"""
MCP Server setup and core decorators for Recursive Thinking
"""

import json
import logging
import sys
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from mcp.server.fastmcp import FastMCP

from ..config import config
from .errors import InvalidRequestError, SessionNotFoundError, create_ai_error_response

# Configure logging to stderr only - NEVER stdout in MCP servers
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.WARNING),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# Type variable for decorators
T = TypeVar("T")

# Create FastMCP instance
mcp = FastMCP(config.server_name)


def get_mcp_server(host: str | None = None, port: int | None = None) -> FastMCP:
    """Return the shared FastMCP instance, binding HTTP host/port when given."""
    if host is not None:
        mcp.settings.host = host
    if port is not None:
        mcp.settings.port = port
    return mcp


def handle_tool_errors(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to handle standard error patterns for MCP tools.

    Request errors become structured error payloads instead of failing the
    call, so the server keeps serving subsequent requests.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        tool_name = func.__name__
        try:
            return await func(*args, **kwargs)  # type: ignore[misc, return-value]
        except InvalidRequestError as e:
            logger.warning(f"Validation error in {tool_name}: {e}")
            return create_ai_error_response(e, tool_name)
        except SessionNotFoundError as e:
            logger.warning(f"Unknown session in {tool_name}: {e.session_id}")
            return create_ai_error_response(e, tool_name)
        except Exception as e:
            logger.exception(f"Unexpected error in {tool_name}")
            return create_ai_error_response(e, tool_name)

    return wrapper  # type: ignore[misc, return-value]


def format_output(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to format tool output for LLM consumption.

    Strings pass through; dict results are rendered as indented JSON.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = await func(*args, **kwargs)  # type: ignore[misc, return-value]

        if isinstance(result, dict):
            return json.dumps(result, indent=2)

        return result

    return wrapper  # type: ignore[misc, return-value]
