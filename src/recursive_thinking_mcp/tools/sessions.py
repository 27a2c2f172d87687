"""
Session inspection tools: status and listing
"""

import logging
import sys

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

from ..core import format_output, handle_tool_errors  # noqa: E402
from ..core.server import mcp  # noqa: E402
from ..core.service import get_thinking_service  # noqa: E402
from ..formatting import format_session_list, format_session_status  # noqa: E402


@mcp.tool(description="Get the current state of a recursive thinking session.")
@format_output
@handle_tool_errors
async def get_thinking_status(sessionId: str) -> str:  # noqa: N803
    """
    Get thinking session status.

    Args:
        sessionId: The thinking session ID

    Returns:
        JSON with depth, confidence, completion and the latest response
    """
    service = get_thinking_service()
    return format_session_status(service.get_status(sessionId))


@mcp.tool(description="List recursive thinking sessions, most recent first.")
@format_output
@handle_tool_errors
async def list_thinking_sessions() -> str:
    """List stored thinking sessions."""
    service = get_thinking_service()
    return format_session_list(service.list_sessions())
