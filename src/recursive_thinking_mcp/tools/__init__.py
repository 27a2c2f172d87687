"""MCP tools for Recursive Thinking"""

from .sessions import get_thinking_status, list_thinking_sessions
from .thinking import recursive_thinking

__all__ = [
    "get_thinking_status",
    "list_thinking_sessions",
    "recursive_thinking",
]
