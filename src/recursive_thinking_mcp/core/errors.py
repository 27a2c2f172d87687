"""
Error types and AI-assistant-friendly error responses.
Structured error payloads help AI assistants understand and recover from errors.
"""

import logging
from typing import Any

from ..config import config

logger = logging.getLogger(__name__)


class ThinkingError(Exception):
    """Base class for request-level failures of the thinking tools."""


class InvalidRequestError(ThinkingError, ValueError):
    """A request argument is missing, malformed or out of range."""


class SessionNotFoundError(ThinkingError, KeyError):
    """No session is stored under the requested identifier."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(session_id)

    def __str__(self) -> str:
        return f"Session {self.session_id} not found. Start with action=start first."


def create_ai_error_response(error: Exception, context: str) -> dict[str, Any]:
    """
    Create error response with AI-actionable hints.

    Args:
        error: The exception that occurred
        context: Context about where the error occurred

    Returns:
        Dict with error details and AI-friendly recovery hints
    """
    error_type = type(error).__name__
    error_msg = str(error)

    response: dict[str, Any] = {
        "success": False,
        "error": error_msg,
        "error_type": error_type,
        "context": context,
    }

    if isinstance(error, SessionNotFoundError):
        response.update(
            {
                "_ai_diagnosis": "Session not found",
                "_ai_suggestion": "Check active sessions with list_thinking_sessions",
                "_ai_recovery": "Start fresh with action='start' and your task",
                "_human_action": "Verify session ID or start a new session",
            }
        )

    elif isinstance(error, InvalidRequestError):
        lowered = error_msg.lower()
        response["_ai_diagnosis"] = "Request validation failed"
        if lowered.startswith("invalid action"):
            response["_ai_suggestion"] = "Use action='start' to begin or action='iterate' to refine"
        elif lowered.startswith("task"):
            response["_ai_suggestion"] = (
                f"Provide a non-empty task of at most {config.max_task_length} characters"
            )
        elif lowered.startswith("response"):
            response["_ai_suggestion"] = (
                "Answer the previous prompt and pass it as 'response' "
                f"(at most {config.max_response_length} characters)"
            )
        elif lowered.startswith("sessionid"):
            response["_ai_suggestion"] = "Pass the sessionId returned by action='start'"
        else:
            response["_ai_suggestion"] = (
                "Check config: maxDepth 1-10, minConfidence 0-1, maxIterations 1-20"
            )

    else:
        response.update(
            {
                "_ai_diagnosis": f"Unexpected error in {context}",
                "_ai_suggestion": "Check server logs for details",
                "_ai_context": {"error_type": error_type},
            }
        )

    return response
