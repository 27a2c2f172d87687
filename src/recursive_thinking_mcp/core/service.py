"""
Request handling for thinking sessions.

ThinkingService validates tool arguments, loads and saves session records
and drives the pure engine. Results are plain dicts for the formatter.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from ..config import ServerConfig
from ..config import config as server_config
from .engine import process_iteration, start_thinking
from .errors import InvalidRequestError, SessionNotFoundError
from .evaluation import HeuristicEvaluator, ResponseEvaluator
from .session_store import InMemorySessionStore, SessionStore, generate_session_id
from .thinking_types import SessionRecord, ThinkingConfig

logger = logging.getLogger(__name__)

VALID_ACTIONS = ("start", "iterate")


class RequestValidator:
    """Checks tool arguments before any session state is touched."""

    def __init__(self, settings: ServerConfig | None = None):
        self.settings = settings or server_config

    def validate_action(self, action: str) -> tuple[bool, str]:
        if action not in VALID_ACTIONS:
            return False, f"Invalid action: {action}. Use 'start' or 'iterate'"
        return True, "Valid"

    def validate_task(self, task: str | None) -> tuple[bool, str]:
        if not task or not task.strip():
            return False, "Task is required for action=start"
        if len(task) > self.settings.max_task_length:
            return False, f"Task too long (maximum {self.settings.max_task_length} characters)"
        return True, "Valid"

    def validate_response(self, response: str | None) -> tuple[bool, str]:
        if not response:
            return False, "Response is required for action=iterate"
        if len(response) > self.settings.max_response_length:
            return (
                False,
                f"Response too long (maximum {self.settings.max_response_length} characters)",
            )
        return True, "Valid"


def _check(result: tuple[bool, str]) -> None:
    is_valid, message = result
    if not is_valid:
        raise InvalidRequestError(message)


class ThinkingService:
    """Runs the start/iterate protocol over an injected session store."""

    def __init__(
        self,
        store: SessionStore | None = None,
        evaluator: ResponseEvaluator | None = None,
        settings: ServerConfig | None = None,
    ):
        self.store = store if store is not None else InMemorySessionStore()
        self.evaluator = evaluator or HeuristicEvaluator()
        self.settings = settings or server_config
        self.validator = RequestValidator(self.settings)

    async def handle(
        self,
        action: str,
        task: str | None = None,
        response: str | None = None,
        session_id: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Dispatch a recursive_thinking request by action."""
        _check(self.validator.validate_action(action))
        if action == "start":
            return await self.start(task, config, session_id)
        return await self.iterate(session_id, response, config)

    async def start(
        self,
        task: str | None,
        config: Mapping[str, Any] | None = None,
        session_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a session and return its initial prompt.

        Args:
            task: The problem to think through
            config: Partial ThinkingConfig overrides
            session_id: Optional caller-chosen ID; generated when empty

        Returns:
            Dict with the session ID, the prompt and the effective config
        """
        _check(self.validator.validate_task(task))
        thinking_config = ThinkingConfig.from_overrides(config)
        sid = session_id or generate_session_id()

        record = SessionRecord(session_id=sid, task=task, config=thinking_config)
        prompt = start_thinking(task, thinking_config)

        async with self.store.lock(sid):
            self.store.put(record)

        logger.info(f"Started thinking session {sid}")
        return {
            "success": True,
            "session_id": sid,
            "prompt": prompt,
            "depth": 0,
            "is_complete": False,
            "config": thinking_config.to_dict(),
        }

    async def iterate(
        self,
        session_id: str | None,
        response: str | None,
        config: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Feed the agent's response into a session.

        Config overrides given here are merged over the session's config
        and kept for later iterations.
        """
        if not session_id:
            raise InvalidRequestError("sessionId is required for action=iterate")

        # Locks exist only for stored sessions; re-read once the lock is held
        if self.store.get(session_id) is None:
            raise SessionNotFoundError(session_id)

        async with self.store.lock(session_id):
            record = self.store.get(session_id)
            if record is None:
                raise SessionNotFoundError(session_id)
            _check(self.validator.validate_response(response))
            thinking_config = record.config.merged(config)

            if record.state.is_complete:
                logger.warning(f"Iterating already completed session {session_id}")

            result = process_iteration(
                record.task, response, record.state, thinking_config, self.evaluator
            )
            updated = replace(
                record,
                config=thinking_config,
                state=result.state,
                stop_reason=result.stop_reason,
                updated_at=datetime.now(timezone.utc),
            )
            self.store.put(updated)

        state = result.state
        logger.debug(f"Session {session_id} depth {state.depth} confidence {state.confidence}")

        if result.next_prompt is None:
            logger.info(
                f"Thinking session {session_id} complete after {state.depth} iterations "
                f"({result.stop_reason.value})"
            )
            return {
                "success": True,
                "session_id": session_id,
                "is_complete": True,
                "depth": state.depth,
                "confidence": state.confidence,
                "stop_reason": result.stop_reason.value,
                "iterations": list(state.iterations),
                "final_solution": state.last_result,
            }

        return {
            "success": True,
            "session_id": session_id,
            "prompt": result.next_prompt,
            "depth": state.depth,
            "confidence": state.confidence,
            "is_complete": False,
        }

    def get_status(self, session_id: str) -> dict[str, Any]:
        """Return the stored record for a session."""
        record = self.store.get(session_id)
        if record is None:
            raise SessionNotFoundError(session_id)
        return {
            "success": True,
            "session": record.to_dict(self.settings.task_preview_length),
            "state": record.state.to_dict(),
        }

    def list_sessions(self) -> dict[str, Any]:
        """List stored sessions, most recently updated first."""
        records = self.store.list_sessions()
        shown = records[: self.settings.max_sessions_display]
        return {
            "success": True,
            "total": len(records),
            "sessions": [r.to_dict(self.settings.task_preview_length) for r in shown],
        }


# Initialize global service (will be created on first use)
_thinking_service: ThinkingService | None = None


def get_thinking_service() -> ThinkingService:
    """Lazy initialization of the process-wide thinking service"""
    global _thinking_service
    if _thinking_service is None:
        _thinking_service = ThinkingService()
    return _thinking_service


def set_thinking_service(service: ThinkingService | None) -> None:
    """Replace the process-wide service (None resets to lazy default)."""
    global _thinking_service
    _thinking_service = service
