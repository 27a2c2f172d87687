"""
Tests for the thinking service request handling
"""

import asyncio
import logging

import pytest

from recursive_thinking_mcp.config import ServerConfig
from recursive_thinking_mcp.core.errors import InvalidRequestError, SessionNotFoundError
from recursive_thinking_mcp.core.service import (
    RequestValidator,
    ThinkingService,
    get_thinking_service,
    set_thinking_service,
)
from recursive_thinking_mcp.core.session_store import InMemorySessionStore
from recursive_thinking_mcp.core.thinking_types import StopReason

READY_RESPONSE = "Final implemented solution, fully tested and ready to deploy, confidence: 0.9"


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def service(store):
    return ThinkingService(store=store, settings=ServerConfig())


class TestRequestValidator:
    """Test boundary validation of tool arguments"""

    def test_actions(self):
        validator = RequestValidator(ServerConfig())
        assert validator.validate_action("start") == (True, "Valid")
        assert validator.validate_action("iterate") == (True, "Valid")
        is_valid, msg = validator.validate_action("finish")
        assert not is_valid
        assert "Invalid action: finish" in msg

    def test_task(self):
        validator = RequestValidator(ServerConfig())
        assert validator.validate_task("Build a REST API")[0]
        assert not validator.validate_task("")[0]
        assert not validator.validate_task("   \n\t")[0]
        assert not validator.validate_task(None)[0]

    def test_task_too_long(self):
        settings = ServerConfig()
        settings.max_task_length = 10
        is_valid, msg = RequestValidator(settings).validate_task("x" * 11)
        assert not is_valid
        assert "too long" in msg

    def test_response(self):
        settings = ServerConfig()
        settings.max_response_length = 5
        validator = RequestValidator(settings)
        assert validator.validate_response("short")[0]
        assert not validator.validate_response("")[0]
        assert "too long" in validator.validate_response("longer")[1]


class TestThinkingServiceStart:
    """Test action=start"""

    @pytest.mark.asyncio
    async def test_start_creates_fresh_session(self, service, store):
        result = await service.start("Build a REST API")

        assert result["success"] is True
        assert result["session_id"].startswith("session_")
        assert result["depth"] == 0
        assert result["is_complete"] is False
        assert '"Build a REST API"' in result["prompt"]

        record = store.get(result["session_id"])
        assert record.task == "Build a REST API"
        assert record.state.depth == 0
        assert record.state.iterations == []

    @pytest.mark.asyncio
    async def test_start_with_explicit_id_and_config(self, service, store):
        result = await service.start("Task", {"maxDepth": 2}, session_id="mine")

        assert result["session_id"] == "mine"
        assert result["config"]["maxDepth"] == 2
        assert store.get("mine").config.max_depth == 2

    @pytest.mark.asyncio
    async def test_start_blank_task_creates_nothing(self, service, store):
        with pytest.raises(InvalidRequestError, match="Task is required"):
            await service.start("   ")
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_start_bad_config_creates_nothing(self, service, store):
        with pytest.raises(InvalidRequestError):
            await service.start("Task", {"maxDepth": 50})
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_restart_replaces_session(self, service, store):
        await service.start("First", session_id="s")
        await service.iterate("s", "progress, confidence: 0.2")

        await service.start("Second", session_id="s")

        assert store.get("s").task == "Second"
        assert store.get("s").state.depth == 0


class TestThinkingServiceIterate:
    """Test action=iterate"""

    @pytest.mark.asyncio
    async def test_iterate_returns_next_prompt(self, service, store):
        sid = (await service.start("Build a REST API"))["session_id"]

        result = await service.iterate(
            sid, "I will use Express and handle errors, confidence: 0.6"
        )

        assert result["is_complete"] is False
        assert result["depth"] == 1
        assert result["confidence"] == 0.6
        assert "depth 1/5" in result["prompt"]
        assert 'Task: "Build a REST API..."' in result["prompt"]
        assert store.get(sid).state.depth == 1

    @pytest.mark.asyncio
    async def test_iterate_completes_when_ready(self, service, store):
        sid = (await service.start("Build a REST API"))["session_id"]

        result = await service.iterate(sid, READY_RESPONSE)

        assert result["is_complete"] is True
        assert result["stop_reason"] == "production_ready"
        assert result["iterations"] == [READY_RESPONSE]
        assert result["final_solution"] == READY_RESPONSE
        assert "prompt" not in result
        assert store.get(sid).stop_reason == StopReason.PRODUCTION_READY

    @pytest.mark.asyncio
    async def test_depth_limit_after_five_rounds(self, service):
        sid = (await service.start("Task"))["session_id"]

        for _ in range(4):
            result = await service.iterate(sid, "still thinking")
            assert result["is_complete"] is False

        result = await service.iterate(sid, "still thinking")
        assert result["is_complete"] is True
        assert result["depth"] == 5
        assert result["confidence"] == 0.5
        assert result["stop_reason"] == "max_depth"

    @pytest.mark.asyncio
    async def test_unknown_session(self, service, store):
        with pytest.raises(SessionNotFoundError, match="action=start"):
            await service.iterate("missing", "response")
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_unknown_sessions_allocate_no_locks(self, service, store):
        for i in range(20):
            with pytest.raises(SessionNotFoundError):
                await service.iterate(f"bogus{i}", "x")

        assert len(store) == 0
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_concurrent_iterations_are_serialized(self, service, store):
        sid = (await service.start("Task"))["session_id"]

        first, second = await asyncio.gather(
            service.iterate(sid, "first answer, confidence: 0.2"),
            service.iterate(sid, "second answer, confidence: 0.3"),
        )

        state = store.get(sid).state
        assert state.depth == 2
        assert sorted(state.iterations) == [
            "first answer, confidence: 0.2",
            "second answer, confidence: 0.3",
        ]
        assert {first["depth"], second["depth"]} == {1, 2}

    @pytest.mark.asyncio
    async def test_missing_session_id(self, service):
        with pytest.raises(InvalidRequestError, match="sessionId is required"):
            await service.iterate("", "response")

    @pytest.mark.asyncio
    async def test_missing_response_leaves_state_untouched(self, service, store):
        sid = (await service.start("Task"))["session_id"]
        before = store.get(sid)

        with pytest.raises(InvalidRequestError, match="Response is required"):
            await service.iterate(sid, "")

        assert store.get(sid) is before
        assert before.state.depth == 0

    @pytest.mark.asyncio
    async def test_iterate_config_overrides_are_kept(self, service, store):
        sid = (await service.start("Task", {"maxDepth": 5}))["session_id"]

        await service.iterate(sid, "one", {"maxDepth": 3})
        result = await service.iterate(sid, "two")
        assert result["is_complete"] is False
        result = await service.iterate(sid, "three")

        assert result["is_complete"] is True
        assert result["stop_reason"] == "max_depth"
        assert store.get(sid).config.max_depth == 3

    @pytest.mark.asyncio
    async def test_bad_iterate_config_leaves_state_untouched(self, service, store):
        sid = (await service.start("Task"))["session_id"]

        with pytest.raises(InvalidRequestError):
            await service.iterate(sid, "one", {"minConfidence": 2})

        assert store.get(sid).state.depth == 0

    @pytest.mark.asyncio
    async def test_iterating_completed_session_is_allowed(self, service, caplog):
        sid = (await service.start("Task"))["session_id"]
        await service.iterate(sid, READY_RESPONSE)

        with caplog.at_level(logging.WARNING):
            result = await service.iterate(sid, "more, confidence: 0.1")

        assert result["depth"] == 2
        assert "already completed" in caplog.text

    @pytest.mark.asyncio
    async def test_handle_dispatches_and_rejects_bad_action(self, service, store):
        result = await service.handle("start", task="Task")
        assert result["depth"] == 0

        with pytest.raises(InvalidRequestError, match="Invalid action"):
            await service.handle("restart", task="Task")
        assert len(store) == 1


class TestServiceStatus:
    """Test status and listing"""

    @pytest.mark.asyncio
    async def test_get_status(self, service):
        sid = (await service.start("Task"))["session_id"]
        await service.iterate(sid, "answer, confidence: 0.3")

        status = service.get_status(sid)

        assert status["session"]["sessionId"] == sid
        assert status["session"]["depth"] == 1
        assert status["state"]["lastResult"] == "answer, confidence: 0.3"

    def test_get_status_unknown(self, service):
        with pytest.raises(SessionNotFoundError):
            service.get_status("missing")

    @pytest.mark.asyncio
    async def test_list_sessions_limits_display(self, store):
        settings = ServerConfig()
        settings.max_sessions_display = 2
        service = ThinkingService(store=store, settings=settings)
        for i in range(3):
            await service.start(f"Task {i}", session_id=f"s{i}")

        listing = service.list_sessions()

        assert listing["total"] == 3
        assert len(listing["sessions"]) == 2


class TestGlobalService:
    """Test lazy process-wide service"""

    def test_lazy_singleton_and_reset(self):
        set_thinking_service(None)
        first = get_thinking_service()
        assert get_thinking_service() is first

        replacement = ThinkingService()
        set_thinking_service(replacement)
        assert get_thinking_service() is replacement
        set_thinking_service(None)
