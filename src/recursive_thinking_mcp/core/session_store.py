#!/usr/bin/env python3
# MIT License
#
# Copyright (c) 2025 Recursive Thinking MCP Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Session storage for thinking sessions.

The store maps an opaque session ID to a SessionRecord. Sessions live in
process memory only and are dropped when the server exits.
"""

import asyncio
import logging
import time
import uuid
from typing import Protocol

from .thinking_types import SessionRecord

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Create a session ID like ``session_1718000000000_a1b2c3``."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


class SessionStore(Protocol):
    """Storage used by the thinking service"""

    def get(self, session_id: str) -> SessionRecord | None: ...

    def put(self, record: SessionRecord) -> None: ...

    def list_sessions(self) -> list[SessionRecord]: ...

    def lock(self, session_id: str) -> asyncio.Lock: ...


class InMemorySessionStore:
    """
    Dictionary-backed session store.

    Besides get/put it hands out one asyncio.Lock per session so callers
    can serialize the read-modify-write of a single session.
    """

    def __init__(self):
        self._sessions: dict[str, SessionRecord] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> SessionRecord | None:
        return self._sessions.get(session_id)

    def put(self, record: SessionRecord) -> None:
        if record.session_id in self._sessions:
            logger.debug(f"Replacing session {record.session_id}")
        self._sessions[record.session_id] = record

    def list_sessions(self) -> list[SessionRecord]:
        """Return all sessions, most recently updated first."""
        return sorted(self._sessions.values(), key=lambda r: r.updated_at, reverse=True)

    def lock(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._locks:
            self._locks[session_id] = asyncio.Lock()
        return self._locks[session_id]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
