"""Bounded, newest-first log of analysed sessions.

Only the most recent ``capacity`` analyses are retained; older ones are
dropped as new ones arrive.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from uuid import UUID

from fraudscope.domain.session import SessionAnalysis

logger = logging.getLogger(__name__)


class SessionStore:
    """Async-safe ring of recent SessionAnalysis records.

    Args:
        capacity: Maximum number of sessions kept in memory.
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._lock = asyncio.Lock()
        self._sessions: deque[SessionAnalysis] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    async def add(self, analysis: SessionAnalysis) -> None:
        async with self._lock:
            self._sessions.appendleft(analysis)

    async def get(self, session_id: UUID) -> SessionAnalysis | None:
        """Retrieve a session by ID, or None if unknown or evicted."""
        async with self._lock:
            for analysis in self._sessions:
                if analysis.session_id == session_id:
                    return analysis
            return None

    async def recent(self, limit: int | None = None) -> list[SessionAnalysis]:
        """Newest first, at most *limit* entries."""
        async with self._lock:
            items = list(self._sessions)
        return items if limit is None else items[: max(limit, 0)]

    async def count(self) -> int:
        async with self._lock:
            return len(self._sessions)

    async def clear(self) -> None:
        async with self._lock:
            self._sessions.clear()
        logger.info("Cleared session log")
