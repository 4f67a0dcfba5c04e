"""REST endpoints for session analysis and the recent-session log.

Paths:
    POST   /api/sessions/analyze   analyse raw producer payloads
    GET    /api/sessions           recent analyses, newest first
    GET    /api/sessions/{id}      one analysis
    DELETE /api/history            forget counters and the session log
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query

from fraudscope.domain.session import SessionReport
from fraudscope.services.analysis import SessionAnalyzer
from fraudscope.store.history_store import HistoryStore
from fraudscope.store.session_store import SessionStore

logger = logging.getLogger(__name__)


def create_sessions_router(
    analyzer: SessionAnalyzer,
    history: HistoryStore,
    sessions: SessionStore,
) -> APIRouter:
    """Factory that wires the session endpoints to analyzer + stores."""

    router = APIRouter(prefix="/api", tags=["sessions"])

    @router.post("/sessions/analyze")
    async def analyze_session(report: SessionReport) -> dict[str, Any]:
        analysis = await analyzer.analyze(report)
        return analysis.to_payload()

    @router.get("/sessions")
    async def list_sessions(limit: int = Query(default=20, ge=1, le=500)) -> dict[str, Any]:
        recent = await sessions.recent(limit)
        return {"sessions": [a.summary() for a in recent], "count": len(recent)}

    @router.get("/sessions/{session_id}")
    async def get_session(session_id: UUID) -> dict[str, Any]:
        analysis = await sessions.get(session_id)
        if analysis is None:
            raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
        return analysis.to_payload()

    @router.delete("/history")
    async def clear_history() -> dict[str, Any]:
        await history.clear()
        await sessions.clear()
        return {"status": "cleared"}

    return router
