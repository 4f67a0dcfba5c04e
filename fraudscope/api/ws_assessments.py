"""Live assessment feed.

Path: /ws/assessments

Listeners receive one JSON message per analysed session.  Any text they
send is treated as a heartbeat; "ping" is answered with "pong".
"""

from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from fraudscope.services.connection_manager import ConnectionManager


def create_assessment_feed_router(manager: ConnectionManager) -> APIRouter:
    """Factory that creates the assessment feed WebSocket endpoint."""

    router = APIRouter()

    @router.websocket("/ws/assessments")
    async def assessment_feed(websocket: WebSocket) -> None:
        await manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                if data.strip().lower() == "ping":
                    await websocket.send_text("pong")
        except WebSocketDisconnect:
            await manager.disconnect(websocket)

    return router
