"""
WebSocket endpoint for real-time session updates.
"""
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from typemotion.schemas.session import SessionSnapshot
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manages WebSocket connections for real-time updates."""

    def __init__(self):
        self.connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        """Accept a new WebSocket connection."""
        await websocket.accept()
        self.connections.add(websocket)
        logger.info("WebSocket connected", connections=len(self.connections))

    def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection."""
        self.connections.discard(websocket)
        logger.info("WebSocket disconnected", connections=len(self.connections))

    async def send_all(self, message: dict):
        """Send a message to every connection."""
        dead_connections = set()
        for websocket in self.connections:
            try:
                await websocket.send_json(message)
            except Exception:
                dead_connections.add(websocket)

        # Clean up dead connections
        for ws in dead_connections:
            self.connections.discard(ws)

    async def broadcast_snapshot(self, snapshot: SessionSnapshot):
        """Broadcast a session change to all subscribers."""
        await self.send_all({
            "type": "session",
            "session": snapshot.model_dump(mode="json"),
        })


# Singleton connection manager
ws_manager = ConnectionManager()


@router.websocket("/ws/session")
async def session_websocket(websocket: WebSocket):
    """
    WebSocket endpoint for real-time session updates.

    Clients connect here to receive a snapshot on every state change.
    The current snapshot is sent on connect.
    """
    await ws_manager.connect(websocket)

    try:
        controller = websocket.app.state.controller
        await websocket.send_json({
            "type": "session",
            "session": controller.snapshot().model_dump(mode="json"),
        })

        # Keep the connection open
        while True:
            # Wait for any message from client (ping/pong or close)
            data = await websocket.receive_text()

            # Echo back as heartbeat confirmation
            if data == "ping":
                await websocket.send_text("pong")

    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)
    except Exception as e:
        logger.error("WebSocket error", error=str(e))
        ws_manager.disconnect(websocket)
