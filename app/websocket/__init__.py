# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Provides real-time updates for file events.
#
# Usage:
#   # Broadcast an event to all connections of a user (from FastAPI)
#   from app.websocket import websocket_manager
#
#   await websocket_manager.broadcast(user_id, {
#       "type": "file_status_changed",
#       "file_id": "..."
#   })
#
#   # Publish events from any process
#   from app.websocket.broadcast import publish_event
#
#   publish_event(user_id, "file_created", {"file": record})
# =============================================================================

from app.websocket.manager import websocket_manager
from app.websocket.broadcast import publish_event, WEBSOCKET_CHANNEL

__all__ = [
    "websocket_manager",
    "publish_event",
    "WEBSOCKET_CHANNEL",
]
