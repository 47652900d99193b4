# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# WebSocket endpoint for real-time file updates.
#
# Connect: ws://host/ws/files?token={jwt}
#
# Events:
#   - {"type": "file_created", "file": {...}}
#   - {"type": "file_status_changed", "file_id": "...", "status": "uploaded", ...}
# =============================================================================

import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from app.auth.dependencies import verify_token
from app.exceptions import AuthenticationRequiredError
from app.websocket.manager import websocket_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/files")
async def files_websocket(
    websocket: WebSocket,
    token: str = Query(..., description="JWT token for authentication")
):
    """
    WebSocket endpoint for real-time updates about the caller's files.

    Authentication is required via the `token` query parameter.

    Connection URL:
        ws://localhost:8000/ws/files?token={jwt}

    Events received:
        - file_created: An upload URL was issued for a new file
        - file_status_changed: An upload finished or failed

    Example event:
        {
            "type": "file_status_changed",
            "file_id": "550e8400-...",
            "status": "uploaded",
            "error_message": null
        }
    """
    # 1. Verify JWT token
    try:
        user = verify_token(token)
    except AuthenticationRequiredError as e:
        logger.warning(f"WebSocket auth failed: {e.message}")
        await websocket.close(code=4001, reason="Invalid token")
        return

    user_id = str(user.id)

    # 2. Accept connection and add to manager
    await websocket_manager.connect(user_id, websocket)

    try:
        # Send welcome message
        await websocket.send_json({
            "type": "connected",
            "user_id": user_id,
            "message": "Connected to file updates"
        })

        # Keep connection alive and handle incoming messages
        while True:
            try:
                data = await websocket.receive_text()

                # Handle ping/pong for keepalive
                if data == "ping":
                    await websocket.send_text("pong")
                else:
                    logger.debug(f"WebSocket received: {data[:100]}")

            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.warning(f"WebSocket receive error: {e}")
                break

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected for user {user_id}")
    finally:
        websocket_manager.disconnect(user_id, websocket)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.

    Reports counts only, never user ids.

    Returns:
        dict: Total connections and number of connected users
    """
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "user_count": len(websocket_manager.get_active_users()),
    }
