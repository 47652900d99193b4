# =============================================================================
# app/websocket/broadcast.py - Cross-Process Broadcasting
# =============================================================================
# Publishes file events that get broadcast to WebSocket clients.
#
# Uses Redis pub/sub for cross-process communication:
# - Services call publish_event() after a write
# - Every API process subscribes and forwards to its own WebSocket clients
#
# Events:
#   - file_created: An upload URL was issued and the file recorded
#   - file_status_changed: A client reported an upload outcome
# =============================================================================

import json
import logging
from typing import Any

import redis

from app.config import settings

logger = logging.getLogger(__name__)

# Redis channel for WebSocket events
WEBSOCKET_CHANNEL = "templatestudio:websocket:events"


def get_redis_client() -> redis.Redis:
    """Get a Redis client for pub/sub operations."""
    return redis.from_url(settings.REDIS_URL)


def publish_event(user_id: str, event_type: str, data: dict[str, Any]) -> bool:
    """
    Publish an event that will be broadcast to a user's WebSocket clients.

    Failures are logged and reported through the return value.

    Args:
        user_id: The user to notify
        event_type: Event type (file_created, file_status_changed)
        data: Event data to include

    Returns:
        bool: True if published successfully
    """
    try:
        client = get_redis_client()

        message = json.dumps({
            "user_id": str(user_id),
            "type": event_type,
            **data
        }, default=str)

        client.publish(WEBSOCKET_CHANNEL, message)

        logger.debug(f"Published {event_type} event for user {user_id}")
        return True

    except redis.RedisError as e:
        logger.error(f"Failed to publish event: {e}")
        return False
