# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import math
from datetime import datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        file_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        file_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Time / Paging
# =============================================================================

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the format PostgREST expects)."""
    return datetime.now(timezone.utc).isoformat()


def page_count(total: int, page_size: int) -> int:
    """
    Number of pages needed to show `total` items.

    Example:
        page_count(0, 50)   # 0
        page_count(51, 50)  # 2
    """
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)
