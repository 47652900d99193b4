# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - files.py: Pre-signed uploads, upload status, listing and content
# - folders.py: Template folder endpoints
# - templates.py: Template save, list, fetch, delete and preview
# - messages.py: Folders with their templates
# - constructor.py: Message preview rendering
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import files
from . import folders
from . import templates
from . import messages
from . import constructor

__all__ = [
    "health",
    "files",
    "folders",
    "templates",
    "messages",
    "constructor",
]
