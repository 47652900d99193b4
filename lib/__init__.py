# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper (service + auth clients)
# - file_tree.py: Flat file records -> uploads/processed tree
# - folder_tree.py: Template folders -> nested tree
# - utils.py: Shared utilities (UUID normalization, paging, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.file_tree import build_file_tree, get_file_extension
from lib.folder_tree import build_folder_tree
from lib.utils import normalize_uuid, page_count, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Trees
    "build_file_tree",
    "get_file_extension",
    "build_folder_tree",
    # Utils
    "normalize_uuid",
    "page_count",
    "utc_now_iso",
]
