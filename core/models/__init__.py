# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - file.py: File records, upload handshake, listing and content schemas
# - folder.py: Template folder schemas
# - template.py: Template document (config) and template CRUD schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# File Models - Uploads and the file browser
# -----------------------------------------------------------------------------
from .file import (
    CLIENT_REPORTABLE_STATUSES,
    ContentColumn,
    FileContentResponse,
    FileListResponse,
    FileRecord,
    FileStatus,
    FileStatusResponse,
    FileStatusUpdate,
    UploadMetadata,
    UploadUrlRequest,
    UploadUrlResponse,
)

# -----------------------------------------------------------------------------
# Folder Models - Template organisation
# -----------------------------------------------------------------------------
from .folder import (
    Folder,
    FolderCreate,
    FolderCreateResponse,
    FolderListResponse,
)

# -----------------------------------------------------------------------------
# Template Models - Message templates
# -----------------------------------------------------------------------------
from .template import (
    ColumnConfig,
    Template,
    TemplateConfig,
    TemplatePreviewResponse,
    TemplateSave,
    TemplateSaveResponse,
    TemplateSummary,
    TemplateType,
    ValidationConfig,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # File
    "CLIENT_REPORTABLE_STATUSES",
    "ContentColumn",
    "FileContentResponse",
    "FileListResponse",
    "FileRecord",
    "FileStatus",
    "FileStatusResponse",
    "FileStatusUpdate",
    "UploadMetadata",
    "UploadUrlRequest",
    "UploadUrlResponse",
    # Folder
    "Folder",
    "FolderCreate",
    "FolderCreateResponse",
    "FolderListResponse",
    # Template
    "ColumnConfig",
    "Template",
    "TemplateConfig",
    "TemplatePreviewResponse",
    "TemplateSave",
    "TemplateSaveResponse",
    "TemplateSummary",
    "TemplateType",
    "ValidationConfig",
]
