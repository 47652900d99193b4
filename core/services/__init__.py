# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService, ObjectNotFoundError, get_storage_service
from .file_service import FileService
from .content_service import ContentService
from .folder_service import FolderService
from .template_service import TemplateService

__all__ = [
    "StorageService",
    "ObjectNotFoundError",
    "get_storage_service",
    "FileService",
    "ContentService",
    "FolderService",
    "TemplateService",
]
