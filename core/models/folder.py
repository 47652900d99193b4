# =============================================================================
# core/models/folder.py - Template Folder Schemas
# =============================================================================
# Folders group message templates. They nest through parent_folder_id;
# the tree is rebuilt in memory by lib.folder_tree.
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FolderCreate(BaseModel):
    """
    Schema for creating a folder.

    The name limits mirror the template_folders check constraint.

    Example:
        {"name": "Onboarding", "parent_folder_id": null}
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ...,
        min_length=3,
        max_length=100,
        description="Folder name"
    )

    parent_folder_id: UUID | None = Field(
        default=None,
        alias="parentFolderId",
        description="Parent folder (must belong to the caller)"
    )


class Folder(BaseModel):
    """One row of the template_folders table."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    parent_folder_id: UUID | None = None
    created_at: datetime | None = None


class FolderCreateResponse(BaseModel):
    success: bool = True
    folder: Folder
    message: str = "Folder created successfully"


class FolderListResponse(BaseModel):
    """Folders as a tree; every node carries a `children` list."""
    success: bool = True
    folders: list[dict[str, Any]] = Field(default_factory=list)
