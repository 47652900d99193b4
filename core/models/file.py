# =============================================================================
# core/models/file.py - File Schemas
# =============================================================================
# These models define the API contract for file operations:
# - FileStatus: Enum for the upload/processing lifecycle
# - FileRecord: One row of the files table
# - UploadUrlRequest / UploadUrlResponse: Pre-signed upload handshake
# - FileStatusUpdate: Client-reported upload outcome
# - FileListResponse: Paginated tree view
# - FileContentResponse: Columns + first row for the message constructor
#
# File bytes never pass through the API; browsers PUT them straight to S3
# using the pre-signed URL, then report the outcome.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):
    """
    Possible states for an uploaded file.

    - uploading: Upload URL issued, bytes not confirmed yet
    - uploaded: Client confirmed the PUT succeeded
    - processing: Picked up by a downstream processor
    - completed: Processed output written (processed_s3_key)
    - failed: Upload or processing failed (see error_message)

    Flow: uploading -> uploaded -> processing -> completed
    """
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# Statuses a browser may report; processing/completed belong to processors
CLIENT_REPORTABLE_STATUSES: tuple[FileStatus, ...] = (
    FileStatus.UPLOADING,
    FileStatus.UPLOADED,
    FileStatus.FAILED,
)


class FileRecord(BaseModel):
    """
    One row of the files table.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "s3_key": "uploads/660e.../sales-1700000000000-ab12cd34.csv",
            "original_name": "sales.csv",
            "status": "uploaded",
            "error_message": null,
            "created_at": "2024-01-15T10:30:00Z",
            "last_processing_date": null,
            "processed_s3_key": null
        }
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    s3_key: str
    original_name: str
    status: FileStatus
    error_message: str | None = None
    created_at: datetime | None = None
    last_processing_date: datetime | None = None
    processed_s3_key: str | None = None


# =============================================================================
# Upload Handshake
# =============================================================================

class UploadUrlRequest(BaseModel):
    """
    Request for a pre-signed upload URL.

    filename and content_type are checked by the service so a missing
    value is reported as a 400 with a readable message.
    """

    model_config = ConfigDict(populate_by_name=True)

    filename: str | None = Field(
        default=None,
        description="Original filename chosen by the user"
    )

    content_type: str | None = Field(
        default=None,
        alias="contentType",
        description="MIME type the browser will send with the PUT"
    )

    prefix: str = Field(
        default="uploads/",
        description="Top-level folder for the object key"
    )


class UploadMetadata(BaseModel):
    filename: str
    content_type: str


class UploadUrlResponse(BaseModel):
    """
    Pre-signed URL plus the created file record's ID.

    The browser PUTs the bytes to `url` with the same Content-Type, then
    calls PATCH /files/status with `file_id`.
    """
    success: bool = True
    url: str
    key: str
    bucket: str
    expires_in: int
    file_id: UUID
    metadata: UploadMetadata


# =============================================================================
# Status Updates
# =============================================================================

class FileStatusUpdate(BaseModel):
    """Client-reported outcome of an upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: UUID = Field(..., alias="fileId")
    status: str = Field(..., description="uploading, uploaded or failed")
    error_message: str | None = Field(default=None, alias="errorMessage")


class FileStatusResponse(BaseModel):
    success: bool = True
    file: FileRecord


# =============================================================================
# Listing
# =============================================================================

class FileListResponse(BaseModel):
    """
    One page of the caller's files, shaped as a tree.

    `files` holds the two root folder nodes (uploads, processed).
    """
    files: list[dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    total_pages: int = 0


# =============================================================================
# Content (Message Constructor input)
# =============================================================================

class ContentColumn(BaseModel):
    id: str
    name: str
    selected: bool = False


class FileContentResponse(BaseModel):
    """
    Column descriptors and the first data row of a file.

    CSV files yield one column per header; anything else is exposed as a
    single pre-selected "content" column holding the first few lines.
    """
    type: Literal["csv", "text"]
    columns: list[ContentColumn]
    first_row: dict[str, str]
    warning: str | None = None
