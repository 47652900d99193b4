# =============================================================================
# app/routers/files.py - File Endpoints
# =============================================================================
# Handles the S3 upload handshake, upload status reports, the file
# browser listing and file content for the message constructor.
# All endpoints require authentication.
# =============================================================================

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from app.config import settings
from app.dependencies import StorageDep
from core.models.file import (
    FileContentResponse,
    FileListResponse,
    FileStatusResponse,
    FileStatusUpdate,
    UploadUrlRequest,
    UploadUrlResponse,
)
from core.services.content_service import ContentService
from core.services.file_service import FileService

router = APIRouter()


@router.post("/upload-url", response_model=UploadUrlResponse)
async def create_upload_url(
    body: UploadUrlRequest,
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get a pre-signed URL for uploading a file straight to S3.

    The file is recorded with status "uploading". After the PUT, report
    the outcome with PATCH /files/status.

    Raises:
        400: Missing filename/content_type, or a prefix outside uploads/ and processed/
        502: S3 could not sign the URL
    """
    return FileService.create_upload(
        user_id=user.id,
        filename=body.filename,
        content_type=body.content_type,
        storage=storage,
        prefix=body.prefix,
    )


@router.patch("/status", response_model=FileStatusResponse)
async def update_file_status(
    body: FileStatusUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Report the outcome of an upload.

    Clients may report "uploading", "uploaded" or "failed".

    Raises:
        400: Status not reportable by clients
        404: No such file for this user
    """
    record = FileService.update_status(
        user_id=user.id,
        file_id=body.file_id,
        status=body.status,
        error_message=body.error_message,
    )
    return FileStatusResponse(file=record)


@router.get("", response_model=FileListResponse)
async def list_files(
    user: AuthUser = Depends(get_current_user),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.FILES_PAGE_SIZE, ge=1, le=200),
    sort_by: Literal["name", "created_at", "last_processing_date"] = Query(default="created_at"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
    filter_status: str | None = Query(default=None),
    filter_type: str | None = Query(default=None, description="File extension, e.g. csv"),
):
    """
    List the caller's files as an uploads/processed tree.

    Pagination counts files, not tree nodes.
    """
    return FileService.list_files(
        user_id=user.id,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        filter_status=filter_status,
        filter_type=filter_type,
    )


@router.get("/content", response_model=FileContentResponse, response_model_exclude_none=True)
async def get_file_content_by_query(
    storage: StorageDep,
    file_id: UUID = Query(...),
    user: AuthUser = Depends(get_current_user),
):
    """Same as GET /files/{file_id}/content, with the ID as a query parameter."""
    return ContentService.get_file_content(user.id, file_id, storage)


@router.get("/{file_id}/content", response_model=FileContentResponse, response_model_exclude_none=True)
async def get_file_content(
    file_id: UUID,
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Columns and first row of a file, for the message constructor.

    CSV files give one column per header; other files (and CSVs that
    fail to parse, flagged with `warning`) give a single text column.

    Raises:
        403: File belongs to another user
        404: No such file, or its object is missing from S3
    """
    return ContentService.get_file_content(user.id, file_id, storage)
