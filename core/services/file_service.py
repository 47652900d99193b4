# =============================================================================
# core/services/file_service.py - File Business Logic
# =============================================================================
# Handles the upload handshake and the file browser:
# - Issue a pre-signed S3 URL and record the file as "uploading"
# - Apply client-reported upload outcomes
# - List a user's files as a paginated tree
# - Ownership checks shared with the content service
# =============================================================================

import logging
import os
import posixpath
import re
import secrets
import time
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    BadRequestError,
    DatabaseError,
    FileAccessDeniedError,
    FileRecordNotFoundError,
    InvalidFileStatusError,
    InvalidFileTypeFilterError,
    InvalidUploadPrefixError,
)
from app.websocket.broadcast import publish_event
from core.models.file import CLIENT_REPORTABLE_STATUSES, FileStatus
from core.services.storage_service import StorageService
from lib.file_tree import build_file_tree
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid, page_count

logger = logging.getLogger(__name__)

FILES_TABLE = "files"

# Listing sort keys -> columns
SORT_COLUMNS = {
    "name": "original_name",
    "created_at": "created_at",
    "last_processing_date": "last_processing_date",
}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

# Listing type filters: a bare extension, no LIKE wildcards
_EXTENSION_FILTER = re.compile(r"[A-Za-z0-9]+")


def create_safe_filename(original_name: str) -> str:
    """
    Build a collision-free object name from a user's filename.

    The stem keeps only letters, digits, "_" and "-"; a millisecond
    timestamp and 8 random hex chars are appended before the extension.

    Example:
        create_safe_filename("Q1 report.csv")
        # "Q1_report-1700000000000-ab12cd34.csv"
    """
    base = posixpath.basename(original_name)
    stem, ext = os.path.splitext(base)
    safe_stem = _UNSAFE_CHARS.sub("_", stem)
    timestamp = int(time.time() * 1000)
    random_id = secrets.token_hex(4)
    return f"{safe_stem}-{timestamp}-{random_id}{ext}"


def build_object_key(prefix: str, user_id: str | UUID, safe_filename: str) -> str:
    """
    Object key for a user's upload: "<prefix>/<user-id>/<filename>".

    Raises:
        InvalidUploadPrefixError: If the key falls outside the allowed prefixes
    """
    sanitized = prefix if prefix.endswith("/") else f"{prefix}/"
    key = f"{sanitized}{normalize_uuid(user_id)}/{safe_filename}"

    allowed = settings.allowed_upload_prefixes_list
    if not any(key.startswith(p) for p in allowed):
        raise InvalidUploadPrefixError(prefix, allowed)
    return key


class FileService:
    """
    Service for file records.

    Every query filters by user_id (the service-role client bypasses RLS).
    """

    @staticmethod
    def create_upload(
        user_id: UUID | str,
        filename: str | None,
        content_type: str | None,
        storage: StorageService,
        prefix: str = "uploads/",
    ) -> dict[str, Any]:
        """
        Issue a pre-signed upload URL and record the pending file.

        Args:
            user_id: The uploading user
            filename: Original filename
            content_type: MIME type the browser will send
            storage: S3 storage service
            prefix: Top-level folder for the key

        Returns:
            Dict with url, key, bucket, expires_in, file_id, metadata

        Raises:
            BadRequestError: If filename or content_type is missing
            InvalidUploadPrefixError: If prefix isn't allowed
            StorageError: If signing fails
            DatabaseError: If the file row can't be inserted
        """
        if not filename or not content_type:
            raise BadRequestError(
                "Filename and content type are required",
                fields=["filename", "content_type"],
            )

        user_id_str = normalize_uuid(user_id)
        key = build_object_key(prefix, user_id_str, create_safe_filename(filename))
        expires_in = settings.UPLOAD_URL_EXPIRES_SECONDS

        url = storage.create_upload_url(
            key,
            content_type,
            metadata={
                "original-filename": filename,
                "uploaded-by": user_id_str,
            },
            expires_in=expires_in,
        )

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(FILES_TABLE)
                .insert({
                    "user_id": user_id_str,
                    "s3_key": key,
                    "original_name": filename,
                    "status": FileStatus.UPLOADING.value,
                })
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to record file metadata for {key}: {e}")
            raise DatabaseError("insert file", str(e))

        if not response.data:
            raise DatabaseError("insert file", "Insert returned no data")

        record = response.data[0]
        logger.info(f"Created file {record['id']} ({key}) for user {user_id_str}")

        publish_event(user_id_str, "file_created", {"file": record})

        return {
            "success": True,
            "url": url,
            "key": key,
            "bucket": storage.bucket,
            "expires_in": expires_in,
            "file_id": record["id"],
            "metadata": {
                "filename": filename,
                "content_type": content_type,
            },
        }

    @staticmethod
    def update_status(
        user_id: UUID | str,
        file_id: UUID | str,
        status: str,
        error_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Apply a client-reported upload outcome.

        An "uploaded" report without a message clears any stored error.

        Raises:
            InvalidFileStatusError: If the status can't be reported by clients
            FileRecordNotFoundError: If the caller has no such file
            DatabaseError: If the update fails
        """
        allowed = [s.value for s in CLIENT_REPORTABLE_STATUSES]
        if status not in allowed:
            raise InvalidFileStatusError(status, allowed)

        update: dict[str, Any] = {"status": status}
        if error_message is not None:
            update["error_message"] = error_message
        elif status == FileStatus.UPLOADED.value:
            update["error_message"] = None

        user_id_str = normalize_uuid(user_id)
        file_id_str = normalize_uuid(file_id)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(FILES_TABLE)
                .update(update)
                .eq("id", file_id_str)
                .eq("user_id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update status of file {file_id_str}: {e}")
            raise DatabaseError("update file status", str(e))

        if not response.data:
            raise FileRecordNotFoundError(file_id_str)

        record = response.data[0]
        logger.info(f"File {file_id_str} status -> {status}")

        publish_event(user_id_str, "file_status_changed", {
            "file_id": file_id_str,
            "status": status,
            "error_message": record.get("error_message"),
        })

        return record

    @staticmethod
    def list_files(
        user_id: UUID | str,
        page: int = 1,
        page_size: int | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        filter_status: str | None = None,
        filter_type: str | None = None,
    ) -> dict[str, Any]:
        """
        One page of the caller's files, shaped as a tree.

        Filters run in the database so the count and the page always
        describe the same set.

        Args:
            user_id: The owner
            page: 1-based page number
            page_size: Rows per page
            sort_by: name, created_at or last_processing_date
            sort_order: asc or desc
            filter_status: Only files in this status
            filter_type: Only files with this extension (case-insensitive)

        Returns:
            Dict with files (tree), total_count, current_page, total_pages

        Raises:
            InvalidFileTypeFilterError: If filter_type is not a bare extension
            DatabaseError: If the query fails
        """
        page_size = page_size or settings.FILES_PAGE_SIZE
        sort_column = SORT_COLUMNS.get(sort_by, "created_at")

        extension = None
        if filter_type:
            extension = filter_type.lstrip(".")
            if not _EXTENSION_FILTER.fullmatch(extension):
                raise InvalidFileTypeFilterError(filter_type)

        client = SupabaseClient.get_client()

        try:
            query = (
                client.table(FILES_TABLE)
                .select("*", count="exact")
                .eq("user_id", normalize_uuid(user_id))
            )
            if filter_status:
                query = query.eq("status", filter_status)
            if extension:
                query = query.ilike("original_name", f"%.{extension}")

            start = (page - 1) * page_size
            response = (
                query
                .order(sort_column, desc=(sort_order != "asc"))
                .range(start, start + page_size - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list files for user {user_id}: {e}")
            raise DatabaseError("list files", str(e))

        files = response.data or []
        total_count = response.count if response.count is not None else len(files)

        return {
            "files": build_file_tree(files),
            "total_count": total_count,
            "current_page": page,
            "total_pages": page_count(total_count, page_size),
        }

    @staticmethod
    def get_owned_file(
        user_id: UUID | str,
        file_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Fetch a file and check the caller owns it.

        Raises:
            FileRecordNotFoundError: If no such file exists
            FileAccessDeniedError: If it belongs to another user
            DatabaseError: If the lookup fails
        """
        file_id_str = normalize_uuid(file_id)

        try:
            record = SupabaseClient.fetch_one(FILES_TABLE, file_id_str)
        except SupabaseClientError as e:
            raise DatabaseError("fetch file", e.message)

        if not record:
            raise FileRecordNotFoundError(file_id_str)

        if str(record.get("user_id")) != normalize_uuid(user_id):
            logger.warning(f"User {user_id} tried to read file {file_id_str}")
            raise FileAccessDeniedError(file_id_str)

        return record
