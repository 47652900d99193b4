# =============================================================================
# core/services/folder_service.py - Template Folder Business Logic
# =============================================================================
# Handles folder creation, the folder tree and the folder -> templates
# overview shown on the messages page.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import DatabaseError, FolderNotFoundError
from lib.folder_tree import build_folder_tree
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

FOLDERS_TABLE = "template_folders"
TEMPLATES_TABLE = "message_templates"


class FolderService:
    """
    Service for template folders.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def get_owned_folder(
        user_id: UUID | str,
        folder_id: UUID | str,
        message: str = "Folder not found or access denied",
    ) -> dict[str, Any]:
        """
        Fetch a folder owned by the caller.

        Raises:
            FolderNotFoundError: If it doesn't exist or belongs to someone else
            DatabaseError: If the lookup fails
        """
        folder_id_str = normalize_uuid(folder_id)
        try:
            folder = SupabaseClient.fetch_one(FOLDERS_TABLE, folder_id_str, user_id=user_id)
        except SupabaseClientError as e:
            raise DatabaseError("fetch folder", e.message)

        if not folder:
            raise FolderNotFoundError(folder_id_str, message=message)
        return folder

    @staticmethod
    def create_folder(
        user_id: UUID | str,
        name: str,
        parent_folder_id: UUID | str | None = None,
    ) -> dict[str, Any]:
        """
        Create a folder, optionally inside another of the caller's folders.

        Returns:
            Created folder row

        Raises:
            FolderNotFoundError: If the parent is missing or not the caller's
            DatabaseError: If the insert fails
        """
        user_id_str = normalize_uuid(user_id)

        if parent_folder_id:
            FolderService.get_owned_folder(
                user_id_str,
                parent_folder_id,
                message="Parent folder not found",
            )

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(FOLDERS_TABLE)
                .insert({
                    "name": name,
                    "user_id": user_id_str,
                    "parent_folder_id": normalize_uuid(parent_folder_id) if parent_folder_id else None,
                })
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to create folder {name!r}: {e}")
            raise DatabaseError("create folder", str(e))

        if not response.data:
            raise DatabaseError("create folder", "Insert returned no data")

        folder = response.data[0]
        logger.info(f"Created folder {folder['id']} for user {user_id_str}")
        return folder

    @staticmethod
    def list_folders(user_id: UUID | str) -> list[dict[str, Any]]:
        """
        The caller's folders as a tree, siblings ordered by name.

        Raises:
            DatabaseError: If the query fails
        """
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(FOLDERS_TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .order("name")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch folders: {e}")
            raise DatabaseError("list folders", str(e))

        return build_folder_tree(response.data or [])

    @staticmethod
    def list_folders_with_templates(user_id: UUID | str) -> list[dict[str, Any]]:
        """
        Every folder of the caller with the templates filed in it.

        Templates without a folder are not listed here.

        Returns:
            List of {id, name, messages: [{id, name, created_at,
            updated_at, folder_id}]}

        Raises:
            DatabaseError: If a query fails
        """
        user_id_str = normalize_uuid(user_id)
        client = SupabaseClient.get_client()

        try:
            folders = (
                client.table(FOLDERS_TABLE)
                .select("id, name")
                .eq("user_id", user_id_str)
                .order("name")
                .execute()
            ).data or []

            templates = (
                client.table(TEMPLATES_TABLE)
                .select("id, name, created_at, updated_at, folder_id")
                .eq("user_id", user_id_str)
                .order("updated_at", desc=True)
                .execute()
            ).data or []
        except Exception as e:
            logger.error(f"Failed to fetch messages overview: {e}")
            raise DatabaseError("list messages", str(e))

        by_folder: dict[str, list[dict[str, Any]]] = {}
        for template in templates:
            if template.get("folder_id"):
                by_folder.setdefault(str(template["folder_id"]), []).append(template)

        return [
            {**folder, "messages": by_folder.get(str(folder["id"]), [])}
            for folder in folders
        ]
