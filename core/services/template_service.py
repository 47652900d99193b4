# =============================================================================
# core/services/template_service.py - Message Template Business Logic
# =============================================================================
# Handles template validation, create-or-update, reads, deletes and
# rendering saved templates against a file.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from app.exceptions import (
    DatabaseError,
    TemplateNotFoundError,
    TemplateValidationError,
)
from core.constructor import MessageConstructor
from core.models.template import TemplateConfig, TemplateSave
from core.services.content_service import ContentService
from core.services.folder_service import FolderService
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid, utc_now_iso

logger = logging.getLogger(__name__)

TEMPLATES_TABLE = "message_templates"


def validation_errors(error: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic error into [{path, message}] pairs."""
    return [
        {
            "path": ".".join(str(part) for part in item["loc"]),
            "message": item["msg"],
        }
        for item in error.errors()
    ]


class TemplateService:
    """
    Service for message templates.

    Every query filters by user_id (the service-role client bypasses RLS).
    """

    @staticmethod
    def validate(payload: dict[str, Any]) -> TemplateSave:
        """
        Validate raw template input.

        Raises:
            TemplateValidationError: With one {path, message} per problem
        """
        try:
            return TemplateSave.model_validate(payload)
        except ValidationError as e:
            errors = validation_errors(e)
            logger.warning(f"Template validation failed: {errors}")
            raise TemplateValidationError(errors)

    @staticmethod
    def _fetch(template_id: str) -> dict[str, Any] | None:
        try:
            return SupabaseClient.fetch_one(TEMPLATES_TABLE, template_id)
        except SupabaseClientError as e:
            raise DatabaseError("fetch template", e.message)

    @staticmethod
    def save_template(
        user_id: UUID | str,
        payload: dict[str, Any],
    ) -> tuple[str, bool]:
        """
        Create or update a template.

        With an `id` that already exists the template is updated (it must
        be the caller's); with an unknown `id` or none it is created.

        Args:
            user_id: The owner
            payload: Raw template input (camelCase or snake_case keys)

        Returns:
            Tuple of (template_id, created)

        Raises:
            TemplateValidationError: If the input fails validation
            FolderNotFoundError: If folder_id isn't one of the caller's folders
            TemplateNotFoundError: If `id` belongs to another user
            DatabaseError: If the upsert fails
        """
        template = TemplateService.validate(payload)
        user_id_str = normalize_uuid(user_id)

        if template.folder_id:
            FolderService.get_owned_folder(user_id_str, template.folder_id)

        created = True
        if template.id:
            existing = TemplateService._fetch(str(template.id))
            if existing:
                if str(existing.get("user_id")) != user_id_str:
                    raise TemplateNotFoundError(str(template.id))
                created = False

        row: dict[str, Any] = {
            "user_id": user_id_str,
            "folder_id": str(template.folder_id) if template.folder_id else None,
            "name": template.name,
            "description": template.description,
            "type": template.type,
            "config": template.config.to_document(),
            "updated_at": utc_now_iso(),
        }
        if template.id:
            row["id"] = str(template.id)

        client = SupabaseClient.get_client()
        try:
            response = client.table(TEMPLATES_TABLE).upsert(row).execute()
        except Exception as e:
            logger.error(f"Failed to save template {template.name!r}: {e}")
            raise DatabaseError("save template", str(e))

        if not response.data:
            raise DatabaseError("save template", "Upsert returned no data")

        template_id = response.data[0]["id"]
        logger.info(f"{'Created' if created else 'Updated'} template {template_id} for user {user_id_str}")
        return template_id, created

    @staticmethod
    def list_templates(
        user_id: UUID | str,
        folder_id: UUID | str | None = None,
    ) -> list[dict[str, Any]]:
        """
        The caller's templates, most recently updated first.

        Raises:
            DatabaseError: If the query fails
        """
        client = SupabaseClient.get_client()
        try:
            query = (
                client.table(TEMPLATES_TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
            )
            if folder_id:
                query = query.eq("folder_id", normalize_uuid(folder_id))
            response = query.order("updated_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Failed to list templates: {e}")
            raise DatabaseError("list templates", str(e))

        return response.data or []

    @staticmethod
    def get_template(
        user_id: UUID | str,
        template_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Fetch one of the caller's templates.

        Raises:
            TemplateNotFoundError: If missing or owned by someone else
        """
        template_id_str = normalize_uuid(template_id)
        template = TemplateService._fetch(template_id_str)

        if not template or str(template.get("user_id")) != normalize_uuid(user_id):
            raise TemplateNotFoundError(template_id_str)
        return template

    @staticmethod
    def delete_template(
        user_id: UUID | str,
        template_id: UUID | str,
    ) -> None:
        """
        Delete one of the caller's templates.

        Raises:
            TemplateNotFoundError: If missing or owned by someone else
            DatabaseError: If the delete fails
        """
        TemplateService.get_template(user_id, template_id)
        template_id_str = normalize_uuid(template_id)

        client = SupabaseClient.get_client()
        try:
            (
                client.table(TEMPLATES_TABLE)
                .delete()
                .eq("id", template_id_str)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete template {template_id_str}: {e}")
            raise DatabaseError("delete template", str(e))

        logger.info(f"Deleted template {template_id_str}")

    @staticmethod
    def preview_template(
        user_id: UUID | str,
        template_id: UUID | str,
        storage: StorageService,
        file_id: UUID | str | None = None,
    ) -> str:
        """
        Render a saved template.

        Values come from the first row of `file_id` when given; otherwise
        every column shows its "[name]" placeholder.

        Raises:
            TemplateNotFoundError: If the template isn't the caller's
            FileRecordNotFoundError / FileAccessDeniedError: For a bad file_id
            TemplateValidationError: If the stored config is no longer valid
        """
        template = TemplateService.get_template(user_id, template_id)

        try:
            config = TemplateConfig.model_validate(template.get("config") or {})
        except ValidationError as e:
            raise TemplateValidationError(validation_errors(e))

        first_row: dict[str, Any] = {}
        if file_id:
            content = ContentService.get_file_content(user_id, file_id, storage)
            first_row = content["first_row"]

        constructor = MessageConstructor.from_template_config(config)
        return constructor.preview_message(first_row)
