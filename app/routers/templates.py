# =============================================================================
# app/routers/templates.py - Message Template Endpoints
# =============================================================================
# Save (create or update), list, fetch, delete and preview templates.
# All endpoints require authentication.
# =============================================================================

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel

from app.auth import get_current_user, AuthUser
from app.dependencies import StorageDep
from core.models.template import Template, TemplatePreviewResponse, TemplateSaveResponse
from core.services.template_service import TemplateService

router = APIRouter()


class TemplateDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Template deleted successfully"


@router.post("/save", response_model=TemplateSaveResponse)
async def save_template(
    payload: dict[str, Any] = Body(...),
    user: AuthUser = Depends(get_current_user),
):
    """
    Create or update a template.

    Include `id` to update an existing template. The body is validated
    here rather than by FastAPI so schema problems come back as a 400
    with one {path, message} entry per problem.

    Raises:
        400: Template validation failed
        404: folder_id or id doesn't belong to the caller
    """
    template_id, created = TemplateService.save_template(user.id, payload)
    return TemplateSaveResponse(
        template_id=template_id,
        message="Template created successfully" if created else "Template updated successfully",
    )


@router.get("", response_model=list[Template])
async def list_templates(
    user: AuthUser = Depends(get_current_user),
    folder_id: UUID | None = Query(default=None),
):
    """The caller's templates, most recently updated first."""
    return TemplateService.list_templates(user.id, folder_id=folder_id)


@router.get("/{template_id}", response_model=Template)
async def get_template(
    template_id: UUID,
    user: AuthUser = Depends(get_current_user),
):
    """
    Fetch one template.

    Raises:
        404: No such template for this user
    """
    return TemplateService.get_template(user.id, template_id)


@router.delete("/{template_id}", response_model=TemplateDeleteResponse)
async def delete_template(
    template_id: UUID,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a template.

    Raises:
        404: No such template for this user
    """
    TemplateService.delete_template(user.id, template_id)
    return TemplateDeleteResponse()


@router.get("/{template_id}/preview", response_model=TemplatePreviewResponse)
async def preview_template(
    template_id: UUID,
    storage: StorageDep,
    file_id: UUID | None = Query(default=None),
    user: AuthUser = Depends(get_current_user),
):
    """
    Render a saved template.

    With `file_id`, values come from that file's first row; without it
    each column shows a "[column name]" placeholder.
    """
    preview = TemplateService.preview_template(
        user.id,
        template_id,
        storage=storage,
        file_id=file_id,
    )
    return TemplatePreviewResponse(
        template_id=template_id,
        file_id=file_id,
        preview=preview,
    )
