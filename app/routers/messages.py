# =============================================================================
# app/routers/messages.py - Messages Overview Endpoint
# =============================================================================
# The messages page: every folder with the templates filed in it.
# =============================================================================

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.auth import get_current_user, AuthUser
from core.models.template import TemplateSummary
from core.services.folder_service import FolderService

router = APIRouter()


class FolderMessages(BaseModel):
    """A folder and its templates."""
    id: UUID
    name: str
    messages: list[TemplateSummary] = Field(default_factory=list)


@router.get("", response_model=list[FolderMessages])
async def list_messages(user: AuthUser = Depends(get_current_user)):
    """List the caller's folders, each with its templates."""
    return FolderService.list_folders_with_templates(user.id)
