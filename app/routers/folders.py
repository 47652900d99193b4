# =============================================================================
# app/routers/folders.py - Template Folder Endpoints
# =============================================================================
# Create folders and list them as a tree.
# All endpoints require authentication.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.models.folder import FolderCreate, FolderCreateResponse, FolderListResponse
from core.services.folder_service import FolderService

router = APIRouter()


@router.post("", response_model=FolderCreateResponse)
async def create_folder(
    body: FolderCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a template folder.

    Raises:
        404: parent_folder_id isn't one of the caller's folders
        422: Name shorter than 3 or longer than 100 characters
    """
    folder = FolderService.create_folder(
        user_id=user.id,
        name=body.name,
        parent_folder_id=body.parent_folder_id,
    )
    return FolderCreateResponse(folder=folder)


@router.get("", response_model=FolderListResponse)
async def list_folders(user: AuthUser = Depends(get_current_user)):
    """List the caller's folders as a tree (children nested under parents)."""
    return FolderListResponse(folders=FolderService.list_folders(user.id))
