# =============================================================================
# app/routers/constructor.py - Message Constructor Endpoint
# =============================================================================
# Stateless preview: the client sends its constructor state and gets the
# rendered message plus the current page of columns back.
# =============================================================================

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.auth import get_current_user, AuthUser
from core.constructor import Column, MessageConstructor

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class ConstructorPreviewRequest(BaseModel):
    """Constructor state as held by the client."""
    columns: list[Column] = Field(default_factory=list)
    introduction: str = ""
    conclusion: str = ""
    first_row: dict[str, Any] = Field(default_factory=dict)
    search_query: str = ""
    page: int = Field(default=1, ge=1)
    items_per_page: int | None = Field(default=None, ge=1, le=500)

    model_config = {
        "json_schema_extra": {
            "example": {
                "columns": [
                    {"id": "col-0", "name": "Region", "selected": True, "preface": "Region: "},
                    {"id": "col-1", "name": "Revenue", "selected": False},
                ],
                "introduction": "Weekly update",
                "conclusion": "Thanks",
                "first_row": {"Region": "EMEA", "Revenue": "1200"},
            }
        }
    }


class ConstructorPreviewResponse(BaseModel):
    preview: str
    selected_columns: list[Column]
    columns: list[Column]
    total_pages: int
    current_page: int


@router.post("/preview", response_model=ConstructorPreviewResponse)
async def preview_message(
    body: ConstructorPreviewRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Render the message for the given state.

    `columns` in the response is the requested page of the
    search-filtered columns; the page is clamped to the valid range.
    """
    constructor = MessageConstructor(items_per_page=body.items_per_page)
    constructor.set_columns(body.columns)
    constructor.set_introduction(body.introduction)
    constructor.set_conclusion(body.conclusion)
    constructor.set_search_query(body.search_query)
    constructor.set_current_page(body.page)

    return ConstructorPreviewResponse(
        preview=constructor.preview_message(body.first_row),
        selected_columns=constructor.selected_columns,
        columns=constructor.paginated_columns,
        total_pages=constructor.total_pages,
        current_page=constructor.current_page,
    )
