# =============================================================================
# core/constructor.py - Message Constructor Engine
# =============================================================================
# State and rendering logic behind the message constructor:
# - Pick which columns of a file go into the message
# - Order them (drag and drop reorder)
# - Wrap each value with preface/closing text
# - Render a live preview against the file's first row
#
# The engine is framework-free: the API builds one per request from the
# client's state, and saved templates are loaded into one for previews.
#
# Usage:
#   from core.constructor import MessageConstructor
#   mc = MessageConstructor()
#   mc.set_columns([{"id": "col-0", "name": "Region", "selected": True}])
#   mc.set_introduction("Hello,")
#   print(mc.preview_message({"Region": "EMEA"}))
# =============================================================================

import logging
import math
from typing import Any, Iterable

from pydantic import BaseModel

from app.config import settings
from core.models.template import ColumnConfig, TemplateConfig, TemplateType

logger = logging.getLogger(__name__)


class Column(BaseModel):
    """
    One selectable column.

    `order` is the position in the user's ordering; it is filled from the
    list index when the column is loaded without one.
    """
    id: str
    name: str
    selected: bool = False
    order: int | None = None
    preface: str = ""
    closing: str = ""


class MessageConstructor:
    """
    Column selection, ordering and preview state.

    Actions mutate the state in place; derived values are properties
    computed from the current state.

    Example:
        mc = MessageConstructor(items_per_page=2)
        mc.set_columns(columns)
        mc.reorder_columns("col-3", "col-0")
        mc.set_search_query("date")
        page = mc.paginated_columns
    """

    def __init__(self, items_per_page: int | None = None):
        self.columns: list[Column] = []
        self.introduction: str = ""
        self.conclusion: str = ""
        self.search_query: str = ""
        self.current_page: int = 1
        self.items_per_page: int = items_per_page or settings.CONSTRUCTOR_PAGE_SIZE
        self.is_dragging: bool = False

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def set_columns(self, columns: Iterable[Column | dict[str, Any]]) -> None:
        """Replace all columns; a missing order becomes the list index."""
        loaded = []
        for index, column in enumerate(columns):
            if not isinstance(column, Column):
                column = Column.model_validate(column)
            if column.order is None:
                column = column.model_copy(update={"order": index})
            loaded.append(column)
        self.columns = loaded

    def toggle_column_selection(self, column_id: str) -> None:
        self.columns = [
            col.model_copy(update={"selected": not col.selected}) if col.id == column_id else col
            for col in self.columns
        ]

    def update_column_config(self, column_id: str, **updates: Any) -> None:
        """
        Merge updates (preface, closing, selected, ...) into one column.

        Raises:
            pydantic.ValidationError: If an update has the wrong type
        """
        self.columns = [
            Column.model_validate({**col.model_dump(), **updates}) if col.id == column_id else col
            for col in self.columns
        ]

    def set_introduction(self, text: str) -> None:
        self.introduction = text

    def set_conclusion(self, text: str) -> None:
        self.conclusion = text

    def set_search_query(self, query: str) -> None:
        """Filter columns by name; the view jumps back to the first page."""
        self.search_query = query
        self.current_page = 1

    def set_current_page(self, page: int) -> None:
        """Go to a page, clamped to 1..total_pages."""
        self.current_page = min(max(page, 1), max(self.total_pages, 1))

    def next_page(self) -> None:
        self.set_current_page(self.current_page + 1)

    def previous_page(self) -> None:
        self.set_current_page(self.current_page - 1)

    def select_all_columns(self, selected: bool) -> None:
        self.columns = [col.model_copy(update={"selected": selected}) for col in self.columns]

    def reorder_columns(self, active_id: str, over_id: str) -> None:
        """
        Move the `active_id` column to where `over_id` sits.

        Unknown IDs leave the columns untouched. Afterwards every
        column's order equals its index.
        """
        ids = [col.id for col in self.columns]
        if active_id not in ids or over_id not in ids:
            logger.debug(f"Ignoring reorder {active_id} -> {over_id}: unknown column")
            return

        old_index = ids.index(active_id)
        new_index = ids.index(over_id)

        columns = list(self.columns)
        moved = columns.pop(old_index)
        columns.insert(new_index, moved)

        self.columns = [
            col.model_copy(update={"order": index})
            for index, col in enumerate(columns)
        ]

    def set_is_dragging(self, is_dragging: bool) -> None:
        self.is_dragging = is_dragging

    # -------------------------------------------------------------------------
    # Derived State
    # -------------------------------------------------------------------------

    @property
    def sorted_and_filtered_columns(self) -> list[Column]:
        """Columns in user order, narrowed by a case-insensitive name search."""
        query = self.search_query.lower()
        ordered = sorted(self.columns, key=lambda col: col.order or 0)
        return [col for col in ordered if query in col.name.lower()]

    @property
    def paginated_columns(self) -> list[Column]:
        start = (self.current_page - 1) * self.items_per_page
        return self.sorted_and_filtered_columns[start:start + self.items_per_page]

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.sorted_and_filtered_columns) / self.items_per_page)

    @property
    def selected_columns(self) -> list[Column]:
        """Selected columns in user order (the order they appear in messages)."""
        return [
            col for col in sorted(self.columns, key=lambda col: col.order or 0)
            if col.selected
        ]

    @property
    def all_selected(self) -> bool:
        return bool(self.columns) and all(col.selected for col in self.columns)

    def config(self) -> dict[str, Any]:
        """The selection as reported to whoever embeds the constructor."""
        return {
            "selected_columns": [col.model_dump() for col in self.selected_columns],
            "introduction": self.introduction,
            "conclusion": self.conclusion,
        }

    def preview_message(self, first_row: dict[str, Any] | None = None) -> str:
        """
        Render the message for one data row.

        Columns with no (or an empty) value in the row show "[name]".
        """
        first_row = first_row or {}
        message = self.introduction + "\n\n"
        for col in self.selected_columns:
            value = first_row.get(col.name) or f"[{col.name}]"
            message += f"{col.preface}{value}{col.closing}\n"
        message += "\n" + self.conclusion
        return message

    # -------------------------------------------------------------------------
    # Template Conversion
    # -------------------------------------------------------------------------

    def to_template_config(self, template_type: TemplateType) -> TemplateConfig:
        """Snapshot the state as a template document (all columns, in order)."""
        ordered = sorted(self.columns, key=lambda col: col.order or 0)
        return TemplateConfig(
            type=template_type,
            intro=self.introduction,
            conclusion=self.conclusion,
            columns=[
                ColumnConfig(
                    id=col.id,
                    name=col.name,
                    selected=col.selected,
                    order=index,
                    preface=col.preface,
                    closing=col.closing,
                )
                for index, col in enumerate(ordered)
            ],
        )

    @classmethod
    def from_template_config(
        cls,
        config: TemplateConfig,
        items_per_page: int | None = None,
    ) -> "MessageConstructor":
        """
        Load a saved template document.

        Documents that never recorded `selected` only listed the columns
        that were in the message, so every listed column is selected.
        """
        legacy = not any("selected" in col.model_fields_set for col in config.columns)

        constructor = cls(items_per_page=items_per_page)
        constructor.set_columns(
            Column(
                id=col.id or f"col-{index}",
                name=col.name,
                selected=True if legacy else col.selected,
                order=col.order,
                preface=col.preface,
                closing=col.closing,
            )
            for index, col in enumerate(config.columns)
        )
        constructor.set_introduction(config.intro)
        constructor.set_conclusion(config.conclusion)
        return constructor
