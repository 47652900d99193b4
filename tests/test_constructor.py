# =============================================================================
# tests/test_constructor.py - Message Constructor Tests
# =============================================================================
# Tests for column selection, ordering, search/pagination and previews.
# =============================================================================

import math

import pytest
from pydantic import ValidationError

from core.constructor import Column, MessageConstructor
from core.models.template import TemplateConfig


SEARCH_NAMES = ["Region", "Revenue", "Order Date", "Ship Date", "Sales Rep", "Units", "Unit Price"]


def _columns(count: int) -> list[dict]:
    return [{"id": f"col-{i}", "name": f"Column {i}"} for i in range(count)]


@pytest.fixture
def constructor():
    mc = MessageConstructor(items_per_page=2)
    mc.set_columns([
        {"id": "col-0", "name": "Region"},
        {"id": "col-1", "name": "Revenue"},
        {"id": "col-2", "name": "Order Date"},
        {"id": "col-3", "name": "Ship Date"},
    ])
    return mc


# =============================================================================
# Actions
# =============================================================================

class TestColumnActions:
    """Test selection and column updates."""

    def test_set_columns_fills_order_from_index(self, constructor):
        assert [col.order for col in constructor.columns] == [0, 1, 2, 3]

    def test_set_columns_keeps_given_order(self):
        mc = MessageConstructor()
        mc.set_columns([{"id": "a", "name": "A", "order": 5}])
        assert mc.columns[0].order == 5

    def test_default_page_size_from_settings(self):
        from app.config import settings
        assert MessageConstructor().items_per_page == settings.CONSTRUCTOR_PAGE_SIZE

    def test_toggle_column_selection(self, constructor):
        constructor.toggle_column_selection("col-1")
        assert constructor.columns[1].selected is True

        constructor.toggle_column_selection("col-1")
        assert constructor.columns[1].selected is False

    def test_toggle_unknown_column_is_noop(self, constructor):
        constructor.toggle_column_selection("missing")
        assert not any(col.selected for col in constructor.columns)

    def test_update_column_config(self, constructor):
        constructor.update_column_config("col-0", preface="Region: ", closing="!")
        column = constructor.columns[0]
        assert column.preface == "Region: "
        assert column.closing == "!"
        assert column.name == "Region"

    def test_update_column_config_rejects_bad_type(self, constructor):
        with pytest.raises(ValidationError):
            constructor.update_column_config("col-0", selected={"not": "a bool"})

    def test_select_all_columns(self, constructor):
        constructor.select_all_columns(True)
        assert constructor.all_selected is True

        constructor.select_all_columns(False)
        assert constructor.selected_columns == []
        assert constructor.all_selected is False

    def test_all_selected_false_without_columns(self):
        assert MessageConstructor().all_selected is False

    def test_dragging_flag(self, constructor):
        constructor.set_is_dragging(True)
        assert constructor.is_dragging is True


class TestReorder:
    """Test drag-and-drop reordering."""

    def test_move_down(self, constructor):
        constructor.reorder_columns("col-0", "col-2")
        assert [col.id for col in constructor.columns] == ["col-1", "col-2", "col-0", "col-3"]
        assert [col.order for col in constructor.columns] == [0, 1, 2, 3]

    def test_move_up(self, constructor):
        constructor.reorder_columns("col-3", "col-0")
        assert [col.id for col in constructor.columns] == ["col-3", "col-0", "col-1", "col-2"]

    def test_unknown_id_leaves_columns(self, constructor):
        before = [col.id for col in constructor.columns]
        constructor.reorder_columns("col-0", "nope")
        assert [col.id for col in constructor.columns] == before

    def test_selected_columns_follow_order(self, constructor):
        constructor.select_all_columns(True)
        constructor.reorder_columns("col-2", "col-0")
        assert [col.name for col in constructor.selected_columns][:2] == ["Order Date", "Region"]

    @pytest.mark.parametrize("source", range(5))
    @pytest.mark.parametrize("target", range(5))
    def test_every_move(self, source, target):
        mc = MessageConstructor()
        mc.set_columns(_columns(5))
        before = [col.id for col in mc.columns]
        moved = before[source]

        mc.reorder_columns(moved, before[target])

        after = [col.id for col in mc.columns]
        assert sorted(after) == sorted(before)
        assert after[target] == moved
        assert [col_id for col_id in after if col_id != moved] == [
            col_id for col_id in before if col_id != moved
        ]
        assert [col.order for col in mc.columns] == list(range(5))
        assert [col.id for col in mc.sorted_and_filtered_columns] == after


# =============================================================================
# Search and Pagination
# =============================================================================

class TestSearchAndPagination:
    """Test filtering and paging of the column list."""

    def test_search_is_case_insensitive(self, constructor):
        constructor.set_search_query("DATE")
        names = [col.name for col in constructor.sorted_and_filtered_columns]
        assert names == ["Order Date", "Ship Date"]

    def test_search_resets_page(self, constructor):
        constructor.set_current_page(2)
        constructor.set_search_query("re")
        assert constructor.current_page == 1

    def test_total_pages(self, constructor):
        assert constructor.total_pages == 2

    def test_paginated_columns(self, constructor):
        constructor.next_page()
        assert [col.id for col in constructor.paginated_columns] == ["col-2", "col-3"]

    def test_page_is_clamped(self, constructor):
        constructor.set_current_page(10)
        assert constructor.current_page == 2

        constructor.set_current_page(0)
        assert constructor.current_page == 1

        constructor.previous_page()
        assert constructor.current_page == 1

    def test_no_matches(self, constructor):
        constructor.set_search_query("zzz")
        assert constructor.total_pages == 0
        assert constructor.paginated_columns == []
        constructor.set_current_page(3)
        assert constructor.current_page == 1

    @pytest.mark.parametrize("items_per_page", [1, 2, 3, 7, 10])
    @pytest.mark.parametrize("query", ["", "re", "DATE", "unit", "zzz"])
    def test_pages_cover_filtered_columns_once(self, items_per_page, query):
        mc = MessageConstructor(items_per_page=items_per_page)
        mc.set_columns([{"id": f"col-{i}", "name": name} for i, name in enumerate(SEARCH_NAMES)])
        mc.set_search_query(query)
        expected = [col.id for col in mc.sorted_and_filtered_columns]

        seen = []
        for page in range(1, mc.total_pages + 1):
            mc.set_current_page(page)
            assert mc.current_page == page
            ids = [col.id for col in mc.paginated_columns]
            assert 0 < len(ids) <= items_per_page
            seen.extend(ids)

        assert seen == expected
        assert mc.total_pages == math.ceil(len(expected) / items_per_page)

    def test_search_matches_substring_of_every_result(self):
        mc = MessageConstructor()
        mc.set_columns([{"id": f"col-{i}", "name": name} for i, name in enumerate(SEARCH_NAMES)])
        mc.set_search_query("Re")

        names = [col.name for col in mc.sorted_and_filtered_columns]
        assert names == [name for name in SEARCH_NAMES if "re" in name.lower()]

    def test_empty_search_returns_every_column(self, constructor):
        constructor.set_search_query("zzz")
        constructor.set_search_query("")

        assert [col.id for col in constructor.sorted_and_filtered_columns] == [
            col.id for col in constructor.columns
        ]
        assert constructor.total_pages == 2


# =============================================================================
# Preview
# =============================================================================

class TestPreview:
    """Test message rendering."""

    def test_preview_with_values(self, constructor):
        constructor.set_introduction("Hello,")
        constructor.set_conclusion("Bye")
        constructor.update_column_config("col-0", selected=True, preface="Region: ")
        constructor.update_column_config("col-1", selected=True, closing=" USD")

        message = constructor.preview_message({"Region": "EMEA", "Revenue": "1200"})

        assert message == "Hello,\n\nRegion: EMEA\n1200 USD\n\nBye"

    def test_preview_placeholder_for_missing_value(self, constructor):
        constructor.toggle_column_selection("col-2")
        message = constructor.preview_message({"Order Date": ""})
        assert "[Order Date]" in message

    def test_preview_without_row(self, constructor):
        constructor.toggle_column_selection("col-0")
        assert constructor.preview_message() == "\n\n[Region]\n\n"

    def test_config_snapshot(self, constructor):
        constructor.toggle_column_selection("col-1")
        constructor.set_introduction("Hi")
        config = constructor.config()
        assert config["introduction"] == "Hi"
        assert [col["id"] for col in config["selected_columns"]] == ["col-1"]


# =============================================================================
# Template Conversion
# =============================================================================

class TestTemplateConversion:
    """Test loading and saving template documents."""

    def test_round_trip_keeps_selection_and_text(self, constructor):
        constructor.update_column_config("col-1", selected=True, preface="Rev: ")
        constructor.set_introduction("Intro")
        constructor.set_conclusion("Outro")

        config = constructor.to_template_config("csv")
        loaded = MessageConstructor.from_template_config(config)

        assert [col.id for col in loaded.selected_columns] == ["col-1"]
        assert loaded.selected_columns[0].preface == "Rev: "
        assert loaded.introduction == "Intro"
        assert loaded.conclusion == "Outro"

    def test_to_template_config_renumbers_order(self, constructor):
        constructor.reorder_columns("col-3", "col-0")
        config = constructor.to_template_config("csv")
        assert [(col.id, col.order) for col in config.columns][:2] == [("col-3", 0), ("col-0", 1)]

    def test_legacy_document_selects_every_column(self):
        config = TemplateConfig.model_validate({
            "type": "csv",
            "columns": [{"name": "Region"}, {"name": "Revenue"}],
        })

        loaded = MessageConstructor.from_template_config(config)

        assert loaded.all_selected is True
        assert [col.id for col in loaded.columns] == ["col-0", "col-1"]

    def test_column_model_defaults(self):
        column = Column(id="c", name="C")
        assert column.selected is False
        assert column.preface == ""
        assert column.order is None
