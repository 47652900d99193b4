# =============================================================================
# tests/test_folder_tree.py - Folder Tree Tests
# =============================================================================

from lib.folder_tree import build_folder_tree


class TestBuildFolderTree:
    """Test nesting folders by parent_folder_id."""

    def test_flat_roots(self):
        tree = build_folder_tree([
            {"id": "a", "name": "Alpha", "parent_folder_id": None},
            {"id": "b", "name": "Beta", "parent_folder_id": None},
        ])
        assert [node["id"] for node in tree] == ["a", "b"]
        assert tree[0]["children"] == []

    def test_nested_children(self):
        tree = build_folder_tree([
            {"id": "a", "name": "Alpha", "parent_folder_id": None},
            {"id": "c", "name": "Child", "parent_folder_id": "a"},
            {"id": "g", "name": "Grandchild", "parent_folder_id": "c"},
        ])
        assert len(tree) == 1
        child = tree[0]["children"][0]
        assert child["id"] == "c"
        assert child["children"][0]["id"] == "g"

    def test_child_listed_before_parent(self):
        tree = build_folder_tree([
            {"id": "c", "name": "Child", "parent_folder_id": "a"},
            {"id": "a", "name": "Alpha", "parent_folder_id": None},
        ])
        assert tree[0]["children"][0]["id"] == "c"

    def test_orphans_dropped(self):
        tree = build_folder_tree([
            {"id": "a", "name": "Alpha", "parent_folder_id": None},
            {"id": "o", "name": "Orphan", "parent_folder_id": "missing"},
        ])
        assert [node["id"] for node in tree] == ["a"]
        assert tree[0]["children"] == []

    def test_rows_not_mutated(self):
        rows = [{"id": "a", "name": "Alpha", "parent_folder_id": None}]
        build_folder_tree(rows)
        assert "children" not in rows[0]
