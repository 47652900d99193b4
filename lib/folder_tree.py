# =============================================================================
# lib/folder_tree.py - Template Folder Tree
# =============================================================================
# Rebuilds the template folder hierarchy from parent pointers.
# =============================================================================

from typing import Any


def build_folder_tree(folders: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Nest folders under their parents.

    Every returned node is a copy of its row with a "children" list.
    Folders without a parent are roots. Folders whose parent is not in
    the input are dropped. Siblings keep their input order.

    Args:
        folders: Folder rows with id and parent_folder_id

    Returns:
        List of root folder nodes
    """
    nodes = {
        folder["id"]: {**folder, "children": []}
        for folder in folders
    }
    roots: list[dict[str, Any]] = []

    for folder in folders:
        node = nodes[folder["id"]]
        parent_id = folder.get("parent_folder_id")
        if not parent_id:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id]["children"].append(node)

    return roots
