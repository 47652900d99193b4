# =============================================================================
# lib/file_tree.py - File Tree Builder
# =============================================================================
# Turns a flat page of file records into the folder/file tree the file
# browser renders.
#
# S3 keys look like "<root>/<user-id>/<sub/dirs>/<name>". The user-id
# segment is hidden from the tree, so two roots are always returned:
#
#   uploads/
#     reports/
#       q1-1700000000000-ab12cd34.csv
#   processed/
#
# Usage:
#   from lib.file_tree import build_file_tree
#   tree = build_file_tree(rows)
# =============================================================================

import re
from typing import Any

# Top-level folders, in display order
TREE_ROOTS = ("uploads", "processed")

_USER_SEGMENT = re.compile(r"^(uploads|processed)/[^/]+/")


def get_file_extension(filename: str) -> str:
    """
    Lower-case extension of a filename, without the dot.

    Example:
        get_file_extension("Report.CSV")  # "csv"
        get_file_extension("README")      # ""
    """
    parts = filename.split(".")
    if len(parts) < 2:
        return ""
    return parts[-1].lower()


def strip_user_segment(s3_key: str) -> str:
    """Remove the "<user-id>/" segment that follows the root folder."""
    return _USER_SEGMENT.sub(r"\1/", s3_key, count=1)


def _folder_node(name: str, path: str) -> dict[str, Any]:
    return {"name": name, "type": "folder", "path": path, "children": []}


def build_file_tree(files: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Build a folder/file tree from file records.

    Intermediate key segments become folder nodes, created once and kept
    in first-seen order. Each record becomes a file node named after its
    original filename. Records under an unknown root are skipped.

    Args:
        files: File rows (dicts with at least id, s3_key, original_name)

    Returns:
        List with one folder node per root, in TREE_ROOTS order
    """
    roots = {name: _folder_node(name, name) for name in TREE_ROOTS}

    for record in files:
        s3_key = strip_user_segment(record.get("s3_key") or "")
        parts = s3_key.split("/")
        node = roots.get(parts[0])
        if node is None or len(parts) < 2:
            continue

        for depth in range(1, len(parts) - 1):
            folder_name = parts[depth]
            folder = next(
                (
                    child for child in node["children"]
                    if child["type"] == "folder" and child["name"] == folder_name
                ),
                None,
            )
            if folder is None:
                folder = _folder_node(folder_name, "/".join(parts[:depth + 1]))
                node["children"].append(folder)
            node = folder

        node["children"].append({
            "id": record.get("id"),
            "name": record.get("original_name"),
            "type": "file",
            "path": s3_key,
            "file_data": record,
        })

    return list(roots.values())
