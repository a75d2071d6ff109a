"""
Seed Layouts

Builds the simulated tree a session starts with.

Layouts are nested mappings: a mapping value is a directory, ``None`` is a
file.

    >>> root = build_tree({"notes": {"todo.txt": None}, "readme.md": None})
    >>> list(root.children)
    ['notes', 'readme.md']
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from shell_tutor.types.filesystem import Directory, File, check_entry_name

HOME = "~"
"""Home sentinel: name of the root directory and first segment of every path"""

SEED_LAYOUT: dict[str, Any] = {
    "documents": {"report.docx": None},
    "images": {"photo.jpg": None, "vacation.png": None},
    "music": {},
    "file1.txt": None,
}


def build_tree(layout: Mapping[str, Any]) -> Directory:
    """
    Build a directory from a nested layout mapping.

    Raises:
        ValueError: If a name is empty, contains '/', or is a reserved segment
    """
    children: dict[str, Directory | File] = {}
    for name, value in layout.items():
        check_entry_name(name)
        if value is None:
            children[name] = File()
        elif isinstance(value, Mapping):
            children[name] = build_tree(value)
        else:
            raise ValueError(
                f"Layout entry {name!r} must be a mapping (directory) or None (file), "
                f"got {type(value).__name__}"
            )
    return Directory(children=children)


def default_tree() -> Directory:
    """Fresh copy of the built-in seed tree."""
    return build_tree(SEED_LAYOUT)


def load_tree_file(path: str | Path) -> Directory:
    """
    Load a seed tree from a JSON file.

    Accepts either a nested layout mapping or the serialized form produced by
    ``VirtualFileSystem.serialize()`` (``{"~": {"type": "dir", ...}}``).

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is not a valid tree or holds an invalid
            entry name (checked in both forms)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tree file not found: {path}")

    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Tree file must contain a JSON object: {path}")

    if set(data) == {HOME}:
        return Directory.model_validate(data[HOME])
    return build_tree(data)
