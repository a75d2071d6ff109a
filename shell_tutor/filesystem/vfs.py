"""
VirtualFileSystem - In-Memory Directory Tree

Holds the simulated tree and the session's current path, resolves relative
and absolute paths, and serializes the tree for the response engine.

Paths:
    Absolute paths start with the home sentinel (``~``, ``~/images``).
    Anything else is relative to a base path. ``..`` never ascends above
    ``~``; ``.`` and empty segments (``a//b``, trailing ``/``) are skipped.

Example:
    >>> vfs = VirtualFileSystem()
    >>> vfs.change_directory("documents")
    ['~', 'documents']
    >>> vfs.display_path()
    '~/documents'
    >>> vfs.change_directory("../../..")
    ['~']
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from shell_tutor.errors import NoSuchDirectoryError
from shell_tutor.filesystem.seed import HOME, default_tree
from shell_tutor.types.filesystem import Directory, DirectoryEntry, File, ResolvedPath

logger = logging.getLogger(__name__)


class VirtualFileSystem:
    """
    Simulated tree plus current-path state for one session.

    The current path only ever takes the value of a successful resolution,
    so every prefix of it names an existing directory.

    Args:
        root: Root directory (the ``~`` node). Defaults to the seed tree.
    """

    def __init__(self, root: Directory | None = None) -> None:
        self._root = root if root is not None else default_tree()
        self._current: list[str] = [HOME]

    @property
    def root(self) -> Directory:
        return self._root

    @property
    def current_path(self) -> list[str]:
        """Copy of the current path segments."""
        return list(self._current)

    # === Resolution ===

    def resolve(self, base_segments: Sequence[str], input_path: str) -> ResolvedPath | None:
        """
        Resolve a path against a base path.

        Args:
            base_segments: Path that relative input is resolved against
            input_path: Slash-separated path, absolute (``~``-prefixed) or relative

        Returns:
            ResolvedPath, or None if a segment is missing or a non-final
            segment is a file
        """
        if input_path.startswith(HOME):
            parts = input_path.split("/")
            if parts[0] != HOME:
                # "~user" style paths have no meaning here
                return None
            accumulated = [HOME]
            parts = parts[1:]
        else:
            accumulated = list(base_segments)
            parts = input_path.split("/")

        for part in parts:
            if part == "..":
                if len(accumulated) > 1:
                    accumulated.pop()
            elif part in (".", ""):
                continue
            else:
                accumulated.append(part)

        node = self._walk(accumulated)
        if node is None:
            return None
        return ResolvedPath(segments=tuple(accumulated), node=node)

    def _walk(self, segments: Sequence[str]) -> Directory | File | None:
        """Follow segments from the root; None if they don't reach a node."""
        if not segments or segments[0] != HOME:
            return None

        node: Directory | File = self._root
        for name in segments[1:]:
            if not isinstance(node, Directory):
                return None
            child = node.child(name)
            if child is None:
                return None
            node = child
        return node

    def exists(self, path: str) -> bool:
        """True if path (relative to the current directory) names any node."""
        return self.resolve(self._current, path) is not None

    def is_directory(self, path: str) -> bool:
        """True if path (relative to the current directory) names a directory."""
        resolved = self.resolve(self._current, path)
        return resolved is not None and resolved.is_directory

    # === Navigation ===

    def change_directory(self, requested: str) -> list[str]:
        """
        Change the current directory.

        An empty argument or ``~`` goes straight home.

        Args:
            requested: Path as typed by the user

        Returns:
            The new current path

        Raises:
            NoSuchDirectoryError: Target is missing or is a file. The current
                path is left unchanged.
        """
        if not requested or requested == HOME:
            self._current = [HOME]
            return self.current_path

        resolved = self.resolve(self._current, requested)
        if resolved is None or not resolved.is_directory:
            logger.debug(f"cd {requested!r} failed from {self.display_path()}")
            raise NoSuchDirectoryError(requested)

        self._current = list(resolved.segments)
        logger.debug(f"cd {requested!r} -> {self.display_path()}")
        return self.current_path

    def revalidate(self) -> bool:
        """
        Check the current path still names a directory.

        Falls back to ``~`` if it doesn't.

        Returns:
            True if the current path was still valid
        """
        if isinstance(self._walk(self._current), Directory):
            return True
        logger.warning(f"Current path {self.display_path()} no longer exists, returning home")
        self._current = [HOME]
        return False

    # === Listing & Display ===

    def list_directory(self, segments: Sequence[str] | None = None) -> list[DirectoryEntry]:
        """
        Immediate children of a directory, in declaration order.

        Args:
            segments: Directory path (default: current path)

        Raises:
            NoSuchDirectoryError: Segments don't name a directory
        """
        target = list(segments) if segments is not None else self._current
        node = self._walk(target)
        if not isinstance(node, Directory):
            raise NoSuchDirectoryError(self.display_path(target))
        return [
            DirectoryEntry(name=name, is_directory=child.is_directory)
            for name, child in node.children.items()
        ]

    def display_path(self, segments: Sequence[str] | None = None) -> str:
        """Render segments as ``~`` or ``~/a/b``."""
        target = segments if segments is not None else self._current
        return "/".join(target)

    # === Serialization ===

    def to_dict(self) -> dict[str, Any]:
        """Whole tree as ``{"~": {"type": "dir", "children": {...}}}``."""
        return {HOME: self._root.model_dump()}

    def serialize(self) -> str:
        """Deterministic JSON of the whole tree, in declaration order."""
        return json.dumps(self.to_dict(), indent=2)
