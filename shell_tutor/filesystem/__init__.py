"""
Virtual File System

In-memory directory tree navigated by the local ``cd`` command.

Modules:
    vfs: VirtualFileSystem (resolution, navigation, listing, serialization)
    seed: Home sentinel, built-in seed layout, layout/JSON tree loading

Example:
    >>> from shell_tutor.filesystem import VirtualFileSystem
    >>> vfs = VirtualFileSystem()
    >>> [entry.name for entry in vfs.list_directory()]
    ['documents', 'images', 'music', 'file1.txt']
"""

from shell_tutor.filesystem.seed import HOME, SEED_LAYOUT, build_tree, default_tree, load_tree_file
from shell_tutor.filesystem.vfs import VirtualFileSystem

__all__ = [
    "HOME",
    "SEED_LAYOUT",
    "VirtualFileSystem",
    "build_tree",
    "default_tree",
    "load_tree_file",
]
