"""
File System Types

Nodes of the simulated directory tree.

Tree Models:
    - File: Leaf entry with no children
    - Directory: Entry owning an ordered mapping of child name -> node
    - DirectoryNode: Tagged union of the two, discriminated on ``type``

Resolution Models:
    - ResolvedPath: Normalized segments plus the node they reach
    - DirectoryEntry: One (name, is_directory) row from a listing

The serialized form of a node is the same shape the response engine sees in
its context description:

    {"type": "dir", "children": {"notes.txt": {"type": "file"}}}
"""

from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

RESERVED_NAMES = frozenset({".", "..", "~"})
"""Names that path resolution treats specially and no entry may use"""


def check_entry_name(name: str) -> str:
    """
    Validate one child name.

    Raises:
        ValueError: If the name is empty, contains '/', or is reserved
    """
    if not name or "/" in name or name in RESERVED_NAMES:
        raise ValueError(f"Invalid entry name: {name!r}")
    return name


class File(BaseModel):
    """A file in the simulated tree. Files never have children."""

    type: Literal["file"] = "file"

    @property
    def is_directory(self) -> bool:
        return False


class Directory(BaseModel):
    """
    A directory in the simulated tree.

    Attributes:
        children: Child name -> node. Keys are unique and keep insertion
            order, which is also the display order.
    """

    type: Literal["dir"] = "dir"
    children: dict[str, "DirectoryNode"] = Field(default_factory=dict)

    @field_validator("children")
    @classmethod
    def _check_names(cls, children: dict) -> dict:
        for name in children:
            check_entry_name(name)
        return children

    @property
    def is_directory(self) -> bool:
        return True

    def child(self, name: str) -> "DirectoryNode | None":
        """Return the named child, or None if absent."""
        return self.children.get(name)


DirectoryNode = Annotated[Union[Directory, File], Field(discriminator="type")]

Directory.model_rebuild()


@dataclass(frozen=True)
class ResolvedPath:
    """
    Result of a successful path resolution.

    Attributes:
        segments: Normalized segments, always starting with the home sentinel
        node: The node the segments reach
    """

    segments: tuple[str, ...]
    node: Directory | File

    @property
    def is_directory(self) -> bool:
        return self.node.is_directory


@dataclass(frozen=True)
class DirectoryEntry:
    """One immediate child of a directory."""

    name: str
    is_directory: bool
