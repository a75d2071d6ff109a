"""Tests for file system and result types."""

import pytest
from pydantic import ValidationError

from shell_tutor.types import (
    CommandOutcome,
    Directory,
    File,
    GuideResult,
    OutcomeKind,
)


class TestDirectoryNode:
    """Tagged tree nodes."""

    def test_validate_nested_serialized_form(self):
        node = Directory.model_validate(
            {
                "type": "dir",
                "children": {
                    "docs": {"type": "dir", "children": {"a.txt": {"type": "file"}}},
                    "b.txt": {"type": "file"},
                },
            }
        )
        assert isinstance(node.children["docs"], Directory)
        assert isinstance(node.children["docs"].children["a.txt"], File)
        assert list(node.children) == ["docs", "b.txt"]

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValidationError):
            Directory.model_validate({"type": "dir", "children": {"x": {"type": "link"}}})

    def test_flags(self):
        assert Directory().is_directory is True
        assert File().is_directory is False
        assert Directory().children == {}

    def test_child_lookup(self):
        node = Directory(children={"a": File()})
        assert isinstance(node.child("a"), File)
        assert node.child("b") is None

    def test_dump_shape(self):
        node = Directory(children={"a": File(), "d": Directory()})
        assert node.model_dump() == {
            "type": "dir",
            "children": {"a": {"type": "file"}, "d": {"type": "dir", "children": {}}},
        }


class TestResults:
    """Session result models."""

    @pytest.mark.parametrize(
        "kind,is_error",
        [
            (OutcomeKind.RESPONSE, False),
            (OutcomeKind.NAVIGATED, False),
            (OutcomeKind.NO_SUCH_DIRECTORY, True),
            (OutcomeKind.REMOTE_ERROR, True),
            (OutcomeKind.IGNORED, False),
            (OutcomeKind.BUSY, False),
        ],
    )
    def test_is_error(self, kind: OutcomeKind, is_error: bool):
        assert CommandOutcome(kind=kind).is_error is is_error

    def test_outcome_defaults(self):
        outcome = CommandOutcome(kind=OutcomeKind.IGNORED)
        assert outcome.command == ""
        assert outcome.output is None
        assert outcome.cwd == []

    def test_outcome_requires_kind(self):
        with pytest.raises(ValidationError):
            CommandOutcome()

    def test_guide_result(self):
        assert GuideResult(goal="x", markdown="# ok").ok
        assert not GuideResult(goal="x", error="failed").ok
