"""
Error Taxonomy

    ShellTutorError
    ├── NoSuchDirectoryError   - cd target missing or not a directory (recovered locally)
    ├── ContextSyncError       - engine session could not be regenerated after cd (non-fatal)
    ├── RemoteCallError        - response engine call failed (shown, never retried)
    └── InitializationError    - bootstrap failure; the interactive session never starts

None of these ever leave the virtual file system in a modified state.
"""


class ShellTutorError(Exception):
    """Base class for all shell-tutor errors."""


class NoSuchDirectoryError(ShellTutorError):
    """Navigation target does not resolve to an existing directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{path}: No such file or directory")


class ContextSyncError(ShellTutorError):
    """Regenerating the response engine session failed."""


class RemoteCallError(ShellTutorError):
    """The response engine call errored or was rejected."""


class InitializationError(ShellTutorError):
    """Missing credentials or a collaborator could not be constructed."""
