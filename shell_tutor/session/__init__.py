"""
Interactive Session

Modules:
    controller: SessionController state machine and context synchronization
"""

from shell_tutor.session.controller import (
    CONTEXT_SYNC_WARNING,
    GUIDE_FAILURE_MESSAGE,
    SessionController,
    SessionState,
)

__all__ = [
    "CONTEXT_SYNC_WARNING",
    "GUIDE_FAILURE_MESSAGE",
    "SessionController",
    "SessionState",
]
