"""
Response Engine Interface

The remote collaborator that fabricates terminal output and tutorials.

Contract:
    create_session(context) - start a conversation seeded with a context
        description; called again after every directory change to replace
        the active session
    send(session, command)  - one command in, one text reply out
    generate_guide(goal)    - stateless tutorial, unrelated to session state
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from shell_tutor.providers.base import ChatTurn


@dataclass
class ChatSession:
    """
    Conversation handle for one context description.

    A new session is created whenever the context changes; an existing
    session's system instruction is never rewritten.

    Attributes:
        system_instruction: Context description the session was seeded with
        history: Completed user/assistant turns, oldest first
        session_id: Short identifier for logs
    """

    system_instruction: str
    history: list[ChatTurn] = field(default_factory=list)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])


class ResponseEngine(ABC):
    """Abstract interface for response engines."""

    @abstractmethod
    def create_session(self, context_description: str) -> ChatSession:
        """Start a conversation seeded with the context description."""
        ...

    @abstractmethod
    async def send(self, session: ChatSession, command_line: str) -> str:
        """
        Send one command and return the reply text.

        Raises:
            RemoteCallError: The call failed
        """
        ...

    @abstractmethod
    async def generate_guide(self, goal: str) -> str:
        """
        Generate a markdown tutorial for a goal.

        Raises:
            RemoteCallError: The call failed
        """
        ...
