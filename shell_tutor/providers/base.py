"""
Abstract Provider Interfaces

Base class for LLM providers and the chat turn type they consume.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ChatTurn:
    """One message of a multi-turn conversation."""

    role: Literal["user", "assistant"]
    content: str


class LLMProvider(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> str:
        """Generate a single-turn completion."""
        ...

    @abstractmethod
    async def chat(
        self,
        turns: list[ChatTurn],
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> str:
        """Generate the next assistant reply for a conversation."""
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Current model name."""
        ...
