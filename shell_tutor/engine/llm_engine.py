"""
LLM-backed Response Engine

Implements ResponseEngine over an LLMProvider. Each send() replays the
session's history so the model keeps conversational context, like a chat
API session would. Only the most recent exchanges are kept, so a long
session stays within the model's context window.

Example:
    >>> engine = LLMResponseEngine(OpenAILLMProvider(model="gpt-4o-mini"))
    >>> session = engine.create_session(build_context_description("~", tree_json))
    >>> await engine.send(session, "ls")
    "documents  images  music  file1.txt"
"""

from __future__ import annotations

import logging

from shell_tutor.engine.base import ChatSession, ResponseEngine
from shell_tutor.engine.prompts import build_guide_prompt
from shell_tutor.errors import RemoteCallError
from shell_tutor.providers.base import ChatTurn, LLMProvider

logger = logging.getLogger(__name__)


class LLMResponseEngine(ResponseEngine):
    """
    Response engine backed by an LLM provider.

    Args:
        llm: Provider for terminal output
        guide_llm: Provider for tutorials (default: same as llm)
        temperature: Sampling temperature for terminal output
        max_tokens: Maximum tokens per terminal reply
        guide_max_tokens: Maximum tokens per tutorial
        history_turns: Completed exchanges kept per session and replayed
            with each command (0 replays none)
    """

    def __init__(
        self,
        llm: LLMProvider,
        *,
        guide_llm: LLMProvider | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
        guide_max_tokens: int = 2048,
        history_turns: int = 20,
    ) -> None:
        self._llm = llm
        self._guide_llm = guide_llm or llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._guide_max_tokens = guide_max_tokens
        self._history_turns = history_turns

    def create_session(self, context_description: str) -> ChatSession:
        if not context_description.strip():
            raise ValueError("Context description must not be empty")
        session = ChatSession(system_instruction=context_description)
        logger.debug(f"Created session {session.session_id} on {self._llm.model_name}")
        return session

    async def send(self, session: ChatSession, command_line: str) -> str:
        turns = [*session.history, ChatTurn(role="user", content=command_line)]
        try:
            reply = await self._llm.chat(
                turns,
                system=session.system_instruction,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(f"Session {session.session_id}: command {command_line!r} failed: {e}")
            raise RemoteCallError(str(e) or type(e).__name__) from e

        # History only grows on success
        session.history.extend(turns[-1:] + [ChatTurn(role="assistant", content=reply)])
        self._trim_history(session)
        return reply

    def _trim_history(self, session: ChatSession) -> None:
        excess = len(session.history) - 2 * self._history_turns
        if excess > 0:
            del session.history[:excess]

    async def generate_guide(self, goal: str) -> str:
        try:
            return await self._guide_llm.generate(
                build_guide_prompt(goal),
                max_tokens=self._guide_max_tokens,
            )
        except Exception as e:
            logger.warning(f"Guide generation for {goal!r} failed: {e}")
            raise RemoteCallError(str(e) or type(e).__name__) from e
