"""
OpenAI LLM Provider (LangChain-based)

Implements LLMProvider interface using LangChain's ChatOpenAI.

Supports:
    - Single-turn text generation (generate)
    - Multi-turn conversation replay (chat)

Models:
    - gpt-4o-mini: Fast and cheap, good for terminal output
    - gpt-4o: Better prose, used for tutorials

Example:
    >>> provider = OpenAILLMProvider(api_key="sk-...", model="gpt-4o-mini")
    >>> await provider.chat([ChatTurn("user", "pwd")], system="You are a terminal.")
    "/home/user"
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from shell_tutor.config.pricing import estimate_llm_cost_usd
from shell_tutor.providers.base import ChatTurn, LLMProvider
from shell_tutor.types.results import CostUsageRecord
from shell_tutor.utils.cost_telemetry import current_stage, record_usage
from shell_tutor.utils.token_count import count_chat_tokens, count_text_tokens

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage
    from langchain_openai import ChatOpenAI


def _as_int(value: Any) -> int | None:
    """Best-effort int coercion."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _extract_token_usage(response: Any) -> tuple[int | None, int | None, int | None]:
    """
    Extract token usage from LangChain response metadata.

    Returns:
        (input_tokens, output_tokens, total_tokens)
    """
    if response is None:
        return None, None, None

    usage = getattr(response, "usage_metadata", None)
    if isinstance(usage, dict):
        input_tokens = _as_int(usage.get("input_tokens") or usage.get("prompt_tokens"))
        output_tokens = _as_int(usage.get("output_tokens") or usage.get("completion_tokens"))
        total_tokens = _as_int(usage.get("total_tokens"))
        if any(v is not None for v in (input_tokens, output_tokens, total_tokens)):
            return input_tokens, output_tokens, total_tokens

    response_metadata = getattr(response, "response_metadata", None)
    if isinstance(response_metadata, dict):
        token_usage = response_metadata.get("token_usage") or response_metadata.get("usage")
        if isinstance(token_usage, dict):
            input_tokens = _as_int(
                token_usage.get("input_tokens") or token_usage.get("prompt_tokens")
            )
            output_tokens = _as_int(
                token_usage.get("output_tokens") or token_usage.get("completion_tokens")
            )
            total_tokens = _as_int(token_usage.get("total_tokens"))
            if any(v is not None for v in (input_tokens, output_tokens, total_tokens)):
                return input_tokens, output_tokens, total_tokens

    return None, None, None


def _get_chat_openai(
    api_key: str | None = None,
    model: str = "gpt-4o-mini",
    temperature: float = 0.0,
) -> "ChatOpenAI":
    """
    Get a ChatOpenAI instance.

    Uses lazy import to avoid requiring langchain-openai unless actually used.

    Args:
        api_key: Optional API key. If not provided, uses OPENAI_API_KEY env var.
        model: Model name to use.
        temperature: Sampling temperature.

    Raises:
        ImportError: If langchain-openai package is not installed
    """
    try:
        from langchain_openai import ChatOpenAI
    except ImportError:
        raise ImportError(
            "OpenAI provider requires the 'langchain-openai' package. "
            "Install with: pip install langchain-openai"
        )

    kwargs: dict[str, Any] = {"model": model, "temperature": temperature}
    if api_key:
        kwargs["api_key"] = api_key

    return ChatOpenAI(**kwargs)


def _to_messages(turns: list[ChatTurn], system: str | None) -> list["BaseMessage"]:
    from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

    messages: list[BaseMessage] = []
    if system:
        messages.append(SystemMessage(content=system))
    for turn in turns:
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


class OpenAILLMProvider(LLMProvider):
    """
    OpenAI LLM provider implementation using LangChain.

    Args:
        api_key: OpenAI API key. If None, uses OPENAI_API_KEY environment variable.
        model: Model to use (default: "gpt-4o-mini")
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
    ) -> None:
        self._api_key = api_key
        self._model = model

    @property
    def model_name(self) -> str:
        """Current model name."""
        return self._model

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> str:
        """
        Generate a text completion.

        Args:
            prompt: User prompt/question
            system: Optional system message for context
            temperature: Sampling temperature (0.0 = deterministic)
            max_tokens: Maximum tokens in response

        Returns:
            Generated text response
        """
        return await self._invoke(
            [ChatTurn(role="user", content=prompt)],
            system=system,
            temperature=temperature,
            max_tokens=max_tokens,
            operation="generate",
        )

    async def chat(
        self,
        turns: list[ChatTurn],
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> str:
        """
        Generate the next assistant reply for a conversation.

        Args:
            turns: Alternating user/assistant turns, ending with a user turn
            system: Optional system message for context
            temperature: Sampling temperature (0.0 = deterministic)
            max_tokens: Maximum tokens in response

        Returns:
            Assistant reply text
        """
        return await self._invoke(
            turns,
            system=system,
            temperature=temperature,
            max_tokens=max_tokens,
            operation="chat",
        )

    async def _invoke(
        self,
        turns: list[ChatTurn],
        *,
        system: str | None,
        temperature: float,
        max_tokens: int,
        operation: str,
    ) -> str:
        start = time.perf_counter_ns()

        base_client = _get_chat_openai(
            api_key=self._api_key,
            model=self._model,
            temperature=temperature,
        )
        client = base_client.bind(max_tokens=max_tokens)

        response = await client.ainvoke(_to_messages(turns, system))
        output_text = str(response.content)

        input_tokens, output_tokens, total_tokens = _extract_token_usage(response)
        estimated = False

        if input_tokens is None:
            chat_messages = [turn.content for turn in turns]
            if system:
                chat_messages.insert(0, system)
            input_tokens = count_chat_tokens(chat_messages, self._model)
            estimated = True

        if output_tokens is None:
            output_tokens = count_text_tokens(output_text, self._model)
            estimated = True

        if total_tokens is None:
            total_tokens = input_tokens + output_tokens

        estimated_cost, pricing_found = estimate_llm_cost_usd(
            self._model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000

        record_usage(
            CostUsageRecord(
                provider="openai",
                model=self._model,
                operation=operation,
                stage=current_stage(),
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=total_tokens,
                estimated_cost_usd=estimated_cost,
                latency_ms=int(elapsed_ms),
                estimated=estimated,
                metadata={
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                    "turns": len(turns),
                    "pricing_found": pricing_found,
                },
            )
        )
        return output_text

    def with_model(self, model: str) -> "OpenAILLMProvider":
        """
        Return a new provider instance with a different model.

        Used to give tutorials a stronger model than terminal output.

        Args:
            model: New model name to use
        """
        return OpenAILLMProvider(api_key=self._api_key, model=model)
