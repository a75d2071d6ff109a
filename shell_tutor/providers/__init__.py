"""
LLM Providers

Provider-agnostic interface for language-model calls.

Modules:
    base: LLMProvider interface and ChatTurn
    llm/: LLM provider implementations

Supported LLM Providers:
    - OpenAI (gpt-4o-mini, gpt-4o) via LangChain

Example:
    >>> from shell_tutor.providers import LLMProvider
    >>> from shell_tutor.providers.llm import OpenAILLMProvider
"""

from shell_tutor.providers.base import ChatTurn, LLMProvider

__all__ = ["ChatTurn", "LLMProvider"]
