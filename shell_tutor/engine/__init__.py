"""
Response Engine

The language-model collaborator that improvises terminal output.

Modules:
    base: ResponseEngine interface and ChatSession handle
    llm_engine: LLMResponseEngine over an LLMProvider
    prompts: System instruction and tutorial prompt templates
"""

from shell_tutor.engine.base import ChatSession, ResponseEngine
from shell_tutor.engine.llm_engine import LLMResponseEngine
from shell_tutor.engine.prompts import build_context_description, build_guide_prompt

__all__ = [
    "ChatSession",
    "LLMResponseEngine",
    "ResponseEngine",
    "build_context_description",
    "build_guide_prompt",
]
