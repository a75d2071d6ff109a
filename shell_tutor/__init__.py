"""
shell-tutor - Simulated Linux Terminal for Beginners

A language model improvises the output of most commands from a snapshot of
a simulated file system; ``cd`` is resolved locally against that tree.

Example:
    >>> from shell_tutor import SessionController, VirtualFileSystem
    >>> controller = SessionController(VirtualFileSystem(), engine)
    >>> await controller.initialize()
    >>> outcome = await controller.submit("cd documents")
    >>> outcome = await controller.submit("ls -l")
    >>> print(outcome.output)

Main Classes:
    VirtualFileSystem: Simulated tree, path resolution and navigation
    SessionController: Command loop and engine context synchronization
    LLMResponseEngine: Response engine backed by an LLM provider
    TutorConfig: Configuration management
"""

__version__ = "0.1.0"


# Public API - lazy imports to avoid loading optional dependencies
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "VirtualFileSystem":
        from shell_tutor.filesystem.vfs import VirtualFileSystem
        return VirtualFileSystem

    if name == "SessionController":
        from shell_tutor.session.controller import SessionController
        return SessionController

    if name == "LLMResponseEngine":
        from shell_tutor.engine.llm_engine import LLMResponseEngine
        return LLMResponseEngine

    if name == "TutorConfig":
        from shell_tutor.config.settings import TutorConfig
        return TutorConfig

    # Types
    if name in ("Directory", "File", "CommandOutcome", "OutcomeKind", "GuideResult"):
        from shell_tutor import types
        return getattr(types, name)

    raise AttributeError(f"module 'shell_tutor' has no attribute {name!r}")


__all__ = [
    # Main classes
    "VirtualFileSystem",
    "SessionController",
    "LLMResponseEngine",
    "TutorConfig",

    # Types
    "Directory",
    "File",
    "CommandOutcome",
    "OutcomeKind",
    "GuideResult",

    # Version
    "__version__",
]
