"""
SessionController - Interactive Terminal Session

Takes raw command lines, resolves navigation locally against the virtual
file system, and forwards everything else to the response engine.

State Machine:
    IDLE --(cd ...)------------------> IDLE               (local, synchronous)
    IDLE --(other command)-----------> AWAITING_RESPONSE  (remote call issued)
    AWAITING_RESPONSE --(settles)----> IDLE               (success, error or cancel)
    AWAITING_RESPONSE --(any input)--> AWAITING_RESPONSE  (dropped as BUSY)

Empty input is ignored in every state.

Context Synchronization:
    A committed directory change regenerates the engine session from the new
    path and the full serialized tree whenever the active session was seeded
    for something else (so ``cd .`` keeps the conversation, and a failed
    regeneration is retried on the next cd). A remote call keeps the session
    handle it was issued with.

Example:
    >>> controller = SessionController(VirtualFileSystem(), engine)
    >>> await controller.initialize()
    True
    >>> outcome = await controller.submit("cd documents")
    >>> controller.prompt
    'user@tutor:~/documents$'
"""

from __future__ import annotations

import logging
from enum import Enum

from shell_tutor.engine.base import ChatSession, ResponseEngine
from shell_tutor.engine.prompts import build_context_description
from shell_tutor.errors import ContextSyncError, NoSuchDirectoryError
from shell_tutor.filesystem.vfs import VirtualFileSystem
from shell_tutor.types.results import CommandOutcome, GuideResult, OutcomeKind
from shell_tutor.utils.cost_telemetry import telemetry_stage

logger = logging.getLogger(__name__)

CONTEXT_SYNC_WARNING = (
    "Error: Failed to update context for new directory. Terminal may not respond correctly."
)
GUIDE_FAILURE_MESSAGE = "Sorry, I couldn't generate a guide for that. Please try again."


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class SessionController:
    """
    One interactive session: virtual file system plus engine session.

    Args:
        vfs: File system holding the tree and current path
        engine: Response engine for non-navigation commands
        navigation_command: Command name resolved locally
        prompt_user: User name shown in the prompt
        prompt_host: Host name shown in the prompt
    """

    def __init__(
        self,
        vfs: VirtualFileSystem,
        engine: ResponseEngine,
        *,
        navigation_command: str = "cd",
        prompt_user: str = "user",
        prompt_host: str = "tutor",
    ) -> None:
        self._vfs = vfs
        self._engine = engine
        self._navigation_command = navigation_command
        self._prompt_user = prompt_user
        self._prompt_host = prompt_host

        self._state = SessionState.IDLE
        self._session: ChatSession | None = None
        self._ready = False
        self._context_generation = 0

    # === State ===

    @property
    def vfs(self) -> VirtualFileSystem:
        return self._vfs

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def ready(self) -> bool:
        """True once initialize() succeeded. Input should stay disabled otherwise."""
        return self._ready

    @property
    def busy(self) -> bool:
        return self._state is SessionState.AWAITING_RESPONSE

    @property
    def session(self) -> ChatSession | None:
        """Engine session that the next remote command will use."""
        return self._session

    @property
    def context_generation(self) -> int:
        """Number of context regenerations after navigation."""
        return self._context_generation

    @property
    def prompt(self) -> str:
        return f"{self._prompt_user}@{self._prompt_host}:{self._vfs.display_path()}$"

    def context_description(self) -> str:
        """Context for the current path and the full tree."""
        return build_context_description(self._vfs.display_path(), self._vfs.serialize())

    @property
    def context_stale(self) -> bool:
        """True if the active session was seeded for a different path or tree."""
        return (
            self._session is None
            or self._session.system_instruction != self.context_description()
        )

    # === Lifecycle ===

    async def initialize(self) -> bool:
        """
        Create the first engine session.

        Returns:
            False if the engine could not be reached or configured. The
            caller should keep input disabled in that case.
        """
        try:
            self._session = self._engine.create_session(self.context_description())
        except Exception as e:
            logger.error(f"Could not initialize response engine session: {e}")
            self._ready = False
            return False

        self._ready = True
        return True

    def refresh_context(self) -> None:
        """
        Replace the engine session with one built from the current path.

        Raises:
            ContextSyncError: Session could not be recreated. The previous
                session stays active.
        """
        try:
            session = self._engine.create_session(self.context_description())
        except Exception as e:
            raise ContextSyncError(str(e)) from e

        self._session = session
        self._context_generation += 1
        logger.debug(
            f"Context regenerated for {self._vfs.display_path()} "
            f"(generation {self._context_generation})"
        )

    # === Commands ===

    async def submit(self, line: str) -> CommandOutcome:
        """
        Handle one command line.

        Navigation resolves immediately. Any other command goes to the
        response engine; input submitted while that call is in flight is
        dropped with a BUSY outcome.
        """
        command = line.strip()
        if not command:
            return self._outcome(OutcomeKind.IGNORED)
        if self.busy:
            logger.debug(f"Dropped {command!r}: a command is already in flight")
            return self._outcome(OutcomeKind.BUSY, command)
        if not self._ready or self._session is None:
            return self._outcome(
                OutcomeKind.NOT_READY,
                command,
                output="Error: The terminal is not initialized.",
            )

        name, *args = command.split()
        if name == self._navigation_command:
            return self.change_directory(" ".join(args), command=command)

        return await self._run_remote(command)

    def change_directory(self, argument: str, *, command: str | None = None) -> CommandOutcome:
        """
        Resolve navigation locally and resynchronize the engine context.

        A failed change leaves both the current path and the engine session
        untouched. A successful change stands even if the context cannot be
        regenerated; the outcome then carries a warning instead.
        """
        command = command or f"{self._navigation_command} {argument}".strip()
        self._vfs.revalidate()
        try:
            self._vfs.change_directory(argument)
        except NoSuchDirectoryError as e:
            return self._outcome(
                OutcomeKind.NO_SUCH_DIRECTORY,
                command,
                output=f"bash: {self._navigation_command}: {e.path}: No such file or directory",
            )

        warning = None
        if self.context_stale:
            try:
                self.refresh_context()
            except ContextSyncError as e:
                logger.warning(f"Failed to re-create session after {command!r}: {e}")
                warning = CONTEXT_SYNC_WARNING

        return self._outcome(OutcomeKind.NAVIGATED, command, warning=warning)

    async def _run_remote(self, command: str) -> CommandOutcome:
        session = self._session

        self._state = SessionState.AWAITING_RESPONSE
        try:
            with telemetry_stage("command"):
                text = await self._engine.send(session, command)
        except Exception as e:
            return self._outcome(OutcomeKind.REMOTE_ERROR, command, output=f"Error: {e}")
        finally:
            self._state = SessionState.IDLE

        return self._outcome(OutcomeKind.RESPONSE, command, output=text)

    async def guide(self, goal: str) -> GuideResult:
        """
        Ask the engine for a step-by-step tutorial.

        Independent of the current path and of any command in flight.
        """
        goal = goal.strip()
        if not goal:
            return GuideResult(goal=goal)

        try:
            with telemetry_stage("guide"):
                markdown = await self._engine.generate_guide(goal)
        except Exception as e:
            logger.warning(f"Guide request failed: {e}")
            return GuideResult(goal=goal, error=GUIDE_FAILURE_MESSAGE)
        return GuideResult(goal=goal, markdown=markdown)

    def _outcome(
        self,
        kind: OutcomeKind,
        command: str = "",
        *,
        output: str | None = None,
        warning: str | None = None,
    ) -> CommandOutcome:
        return CommandOutcome(
            kind=kind,
            command=command,
            output=output,
            warning=warning,
            cwd=self._vfs.current_path,
        )
