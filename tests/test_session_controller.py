"""
Tests for SessionController

Navigation, remote commands, the busy state machine and context
synchronization, with a mocked response engine.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from shell_tutor.engine.base import ChatSession
from shell_tutor.errors import RemoteCallError
from shell_tutor.filesystem import VirtualFileSystem, build_tree
from shell_tutor.session import (
    CONTEXT_SYNC_WARNING,
    GUIDE_FAILURE_MESSAGE,
    SessionController,
    SessionState,
)
from shell_tutor.types.results import OutcomeKind

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def mock_engine() -> MagicMock:
    """Create a mock response engine that hands out real sessions."""
    engine = MagicMock()
    engine.create_session = MagicMock(
        side_effect=lambda context: ChatSession(system_instruction=context)
    )
    engine.send = AsyncMock(return_value="documents  images  music  file1.txt")
    engine.generate_guide = AsyncMock(return_value="# Steps\n\n1. Run `ls`")
    return engine


@pytest_asyncio.fixture
async def controller(mock_engine: MagicMock) -> SessionController:
    """Initialized controller over the seed tree."""
    controller = SessionController(VirtualFileSystem(), mock_engine)
    assert await controller.initialize() is True
    return controller


# -----------------------------------------------------------------------------
# Initialization
# -----------------------------------------------------------------------------


class TestInitialize:
    """Session start."""

    @pytest.mark.asyncio
    async def test_initialize_seeds_context(self, mock_engine: MagicMock):
        controller = SessionController(VirtualFileSystem(), mock_engine)
        assert controller.ready is False

        assert await controller.initialize() is True
        assert controller.ready is True
        mock_engine.create_session.assert_called_once()
        context = mock_engine.create_session.call_args.args[0]
        assert "The user's current directory is '~'." in context
        assert controller.vfs.serialize() in context
        assert controller.context_generation == 0

    @pytest.mark.asyncio
    async def test_initialize_failure_keeps_input_disabled(self, mock_engine: MagicMock):
        mock_engine.create_session.side_effect = RuntimeError("no credentials")
        controller = SessionController(VirtualFileSystem(), mock_engine)

        assert await controller.initialize() is False
        assert controller.ready is False

        outcome = await controller.submit("ls")
        assert outcome.kind is OutcomeKind.NOT_READY
        mock_engine.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commands_before_initialize_not_ready(self, mock_engine: MagicMock):
        controller = SessionController(VirtualFileSystem(), mock_engine)

        for line in ("ls", "cd documents"):
            outcome = await controller.submit(line)
            assert outcome.kind is OutcomeKind.NOT_READY
            assert controller.state is SessionState.IDLE

        assert controller.vfs.current_path == ["~"]
        mock_engine.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_prompt(self, controller: SessionController):
        assert controller.prompt == "user@tutor:~$"

    @pytest.mark.asyncio
    async def test_custom_prompt(self, mock_engine: MagicMock):
        controller = SessionController(
            VirtualFileSystem(), mock_engine, prompt_user="ada", prompt_host="lab"
        )
        assert controller.prompt == "ada@lab:~$"


# -----------------------------------------------------------------------------
# Navigation
# -----------------------------------------------------------------------------


class TestNavigation:
    """Locally resolved cd."""

    @pytest.mark.asyncio
    async def test_cd_documents(self, controller: SessionController, mock_engine: MagicMock):
        outcome = await controller.submit("cd documents")

        assert outcome.kind is OutcomeKind.NAVIGATED
        assert outcome.cwd == ["~", "documents"]
        assert outcome.warning is None
        assert controller.prompt == "user@tutor:~/documents$"
        assert controller.state is SessionState.IDLE
        mock_engine.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_context_follows_directory(self, controller: SessionController):
        await controller.submit("cd documents")
        assert controller.session is not None
        assert "current directory is '~/documents'" in controller.session.system_instruction
        assert controller.context_generation == 1

    @pytest.mark.asyncio
    async def test_cd_into_file_fails(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        await controller.submit("cd images")
        session_before = controller.session
        calls_before = mock_engine.create_session.call_count

        outcome = await controller.submit("cd report.docx")

        assert outcome.kind is OutcomeKind.NO_SUCH_DIRECTORY
        assert outcome.is_error
        assert outcome.output == "bash: cd: report.docx: No such file or directory"
        assert outcome.cwd == ["~", "images"]
        assert controller.session is session_before
        assert mock_engine.create_session.call_count == calls_before

    @pytest.mark.asyncio
    async def test_cd_past_root(self, controller: SessionController):
        await controller.submit("cd images")
        outcome = await controller.submit("cd ../../..")
        assert outcome.cwd == ["~"]

    @pytest.mark.asyncio
    async def test_cd_music_round_trip(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        for line in ("cd music", "cd ..", "cd music"):
            outcome = await controller.submit(line)
            assert outcome.kind is OutcomeKind.NAVIGATED

        assert controller.vfs.current_path == ["~", "music"]
        assert controller.context_generation == 3
        # one session from initialize, one per directory change
        assert mock_engine.create_session.call_count == 4

    @pytest.mark.asyncio
    async def test_cd_dot_keeps_session(self, controller: SessionController):
        session = controller.session
        outcome = await controller.submit("cd .")
        assert outcome.kind is OutcomeKind.NAVIGATED
        assert controller.session is session
        assert controller.context_generation == 0

    @pytest.mark.asyncio
    async def test_cd_without_argument_goes_home(self, controller: SessionController):
        await controller.submit("cd images")
        outcome = await controller.submit("cd")
        assert outcome.cwd == ["~"]

    @pytest.mark.asyncio
    async def test_cd_argument_with_spaces(self, mock_engine: MagicMock):
        vfs = VirtualFileSystem(build_tree({"my docs": {"a.txt": None}}))
        controller = SessionController(vfs, mock_engine)
        await controller.initialize()

        outcome = await controller.submit("cd   my   docs")
        assert outcome.cwd == ["~", "my docs"]

    @pytest.mark.asyncio
    async def test_context_sync_failure_keeps_navigation(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        session = controller.session
        mock_engine.create_session.side_effect = RuntimeError("service unavailable")

        outcome = await controller.submit("cd documents")

        assert outcome.kind is OutcomeKind.NAVIGATED
        assert outcome.warning == CONTEXT_SYNC_WARNING
        assert controller.vfs.current_path == ["~", "documents"]
        assert controller.session is session
        assert controller.context_stale is True

    @pytest.mark.asyncio
    async def test_context_sync_retried_on_next_cd(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        mock_engine.create_session.side_effect = RuntimeError("service unavailable")
        await controller.submit("cd documents")

        mock_engine.create_session.side_effect = (
            lambda context: ChatSession(system_instruction=context)
        )
        outcome = await controller.submit("cd .")

        assert outcome.warning is None
        assert controller.context_stale is False
        assert "'~/documents'" in controller.session.system_instruction

    @pytest.mark.asyncio
    async def test_custom_navigation_command(self, mock_engine: MagicMock):
        controller = SessionController(
            VirtualFileSystem(), mock_engine, navigation_command="chdir"
        )
        await controller.initialize()

        outcome = await controller.submit("chdir music")
        assert outcome.kind is OutcomeKind.NAVIGATED

        outcome = await controller.submit("cd music")
        assert outcome.kind is OutcomeKind.RESPONSE
        assert controller.vfs.current_path == ["~", "music"]


# -----------------------------------------------------------------------------
# Remote Commands
# -----------------------------------------------------------------------------


class TestRemoteCommands:
    """Commands forwarded to the response engine."""

    @pytest.mark.asyncio
    async def test_empty_input_ignored(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        for line in ("", "   ", "\t"):
            outcome = await controller.submit(line)
            assert outcome.kind is OutcomeKind.IGNORED
        mock_engine.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_command_forwarded_verbatim(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        outcome = await controller.submit("  ls -la  ")

        assert outcome.kind is OutcomeKind.RESPONSE
        assert outcome.command == "ls -la"
        assert outcome.output == "documents  images  music  file1.txt"
        mock_engine.send.assert_awaited_once_with(controller.session, "ls -la")
        assert controller.state is SessionState.IDLE

    @pytest.mark.asyncio
    async def test_remote_error(self, controller: SessionController, mock_engine: MagicMock):
        mock_engine.send.side_effect = RemoteCallError("quota exceeded")

        outcome = await controller.submit("pwd")

        assert outcome.kind is OutcomeKind.REMOTE_ERROR
        assert outcome.output == "Error: quota exceeded"
        assert controller.state is SessionState.IDLE
        assert controller.vfs.current_path == ["~"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_recovers(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        mock_engine.send.side_effect = TimeoutError("timed out")

        outcome = await controller.submit("pwd")

        assert outcome.kind is OutcomeKind.REMOTE_ERROR
        assert controller.state is SessionState.IDLE

    @pytest.mark.asyncio
    async def test_uses_session_after_navigation(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        await controller.submit("cd images")
        await controller.submit("ls")

        session = mock_engine.send.await_args.args[0]
        assert "'~/images'" in session.system_instruction


class TestBusyState:
    """At most one remote call in flight."""

    @staticmethod
    def _gate(mock_engine: MagicMock) -> asyncio.Event:
        release = asyncio.Event()

        async def slow_send(session, command):
            await release.wait()
            return f"output of {command}"

        mock_engine.send.side_effect = slow_send
        return release

    @staticmethod
    async def _wait_until_busy(controller: SessionController) -> None:
        while not controller.busy:
            await asyncio.sleep(0)

    @pytest.mark.asyncio
    async def test_input_dropped_while_awaiting(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        release = self._gate(mock_engine)
        task = asyncio.create_task(controller.submit("ls"))
        await self._wait_until_busy(controller)

        assert controller.state is SessionState.AWAITING_RESPONSE
        assert (await controller.submit("pwd")).kind is OutcomeKind.BUSY
        assert (await controller.submit("cd documents")).kind is OutcomeKind.BUSY
        assert controller.vfs.current_path == ["~"]

        release.set()
        outcome = await task

        assert outcome.kind is OutcomeKind.RESPONSE
        assert outcome.output == "output of ls"
        assert mock_engine.send.await_count == 1
        assert controller.state is SessionState.IDLE

        # dropped input is not replayed; new input is accepted again
        assert (await controller.submit("pwd")).kind is OutcomeKind.RESPONSE
        assert mock_engine.send.await_count == 2

    @pytest.mark.asyncio
    async def test_inflight_call_keeps_issue_time_context(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        release = self._gate(mock_engine)
        original = controller.session
        task = asyncio.create_task(controller.submit("ls"))
        await self._wait_until_busy(controller)

        controller.change_directory("documents")
        release.set()
        await task

        issued_with = mock_engine.send.await_args.args[0]
        assert issued_with is original
        assert "current directory is '~'." in issued_with.system_instruction
        assert controller.session is not original

    @pytest.mark.asyncio
    async def test_cancellation_returns_to_idle(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        self._gate(mock_engine)
        task = asyncio.create_task(controller.submit("sleep 100"))
        await self._wait_until_busy(controller)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert controller.state is SessionState.IDLE


# -----------------------------------------------------------------------------
# Guides
# -----------------------------------------------------------------------------


class TestGuide:
    """Tutorial requests."""

    @pytest.mark.asyncio
    async def test_guide(self, controller: SessionController, mock_engine: MagicMock):
        result = await controller.guide("  copy a file  ")

        assert result.ok
        assert result.goal == "copy a file"
        assert result.markdown.startswith("# Steps")
        mock_engine.generate_guide.assert_awaited_once_with("copy a file")

    @pytest.mark.asyncio
    async def test_empty_goal_ignored(
        self, controller: SessionController, mock_engine: MagicMock
    ):
        result = await controller.guide("   ")
        assert not result.ok
        assert result.error is None
        mock_engine.generate_guide.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guide_failure(self, controller: SessionController, mock_engine: MagicMock):
        mock_engine.generate_guide.side_effect = RemoteCallError("rate limited")

        result = await controller.guide("list hidden files")

        assert result.error == GUIDE_FAILURE_MESSAGE
        assert result.markdown is None

    @pytest.mark.asyncio
    async def test_guide_does_not_touch_path(self, controller: SessionController):
        await controller.submit("cd music")
        await controller.guide("make a directory")
        assert controller.vfs.current_path == ["~", "music"]
