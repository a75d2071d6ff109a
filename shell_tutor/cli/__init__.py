"""
Command-Line Interface

CLI commands for shell-tutor.

Commands:
    shell-tutor run          - Interactive simulated terminal
    shell-tutor guide GOAL   - Step-by-step tutorial for a goal
    shell-tutor tree         - Show the simulated file system
    shell-tutor config-init  - Write a default configuration file

Usage:
    # Start a session (needs OPENAI_API_KEY, read from .env too)
    shell-tutor run

    # Ask for a tutorial
    shell-tutor guide "find all .txt files"

    # Show the tree as seen from ~/images
    shell-tutor tree --cwd images
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from shell_tutor.cli.render import render_cost_report, render_guide, render_outcome, render_tree
from shell_tutor.config.settings import TutorConfig
from shell_tutor.errors import InitializationError, NoSuchDirectoryError
from shell_tutor.filesystem.seed import load_tree_file
from shell_tutor.filesystem.vfs import VirtualFileSystem
from shell_tutor.session.controller import SessionController
from shell_tutor.types.results import CommandOutcome
from shell_tutor.utils.cost_telemetry import CostCollector, telemetry_collector

__all__ = ["main", "app"]

app = typer.Typer(
    name="shell-tutor",
    help="Practice Linux terminal commands in a simulated, AI-driven shell",
    no_args_is_help=True,
)
console = Console()

ConfigOption = typer.Option(
    None,
    "--config", "-c",
    help="TOML configuration file (default: $SHELL_TUTOR_CONFIG_FILE)",
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def _load_config(config_path: Path | None) -> TutorConfig:
    load_dotenv()
    if config_path is None and (env_path := os.getenv("SHELL_TUTOR_CONFIG_FILE")):
        config_path = Path(env_path)
    if config_path is not None:
        return TutorConfig.from_file(config_path)
    return TutorConfig()


def _build_vfs(config: TutorConfig) -> VirtualFileSystem:
    if config.tree_file:
        return VirtualFileSystem(load_tree_file(config.tree_file))
    return VirtualFileSystem()


def build_controller(config: TutorConfig) -> SessionController:
    """
    Wire the file system, provider and engine for one session.

    Raises:
        InitializationError: Missing API key, unsupported provider, or a
            collaborator could not be constructed
    """
    from shell_tutor.engine.llm_engine import LLMResponseEngine
    from shell_tutor.providers.llm.openai import OpenAILLMProvider

    api_key = config.require_api_key()
    try:
        vfs = _build_vfs(config)
        llm = OpenAILLMProvider(api_key=api_key, model=config.llm_model)
    except (OSError, ValueError) as e:
        raise InitializationError(str(e)) from e

    engine = LLMResponseEngine(
        llm,
        guide_llm=llm.with_model(config.guide_model),
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens,
        guide_max_tokens=config.guide_max_tokens,
        history_turns=config.llm_history_turns,
    )
    return SessionController(
        vfs,
        engine,
        navigation_command=config.navigation_command,
        prompt_user=config.prompt_user,
        prompt_host=config.prompt_host,
    )


def _controller_or_exit(config: TutorConfig) -> SessionController:
    try:
        return build_controller(config)
    except InitializationError as e:
        console.print(Panel(f"[red]{escape(str(e))}[/]", title="Configuration Error"))
        raise typer.Exit(code=1)


def _collector(config: TutorConfig) -> CostCollector | None:
    if not config.cost_debug:
        return None
    return CostCollector(warn_threshold_usd=config.cost_debug_warn_threshold_usd)


@app.command()
def run(
    config_path: Optional[Path] = ConfigOption,
    cost_debug: bool = typer.Option(
        False,
        "--cost-debug",
        help="Print estimated API cost when the session ends",
    ),
    verbose: bool = VerboseOption,
) -> None:
    """Start an interactive simulated terminal session."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    if cost_debug:
        config = config.with_overrides(cost_debug=True)
    controller = _controller_or_exit(config)
    collector = _collector(config)

    # Input is read outside runner.run(); Ctrl-C at the prompt raises KeyboardInterrupt
    with telemetry_collector(collector), asyncio.Runner() as runner:
        console.print("Initializing AI Tutor...")
        if not runner.run(controller.initialize()):
            console.print(
                "[red]Critical Error: Could not initialize AI model. "
                "Please check your API key and network connection.[/]"
            )
            raise typer.Exit(code=1)

        console.print("AI Tutor initialized. Type a command, or press Ctrl-D to quit.")
        while True:
            try:
                line = console.input(f"[bold green]{escape(controller.prompt)}[/] ")
                outcome = _submit(runner, controller, line, config.navigation_command)
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            render_outcome(console, outcome)

    if collector is not None:
        render_cost_report(console, collector.summary())


def _submit(
    runner: asyncio.Runner,
    controller: SessionController,
    line: str,
    navigation_command: str,
) -> CommandOutcome:
    tokens = line.split()
    if tokens and tokens[0] != navigation_command:
        with console.status("Thinking..."):
            return runner.run(controller.submit(line))
    return runner.run(controller.submit(line))


@app.command()
def guide(
    goal: str = typer.Argument(..., help="What you want to learn to do"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Get a step-by-step tutorial for a terminal task."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    controller = _controller_or_exit(config)

    async def _run() -> None:
        with console.status("Thinking..."):
            result = await controller.guide(goal)
        render_guide(console, result)
        if result.error:
            raise typer.Exit(code=1)

    asyncio.run(_run())


@app.command()
def tree(
    cwd: str = typer.Option("~", "--cwd", help="Directory to highlight"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Show the simulated file system."""
    config = _load_config(config_path)
    try:
        vfs = _build_vfs(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Could not load tree: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    try:
        vfs.change_directory(cwd)
    except NoSuchDirectoryError as e:
        console.print(f"[red]No such directory: {escape(e.path)}[/]")
        raise typer.Exit(code=1)
    render_tree(console, vfs)


@app.command("config-init")
def config_init(
    path: Path = typer.Argument(Path("shell-tutor.toml"), help="Where to write the file"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        console.print(f"[yellow]{escape(str(path))} already exists (use --force to overwrite)[/]")
        raise typer.Exit(code=1)
    TutorConfig().to_file(path)
    console.print(f"[green]Wrote {escape(str(path))}[/]")


def main() -> None:
    """Entry point for the CLI."""
    app()
