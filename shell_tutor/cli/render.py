"""
Rich Rendering

Turns session results into terminal output.

    render_outcome  - one command result (plain text, errors in red, warnings in yellow)
    render_guide    - tutorial markdown in a panel
    render_tree     - simulated tree with the current directory highlighted
    render_cost_report - per-stage cost table
"""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from shell_tutor.filesystem.seed import HOME
from shell_tutor.filesystem.vfs import VirtualFileSystem
from shell_tutor.types.results import (
    CommandOutcome,
    CostDebugReport,
    GuideResult,
    OutcomeKind,
)


def render_outcome(console: Console, outcome: CommandOutcome) -> None:
    """Print one command outcome. Response text is never parsed as markup."""
    if outcome.kind is OutcomeKind.IGNORED:
        return
    if outcome.kind is OutcomeKind.BUSY:
        console.print(Text("A command is still running. Please wait.", style="dim"))
        return

    if outcome.output:
        style = "red" if outcome.is_error or outcome.kind is OutcomeKind.NOT_READY else ""
        console.print(Text(outcome.output, style=style))
    if outcome.warning:
        console.print(Text(outcome.warning, style="yellow"))


def render_guide(console: Console, result: GuideResult) -> None:
    if result.markdown is not None:
        console.print(Panel(Markdown(result.markdown), title=f"Guide: {result.goal}"))
    elif result.error:
        console.print(Text(result.error, style="red"))


def render_tree(console: Console, vfs: VirtualFileSystem) -> None:
    """Print the whole tree; the current directory is highlighted."""
    current = tuple(vfs.current_path)
    root = Tree(_label(HOME + "/", (HOME,) == current, is_root=True))
    _add_children(root, vfs, (HOME,), current)
    console.print(root)


def _label(name: str, active: bool, *, is_root: bool = False, is_dir: bool = True) -> Text:
    icon = "🏠" if is_root else ("📁" if is_dir else "📄")
    style = "bold reverse" if active else ("bold blue" if is_dir else "")
    return Text(f"{icon} {name}", style=style)


def _add_children(
    branch: Tree,
    vfs: VirtualFileSystem,
    segments: tuple[str, ...],
    current: tuple[str, ...],
) -> None:
    for entry in vfs.list_directory(segments):
        child_segments = (*segments, entry.name)
        if entry.is_directory:
            sub = branch.add(_label(entry.name + "/", child_segments == current))
            _add_children(sub, vfs, child_segments, current)
        else:
            branch.add(_label(entry.name, False, is_dir=False))


def render_cost_report(console: Console, report: CostDebugReport) -> None:
    breakdown = report.breakdown
    table = Table(title=f"Estimated Cost (pricing {report.pricing_version})")
    table.add_column("Stage", style="cyan")
    table.add_column("Calls", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("USD", justify="right", style="green")

    for stage in breakdown.by_stage:
        table.add_row(
            stage.stage,
            str(stage.calls),
            str(stage.total_tokens),
            f"{stage.estimated_cost_usd:.6f}",
        )
    table.add_row(
        "total",
        str(breakdown.total_calls),
        str(breakdown.total_tokens),
        f"{breakdown.total_estimated_cost_usd:.6f}",
        style="bold",
    )
    console.print(table)

    for warning in report.warnings:
        console.print(Text(warning, style="yellow"))
