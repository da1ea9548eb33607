"""Rendering of command results: JSON report and a console summary."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from rich.table import Table
from rich.text import Text

from cmdsweep.execution.runner import CommandResult


def results_to_json(results: Sequence[CommandResult]) -> str:
    return json.dumps([r.to_dict() for r in results], indent=2)


def write_results(results: Sequence[CommandResult], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(results_to_json(results) + "\n", encoding="utf-8")
    return path


def build_summary_table(results: Sequence[CommandResult]) -> Table:
    """One row per command: exit code, timings and check outcome."""
    table = Table(title="Command Results")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Command", style="cyan")
    table.add_column("Exit", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Check", style="white")

    for r in results:
        exit_style = "green" if r.ok else "red"
        table.add_row(
            str(r.seqnum),
            Text(r.command),
            f"[{exit_style}]{r.exitcode}[/{exit_style}]",
            f"{r.duration:.2f}s",
            f"{r.checked_duration:.2f}s" if r.checked else "-",
            Text(_outcome(r)),
        )
    return table


def _outcome(result: CommandResult) -> str:
    if result.checked:
        return result.checked
    lines = result.error.strip().splitlines()
    return lines[-1] if lines else ""
