"""Command line entry point.

Usage::

    cmdsweep [options] -- <command template ...> [++ name:values ...]

Example::

    cmdsweep --concurrency 2 --output results.json \\
        -- neutron lbaas-loadbalancer-create --name lb%{x} %{y} \\
        ++ x:1-5 y:private-subnet,public-subnet
"""

from __future__ import annotations

import functools
import logging
import shutil
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cmdsweep.config import Settings, check_environment
from cmdsweep.errors import (
    CmdsweepError,
    ConfigurationError,
    ExecutableNotFoundError,
    TemplateError,
    ValueSpecError,
)
from cmdsweep.execution.operations import plan_commands
from cmdsweep.execution.orchestrator import run_all
from cmdsweep.execution.runner import run_command
from cmdsweep.reporting import build_summary_table, results_to_json, write_results
from cmdsweep.templates.templating import find_placeholders
from cmdsweep.templates.values import parse_variable_definitions

logger = logging.getLogger("cmdsweep")

VARIABLES_MARKER = "++"

USAGE = (
    "Usage:\n\n"
    "    cmdsweep [options] -- <command and arguments> [++ variable-definition ...]\n\n"
    "Example:\n\n"
    "    cmdsweep --output /dev/stdout \\\n"
    "        -- neutron lbaas-loadbalancer-create --name lb%{x} %{y} \\\n"
    "        ++ x:1-5 y:private-subnet,public-subnet\n"
)

app = typer.Typer(
    add_completion=False,
    help="Expand a command template over value lists and run every combination.",
)

_err_console = Console(stderr=True)


def split_command_line(tokens: list[str]) -> tuple[list[str], list[str]]:
    """Split positional tokens into template tokens and variable definitions."""
    if VARIABLES_MARKER in tokens:
        i = tokens.index(VARIABLES_MARKER)
        return tokens[:i], tokens[i + 1 :]
    return list(tokens), []


def _configure_logging(level: str) -> None:
    handler = RichHandler(console=_err_console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("cmdsweep")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False


def _load_settings(**overrides) -> Settings:
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


@app.command()
def main(
    command: Optional[List[str]] = typer.Argument(
        None, help="Command template after '--', then '++' and name:values definitions."
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", help="Number of commands run at the same time."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the JSON report here instead of stdout."
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds between status checks."
    ),
    poll_timeout: Optional[float] = typer.Option(
        None, "--poll-timeout", help="Give up checking a resource after this many seconds."
    ),
    max_attempts: Optional[int] = typer.Option(
        None, "--max-attempts", help="Give up checking a resource after this many checks."
    ),
    command_timeout: Optional[float] = typer.Option(
        None, "--command-timeout", help="Kill a command running longer than this."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the expanded commands without running them."
    ),
    skip_env_check: bool = typer.Option(
        False, "--skip-env-check", help="Do not require cloud credentials in the environment."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Expand the command template and run every resulting command."""
    try:
        settings = _load_settings(
            concurrency=concurrency,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
            poll_max_attempts=max_attempts,
            command_timeout=command_timeout,
            log_level=log_level,
        )
        _configure_logging(settings.log_level)
        _run(settings, command or [], output=output, dry_run=dry_run, skip_env_check=skip_env_check)
    except (ConfigurationError, TemplateError, ValueSpecError) as e:
        _err_console.print(f"[red]{escape(str(e))}[/red]")
        _err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(2)
    except CmdsweepError as e:
        _err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def _run(
    settings: Settings,
    tokens: list[str],
    *,
    output: Path | None,
    dry_run: bool,
    skip_env_check: bool,
) -> None:
    template_tokens, definitions = split_command_line(tokens)
    if not template_tokens:
        raise TemplateError("No command template given")

    template = " ".join(template_tokens)
    logger.info("Command template: %s", template)

    variables = parse_variable_definitions(definitions, find_placeholders(template))
    for name, values in variables.items():
        logger.info("%15s: %s", name, values)

    planned = plan_commands(template, variables)
    if dry_run:
        for p in planned:
            typer.echo(p.command)
        return

    if not skip_env_check:
        missing = check_environment(settings.required_env)
        if missing:
            _err_console.print(
                f"No {', '.join(missing)} environment found. "
                "Execute `source <path/to/openrc>` first!",
                markup=False,
            )
            raise typer.Exit(1)

    executable = shutil.which(template_tokens[0])
    if executable is None:
        raise ExecutableNotFoundError(template_tokens[0])
    logger.info("%s command: %s", template_tokens[0], executable)
    logger.info("concurrency number: %d", settings.concurrency)

    runner = functools.partial(
        run_command,
        extra_args=settings.format_args,
        timeout=settings.command_timeout,
    )
    results = run_all(
        planned,
        runner=runner,
        policy=settings.poll_policy(),
        concurrency=settings.concurrency,
    )

    if output is not None:
        write_results(results, output)
        logger.info("Results written to %s", output)
    else:
        typer.echo(results_to_json(results))
    _err_console.print(build_summary_table(results))


def run() -> None:
    app()
