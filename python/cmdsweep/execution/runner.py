"""Command runner: execute one concrete command and capture its outcome."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)

FORMAT_ARGS: tuple[str, ...] = ("--format", "json")

# exit code reported when the process never ran to completion
NOT_STARTED = -1


@dataclass
class CommandResult:
    """Outcome of one concrete command, including its completion check."""

    command: str
    seqnum: int = 0
    output: dict[str, Any] = field(default_factory=dict)
    error: str = ""
    exitcode: int = NOT_STARTED
    duration: float = 0.0
    checked: str = ""
    checked_duration: float = 0.0
    check_state: str | None = None

    @property
    def ok(self) -> bool:
        return self.exitcode == 0

    def to_dict(self) -> dict[str, Any]:
        """Render with the field names of the JSON report."""
        return {
            "seqnum": self.seqnum,
            "command": self.command,
            "output": self.output,
            "error": self.error,
            "exitcode": self.exitcode,
            "duration": self.duration,
            "success": self.checked,
            "done_duration": self.checked_duration,
        }


Runner = Callable[[str], CommandResult]


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def parse_output(stdout: str) -> dict[str, Any]:
    """Parse CLI stdout as a JSON object, wrapping anything else as a message."""
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError:
        return {"message": stdout}
    if not isinstance(data, dict):
        return {"message": stdout}
    return data


def run_command(
    command: str,
    *,
    extra_args: Sequence[str] = FORMAT_ARGS,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run *command* as a subprocess and return its result.

    The command is split on whitespace, *extra_args* are appended and the
    process inherits the current environment unless *env* is given.
    Process failures never raise: they are recorded in ``error`` and
    ``exitcode`` so a batch can carry on.
    """
    args = command.split() + list(extra_args)
    result = CommandResult(command=command)

    started = time.monotonic()
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            env=dict(os.environ) if env is None else env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        result.error = f"command timed out after {timeout}s"
    except (OSError, ValueError) as e:
        # ValueError: arguments the OS refuses, e.g. an embedded NUL byte
        result.error = str(e)
    else:
        result.exitcode = completed.returncode
        stdout = _decode(completed.stdout)
        stderr = _decode(completed.stderr)
        if completed.returncode == 0:
            result.output = parse_output(stdout)
            result.error = stderr
        else:
            result.error = f"{stderr}exit status {completed.returncode}"
    result.duration = time.monotonic() - started

    if not result.ok:
        logger.debug("Command %r failed: %s", command, result.error)
    return result
