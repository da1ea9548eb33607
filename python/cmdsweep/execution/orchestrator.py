"""Orchestrator: drive expanded commands through the runner and poller."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, Union

from cmdsweep.execution.operations import PlannedCommand, describe_operation, plan_commands
from cmdsweep.execution.poller import PollPolicy, check_execution
from cmdsweep.execution.runner import CommandResult, Runner, run_command

logger = logging.getLogger(__name__)

CommandLike = Union[str, PlannedCommand]


def _as_planned(commands: Sequence[CommandLike]) -> list[PlannedCommand]:
    planned = []
    for i, cmd in enumerate(commands):
        if isinstance(cmd, PlannedCommand):
            planned.append(cmd)
        else:
            planned.append(
                PlannedCommand(
                    index=i,
                    command=cmd,
                    operation=describe_operation(cmd),
                    dependency_key=cmd,
                )
            )
    return planned


def run_one(
    planned: PlannedCommand,
    total: int,
    *,
    runner: Runner = run_command,
    policy: PollPolicy | None = None,
    cancel: threading.Event | None = None,
) -> CommandResult:
    """Run a single planned command and, if it succeeded, check its completion."""
    seqnum = planned.index + 1
    logger.info("Command(%d/%d): '%s' starts", seqnum, total, planned.command)

    result = runner(planned.command)
    result.seqnum = seqnum
    logger.info(
        "Command '%s' exits with: %d, executing time: %.3fs",
        result.command,
        result.exitcode,
        result.duration,
    )

    if result.exitcode != 0:
        return result
    return check_execution(
        result, planned.operation, runner=runner, policy=policy, cancel=cancel
    )


def run_all(
    commands: Sequence[CommandLike],
    *,
    runner: Runner = run_command,
    policy: PollPolicy | None = None,
    concurrency: int = 1,
    cancel: threading.Event | None = None,
) -> list[CommandResult]:
    """Run every command and return one result per command, in input order.

    With ``concurrency <= 1`` commands are processed strictly one at a time.
    Otherwise a pool of *concurrency* workers processes groups of commands
    sharing a dependency key, each group serially and in input order.
    """
    planned = _as_planned(commands)
    total = len(planned)

    def run_group(group: list[PlannedCommand]) -> list[tuple[int, CommandResult]]:
        return [
            (p.index, run_one(p, total, runner=runner, policy=policy, cancel=cancel))
            for p in group
        ]

    if concurrency <= 1 or total <= 1:
        return [result for _, result in run_group(planned)]

    groups: dict[str, list[PlannedCommand]] = {}
    for p in planned:
        groups.setdefault(p.dependency_key, []).append(p)

    slots: dict[int, CommandResult] = {}
    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        for finished in pool.map(run_group, groups.values()):
            slots.update(finished)
    return [slots[p.index] for p in planned]


def run_template(
    template: str,
    variables: dict[str, list[str]],
    *,
    dependency_key: Callable[[str], str] | None = None,
    **kwargs,
) -> list[CommandResult]:
    """Expand *template* with *variables* and run the resulting commands."""
    return run_all(plan_commands(template, variables, dependency_key), **kwargs)
