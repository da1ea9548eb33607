"""cmdsweep execution: running commands and waiting for them to settle."""

from cmdsweep.execution.operations import (
    Operation,
    PlannedCommand,
    describe_operation,
    plan_commands,
)
from cmdsweep.execution.orchestrator import run_all, run_one, run_template
from cmdsweep.execution.poller import CheckState, PollPolicy, StatusRecord, check_execution
from cmdsweep.execution.runner import CommandResult, parse_output, run_command

__all__ = [
    "CheckState",
    "CommandResult",
    "Operation",
    "PlannedCommand",
    "PollPolicy",
    "StatusRecord",
    "check_execution",
    "describe_operation",
    "parse_output",
    "plan_commands",
    "run_all",
    "run_command",
    "run_one",
    "run_template",
]
