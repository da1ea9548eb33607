"""cmdsweep: expand a command template and run every combination."""

from cmdsweep.errors import (
    CmdsweepError,
    ConfigurationError,
    ExecutableNotFoundError,
    PollCancelledError,
    PollTimeoutError,
    TemplateError,
    ValueSpecError,
)
from cmdsweep.execution import (
    CheckState,
    CommandResult,
    PollPolicy,
    check_execution,
    plan_commands,
    run_all,
    run_command,
    run_template,
)
from cmdsweep.templates import expand_template, find_placeholders, parse_values

__all__ = [
    "expand_template",
    "find_placeholders",
    "parse_values",
    "plan_commands",
    "run_command",
    "check_execution",
    "run_all",
    "run_template",
    "CheckState",
    "CommandResult",
    "PollPolicy",
    "CmdsweepError",
    "ConfigurationError",
    "ExecutableNotFoundError",
    "PollCancelledError",
    "PollTimeoutError",
    "TemplateError",
    "ValueSpecError",
]
