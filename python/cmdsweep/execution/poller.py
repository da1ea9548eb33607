"""Completion poller: wait for asynchronous create/update operations to settle."""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

from cmdsweep.errors import ConfigurationError, PollCancelledError, PollTimeoutError
from cmdsweep.execution.operations import Operation
from cmdsweep.execution.runner import CommandResult, Runner, run_command

logger = logging.getLogger(__name__)

PENDING_PREFIX = "PENDING_"


class CheckState(str, enum.Enum):
    NOT_NEEDED = "not_needed"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED_CHECK = "failed_check"


@dataclass(frozen=True)
class PollPolicy:
    """How often and for how long a resource status is polled.

    ``None`` for *max_attempts* or *timeout* leaves that bound open.
    """

    interval: float = 1.0
    max_attempts: int | None = None
    timeout: float | None = None

    def __post_init__(self):
        if self.interval < 0:
            raise ConfigurationError(f"poll interval must be >= 0, got {self.interval}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ConfigurationError(
                f"max_attempts must be >= 1, got {self.max_attempts}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"poll timeout must be > 0, got {self.timeout}")


@dataclass(frozen=True)
class StatusRecord:
    id: str
    provisioning_status: str

    @classmethod
    def from_output(cls, output: dict[str, Any]) -> StatusRecord:
        return cls(
            id=str(output.get("id", "")),
            provisioning_status=str(output.get("provisioning_status", "")),
        )

    @property
    def pending(self) -> bool:
        return self.provisioning_status.startswith(PENDING_PREFIX)


class _CheckFailed(Exception):
    """The show command itself failed; ends polling without retry."""


def check_execution(
    result: CommandResult,
    operation: Operation,
    *,
    runner: Runner = run_command,
    policy: PollPolicy | None = None,
    cancel: threading.Event | None = None,
) -> CommandResult:
    """Fill ``checked``/``checked_duration`` on a successful command result.

    Show, list and delete operations complete immediately. Create and update
    operations poll the resource's show command until its provisioning status
    leaves ``PENDING_*``. Check failures are recorded, never raised.
    """
    if not operation.requires_polling:
        result.checked = f"{operation.action} done"
        result.check_state = CheckState.NOT_NEEDED.value
        result.checked_duration = result.duration
        return result

    policy = policy or PollPolicy()
    started = time.monotonic()
    resource_id = result.output.get("id")

    if resource_id is None or resource_id == "":
        result.checked = (
            f"Failed to check execution of {result.command}: no id in output"
        )
        result.check_state = CheckState.FAILED_CHECK.value
    else:
        check_cmd = operation.show_command(str(resource_id))
        logger.info("Checking command: %s", check_cmd)
        result.check_state = CheckState.POLLING.value
        try:
            status = _poll_status(check_cmd, runner, policy, cancel)
        except _CheckFailed as e:
            result.checked = f"Failed to check execution of {result.command}: {e}"
            result.check_state = CheckState.FAILED_CHECK.value
        except (PollTimeoutError, PollCancelledError) as e:
            result.checked = f"Stopped checking {result.command}: {e}"
            result.check_state = CheckState.FAILED_CHECK.value
        else:
            result.checked = f"{status.id}: {status.provisioning_status}"
            result.check_state = CheckState.SUCCEEDED.value

    result.checked_duration = (time.monotonic() - started) + result.duration
    logger.info("Check of %r: %s", result.command, result.checked)
    return result


def _poll_status(
    check_cmd: str,
    runner: Runner,
    policy: PollPolicy,
    cancel: threading.Event | None,
) -> StatusRecord:
    """Run *check_cmd* until the status is no longer pending."""
    deadline = None
    if policy.timeout is not None:
        deadline = time.monotonic() + policy.timeout

    attempts = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise PollCancelledError(f"polling cancelled after {attempts} attempts")

        shown = runner(check_cmd)
        attempts += 1
        if not shown.ok:
            raise _CheckFailed(shown.error)

        status = StatusRecord.from_output(shown.output)
        if not status.pending:
            return status
        logger.debug("%s is %s (attempt %d)", status.id, status.provisioning_status, attempts)

        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise PollTimeoutError(
                f"still {status.provisioning_status} after {attempts} attempts"
            )
        if deadline is not None and time.monotonic() + policy.interval >= deadline:
            raise PollTimeoutError(
                f"still {status.provisioning_status} after {policy.timeout}s"
            )
        if policy.interval > 0:
            if cancel is not None:
                cancel.wait(policy.interval)
            else:
                time.sleep(policy.interval)
