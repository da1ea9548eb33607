"""Operation descriptors: what a concrete command does and whether to poll it.

Commands follow the ``<program> <prefix>-<resource>-<verb> ...`` shape of
control-plane CLIs, e.g. ``neutron lbaas-loadbalancer-create --name lb1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from cmdsweep.templates.templating import expand_template

POLLING_VERBS = frozenset({"create", "update"})


@dataclass(frozen=True)
class Operation:
    program: str
    action: str
    resource_type: str | None
    verb: str

    @property
    def requires_polling(self) -> bool:
        return self.resource_type is not None and self.verb in POLLING_VERBS

    def show_command(self, resource_id: str) -> str:
        """Command that reports the provisioning status of *resource_id*."""
        if self.resource_type is None:
            raise ValueError(f"Cannot derive a show command from {self.action!r}")
        prefix = self.action[: -len(self.verb)]
        return f"{self.program} {prefix}show {resource_id}"


def describe_operation(command: str) -> Operation:
    """Build the :class:`Operation` for a concrete command.

    The second whitespace token is split on ``-``; with at least three parts
    the last one is the verb and the ones between the first and the last form
    the resource type. Anything else describes an operation that is never
    polled.
    """
    tokens = command.split()
    program = tokens[0] if tokens else ""
    action = tokens[1] if len(tokens) > 1 else ""

    parts = action.split("-")
    if len(parts) < 3 or not all(parts):
        return Operation(program=program, action=action, resource_type=None, verb=action)
    return Operation(
        program=program,
        action=action,
        resource_type="-".join(parts[1:-1]),
        verb=parts[-1],
    )


@dataclass(frozen=True)
class PlannedCommand:
    """A concrete command ready to run, with its position and ordering key."""

    index: int
    command: str
    operation: Operation
    dependency_key: str


def plan_commands(
    template: str,
    variables: dict[str, list[str]],
    dependency_key: Callable[[str], str] | None = None,
) -> list[PlannedCommand]:
    """Expand *template* and describe every resulting command up front.

    Commands sharing a dependency key are never run concurrently; by default
    the key is the command text itself.
    """
    key_fn = dependency_key or (lambda command: command)
    return [
        PlannedCommand(
            index=i,
            command=command,
            operation=describe_operation(command),
            dependency_key=key_fn(command),
        )
        for i, command in enumerate(expand_template(template, variables))
    ]
