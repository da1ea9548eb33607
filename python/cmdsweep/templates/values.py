"""Value-list parsing for placeholder definitions.

Supports numeric ranges and comma separated literals, mixed freely::

    1-5
    a,b,c
    1-3,4,6-9,a,b,c
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from cmdsweep.errors import ValueSpecError

logger = logging.getLogger(__name__)

_RANGE_PATTERN = re.compile(r"^([0-9]+)-([0-9]+)$")
_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def parse_values(spec: str) -> list[str]:
    """Parse a comma separated value spec into an ordered list of values.

    ``start-end`` tokens expand to the inclusive integer range, other tokens
    are kept verbatim. An inverted range (``5-1``) contributes no values.

    Raises:
        ValueSpecError: If a range bound cannot be parsed as an integer.
    """
    if not spec:
        return []

    values: list[str] = []
    for token in spec.split(","):
        match = _RANGE_PATTERN.match(token)
        if match is None:
            values.append(token)
            continue

        try:
            start, end = int(match.group(1)), int(match.group(2))
        except ValueError as exc:
            raise ValueSpecError(spec, f"bad range {token!r}") from exc

        if start > end:
            logger.warning("Range %r is inverted and yields no values", token)
        values.extend(str(i) for i in range(start, end + 1))
    return values


def parse_variable_definitions(
    definitions: Iterable[str],
    names: Iterable[str] | None = None,
) -> dict[str, list[str]]:
    """Parse ``name:spec`` definitions into a placeholder -> values mapping.

    Repeated definitions of one name accumulate in order. When *names* is
    given, the result holds exactly those names (an empty list for any name
    never defined) and definitions of other names are ignored.

    Raises:
        ValueSpecError: If a definition has no ``:`` or an invalid name.
    """
    wanted = set(names) if names is not None else None
    variables: dict[str, list[str]] = {name: [] for name in sorted(wanted or ())}

    for definition in definitions:
        name, sep, spec = definition.partition(":")
        if not sep:
            raise ValueSpecError(definition, "expected 'name:values'")
        if not _NAME_PATTERN.match(name):
            raise ValueSpecError(definition, f"invalid placeholder name {name!r}")
        if wanted is not None and name not in wanted:
            logger.debug("Ignoring definition for unused placeholder %s", name)
            continue
        variables.setdefault(name, []).extend(parse_values(spec))

    return variables
