"""Command template expansion with cartesian product placeholder substitution."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"%\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


def find_placeholders(text: str) -> set[str]:
    """Return the distinct placeholder names used in *text*."""
    return set(PLACEHOLDER_PATTERN.findall(text))


def expand_template(
    template: str,
    variables: dict[str, list[str]],
) -> list[str]:
    """Expand a template string with ``%{var}`` placeholders into all combinations.

    The leftmost placeholder is substituted first, every occurrence of it at
    once, and the result is expanded recursively. The first placeholder seen is
    therefore the outermost loop of the product.

    A placeholder with no values (undeclared, or declared with an empty list)
    prunes every command that would have contained it.

    Args:
        template: A command string with ``%{var}`` placeholders.
        variables: Mapping from placeholder names to ordered value lists.

    Returns:
        List of concrete commands, in nested iteration order.

    Example::

        expand_template("create --name lb%{x}", {"x": ["1", "2"]})
        # => ["create --name lb1", "create --name lb2"]
    """
    empty = sorted(
        name for name in find_placeholders(template) if not variables.get(name)
    )
    if empty:
        logger.warning(
            "Placeholders without values, matching commands are skipped: %s",
            ", ".join(empty),
        )

    results: list[str] = []
    _expand_into(template, variables, results)
    return results


def _expand_into(
    template: str,
    variables: dict[str, list[str]],
    results: list[str],
) -> None:
    match = PLACEHOLDER_PATTERN.search(template)
    if match is None:
        results.append(template)
        return

    token = match.group(0)
    for value in variables.get(match.group(1), []):
        _expand_into(template.replace(token, value), variables, results)


def expand_templates(
    templates: list[str],
    variables: dict[str, list[str]],
) -> list[str]:
    """Apply template expansion to a list of templates.

    Each template is expanded independently, and the results are concatenated.
    Templates without placeholders pass through unchanged.
    """
    results: list[str] = []
    for template in templates:
        results.extend(expand_template(template, variables))
    return results
