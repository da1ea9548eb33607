"""cmdsweep templates: placeholder scanning, value lists and expansion."""

from cmdsweep.templates.templating import (
    PLACEHOLDER_PATTERN,
    expand_template,
    expand_templates,
    find_placeholders,
)
from cmdsweep.templates.values import parse_values, parse_variable_definitions

__all__ = [
    "PLACEHOLDER_PATTERN",
    "expand_template",
    "expand_templates",
    "find_placeholders",
    "parse_values",
    "parse_variable_definitions",
]
