"""Template normalization: turn Blade source into HTML that parses cleanly."""

import re

from seo_audit.constants import DYNAMIC_SENTINEL, TEMPLATE_DIRECTIVES

# Directive plus the remainder of its line; the newline itself is kept so that
# element line numbers in the normalized HTML match the template.
DIRECTIVE_PATTERN = re.compile(
    r"@(?:" + "|".join(TEMPLATE_DIRECTIVES) + r")\b[^\n]*",
    re.IGNORECASE,
)

ESCAPED_ECHO_PATTERN = re.compile(r"\{\{[\s\S]*?\}\}")
RAW_ECHO_PATTERN = re.compile(r"\{!![\s\S]*?!!\}")


def normalize_template(raw: str) -> str:
    """Strip template directives and replace interpolations with a sentinel.

    Unmatched markers are left as they are; this never raises.

    Args:
        raw: Template source

    Returns:
        HTML safe to hand to the parser
    """
    cleaned = DIRECTIVE_PATTERN.sub("", raw)
    cleaned = ESCAPED_ECHO_PATTERN.sub(DYNAMIC_SENTINEL, cleaned)
    return RAW_ECHO_PATTERN.sub(DYNAMIC_SENTINEL, cleaned)
