"""Minimal DOM query helpers over BeautifulSoup.

The analyzers only ever need to select elements by tag and attribute, read an
attribute, and read normalized text. Everything goes through these helpers so
the rest of the package never touches the parse tree API directly.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from seo_audit.constants import INVISIBLE_TAGS

WHITESPACE_PATTERN = re.compile(r"\s+")


def parse_html(html: str) -> BeautifulSoup:
    """Parse HTML best-effort. html.parser keeps the tree as written (no
    implied <head>/<body>) and records source lines."""
    return BeautifulSoup(html, "html.parser")


def select_first(node: Optional[Tag], tag, attrs: Optional[dict] = None, **kwargs) -> Optional[Tag]:
    if node is None:
        return None
    return node.find(tag, attrs={**(attrs or {}), **kwargs})


def select_all(node: Optional[Tag], tag, attrs: Optional[dict] = None, **kwargs) -> List[Tag]:
    if node is None:
        return []
    return node.find_all(tag, attrs={**(attrs or {}), **kwargs})


def attr(node: Optional[Tag], name: str) -> Optional[str]:
    """Read an attribute; multi-valued attributes are joined with spaces.

    Returns None when the node or the attribute is absent.
    """
    if node is None:
        return None
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def attr_text(node: Optional[Tag], name: str) -> str:
    """Attribute value trimmed, or "" when absent."""
    return (attr(node, name) or "").strip()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def _is_visible(string: NavigableString, root: Tag) -> bool:
    if isinstance(string, PreformattedString):
        return False
    for parent in string.parents:
        if parent.name in INVISIBLE_TAGS:
            return False
        if parent is root:
            break
    return True


def text_of(node: Optional[Tag]) -> str:
    """Visible text of a node with whitespace collapsed.

    Strings are concatenated as written, so inline markup never splits a
    word. Script, style, noscript and template content and comments are
    skipped.
    """
    if node is None:
        return ""
    if isinstance(node, NavigableString):
        return collapse_whitespace(str(node))
    if node.name in INVISIBLE_TAGS:
        return ""
    parts = [
        str(string)
        for string in node.descendants
        if isinstance(string, NavigableString) and _is_visible(string, node)
    ]
    return collapse_whitespace("".join(parts))


def raw_text_of(node: Optional[Tag]) -> str:
    """Raw character content of a node, including script bodies."""
    if node is None:
        return ""
    return "".join(
        str(string)
        for string in node.descendants
        if isinstance(string, NavigableString) and not isinstance(string, PreformattedString)
    )


def line_of(node: Optional[Tag]) -> Optional[int]:
    if node is None:
        return None
    return getattr(node, "sourceline", None)
