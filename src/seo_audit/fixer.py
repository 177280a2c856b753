"""
Fix Engine

Applies minimal placeholder fixes to a page's original template source for
issues that have a safe textual remedy: image alt text, <title>, meta
description, canonical link, OpenGraph and Twitter Card tags.

Edits are plain regex rewrites of the raw source; the template is never
re-serialized, so everything outside the edited tags is left byte for byte.
Head tags are only looked for between <head> and </head>, the same place the
page analyzer reads them from.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from seo_audit.constants import (
    CURRENT_URL_EXPRESSION,
    OG_PLACEHOLDERS,
    PLACEHOLDER_ALT,
    PLACEHOLDER_TEXT,
    TWITTER_PLACEHOLDERS,
)
from seo_audit.models import Fix, Issue

logger = logging.getLogger(__name__)

# Quoted values and Blade echoes are consumed whole, so a ">" inside them
# (as in `{{ $post->image }}`) never ends the tag
VALUE = r"""(?:"[^"]*"|'[^']*'|\{\{[\s\S]*?\}\}|\{!![\s\S]*?!!\})"""
TAG_BODY = r"(?:" + VALUE + r"""|[^'">])*"""

TAG_NAME_PATTERN = re.compile(r"<[\w:-]+")
ATTRIBUTE_PATTERN = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(""" + VALUE + r"""|[^\s"'>]+))?"""
)


def _tag_pattern(name: str) -> re.Pattern:
    return re.compile(r"<" + name + r"\b" + TAG_BODY + r">", re.IGNORECASE)


IMG_TAG_PATTERN = _tag_pattern("img")
META_TAG_PATTERN = _tag_pattern("meta")
LINK_TAG_PATTERN = _tag_pattern("link")
HEAD_OPEN_PATTERN = _tag_pattern("head")
HEAD_CLOSE_PATTERN = re.compile(r"</head\s*>", re.IGNORECASE)
TITLE_PATTERN = re.compile(r"<title\b" + TAG_BODY + r">([\s\S]*?)</title\s*>", re.IGNORECASE)


def line_at(text: str, offset: int) -> int:
    """1-based line number of ``offset`` in ``text``."""
    return text.count("\n", 0, offset) + 1


def tag_attributes(tag: str) -> Dict[str, re.Match]:
    """Attributes of an opening tag keyed by lowercased name; first one wins.

    Each match has the name in group 1 and the raw value (quotes included, or
    None for a bare attribute) in group 2.
    """
    opener = TAG_NAME_PATTERN.match(tag)
    start = opener.end() if opener else 0
    attributes: Dict[str, re.Match] = {}
    for match in ATTRIBUTE_PATTERN.finditer(tag, start, len(tag) - 1):
        attributes.setdefault(match.group(1).lower(), match)
    return attributes


def _unquote(raw: Optional[str]) -> str:
    if not raw:
        return ""
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "\"'":
        return raw[1:-1]
    return raw


class TemplateEdit:
    """Edit buffer for one template plus the fixes applied to it."""

    def __init__(self, source: str):
        self.text = source
        self.fixes: List[Fix] = []

    def _record(self, kind: str, detail: str, offset: int) -> None:
        self.fixes.append(Fix(kind=kind, detail=detail, line=line_at(self.text, offset)))

    def head_span(self) -> Optional[Tuple[int, int]]:
        """Offsets of the <head> element's content, or None without a <head>."""
        opener = HEAD_OPEN_PATTERN.search(self.text)
        if opener is None:
            return None
        closer = HEAD_CLOSE_PATTERN.search(self.text, opener.end())
        return opener.end(), closer.start() if closer else len(self.text)

    def find_head_tag(self, pattern: re.Pattern, attribute: str, value: str) -> Optional[re.Match]:
        """First tag in <head> whose ``attribute`` has ``value`` among its tokens."""
        span = self.head_span()
        if span is None:
            return None
        for match in pattern.finditer(self.text, *span):
            found = tag_attributes(match.group(0)).get(attribute)
            if found and value.lower() in _unquote(found.group(2)).lower().split():
                return match
        return None

    def insert_into_head(self, snippet: str, kind: str, detail: str) -> bool:
        span = self.head_span()
        if span is None:
            logger.debug(f"No <head> to insert {kind} placeholder into")
            return False
        index = span[0]
        self.text = f"{self.text[:index]}\n    {snippet}{self.text[index:]}"
        self._record(kind, detail, index)
        return True

    def add_image_alts(self) -> None:
        def add_alt(match: re.Match) -> str:
            tag = match.group(0)
            if "alt" in tag_attributes(tag):
                return tag
            self._record("img_alt", "Inserted alt placeholder.", match.start())
            return f'<img alt="{PLACEHOLDER_ALT}"' + tag[len("<img"):]

        # Only the attribute is inserted, so offsets in the old buffer give the same lines
        self.text = IMG_TAG_PATTERN.sub(add_alt, self.text)

    def fix_title(self) -> None:
        span = self.head_span()
        if span is None:
            logger.debug("No <head> to insert title placeholder into")
            return

        match = TITLE_PATTERN.search(self.text, *span)
        if match is None:
            self.insert_into_head(
                f"<title>{PLACEHOLDER_TEXT}</title>", "title", "Inserted <title> placeholder."
            )
            return
        if match.group(1).strip():
            return

        self._record("title", "Filled empty <title> placeholder.", match.start())
        self.text = self.text[:match.start(1)] + PLACEHOLDER_TEXT + self.text[match.end(1):]

    def fix_head_tag(
        self,
        pattern: re.Pattern,
        selector: Tuple[str, str],
        name: str,
        value: str,
        snippet: str,
        kind: str,
        label: str,
    ) -> None:
        """Fill the matching head tag's empty ``name`` attribute, or insert ``snippet``."""
        match = self.find_head_tag(pattern, *selector)
        if match is None:
            self.insert_into_head(snippet, kind, f"Inserted {label} placeholder.")
            return

        tag = match.group(0)
        existing = tag_attributes(tag).get(name)
        if existing is not None and _unquote(existing.group(2)).strip():
            return

        filled = f'{name}="{value}"'
        if existing is not None:
            tag = tag[:existing.start()] + filled + tag[existing.end():]
        else:
            opener = TAG_NAME_PATTERN.match(tag)
            tag = f"{tag[:opener.end()]} {filled}{tag[opener.end():]}"

        self._record(kind, f"Filled {label} placeholder.", match.start())
        self.text = self.text[:match.start()] + tag + self.text[match.end():]


class FixEngine:
    """Rewrites a template source to add placeholders for fixable issues.

    The engine holds no per-page state; every call edits its own buffer.
    """

    def apply(self, source: str, issues: Iterable[Issue]) -> Tuple[str, List[Fix]]:
        """Apply every fix the page's issues call for.

        Args:
            source: Original (non-normalized) template source
            issues: The page's issues

        Returns:
            Tuple of (updated source, fixes applied in order)
        """
        issues = list(issues)
        kinds = {issue.kind for issue in issues}
        edit = TemplateEdit(source)

        if "img_missing_alt" in kinds:
            edit.add_image_alts()
        if "missing_title" in kinds:
            edit.fix_title()
        if "missing_meta_description" in kinds:
            edit.fix_head_tag(
                META_TAG_PATTERN, ("name", "description"),
                "content", PLACEHOLDER_TEXT,
                snippet=f'<meta name="description" content="{PLACEHOLDER_TEXT}">',
                kind="meta_description", label="meta description",
            )
        if "missing_canonical" in kinds:
            edit.fix_head_tag(
                LINK_TAG_PATTERN, ("rel", "canonical"),
                "href", CURRENT_URL_EXPRESSION,
                snippet=f'<link rel="canonical" href="{CURRENT_URL_EXPRESSION}">',
                kind="canonical", label="canonical",
            )
        if "missing_og" in kinds:
            targets = self._targets(issues, "missing_og", "property", OG_PLACEHOLDERS)
            self._fix_meta_tags(edit, "property", targets, OG_PLACEHOLDERS, "opengraph")
        if "missing_twitter" in kinds:
            targets = self._targets(issues, "missing_twitter", "name", TWITTER_PLACEHOLDERS)
            self._fix_meta_tags(edit, "name", targets, TWITTER_PLACEHOLDERS, "twitter")

        return edit.text, edit.fixes

    @staticmethod
    def _targets(issues: List[Issue], kind: str, key: str, placeholders: Dict[str, str]) -> List[str]:
        """Properties named by the page's issues, else every known property."""
        named = []
        for issue in issues:
            value = issue.details.get(key) if issue.kind == kind else None
            if value and value in placeholders and value not in named:
                named.append(value)
        return named or list(placeholders)

    @staticmethod
    def _fix_meta_tags(
        edit: TemplateEdit,
        key: str,
        targets: List[str],
        placeholders: Dict[str, str],
        kind: str,
    ) -> None:
        for target in targets:
            value = placeholders[target]
            edit.fix_head_tag(
                META_TAG_PATTERN, (key, target),
                "content", value,
                snippet=f'<meta {key}="{target}" content="{value}">',
                kind=kind, label=target,
            )
