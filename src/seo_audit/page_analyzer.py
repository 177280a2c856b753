"""
Page Analyzer

Evaluates the on-page rule set against one normalized template (or one live
page) and produces its PageReport plus the AnalysisDigest the project
aggregator consumes:
- heading hierarchy, title, meta description, robots meta, canonical
- OpenGraph / Twitter Cards (via SocialMetaAnalyzer)
- images, anchors, content volume
- JSON-LD (via StructuredDataAnalyzer), hreflang, mixed content
- canonical path versus the view's guessed route (heuristic)
"""

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from seo_audit.config import AuditThresholds
from seo_audit.constants import (
    DYNAMIC_SENTINEL,
    DYNAMIC_WORD,
    GENERIC_ALT_TEXT,
    GENERIC_ANCHOR_TEXT,
    HEADING_TAGS,
    STOP_WORDS,
    VECTOR_IMAGE_SUFFIXES,
)
from seo_audit.dom import (
    attr,
    attr_text,
    collapse_whitespace,
    line_of,
    parse_html,
    raw_text_of,
    select_all,
    select_first,
    text_of,
)
from seo_audit.models import AnalysisDigest, Issue, PageReport, PageStats, Severity
from seo_audit.routes import is_internal_href, normalize_path
from seo_audit.social_analyzer import SocialMetaAnalyzer
from seo_audit.structured_data import StructuredDataAnalyzer, find_json_ld_blocks

logger = logging.getLogger(__name__)

ABSOLUTE_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9\s]")
SLUG_PATTERN = re.compile(r"[A-Z_]")

NOOP_HREFS = frozenset({"#", "javascript:void(0)", "javascript:void(0);", "javascript:;"})


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    if not text:
        return ""
    return collapse_whitespace(NON_ALNUM_PATTERN.sub(" ", text.lower()))


def tokenize(text: Optional[str]) -> List[str]:
    """Content tokens of ``text`` in order, stop words removed."""
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [token for token in normalized.split(" ") if token and token not in STOP_WORDS]


def count_words(text: str) -> int:
    return len(text.split())


def _is_seo_url_node(tag: Tag) -> bool:
    """Canonical links, og:* meta tags and JSON-LD scripts."""
    if tag.name == "link":
        return "canonical" in (tag.get("rel") or [])
    if tag.name == "meta":
        return (attr(tag, "property") or "").startswith("og:")
    if tag.name == "script":
        return attr(tag, "type") == "application/ld+json"
    return False


class PageAnalyzer:
    """Runs every on-page check for one page."""

    def __init__(
        self,
        thresholds: Optional[AuditThresholds] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize the page analyzer.

        Args:
            thresholds: Analysis thresholds (defaults used if omitted)
            base_url: Site base URL without trailing slash, if known
        """
        self.thresholds = thresholds or AuditThresholds()
        self.base_url = base_url
        self.social_analyzer = SocialMetaAnalyzer()
        self.structured_data_analyzer = StructuredDataAnalyzer()

    def analyze(
        self,
        path: str,
        html: str,
        guessed_route: Optional[str] = None,
    ) -> Tuple[PageReport, AnalysisDigest]:
        """Analyze one page.

        Args:
            path: Report path (template file path or fetched URL)
            html: Normalized HTML
            guessed_route: Route the page is believed to render at

        Returns:
            Tuple of (PageReport, AnalysisDigest)
        """
        report = PageReport(path=path, guessed_route=guessed_route)
        soup = parse_html(html)
        head = select_first(soup, "head")
        body = select_first(soup, "body")

        self._check_headings(soup, report)
        title_text = self._check_title(head, report)
        description = self._check_meta_description(head, report)
        self._check_robots_meta(head, report)
        canonical_href = self._check_canonical(head, report)

        for issue in self.social_analyzer.analyze(head):
            report.add_issue(issue)

        self._check_images(soup, report)
        internal_links = self._check_links(soup, report)

        visible_text = text_of(body) if body is not None else text_of(soup)
        visible_text = visible_text.replace(DYNAMIC_SENTINEL, DYNAMIC_WORD)
        self._check_content(visible_text, html, report)

        self._check_structured_data(soup, report)
        self._check_hreflang(soup, report)
        self._check_mixed_content(soup, report)
        self._check_canonical_path(canonical_href, report)

        tokens = tokenize(visible_text)[: self.thresholds.max_digest_tokens]
        digest = AnalysisDigest(
            tokens=frozenset(tokens),
            word_count=report.stats.word_count,
            internal_links=tuple(internal_links),
            title_key=normalize_text(title_text),
            description_key=normalize_text(description),
            guessed_route=guessed_route,
        )

        logger.debug(f"Analyzed {path}: {len(report.issues)} issues, {report.stats.word_count} words")
        return report, digest

    # ------------------------------------------------------------------
    # Head checks
    # ------------------------------------------------------------------

    def _check_headings(self, soup: BeautifulSoup, report: PageReport) -> None:
        h1s = select_all(soup, "h1")
        report.stats.h1_count = len(h1s)
        if not h1s:
            report.add_issue(Issue(
                kind="missing_h1",
                severity=Severity.ERROR,
                message="No <h1> found.",
            ))
        elif len(h1s) > 1:
            report.add_issue(Issue(
                kind="multiple_h1",
                severity=Severity.WARNING,
                message="More than one <h1> found.",
                line=line_of(h1s[1]),
            ))

        headings = select_all(soup, HEADING_TAGS)
        if not headings:
            return

        levels = [int(heading.name[1]) for heading in headings]
        if levels[0] > 1:
            report.add_issue(Issue(
                kind="heading_starts_not_h1",
                severity=Severity.ERROR,
                message="First heading is not H1.",
                line=line_of(headings[0]),
            ))

        for i in range(1, len(levels)):
            if levels[i] - levels[i - 1] > 1:
                report.add_issue(Issue(
                    kind="heading_jump",
                    severity=Severity.WARNING,
                    message="Heading level jumps more than one.",
                    details={"from": levels[i - 1], "to": levels[i]},
                    line=line_of(headings[i]),
                ))

    def _check_title(self, head: Optional[Tag], report: PageReport) -> str:
        title = select_first(head, "title")
        title_text = text_of(title)
        if not title_text:
            report.add_issue(Issue(
                kind="missing_title",
                severity=Severity.ERROR,
                message="Missing or empty <title>.",
                line=line_of(title),
            ))
        return title_text

    def _check_meta_description(self, head: Optional[Tag], report: PageReport) -> str:
        meta = select_first(head, "meta", {"name": "description"})
        content = attr_text(meta, "content")
        if not content:
            report.add_issue(Issue(
                kind="missing_meta_description",
                severity=Severity.ERROR,
                message="Missing meta description.",
                line=line_of(meta),
            ))
        elif not (self.thresholds.meta_description_min <= len(content) <= self.thresholds.meta_description_max):
            report.add_issue(Issue(
                kind="meta_description_length",
                severity=Severity.SUGGESTION,
                message=(
                    f"Meta description length is outside "
                    f"{self.thresholds.meta_description_min}-{self.thresholds.meta_description_max} characters."
                ),
                details={"length": len(content)},
                line=line_of(meta),
            ))
        return content

    def _check_robots_meta(self, head: Optional[Tag], report: PageReport) -> None:
        meta = select_first(head, "meta", {"name": "robots"})
        content = attr_text(meta, "content").lower()
        if "noindex" in content or "nofollow" in content:
            report.add_issue(Issue(
                kind="meta_robots_noindex",
                severity=Severity.WARNING,
                message="meta robots includes noindex/nofollow.",
                details={"content": content},
                line=line_of(meta),
            ))

    def _check_canonical(self, head: Optional[Tag], report: PageReport) -> str:
        """Validate the canonical link; returns the first canonical href ("" if none)."""
        canonicals = select_all(head, "link", rel="canonical")
        if len(canonicals) > 1:
            report.add_issue(Issue(
                kind="multiple_canonical",
                severity=Severity.ERROR,
                message="Multiple canonical tags found.",
                details={"count": len(canonicals)},
                line=line_of(canonicals[1]),
            ))

        canonical = canonicals[0] if canonicals else None
        href = attr_text(canonical, "href")
        line = line_of(canonical)
        if not href:
            report.add_issue(Issue(
                kind="missing_canonical",
                severity=Severity.ERROR,
                message="Missing canonical link.",
                line=line,
            ))
            return ""

        if not ABSOLUTE_URL_PATTERN.match(href):
            report.add_issue(Issue(
                kind="canonical_not_absolute",
                severity=Severity.ERROR,
                message="Canonical href should be absolute.",
                details={"href": href},
                line=line,
            ))
        if href.startswith("http://"):
            report.add_issue(Issue(
                kind="canonical_http",
                severity=Severity.WARNING,
                message="Canonical uses http://.",
                line=line,
            ))
        if "?" in href:
            report.add_issue(Issue(
                kind="canonical_has_query",
                severity=Severity.SUGGESTION,
                message="Canonical includes query parameters.",
                line=line,
            ))
        if self.base_url and not href.startswith(self.base_url):
            report.add_issue(Issue(
                kind="canonical_base_mismatch",
                severity=Severity.WARNING,
                message="Canonical does not match app URL base.",
                details={"appUrl": self.base_url},
                line=line,
            ))
        return href

    # ------------------------------------------------------------------
    # Body checks
    # ------------------------------------------------------------------

    def _check_images(self, soup: BeautifulSoup, report: PageReport) -> None:
        for img in select_all(soup, "img"):
            line = line_of(img)
            alt = attr_text(img, "alt")
            if not alt:
                report.add_issue(Issue(
                    kind="img_missing_alt",
                    severity=Severity.ERROR,
                    message="Image missing alt.",
                    details={"src": attr_text(img, "src")},
                    line=line,
                ))
            elif alt.lower() in GENERIC_ALT_TEXT:
                report.add_issue(Issue(
                    kind="img_generic_alt",
                    severity=Severity.SUGGESTION,
                    message="Image alt text is too generic.",
                    details={"alt": alt},
                    line=line,
                ))

            src = attr_text(img, "src")
            if (not attr(img, "width") or not attr(img, "height")) and not src.lower().endswith(VECTOR_IMAGE_SUFFIXES):
                report.add_issue(Issue(
                    kind="img_missing_dimensions",
                    severity=Severity.SUGGESTION,
                    message="Image missing width/height.",
                    line=line,
                ))

            if not attr(img, "loading"):
                report.add_issue(Issue(
                    kind="img_missing_lazy",
                    severity=Severity.SUGGESTION,
                    message='Image missing loading="lazy".',
                    line=line,
                ))

    def _check_links(self, soup: BeautifulSoup, report: PageReport) -> List[str]:
        """Check anchors; returns normalized internal link targets in document order."""
        internal_links: List[str] = []

        for anchor in select_all(soup, "a"):
            line = line_of(anchor)
            href = attr_text(anchor, "href")
            raw_text = text_of(anchor)
            has_dynamic = DYNAMIC_SENTINEL in raw_text
            text = collapse_whitespace(raw_text.replace(DYNAMIC_SENTINEL, ""))

            if not text and not has_dynamic:
                report.add_issue(Issue(
                    kind="empty_anchor",
                    severity=Severity.ERROR,
                    message="Anchor has no text.",
                    details={"href": href},
                    line=line,
                ))
            if not href or href.lower() in NOOP_HREFS:
                report.add_issue(Issue(
                    kind="empty_href",
                    severity=Severity.WARNING,
                    message="Anchor href is empty or non-navigable.",
                    line=line,
                ))
            if text and text.lower() in GENERIC_ANCHOR_TEXT:
                report.add_issue(Issue(
                    kind="generic_anchor_text",
                    severity=Severity.SUGGESTION,
                    message="Anchor text is generic.",
                    details={"text": text},
                    line=line,
                ))

            if is_internal_href(href):
                target = normalize_path(href)
                if target:
                    internal_links.append(target)
                if SLUG_PATTERN.search(href):
                    report.add_issue(Issue(
                        kind="non_seo_slug",
                        severity=Severity.SUGGESTION,
                        message="Internal URL contains uppercase letters or underscores.",
                        details={"href": href},
                        line=line,
                    ))

        return internal_links

    def _check_content(self, visible_text: str, html: str, report: PageReport) -> None:
        word_count = count_words(visible_text)
        ratio = len(visible_text) / len(html) if html else 0.0
        report.stats.word_count = word_count
        report.stats.text_html_ratio = round(ratio, 3)

        if word_count < self.thresholds.thin_content_words or ratio < self.thresholds.min_text_html_ratio:
            report.add_issue(Issue(
                kind="thin_content",
                severity=Severity.WARNING,
                message="Thin content detected.",
                details={"wordCount": word_count, "ratio": report.stats.text_html_ratio},
            ))

    # ------------------------------------------------------------------
    # Structured data and URLs
    # ------------------------------------------------------------------

    def _check_structured_data(self, soup: BeautifulSoup, report: PageReport) -> None:
        blocks = find_json_ld_blocks(soup)
        if not blocks and report.stats.word_count >= self.thresholds.structured_data_min_words:
            report.add_issue(Issue(
                kind="missing_json_ld",
                severity=Severity.SUGGESTION,
                message="Consider adding JSON-LD for rich results.",
            ))

        for issue in self.structured_data_analyzer.analyze(blocks):
            report.add_issue(issue)

    def _check_hreflang(self, soup: BeautifulSoup, report: PageReport) -> None:
        alternates = select_all(soup, "link", rel="alternate", hreflang=True)
        if not alternates:
            return
        if not any(attr_text(link, "hreflang") == "x-default" for link in alternates):
            report.add_issue(Issue(
                kind="missing_hreflang_default",
                severity=Severity.WARNING,
                message="hreflang present but missing x-default.",
                details={"languages": [attr_text(link, "hreflang") for link in alternates]},
                line=line_of(alternates[0]),
            ))

    def _check_mixed_content(self, soup: BeautifulSoup, report: PageReport) -> None:
        for node in select_all(soup, _is_seo_url_node):
            value = attr(node, "href") or attr(node, "content") or raw_text_of(node)
            if value and "http://" in value:
                report.add_issue(Issue(
                    kind="mixed_content",
                    severity=Severity.WARNING,
                    message="Found http:// in SEO URL.",
                    details={"element": node.name},
                    line=line_of(node),
                ))

    def _check_canonical_path(self, canonical_href: str, report: PageReport) -> None:
        """Compare the canonical's path with the guessed route. Heuristic only."""
        route = report.guessed_route
        if not self.base_url or not route or route == "/":
            return
        if not canonical_href or not canonical_href.startswith(self.base_url):
            return

        expected = normalize_path(route)
        actual = normalize_path(canonical_href[len(self.base_url):]) or "/"
        if expected and expected != actual:
            report.add_issue(Issue(
                kind="canonical_path_mismatch",
                severity=Severity.SUGGESTION,
                message="Canonical path differs from view path (heuristic).",
                details={"expected": expected, "actual": actual},
            ))
