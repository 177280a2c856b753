"""Social meta tag checks for Open Graph and Twitter Cards."""

from typing import List, Optional

from bs4 import Tag

from seo_audit.constants import RECOMMENDED_OG, REQUIRED_OG, REQUIRED_TWITTER
from seo_audit.dom import attr_text, line_of, select_first
from seo_audit.models import Issue, Severity


class SocialMetaAnalyzer:
    """Checks a page's <head> for Open Graph and Twitter Card tags."""

    def __init__(
        self,
        required_og: Optional[List[str]] = None,
        recommended_og: Optional[List[str]] = None,
        required_twitter: Optional[List[str]] = None,
    ):
        """Initialize analyzer with configurable property lists.

        Args:
            required_og: Open Graph properties that must carry content
            recommended_og: Open Graph properties that should be present
            required_twitter: Twitter Card names that should carry content
        """
        self.required_og = required_og or REQUIRED_OG
        self.recommended_og = recommended_og or RECOMMENDED_OG
        self.required_twitter = required_twitter or REQUIRED_TWITTER

    def analyze(self, head: Optional[Tag]) -> List[Issue]:
        """Check Open Graph and Twitter Card tags.

        Args:
            head: The page's <head> element, or None if it has none

        Returns:
            Issues found, in check order
        """
        issues: List[Issue] = []
        self._check_open_graph(head, issues)
        self._check_twitter(head, issues)
        return issues

    def _check_open_graph(self, head: Optional[Tag], issues: List[Issue]) -> None:
        for prop in self.required_og:
            tag = select_first(head, "meta", property=prop)
            if not attr_text(tag, "content"):
                issues.append(Issue(
                    kind="missing_og",
                    severity=Severity.ERROR,
                    message=f"Missing OpenGraph {prop}.",
                    details={"property": prop},
                    line=line_of(tag),
                ))

        # An absent og:type falls back to "website"; an empty one is broken markup
        og_type = select_first(head, "meta", property="og:type")
        if og_type is None:
            issues.append(Issue(
                kind="missing_og",
                severity=Severity.WARNING,
                message="Missing OpenGraph og:type.",
                details={"property": "og:type"},
            ))
        elif not attr_text(og_type, "content"):
            issues.append(Issue(
                kind="missing_og",
                severity=Severity.ERROR,
                message="OpenGraph og:type is empty.",
                details={"property": "og:type"},
                line=line_of(og_type),
            ))

        for prop in self.recommended_og:
            tag = select_first(head, "meta", property=prop)
            if not attr_text(tag, "content"):
                suffix = prop.split(":", 1)[1]
                issues.append(Issue(
                    kind=f"missing_og_{suffix}",
                    severity=Severity.SUGGESTION,
                    message=f"Missing {prop}.",
                ))

    def _check_twitter(self, head: Optional[Tag], issues: List[Issue]) -> None:
        for name in self.required_twitter:
            tag = select_first(head, "meta", {"name": name})
            if not attr_text(tag, "content"):
                issues.append(Issue(
                    kind="missing_twitter",
                    severity=Severity.WARNING,
                    message=f"Missing Twitter {name}.",
                    details={"name": name},
                    line=line_of(tag),
                ))

        site = select_first(head, "meta", {"name": "twitter:site"})
        if not attr_text(site, "content"):
            issues.append(Issue(
                kind="missing_twitter_site",
                severity=Severity.SUGGESTION,
                message="Missing twitter:site.",
            ))
