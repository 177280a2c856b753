"""Cross-page analysis run once every page digest is available."""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from seo_audit.config import AuditThresholds
from seo_audit.models import (
    AnalysisDigest,
    Issue,
    PageReport,
    ProjectIssue,
    RouteTable,
    Severity,
)
from seo_audit.routes import normalize_path, route_depth

logger = logging.getLogger(__name__)


def jaccard(a: frozenset, b: frozenset) -> float:
    """|A ∩ B| / |A ∪ B|, or 0 when either set is empty."""
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0


def build_route_table(digests: Dict[str, AnalysisDigest]) -> RouteTable:
    """Map guessed routes to pages and count inbound internal links.

    When two pages guess the same route the later one wins.
    """
    table = RouteTable()
    for path, digest in digests.items():
        if digest.guessed_route:
            table.route_to_path[digest.guessed_route] = path
            table.inbound[digest.guessed_route] = 0

    for digest in digests.values():
        for link in digest.internal_links:
            target = normalize_path(link)
            if target in table.inbound:
                table.inbound[target] += 1

    return table


class ProjectAggregator:
    """Finds duplicate metadata, weakly linked pages and near-duplicate content."""

    def __init__(self, thresholds: Optional[AuditThresholds] = None):
        self.thresholds = thresholds or AuditThresholds()

    def aggregate(
        self,
        reports: Dict[str, PageReport],
        digests: Dict[str, AnalysisDigest],
    ) -> List[ProjectIssue]:
        """Run every cross-page check.

        Page-scoped findings are appended to the matching report in
        ``reports``; project-scoped findings are returned.

        Args:
            reports: Page reports keyed by path
            digests: Digests keyed by path, complete for the run

        Returns:
            Project issues for duplicate titles and descriptions
        """
        project_issues = self._find_duplicate_metadata(digests)

        table = build_route_table(digests)
        self._check_link_graph(table, reports)

        self._find_near_duplicates(reports, digests)

        logger.info(
            f"Aggregated {len(digests)} pages: {len(project_issues)} duplicate metadata groups, "
            f"{len(table.route_to_path)} known routes"
        )
        return project_issues

    def _find_duplicate_metadata(self, digests: Dict[str, AnalysisDigest]) -> List[ProjectIssue]:
        titles_seen = defaultdict(list)
        descriptions_seen = defaultdict(list)

        for path, digest in digests.items():
            if digest.title_key:
                titles_seen[digest.title_key].append(path)
            if digest.description_key:
                descriptions_seen[digest.description_key].append(path)

        issues: List[ProjectIssue] = []
        for paths in titles_seen.values():
            if len(paths) > 1:
                issues.append(ProjectIssue(
                    kind="duplicate_title",
                    severity=Severity.WARNING,
                    message="Duplicate <title> across views.",
                    details={"files": paths},
                ))

        for paths in descriptions_seen.values():
            if len(paths) > 1:
                issues.append(ProjectIssue(
                    kind="duplicate_meta_description",
                    severity=Severity.WARNING,
                    message="Duplicate meta description across views.",
                    details={"files": paths},
                ))

        return issues

    def _check_link_graph(self, table: RouteTable, reports: Dict[str, PageReport]) -> None:
        for route, count in table.inbound.items():
            if route == "/":
                continue
            report = reports.get(table.route_to_path[route])
            if report is None:
                continue

            if count == 0:
                report.add_issue(Issue(
                    kind="orphan_page",
                    severity=Severity.SUGGESTION,
                    message="Page appears orphaned (no inbound internal links).",
                    details={"path": route},
                ))

            depth = route_depth(route)
            if depth > self.thresholds.deep_page_depth and count < self.thresholds.deep_page_min_inbound:
                report.add_issue(Issue(
                    kind="deep_page",
                    severity=Severity.SUGGESTION,
                    message="Deep page with weak internal linking.",
                    details={"path": route, "depth": depth, "inbound": count},
                ))

    def _find_near_duplicates(
        self,
        reports: Dict[str, PageReport],
        digests: Dict[str, AnalysisDigest],
    ) -> None:
        min_words = self.thresholds.duplicate_content_min_words
        candidates = [
            (path, digest) for path, digest in digests.items()
            if digest.word_count >= min_words
        ]

        for i, (path_a, digest_a) in enumerate(candidates):
            for path_b, digest_b in candidates[i + 1:]:
                similarity = jaccard(digest_a.tokens, digest_b.tokens)
                if similarity <= self.thresholds.duplicate_similarity_threshold:
                    continue

                logger.debug(f"Near-duplicate content: {path_a} ~ {path_b} ({similarity:.2f})")
                for path, other in ((path_a, path_b), (path_b, path_a)):
                    report = reports.get(path)
                    if report is not None:
                        report.add_issue(Issue(
                            kind="duplicate_content",
                            severity=Severity.WARNING,
                            message="Content is highly similar to another view.",
                            details={"other": other, "similarity": round(similarity, 2)},
                        ))
