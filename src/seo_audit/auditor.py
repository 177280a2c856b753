"""
Audit orchestration.

One run goes through these stages, each reading from and writing to an
explicit RunContext:

1. Per-page analysis (templates, or live pages in live mode), fanned out
   over a thread pool and joined before anything else runs
2. Technical artifact checks and route redirect hints
3. Cross-page aggregation over the complete digest set
4. Scoring
5. Fixes written back to templates (fix mode only)
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from seo_audit.aggregator import ProjectAggregator
from seo_audit.config import AuditConfig, resolve_base_url
from seo_audit.crawlability import TechnicalArtifactChecker
from seo_audit.fetcher import FetchedPage, fetch_live_pages
from seo_audit.fixer import FixEngine
from seo_audit.models import (
    AnalysisDigest,
    AuditResult,
    AuditSummary,
    PageReport,
    ProjectIssue,
)
from seo_audit.normalizer import normalize_template
from seo_audit.page_analyzer import PageAnalyzer
from seo_audit.routes import extract_static_routes, find_redirect_hints, guess_route
from seo_audit.scoring import score_issues, score_project
from seo_audit.sources import PageSource, iter_view_sources

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """State of one audit run. Pages are keyed by report path."""

    config: AuditConfig
    base_url: Optional[str] = None
    reports: Dict[str, PageReport] = field(default_factory=dict)
    digests: Dict[str, AnalysisDigest] = field(default_factory=dict)
    sources: Dict[str, PageSource] = field(default_factory=dict)
    project_issues: List[ProjectIssue] = field(default_factory=list)

    def record_page(self, report: PageReport, digest: AnalysisDigest) -> None:
        if report.path in self.reports:
            raise ValueError(f"Page analyzed twice: {report.path}")
        self.reports[report.path] = report
        self.digests[report.path] = digest


class SEOAuditor:
    """Runs a complete audit of one project."""

    def __init__(self, config: AuditConfig):
        """Initialize the auditor.

        Args:
            config: Run configuration
        """
        self.config = config
        self.fix_engine = FixEngine()

    def run(self) -> AuditResult:
        """Audit the project.

        Returns:
            AuditResult with page reports in path order and project issues
        """
        layout = self.config.layout
        context = RunContext(
            config=self.config,
            base_url=resolve_base_url(layout, self.config.base_url_override),
        )
        logger.info(
            f"Auditing {layout.root} (base URL: {context.base_url or 'unknown'}, "
            f"fix mode: {self.config.fix_mode}, live mode: {self.config.live_mode})"
        )

        routes_source = self._read_routes_file()
        analyzer = PageAnalyzer(self.config.thresholds, context.base_url)

        if self.config.live_mode:
            self._analyze_live_pages(context, analyzer, routes_source)
        else:
            self._analyze_templates(context, analyzer)

        checker = TechnicalArtifactChecker(layout.public_dir, context.base_url, self.config.fix_mode)
        context.project_issues.extend(checker.analyze())
        context.project_issues.extend(find_redirect_hints(routes_source))

        aggregator = ProjectAggregator(self.config.thresholds)
        context.project_issues.extend(aggregator.aggregate(context.reports, context.digests))

        for report in context.reports.values():
            report.score = score_issues(report.issues)

        if self.config.fix_mode and not self.config.live_mode:
            self._apply_fixes(context)

        return self._build_result(context)

    # ------------------------------------------------------------------
    # Page analysis
    # ------------------------------------------------------------------

    def _analyze_templates(self, context: RunContext, analyzer: PageAnalyzer) -> None:
        sources = list(iter_view_sources(self.config.layout.views_dir))
        logger.info(f"Analyzing {len(sources)} templates with {self.config.workers} workers")

        results: Dict[str, Tuple[PageReport, AnalysisDigest]] = {}
        with ThreadPoolExecutor(max_workers=max(1, self.config.workers)) as executor:
            future_to_path = {
                executor.submit(self._analyze_template, analyzer, source): source.path
                for source in sources
            }

            for future in as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    results[path] = future.result()
                except Exception as e:
                    logger.error(f"Failed to analyze {path}: {type(e).__name__}: {e}")

        # Join barrier: everything below sees the complete page set
        for source in sources:
            if source.path in results:
                context.record_page(*results[source.path])
                context.sources[source.path] = source

    @staticmethod
    def _analyze_template(analyzer: PageAnalyzer, source: PageSource) -> Tuple[PageReport, AnalysisDigest]:
        html = normalize_template(source.content)
        return analyzer.analyze(source.path, html, guess_route(source.relative_path))

    def _analyze_live_pages(
        self,
        context: RunContext,
        analyzer: PageAnalyzer,
        routes_source: Optional[str],
    ) -> None:
        if not context.base_url:
            logger.warning("Live mode needs a base URL (APP_URL or --app-url); no pages analyzed")
            return

        routes = extract_static_routes(routes_source)
        logger.info(f"Fetching {len(routes)} static routes from {context.base_url}")
        pages: List[FetchedPage] = fetch_live_pages(
            context.base_url,
            routes,
            timeout=self.config.fetch_timeout,
            max_concurrent=self.config.max_concurrent,
            user_agent=self.config.user_agent,
        )

        for page in pages:
            context.record_page(*analyzer.analyze(page.url, page.html, page.route))

    def _read_routes_file(self) -> Optional[str]:
        routes_file = self.config.layout.routes_file
        try:
            return routes_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No readable routes file at {routes_file}: {e}")
            return None

    # ------------------------------------------------------------------
    # Fixes and results
    # ------------------------------------------------------------------

    def _apply_fixes(self, context: RunContext) -> None:
        """Rewrite each template in place; one file at a time."""
        changed = 0
        for path, report in context.reports.items():
            source = context.sources.get(path)
            if source is None:
                continue

            updated, fixes = self.fix_engine.apply(source.content, report.issues)
            report.fixes_applied = fixes
            if updated == source.content:
                continue

            try:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(updated)
            except OSError as e:
                logger.error(f"Failed to write fixes to {path}: {e}")
                continue

            changed += 1
            logger.info(f"Applied {len(fixes)} fixes to {path}")

        logger.info(f"Fix mode: rewrote {changed} templates")

    @staticmethod
    def _build_result(context: RunContext) -> AuditResult:
        files = list(context.reports.values())
        summary = AuditSummary(
            files_scanned=len(files),
            files_with_issues=sum(1 for report in files if report.issues),
            total_issues=sum(len(report.issues) for report in files) + len(context.project_issues),
            project_score=score_project([report.score for report in files], context.project_issues),
        )
        logger.info(
            f"Audit complete: {summary.files_scanned} files, {summary.total_issues} issues, "
            f"project score {summary.project_score}"
        )
        return AuditResult(summary=summary, files=files, project_issues=context.project_issues)


def run_audit(config: AuditConfig) -> AuditResult:
    """Convenience wrapper: ``SEOAuditor(config).run()``."""
    return SEOAuditor(config).run()
