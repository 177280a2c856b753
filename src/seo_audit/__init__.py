"""SEO auditor for Laravel Blade templates and site artifacts."""

__version__ = "0.1.0"

from seo_audit.auditor import RunContext, SEOAuditor, run_audit
from seo_audit.aggregator import ProjectAggregator, jaccard
from seo_audit.crawlability import TechnicalArtifactChecker
from seo_audit.fixer import FixEngine
from seo_audit.normalizer import normalize_template
from seo_audit.page_analyzer import PageAnalyzer
from seo_audit.scoring import score_issues, score_project
from seo_audit.models import (
    AnalysisDigest,
    AuditResult,
    AuditSummary,
    Fix,
    Issue,
    PageReport,
    PageStats,
    ProjectIssue,
    Severity,
)
from seo_audit.config import AuditConfig, AuditThresholds, settings

__all__ = [
    # Core
    "SEOAuditor",
    "RunContext",
    "run_audit",
    "PageAnalyzer",
    "ProjectAggregator",
    "TechnicalArtifactChecker",
    "FixEngine",
    "normalize_template",
    "jaccard",
    "score_issues",
    "score_project",
    # Models
    "AnalysisDigest",
    "AuditResult",
    "AuditSummary",
    "Fix",
    "Issue",
    "PageReport",
    "PageStats",
    "ProjectIssue",
    "Severity",
    # Config
    "AuditConfig",
    "AuditThresholds",
    "settings",
]
