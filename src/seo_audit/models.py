"""Data models for template SEO auditing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """How much an issue costs a page's score."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


# ============================================================================
# Findings
# ============================================================================

@dataclass(frozen=True)
class Issue:
    """A single finding on a page or on the project as a whole."""

    kind: str
    severity: Severity
    message: str
    details: dict = field(default_factory=dict)
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "severity": self.severity.value,
            "message": self.message,
            "details": dict(self.details),
            "line": self.line,
        }


@dataclass(frozen=True)
class ProjectIssue:
    """A finding scoped to the whole project; details may list affected files."""

    kind: str
    severity: Severity
    message: str
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "severity": self.severity.value,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class Fix:
    """One textual edit applied to a page source."""

    kind: str
    detail: str
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {"type": self.kind, "detail": self.detail, "line": self.line}


# ============================================================================
# Page Models
# ============================================================================

@dataclass
class PageStats:
    """Content statistics gathered while analyzing a page."""

    h1_count: int = 0
    word_count: int = 0
    text_html_ratio: float = 0.0  # rounded to 3 decimals

    def to_dict(self) -> dict:
        return {
            "h1_count": self.h1_count,
            "word_count": self.word_count,
            "text_html_ratio": self.text_html_ratio,
        }


@dataclass
class PageReport:
    """Audit result for one page template (or one live route)."""

    path: str
    score: int = 100
    issues: list[Issue] = field(default_factory=list)
    stats: PageStats = field(default_factory=PageStats)
    fixes_applied: list[Fix] = field(default_factory=list)
    guessed_route: Optional[str] = None

    def add_issue(self, issue: Issue) -> None:
        self.issues.append(issue)

    def has_issue(self, kind: str) -> bool:
        return any(issue.kind == kind for issue in self.issues)

    def issues_of(self, kind: str) -> list[Issue]:
        return [issue for issue in self.issues if issue.kind == kind]

    def to_dict(self, compact: bool = False) -> dict:
        data: dict[str, Any] = {
            "path": self.path,
            "score": self.score,
            "guessed_path": self.guessed_route,
        }
        if compact:
            data["issues_count"] = len(self.issues)
            return data

        data["issues"] = [issue.to_dict() for issue in self.issues]
        data["stats"] = self.stats.to_dict()
        data["fixes_applied"] = [fix.to_dict() for fix in self.fixes_applied]
        return data


@dataclass(frozen=True)
class AnalysisDigest:
    """Transient per-page summary consumed only by the project aggregator."""

    tokens: frozenset = frozenset()
    word_count: int = 0
    internal_links: tuple = ()
    title_key: str = ""
    description_key: str = ""
    guessed_route: Optional[str] = None


@dataclass
class RouteTable:
    """Internal link graph derived from every digest's internal links."""

    route_to_path: dict[str, str] = field(default_factory=dict)
    inbound: dict[str, int] = field(default_factory=dict)


# ============================================================================
# Run Models
# ============================================================================

@dataclass
class AuditSummary:
    """Totals for one run."""

    files_scanned: int = 0
    files_with_issues: int = 0
    total_issues: int = 0
    project_score: int = 100

    def to_dict(self) -> dict:
        return {
            "files_scanned": self.files_scanned,
            "files_with_issues": self.files_with_issues,
            "total_issues": self.total_issues,
            "project_score": self.project_score,
        }


@dataclass
class AuditResult:
    """Everything one run produced."""

    summary: AuditSummary
    files: list[PageReport] = field(default_factory=list)
    project_issues: list[ProjectIssue] = field(default_factory=list)
