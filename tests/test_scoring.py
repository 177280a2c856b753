"""Tests for page and project scoring."""

from seo_audit.models import Issue, ProjectIssue, Severity
from seo_audit.scoring import score_issues, score_project


def issues(*severities):
    return [Issue(kind="x", severity=severity, message="x") for severity in severities]


class TestScoreIssues:
    """Test cases for score_issues."""

    def test_no_issues(self):
        assert score_issues([]) == 100

    def test_deductions(self):
        assert score_issues(issues(Severity.ERROR)) == 90
        assert score_issues(issues(Severity.WARNING)) == 95
        assert score_issues(issues(Severity.SUGGESTION)) == 98
        assert score_issues(issues(Severity.ERROR, Severity.WARNING, Severity.SUGGESTION)) == 83

    def test_clamped_at_zero(self):
        assert score_issues(issues(*[Severity.ERROR] * 15)) == 0

    def test_non_increasing(self):
        found = []
        previous = score_issues(found)
        for severity in [Severity.SUGGESTION, Severity.ERROR, Severity.WARNING] * 6:
            found.extend(issues(severity))
            current = score_issues(found)
            assert 0 <= current <= previous
            previous = current


class TestScoreProject:
    """Test cases for score_project."""

    def test_mean_rounds_half_up(self):
        assert score_project([90, 85], []) == 88
        assert score_project([91, 90], []) == 91

    def test_project_issues_subtract_their_loss(self):
        project_issues = [ProjectIssue(kind="missing_robots", severity=Severity.ERROR, message="x")]
        assert score_project([90, 85], project_issues) == 78

    def test_no_pages(self):
        assert score_project([], []) == 100
        project_issues = [ProjectIssue(kind="missing_sitemap", severity=Severity.WARNING, message="x")]
        assert score_project([], project_issues) == 95

    def test_clamped(self):
        project_issues = [ProjectIssue(kind="x", severity=Severity.ERROR, message="x")] * 12
        assert score_project([40], project_issues) == 0
