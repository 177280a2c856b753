"""Tests for report assembly."""

import json

from seo_audit.models import (
    AuditResult,
    AuditSummary,
    Fix,
    Issue,
    PageReport,
    ProjectIssue,
    Severity,
)
from seo_audit.report import build_report, filter_files, paginate, save_report


def page(path, issue_count=0):
    report = PageReport(path=path, guessed_route="/" + path.split(".")[0])
    for i in range(issue_count):
        report.add_issue(Issue(kind="missing_h1", severity=Severity.ERROR, message="No <h1> found.", line=i + 1))
    report.score = 100 - 10 * issue_count
    return report


def make_result():
    files = [page("about.blade.php", 1), page("blog/index.blade.php"), page("contact.blade.php", 2)]
    return AuditResult(
        summary=AuditSummary(files_scanned=3, files_with_issues=2, total_issues=3, project_score=80),
        files=files,
        project_issues=[ProjectIssue(kind="missing_sitemap", severity=Severity.ERROR, message="sitemap.xml not found.")],
    )


class TestFiltering:
    """Test cases for filter_files and paginate."""

    def test_filter_by_suffix(self):
        files = make_result().files

        assert [f.path for f in filter_files(files, "index.blade.php")] == ["blog/index.blade.php"]
        assert [f.path for f in filter_files(files, "about.blade.php")] == ["about.blade.php"]
        assert filter_files(files, None) == files
        assert filter_files(files, "missing.blade.php") == []

    def test_paginate(self):
        files = make_result().files

        chunk, pagination = paginate(files, 2, 2)
        assert [f.path for f in chunk] == ["contact.blade.php"]
        assert pagination == {"page": 2, "per_page": 2, "total_files": 3, "total_pages": 2}

    def test_paginate_past_the_end(self):
        chunk, pagination = paginate(make_result().files, 5, 2)

        assert chunk == []
        assert pagination["total_pages"] == 2

    def test_paginate_empty(self):
        assert paginate([], 1, 10) == ([], {"page": 1, "per_page": 10, "total_files": 0, "total_pages": 0})


class TestBuildReport:
    """Test cases for build_report."""

    def test_full_report(self):
        result = make_result()
        result.files[0].fixes_applied.append(Fix(kind="title", detail="Inserted <title> placeholder.", line=3))
        report = build_report(result)

        assert report["summary"] == {
            "files_scanned": 3,
            "files_with_issues": 2,
            "total_issues": 3,
            "project_score": 80,
        }
        about = report["files"][0]
        assert about["path"] == "about.blade.php"
        assert about["score"] == 90
        assert about["guessed_path"] == "/about"
        assert about["issues"][0] == {
            "type": "missing_h1",
            "severity": "error",
            "message": "No <h1> found.",
            "details": {},
            "line": 1,
        }
        assert about["fixes_applied"] == [{"type": "title", "detail": "Inserted <title> placeholder.", "line": 3}]
        assert set(about["stats"]) == {"h1_count", "word_count", "text_html_ratio"}
        assert report["project_issues"][0]["type"] == "missing_sitemap"
        assert "pagination" not in report

    def test_compact_report(self):
        report = build_report(make_result(), compact=True)

        assert report["files"][2] == {
            "path": "contact.blade.php",
            "score": 80,
            "guessed_path": "/contact",
            "issues_count": 2,
        }
        assert "project_issues" not in report

    def test_compact_report_with_project_issues(self):
        report = build_report(make_result(), compact=True, include_project_issues=True)
        assert len(report["project_issues"]) == 1

    def test_summary_ignores_filter_and_pages(self):
        report = build_report(make_result(), file_filter="contact.blade.php", page=1, per_page=1)

        assert [f["path"] for f in report["files"]] == ["contact.blade.php"]
        assert report["summary"]["files_scanned"] == 3
        assert report["pagination"] == {"page": 1, "per_page": 1, "total_files": 1, "total_pages": 1}

    def test_per_page_alone_starts_at_first_page(self):
        report = build_report(make_result(), per_page=2)

        assert len(report["files"]) == 2
        assert report["pagination"]["page"] == 1


class TestSaveReport:
    """Test cases for save_report."""

    def test_writes_json(self, tmp_path):
        output = tmp_path / "reports" / "seo.json"
        path = save_report(build_report(make_result(), compact=True), str(output))

        assert path == output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["summary"]["project_score"] == 80
