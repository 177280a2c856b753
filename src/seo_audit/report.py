"""Report assembly: full or compact, single-file filtering and pagination."""

import json
import logging
import math
from pathlib import Path
from typing import List, Optional

from seo_audit.constants import DEFAULT_PER_PAGE
from seo_audit.models import AuditResult, PageReport

logger = logging.getLogger(__name__)


def filter_files(files: List[PageReport], file_filter: Optional[str]) -> List[PageReport]:
    """Reports whose path equals or ends with ``file_filter``."""
    if not file_filter:
        return files
    return [report for report in files if report.path == file_filter or report.path.endswith(file_filter)]


def paginate(files: List[PageReport], page: int, per_page: int) -> tuple:
    """Slice ``files`` to one page.

    Returns:
        Tuple of (page slice, pagination block)
    """
    page = max(1, page)
    per_page = max(1, per_page)
    total_pages = math.ceil(len(files) / per_page) if files else 0
    start = (page - 1) * per_page
    pagination = {
        "page": page,
        "per_page": per_page,
        "total_files": len(files),
        "total_pages": total_pages,
    }
    return files[start:start + per_page], pagination


def build_report(
    result: AuditResult,
    compact: bool = False,
    include_project_issues: bool = False,
    file_filter: Optional[str] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> dict:
    """Build the report object for one run.

    The summary always describes the whole run; filtering and pagination only
    narrow ``files``.

    Args:
        result: Audit result
        compact: Replace each file's issues, stats and fixes with a count
        include_project_issues: Keep project issues in compact mode
        file_filter: Keep only files whose path equals or ends with this
        page: 1-based page of the file list
        per_page: Files per page

    Returns:
        JSON-serializable report dictionary
    """
    files = filter_files(result.files, file_filter)

    pagination = None
    if page is not None or per_page is not None:
        files, pagination = paginate(files, page or 1, per_page or DEFAULT_PER_PAGE)

    report = {
        "summary": result.summary.to_dict(),
        "files": [file_report.to_dict(compact=compact) for file_report in files],
    }
    if not compact or include_project_issues:
        report["project_issues"] = [issue.to_dict() for issue in result.project_issues]
    if pagination is not None:
        report["pagination"] = pagination

    return report


def to_json(report: dict) -> str:
    return json.dumps(report, indent=2, ensure_ascii=False, default=str)


def save_report(report: dict, output_file: str) -> Path:
    """Write the report as JSON, creating parent directories."""
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_json(report))
        f.write("\n")
    logger.info(f"Report saved to {path}")
    return path
