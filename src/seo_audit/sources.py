"""Enumerates page templates under a project's views directory."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from seo_audit.constants import TEMPLATE_SUFFIX

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSource:
    """One readable page template."""

    path: str  # report path
    relative_path: str  # relative to the views directory, forward slashes
    content: str


def find_templates(views_dir: Path) -> list[Path]:
    """All template files under ``views_dir``, sorted by path."""
    if not views_dir.is_dir():
        logger.warning(f"Views directory not found: {views_dir}")
        return []
    return sorted(p for p in views_dir.rglob(f"*{TEMPLATE_SUFFIX}") if p.is_file())


def iter_view_sources(views_dir: Path) -> Iterator[PageSource]:
    """Yield every readable template with its text.

    Unreadable files are logged and skipped.

    Args:
        views_dir: Root of the view templates

    Yields:
        PageSource per template, in path order
    """
    for file_path in find_templates(views_dir):
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable template {file_path}: {e}")
            continue

        yield PageSource(
            path=str(file_path),
            relative_path=file_path.relative_to(views_dir).as_posix(),
            content=content,
        )
