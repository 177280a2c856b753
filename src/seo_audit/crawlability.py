"""
Crawlability Checks

Validates the site-wide technical artifacts served from the public directory:
- robots.txt presence, User-agent and Sitemap directives, disallow-all blocks
- sitemap*.xml presence, well-formedness and per-<url> fields
- sitemap index when several sitemap files exist

In fix mode a missing robots.txt or sitemap.xml is replaced by a minimal
placeholder.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from seo_audit.constants import (
    PLACEHOLDER_TEXT,
    ROBOTS_FILENAME,
    SITEMAP_DEFAULT_CHANGEFREQ,
    SITEMAP_DEFAULT_PRIORITY,
    SITEMAP_FILENAME,
    SITEMAP_NAMESPACE,
    SITEMAP_PREFIX,
    SITEMAP_SUFFIX,
)
from seo_audit.models import ProjectIssue, Severity

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR_PATTERN = re.compile(r"\n\s*\n")
USER_AGENT_PATTERN = re.compile(r"User-agent:", re.IGNORECASE)
SITEMAP_DIRECTIVE_PATTERN = re.compile(r"Sitemap:\s*(\S+)", re.IGNORECASE)
WILDCARD_AGENT_PATTERN = re.compile(r"^[ \t]*User-agent:[ \t]*\*[ \t]*$", re.IGNORECASE | re.MULTILINE)
DISALLOW_ALL_PATTERN = re.compile(r"^[ \t]*Disallow:[ \t]*/[ \t]*$", re.IGNORECASE | re.MULTILINE)

SITEMAP_ENTRY_FIELDS = ("lastmod", "changefreq", "priority")


def robots_placeholder(base_url: Optional[str]) -> str:
    """robots.txt granting full access and pointing at the sitemap."""
    sitemap = f"{base_url}/{SITEMAP_FILENAME}" if base_url else PLACEHOLDER_TEXT
    return f"User-agent: *\nDisallow:\n\nSitemap: {sitemap}\n"


def sitemap_placeholder(base_url: Optional[str], today: Optional[str] = None) -> str:
    """One-entry urlset for the site root."""
    loc = f"{base_url}/" if base_url else PLACEHOLDER_TEXT
    lastmod = today or datetime.now().date().isoformat()
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
        "  <url>\n"
        f"    <loc>{loc}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{SITEMAP_DEFAULT_CHANGEFREQ}</changefreq>\n"
        f"    <priority>{SITEMAP_DEFAULT_PRIORITY}</priority>\n"
        "  </url>\n"
        "</urlset>\n"
    )


def _local_name(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _child_text(element: ET.Element, name: str) -> str:
    child = element.find(f"{{{SITEMAP_NAMESPACE}}}{name}")
    if child is None:
        child = element.find(name)
    if child is None or not child.text:
        return ""
    return child.text.strip()


class TechnicalArtifactChecker:
    """Checks robots.txt and sitemap files of a project's public directory."""

    def __init__(self, public_dir: Path, base_url: Optional[str] = None, fix_mode: bool = False):
        """Initialize the checker.

        Args:
            public_dir: Directory robots.txt and sitemaps are served from
            base_url: Site base URL without trailing slash, if known
            fix_mode: Create placeholder artifacts when they are missing
        """
        self.public_dir = Path(public_dir)
        self.base_url = base_url
        self.fix_mode = fix_mode

    def analyze(self) -> List[ProjectIssue]:
        """Run robots and sitemap checks.

        Returns:
            Project issues, robots findings first
        """
        issues: List[ProjectIssue] = []
        self._check_robots_txt(issues)
        self._check_sitemaps(issues)
        return issues

    # ------------------------------------------------------------------
    # robots.txt
    # ------------------------------------------------------------------

    def _check_robots_txt(self, issues: List[ProjectIssue]) -> None:
        robots_path = self.public_dir / ROBOTS_FILENAME
        try:
            content = robots_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            content = None

        if content is None:
            issues.append(ProjectIssue(
                kind="missing_robots",
                severity=Severity.ERROR,
                message="Missing public/robots.txt",
                details={"path": str(robots_path)},
            ))
            if self.fix_mode and self._write_placeholder(robots_path, robots_placeholder(self.base_url)):
                issues.append(ProjectIssue(
                    kind="robots_created",
                    severity=Severity.SUGGESTION,
                    message="Created placeholder robots.txt.",
                    details={"path": str(robots_path)},
                ))
            return

        self._parse_robots_txt(content, robots_path, issues)

    def _parse_robots_txt(self, content: str, robots_path: Path, issues: List[ProjectIssue]) -> None:
        details = {"path": str(robots_path)}

        if not USER_AGENT_PATTERN.search(content):
            issues.append(ProjectIssue(
                kind="robots_missing_user_agent",
                severity=Severity.ERROR,
                message="robots.txt missing User-agent.",
                details=details,
            ))

        sitemap_urls = SITEMAP_DIRECTIVE_PATTERN.findall(content)
        if not sitemap_urls:
            issues.append(ProjectIssue(
                kind="robots_missing_sitemap",
                severity=Severity.WARNING,
                message="robots.txt missing Sitemap.",
                details=details,
            ))

        # Groups are separated by blank lines
        for block in BLOCK_SEPARATOR_PATTERN.split(content):
            if WILDCARD_AGENT_PATTERN.search(block) and DISALLOW_ALL_PATTERN.search(block):
                issues.append(ProjectIssue(
                    kind="robots_disallow_all",
                    severity=Severity.WARNING,
                    message="robots.txt disallows all for User-agent *.",
                    details=details,
                ))

        if self.base_url:
            for sitemap_url in sitemap_urls:
                if not sitemap_url.startswith(self.base_url):
                    issues.append(ProjectIssue(
                        kind="robots_sitemap_mismatch",
                        severity=Severity.WARNING,
                        message="Sitemap URL in robots.txt does not match app URL base.",
                        details={"appUrl": self.base_url, "sitemap": sitemap_url},
                    ))

    # ------------------------------------------------------------------
    # Sitemaps
    # ------------------------------------------------------------------

    def find_sitemaps(self) -> List[str]:
        """Names of sitemap*.xml files in the public directory, sorted."""
        if not self.public_dir.is_dir():
            return []
        return sorted(
            entry.name for entry in self.public_dir.iterdir()
            if entry.is_file()
            and entry.name.startswith(SITEMAP_PREFIX)
            and entry.name.endswith(SITEMAP_SUFFIX)
        )

    def _check_sitemaps(self, issues: List[ProjectIssue]) -> None:
        entries = self.find_sitemaps()
        if not entries:
            issues.append(ProjectIssue(
                kind="missing_sitemap",
                severity=Severity.ERROR,
                message="No sitemap.xml found in public/.",
                details={"path": str(self.public_dir)},
            ))
            sitemap_path = self.public_dir / SITEMAP_FILENAME
            if self.fix_mode and self._write_placeholder(sitemap_path, sitemap_placeholder(self.base_url)):
                issues.append(ProjectIssue(
                    kind="sitemap_created",
                    severity=Severity.SUGGESTION,
                    message="Created placeholder sitemap.xml.",
                    details={"path": str(sitemap_path)},
                ))
            return

        for name in entries:
            sitemap_path = self.public_dir / name
            try:
                content = sitemap_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable sitemap {sitemap_path}: {e}")
                continue

            try:
                root = ET.fromstring(content)
            except ET.ParseError as e:
                logger.debug(f"Failed to parse sitemap XML {sitemap_path}: {e}")
                issues.append(ProjectIssue(
                    kind="invalid_sitemap_xml",
                    severity=Severity.ERROR,
                    message="Sitemap XML is invalid.",
                    details={"path": str(sitemap_path)},
                ))
                continue

            self._parse_urlset(root, sitemap_path, issues)

        if len(entries) > 1 and not any("index" in name for name in entries):
            issues.append(ProjectIssue(
                kind="missing_sitemap_index",
                severity=Severity.WARNING,
                message="Multiple sitemaps found without index.",
                details={"entries": entries},
            ))

    def _parse_urlset(self, root: ET.Element, sitemap_path: Path, issues: List[ProjectIssue]) -> None:
        """Check every <url> entry of a parsed sitemap."""
        count = 0
        for url_elem in root.iter():
            if _local_name(url_elem.tag) != "url":
                continue
            count += 1

            loc = _child_text(url_elem, "loc")
            if not loc:
                issues.append(ProjectIssue(
                    kind="sitemap_missing_loc",
                    severity=Severity.ERROR,
                    message="Sitemap entry missing <loc>.",
                    details={"path": str(sitemap_path)},
                ))
            elif self.base_url and not loc.startswith(self.base_url):
                issues.append(ProjectIssue(
                    kind="sitemap_loc_mismatch",
                    severity=Severity.WARNING,
                    message="Sitemap URL does not match app URL base.",
                    details={"loc": loc, "appUrl": self.base_url},
                ))

            for name in SITEMAP_ENTRY_FIELDS:
                if not _child_text(url_elem, name):
                    issues.append(ProjectIssue(
                        kind=f"sitemap_missing_{name}",
                        severity=Severity.SUGGESTION,
                        message=f"Sitemap entry missing <{name}>.",
                        details={"path": str(sitemap_path)},
                    ))

        logger.debug(f"Checked {count} URLs in {sitemap_path}")

    def _write_placeholder(self, path: Path, content: str) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to create {path}: {e}")
            return False
        logger.info(f"Created placeholder {path}")
        return True
