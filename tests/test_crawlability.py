"""Tests for robots.txt and sitemap checks."""

import xml.etree.ElementTree as ET

import pytest

from seo_audit.crawlability import (
    TechnicalArtifactChecker,
    robots_placeholder,
    sitemap_placeholder,
)
from seo_audit.models import Severity

BASE_URL = "https://example.com"

VALID_SITEMAP = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url>
    <loc>https://example.com/</loc>
    <lastmod>2024-01-01</lastmod>
    <changefreq>weekly</changefreq>
    <priority>0.8</priority>
  </url>
</urlset>
"""


@pytest.fixture
def public_dir(tmp_path):
    path = tmp_path / "public"
    path.mkdir()
    return path


def kinds(issues):
    return [issue.kind for issue in issues]


def check(public_dir, base_url=BASE_URL, fix_mode=False):
    return TechnicalArtifactChecker(public_dir, base_url, fix_mode).analyze()


class TestRobotsTxt:
    """Test cases for robots.txt checks."""

    def test_valid_robots(self, public_dir):
        (public_dir / "robots.txt").write_text(robots_placeholder(BASE_URL))
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)

        assert check(public_dir) == []

    def test_missing_robots_without_fix(self, public_dir):
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)
        issues = check(public_dir)

        assert kinds(issues) == ["missing_robots"]
        assert issues[0].severity == Severity.ERROR
        assert not (public_dir / "robots.txt").exists()

    def test_missing_robots_with_fix(self, public_dir):
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)
        issues = check(public_dir, fix_mode=True)

        assert kinds(issues) == ["missing_robots", "robots_created"]
        assert issues[1].severity == Severity.SUGGESTION
        content = (public_dir / "robots.txt").read_text()
        assert "User-agent: *" in content
        assert "Sitemap: https://example.com/sitemap.xml" in content

    def test_fix_without_base_url_uses_placeholder(self, public_dir):
        check(public_dir, base_url=None, fix_mode=True)

        assert "Sitemap: TODO" in (public_dir / "robots.txt").read_text()

    def test_missing_directives(self, public_dir):
        (public_dir / "robots.txt").write_text("Disallow: /admin\n")
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)

        assert kinds(check(public_dir)) == ["robots_missing_user_agent", "robots_missing_sitemap"]

    def test_disallow_all_for_wildcard(self, public_dir):
        (public_dir / "robots.txt").write_text(
            "User-agent: *\nDisallow: /\n\nSitemap: https://example.com/sitemap.xml\n"
        )
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)

        issues = check(public_dir)
        assert kinds(issues) == ["robots_disallow_all"]
        assert issues[0].severity == Severity.WARNING

    def test_disallow_all_for_named_agent_only(self, public_dir):
        (public_dir / "robots.txt").write_text(
            "User-agent: BadBot\nDisallow: /\n\n"
            "User-agent: *\nDisallow: /admin\n\n"
            "Sitemap: https://example.com/sitemap.xml\n"
        )
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)

        assert check(public_dir) == []

    def test_sitemap_mismatch(self, public_dir):
        (public_dir / "robots.txt").write_text("User-agent: *\nDisallow:\n\nSitemap: https://old.example.org/sitemap.xml\n")
        (public_dir / "sitemap.xml").write_text(VALID_SITEMAP)

        issues = check(public_dir)
        assert kinds(issues) == ["robots_sitemap_mismatch"]
        assert issues[0].details["appUrl"] == BASE_URL

        assert check(public_dir, base_url=None) == []


class TestSitemaps:
    """Test cases for sitemap checks."""

    @pytest.fixture(autouse=True)
    def robots(self, public_dir):
        (public_dir / "robots.txt").write_text(robots_placeholder(BASE_URL))

    def test_missing_sitemap(self, public_dir):
        issues = check(public_dir)

        assert kinds(issues) == ["missing_sitemap"]
        assert issues[0].severity == Severity.ERROR

    def test_missing_sitemap_with_fix(self, public_dir):
        issues = check(public_dir, fix_mode=True)

        assert kinds(issues) == ["missing_sitemap", "sitemap_created"]
        root = ET.fromstring((public_dir / "sitemap.xml").read_text())
        ns = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
        assert root.find("sm:url/sm:loc", ns).text == "https://example.com/"
        assert root.find("sm:url/sm:changefreq", ns).text == "weekly"
        assert root.find("sm:url/sm:priority", ns).text == "0.8"

        # A second run finds the placeholder valid
        assert check(public_dir) == []

    def test_placeholder_date(self):
        assert "<lastmod>2024-05-01</lastmod>" in sitemap_placeholder(BASE_URL, today="2024-05-01")
        assert "<loc>TODO</loc>" in sitemap_placeholder(None, today="2024-05-01")

    def test_invalid_xml_continues(self, public_dir):
        (public_dir / "sitemap-broken.xml").write_text("<urlset><url></urlset>")
        (public_dir / "sitemap_index.xml").write_text(VALID_SITEMAP)

        issues = check(public_dir)
        assert kinds(issues) == ["invalid_sitemap_xml"]
        assert issues[0].details["path"].endswith("sitemap-broken.xml")

    def test_url_entries(self, public_dir):
        (public_dir / "sitemap.xml").write_text(
            '<?xml version="1.0"?>\n'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            "  <url><lastmod>2024-01-01</lastmod><changefreq>daily</changefreq><priority>1.0</priority></url>\n"
            "  <url><loc>https://elsewhere.test/a</loc></url>\n"
            "</urlset>\n"
        )

        issues = check(public_dir)
        assert kinds(issues) == [
            "sitemap_missing_loc",
            "sitemap_loc_mismatch",
            "sitemap_missing_lastmod",
            "sitemap_missing_changefreq",
            "sitemap_missing_priority",
        ]
        assert issues[1].details == {"loc": "https://elsewhere.test/a", "appUrl": BASE_URL}

    def test_sitemap_without_namespace(self, public_dir):
        (public_dir / "sitemap.xml").write_text(
            "<urlset><url><loc>https://example.com/</loc><lastmod>2024-01-01</lastmod>"
            "<changefreq>daily</changefreq><priority>1.0</priority></url></urlset>"
        )

        assert check(public_dir) == []

    def test_multiple_sitemaps_need_index(self, public_dir):
        (public_dir / "sitemap-posts.xml").write_text(VALID_SITEMAP)
        (public_dir / "sitemap-pages.xml").write_text(VALID_SITEMAP)

        issues = check(public_dir)
        assert kinds(issues) == ["missing_sitemap_index"]
        assert issues[0].details == {"entries": ["sitemap-pages.xml", "sitemap-posts.xml"]}

        (public_dir / "sitemap-index.xml").write_text(VALID_SITEMAP)
        assert check(public_dir) == []
