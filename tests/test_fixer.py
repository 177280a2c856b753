"""Tests for the placeholder fix engine."""

from seo_audit.fixer import FixEngine, line_at
from seo_audit.models import Issue, Severity
from seo_audit.normalizer import normalize_template
from seo_audit.page_analyzer import PageAnalyzer


def issue(kind, **details):
    return Issue(kind=kind, severity=Severity.ERROR, message=kind, details=details)


def apply(source, *found):
    return FixEngine().apply(source, list(found))


HEAD_ONLY = '<html>\n<head>\n<meta charset="utf-8">\n</head>\n<body></body>\n</html>'


class TestLineAt:
    """Test cases for line_at."""

    def test_lines(self):
        text = "a\nb\nc"
        assert line_at(text, 0) == 1
        assert line_at(text, 2) == 2
        assert line_at(text, len(text)) == 3


class TestImageAlts:
    """Test cases for image alt placeholders."""

    def test_only_images_without_alt_attribute(self):
        source = '<div>\n<img src="a.png">\n<img src="b.png" alt="">\n<IMG SRC="c.png">\n</div>'
        updated, fixes = apply(source, issue("img_missing_alt"))

        assert '<img alt="TODO: describe image" src="a.png">' in updated
        assert '<img src="b.png" alt="">' in updated
        assert '<img alt="TODO: describe image" SRC="c.png">' in updated
        assert [(fix.kind, fix.line) for fix in fixes] == [("img_alt", 2), ("img_alt", 4)]

    def test_no_issue_no_change(self):
        source = '<img src="a.png">'
        assert apply(source) == (source, [])

    def test_blade_arrow_does_not_end_the_tag(self):
        source = (
            "<html><head><title>Post</title></head><body>\n"
            '<img src="{{ $post->image }}" alt="Cover of the post">\n'
            '<img src="{{ $post->thumb }}">\n'
            "</body></html>"
        )
        report, _ = PageAnalyzer().analyze("post.blade.php", normalize_template(source))
        updated, fixes = FixEngine().apply(source, report.issues)

        assert updated.count('alt="') == 2
        assert '<img src="{{ $post->image }}" alt="Cover of the post">' in updated
        assert '<img alt="TODO: describe image" src="{{ $post->thumb }}">' in updated
        assert [(fix.kind, fix.line) for fix in fixes if fix.kind == "img_alt"] == [("img_alt", 3)]

    def test_bare_alt_attribute_left_alone(self):
        source = '<img src="a.png" alt>'
        assert apply(source, issue("img_missing_alt")) == (source, [])


class TestTitle:
    """Test cases for <title> placeholders."""

    def test_inserted_after_head(self):
        updated, fixes = apply(HEAD_ONLY, issue("missing_title"))

        assert updated.startswith("<html>\n<head>\n    <title>TODO</title>\n<meta")
        assert fixes[0].kind == "title"
        assert fixes[0].detail == "Inserted <title> placeholder."
        assert fixes[0].line == 2

    def test_empty_title_filled(self):
        updated, fixes = apply("<head><title>  </title></head>", issue("missing_title"))

        assert updated == "<head><title>TODO</title></head>"
        assert fixes[0].detail == "Filled empty <title> placeholder."

    def test_no_head_skips_insertion(self):
        source = "<header>\n<img src='x.png'>\n</header>"
        updated, fixes = apply(source, issue("missing_title"), issue("img_missing_alt"))

        assert "<title>" not in updated
        assert [fix.kind for fix in fixes] == ["img_alt"]

    def test_body_svg_title_does_not_count(self):
        source = (
            "<html>\n<head>\n<meta charset=\"utf-8\">\n</head>\n<body>\n"
            "<svg><title>Menu</title></svg>\n</body>\n</html>"
        )
        report, _ = PageAnalyzer().analyze("menu.blade.php", normalize_template(source))
        assert report.has_issue("missing_title")

        updated, fixes = FixEngine().apply(source, report.issues)

        assert "title" in [fix.kind for fix in fixes]
        assert "    <title>TODO</title>\n" in updated
        assert updated.index("<title>TODO</title>") < updated.index("</head>")
        assert "<svg><title>Menu</title></svg>" in updated


class TestHeadTags:
    """Test cases for meta description and canonical placeholders."""

    def test_empty_description_filled(self):
        source = '<head>\n<meta name="description" content="">\n</head>'
        updated, fixes = apply(source, issue("missing_meta_description"))

        assert '<meta name="description" content="TODO">' in updated
        assert fixes[0].kind == "meta_description"
        assert fixes[0].line == 2

    def test_description_without_content_attribute(self):
        source = '<head><meta name="description"></head>'
        updated, _ = apply(source, issue("missing_meta_description"))

        assert '<meta content="TODO" name="description">' in updated

    def test_description_inserted(self):
        updated, fixes = apply(HEAD_ONLY, issue("missing_meta_description"))

        assert '<meta name="description" content="TODO">' in updated
        assert fixes[0].detail == "Inserted meta description placeholder."

    def test_canonical_inserted(self):
        updated, fixes = apply(HEAD_ONLY, issue("missing_canonical"))

        assert '<link rel="canonical" href="{{ url()->current() }}">' in updated
        assert fixes[0].kind == "canonical"

    def test_filled_tag_left_alone(self):
        source = '<head><link rel="canonical" href="https://example.com/"></head>'
        assert apply(source, issue("missing_canonical")) == (source, [])

    def test_interpolated_values_are_not_refilled(self):
        source = (
            '<head>\n<meta name="description" content="{{ $post->summary }}">\n'
            '<link rel="canonical" href="{{ $post->url() }}">\n</head>'
        )
        assert apply(source, issue("missing_meta_description"), issue("missing_canonical")) == (source, [])

    def test_tags_outside_head_are_ignored(self):
        source = (
            '<html>\n<head>\n</head>\n<body>\n'
            '<meta name="description" content="">\n</body>\n</html>'
        )
        updated, fixes = apply(source, issue("missing_meta_description"))

        assert fixes[0].detail == "Inserted meta description placeholder."
        assert '<head>\n    <meta name="description" content="TODO">' in updated
        assert '<body>\n<meta name="description" content="">' in updated


class TestSocialTags:
    """Test cases for OpenGraph and Twitter placeholders."""

    def test_only_reported_properties_are_added(self):
        source = '<head>\n<meta property="og:title" content="Hi">\n</head>'
        updated, fixes = apply(source, issue("missing_og", property="og:image"))

        assert '<meta property="og:image" content="TODO">' in updated
        assert "og:description" not in updated
        assert '<meta property="og:title" content="Hi">' in updated
        assert [fix.kind for fix in fixes] == ["opengraph"]

    def test_og_type_placeholder(self):
        updated, _ = apply(HEAD_ONLY, issue("missing_og", property="og:type"))
        assert '<meta property="og:type" content="website">' in updated

    def test_twitter_tags(self):
        updated, fixes = apply(
            HEAD_ONLY,
            issue("missing_twitter", name="twitter:card"),
            issue("missing_twitter", name="twitter:title"),
        )

        assert '<meta name="twitter:card" content="summary_large_image">' in updated
        assert '<meta name="twitter:title" content="TODO">' in updated
        assert len(fixes) == 2

    def test_interpolated_og_content_kept(self):
        source = '<head><meta property="og:title" content="{{ $post->title }}"></head>'
        assert apply(source, issue("missing_og", property="og:title")) == (source, [])


class TestFixEngineReuse:
    """Test cases for running one engine over several pages."""

    def test_calls_are_independent(self):
        engine = FixEngine()
        engine.apply(HEAD_ONLY, [issue("missing_title")])

        updated, fixes = engine.apply('<img src="a.png">', [issue("img_missing_alt")])

        assert updated == '<img alt="TODO: describe image" src="a.png">'
        assert [fix.kind for fix in fixes] == ["img_alt"]


class TestFixRoundTrip:
    """Test cases for fixing a template and auditing it again."""

    SOURCE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title></title>
    <meta name="description" content="">
    <meta property="og:title" content="">
</head>
<body>
    <h1>{{ $title }}</h1>
    <img src="/hero.png">
</body>
</html>
"""

    def fix(self, source):
        report, _ = PageAnalyzer().analyze("page.blade.php", normalize_template(source))
        return FixEngine().apply(source, report.issues)

    def test_second_pass_finds_nothing_to_fix(self):
        updated, fixes = self.fix(self.SOURCE)

        kinds = {fix.kind for fix in fixes}
        assert kinds == {"img_alt", "title", "meta_description", "canonical", "opengraph", "twitter"}

        again, more = self.fix(updated)
        assert more == []
        assert again == updated

    def test_unrelated_text_is_preserved(self):
        updated, _ = self.fix(self.SOURCE)

        assert "<h1>{{ $title }}</h1>" in updated
        assert updated.endswith("</body>\n</html>\n")
