"""Shared fixtures for the auditor tests."""

import logging

import pytest


COMPLETE_HEAD = """
    <title>{title}</title>
    <meta name="description" content="{description}">
    <link rel="canonical" href="{canonical}">
    <meta property="og:title" content="Field guide">
    <meta property="og:description" content="A field guide to birds.">
    <meta property="og:url" content="{canonical}">
    <meta property="og:type" content="article">
    <meta property="og:image" content="https://example.com/cover.png">
    <meta property="og:locale" content="en_US">
    <meta property="og:site_name" content="Example">
    <meta name="twitter:card" content="summary_large_image">
    <meta name="twitter:title" content="Field guide">
    <meta name="twitter:description" content="A field guide to birds.">
    <meta name="twitter:image" content="https://example.com/cover.png">
    <meta name="twitter:site" content="@example">
"""

# Inside the recommended 120-160 character range
DEFAULT_DESCRIPTION = (
    "A practical field guide to common garden birds, with notes on song, "
    "plumage and habitat so you can name every visitor to your feeder today."
)


def filler_words(count: int, prefix: str = "word") -> str:
    """``count`` distinct words, ten per line."""
    words = [f"{prefix}{i}" for i in range(count)]
    return "\n".join(" ".join(words[i:i + 10]) for i in range(0, count, 10))


@pytest.fixture
def make_page():
    """Build a page that passes every on-page check unless overridden."""

    def _make_page(
        body=None,
        title="Field guide",
        description=DEFAULT_DESCRIPTION,
        canonical="https://example.com/guide",
        head=None,
        words=350,
    ):
        if head is None:
            head = COMPLETE_HEAD.format(title=title, description=description, canonical=canonical)
        if body is None:
            body = f"<h1>Field guide</h1>\n<p>\n{filler_words(words)}\n</p>"
        return f"<!DOCTYPE html>\n<html lang=\"en\">\n<head>{head}</head>\n<body>\n{body}\n</body>\n</html>\n"

    return _make_page


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
