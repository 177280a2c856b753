"""Route helpers: guessed routes for views, route-file scanning, redirect hints.

Guessed routes are best-effort. Views rendered from parameterized or
controller routes will not map onto their real URL, so every check built on
them only ever emits suggestions.
"""

import re
from pathlib import PurePosixPath
from typing import List, Optional

from seo_audit.constants import INDEX_LEAF, TEMPLATE_SUFFIX
from seo_audit.models import ProjectIssue, Severity

# Route::get('/about', ...), Route::view('about', 'about'), Route::any(...)
STATIC_ROUTE_PATTERN = re.compile(r"""Route::(?:get|view|any)\(\s*['"]([^'"]+)['"]""")

# Route::match(['get', 'post'], '/contact', ...)
MATCH_ROUTE_PATTERN = re.compile(
    r"""Route::match\(\s*\[[^\]]*\]\s*,\s*['"]([^'"]+)['"]"""
)

REDIRECT_PATTERN = re.compile(r"Route::redirect\([^)]*\)")
PERMANENT_STATUS_PATTERN = re.compile(r",\s*301\s*\)")


def normalize_path(value: Optional[str]) -> Optional[str]:
    """Strip fragment, query and trailing slash from a URL path.

    Returns None for empty input; "/" stays "/".
    """
    if not value:
        return None
    stripped = value.split("#")[0].split("?")[0]
    if not stripped:
        return None
    if stripped == "/":
        return "/"
    return stripped.rstrip("/") or "/"


def guess_route(relative_path: str) -> str:
    """Guess the URL a view renders at from its path under the views root.

    ``index.blade.php`` maps to ``/``, ``blog/index.blade.php`` to ``/blog``
    and ``blog/post.blade.php`` to ``/blog/post``.
    """
    posix = PurePosixPath(relative_path.replace("\\", "/")).as_posix()
    if posix.endswith(TEMPLATE_SUFFIX):
        stem = posix[: -len(TEMPLATE_SUFFIX)]
    else:
        stem = posix.rsplit(".", 1)[0] if "." in posix.rsplit("/", 1)[-1] else posix
    stem = stem.strip("/")

    if stem == INDEX_LEAF:
        return "/"
    if stem.endswith("/" + INDEX_LEAF):
        return "/" + stem[: -len("/" + INDEX_LEAF)]
    return "/" + stem


def is_internal_href(href: Optional[str]) -> bool:
    """Root-relative hrefs count as internal; protocol-relative ones do not."""
    return bool(href) and href.startswith("/") and not href.startswith("//")


def route_depth(route: str) -> int:
    return len([segment for segment in route.split("/") if segment])


def extract_static_routes(source: Optional[str]) -> List[str]:
    """Literal (non-parameterized) routes declared in a routes file.

    Args:
        source: Contents of routes/web.php, or None if unavailable

    Returns:
        Routes in declaration order, "/" always included
    """
    routes: List[str] = []
    if source:
        matches = list(STATIC_ROUTE_PATTERN.finditer(source))
        matches += list(MATCH_ROUTE_PATTERN.finditer(source))
        matches.sort(key=lambda match: match.start())
        for match in matches:
            route = match.group(1)
            if "{" in route or "}" in route:
                continue
            if not route.startswith("/"):
                route = "/" + route
            if route not in routes:
                routes.append(route)

    if "/" not in routes:
        routes.append("/")
    return routes


def find_redirect_hints(source: Optional[str]) -> List[ProjectIssue]:
    """Flag Route::redirect declarations that do not pass an explicit 301."""
    if not source:
        return []

    issues = []
    for match in REDIRECT_PATTERN.finditer(source):
        entry = match.group(0)
        if not PERMANENT_STATUS_PATTERN.search(entry):
            issues.append(ProjectIssue(
                kind="redirect_not_301",
                severity=Severity.SUGGESTION,
                message="Route::redirect without explicit 301.",
                details={"entry": entry},
            ))
    return issues
