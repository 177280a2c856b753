# src/seo_audit/constants.py
"""Centralized constants for the template SEO auditor.

This module contains magic numbers, word lists and placeholder values that are
used across multiple modules. For user-configurable thresholds, see config.py
and AuditThresholds.
"""

# =============================================================================
# Template Normalization Constants
# =============================================================================

# Token substituted for every interpolated expression in a template
DYNAMIC_SENTINEL = "__DYNAMIC__"

# Word the sentinel stands for when counting visible words
DYNAMIC_WORD = "word"

# Blade control directives stripped (with the rest of their line) before parsing
TEMPLATE_DIRECTIVES = (
    "if", "elseif", "else", "endif",
    "foreach", "endforeach", "for", "endfor", "while", "endwhile",
    "switch", "case", "break", "default", "endswitch",
    "extends", "section", "endsection", "yield",
    "include", "includeIf", "includeWhen", "includeUnless",
    "stack", "push", "endpush", "prepend", "endprepend",
    "csrf", "method", "vite", "once", "endonce",
    "production", "endproduction", "verbatim", "endverbatim",
    "php", "endphp", "auth", "endauth", "guest", "endguest",
    "props", "pushonce", "endpushonce",
)

# File suffix of page templates
TEMPLATE_SUFFIX = ".blade.php"

# Leaf name that collapses to its parent route
INDEX_LEAF = "index"


# =============================================================================
# Severity Deductions
# =============================================================================

SEVERITY_DEDUCTIONS = {
    "error": 10,
    "warning": 5,
    "suggestion": 2,
}

MAX_SCORE = 100
MIN_SCORE = 0


# =============================================================================
# Content Constants
# =============================================================================

# Common English words removed before building a page's token set
STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
    "he", "in", "is", "it", "its", "of", "on", "that", "the", "to", "was",
    "were", "will", "with", "you", "your", "we", "our", "they", "their",
    "or", "but", "not",
})

# Elements whose text never renders
INVISIBLE_TAGS = frozenset({"script", "style", "noscript", "template"})

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


# =============================================================================
# Image & Link Constants
# =============================================================================

# Alt text that says nothing about the image
GENERIC_ALT_TEXT = frozenset({
    "image", "photo", "picture", "placeholder", "img", "logo", "icon",
})

# Vector formats never need explicit dimensions
VECTOR_IMAGE_SUFFIXES = (".svg",)

# Anchor text that says nothing about the target
GENERIC_ANCHOR_TEXT = frozenset({"click here", "read more", "learn more"})


# =============================================================================
# Social Meta Constants
# =============================================================================

# OpenGraph properties whose absence or emptiness is an error
REQUIRED_OG = ["og:title", "og:description", "og:url", "og:image"]

# OpenGraph properties that are merely recommended
RECOMMENDED_OG = ["og:locale", "og:site_name"]

REQUIRED_TWITTER = [
    "twitter:card", "twitter:title", "twitter:description", "twitter:image",
]


# =============================================================================
# Structured Data Constants
# =============================================================================

JSON_LD_MIME = "application/ld+json"

# Fields every JSON-LD object of the given @type must carry
REQUIRED_SCHEMA_FIELDS = {
    "Organization": ["name", "url"],
    "WebSite": ["name", "url"],
    "WebPage": ["name", "description"],
    "Article": ["headline", "datePublished", "author", "image"],
    "BlogPosting": ["headline", "datePublished", "author", "image"],
    "Product": ["name", "image", "offers"],
    "BreadcrumbList": ["itemListElement"],
}

REQUIRED_OFFER_FIELDS = ("price", "priceCurrency", "availability")

REQUIRED_BREADCRUMB_FIELDS = ("position", "name", "item")


# =============================================================================
# Fix Placeholders
# =============================================================================

PLACEHOLDER_TEXT = "TODO"
PLACEHOLDER_ALT = "TODO: describe image"
CURRENT_URL_EXPRESSION = "{{ url()->current() }}"

OG_PLACEHOLDERS = {
    "og:title": PLACEHOLDER_TEXT,
    "og:description": PLACEHOLDER_TEXT,
    "og:url": CURRENT_URL_EXPRESSION,
    "og:type": "website",
    "og:image": PLACEHOLDER_TEXT,
}

TWITTER_PLACEHOLDERS = {
    "twitter:card": "summary_large_image",
    "twitter:title": PLACEHOLDER_TEXT,
    "twitter:description": PLACEHOLDER_TEXT,
    "twitter:image": PLACEHOLDER_TEXT,
}


# =============================================================================
# Technical Artifact Constants
# =============================================================================

ROBOTS_FILENAME = "robots.txt"
SITEMAP_FILENAME = "sitemap.xml"
SITEMAP_PREFIX = "sitemap"
SITEMAP_SUFFIX = ".xml"
SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_DEFAULT_CHANGEFREQ = "weekly"
SITEMAP_DEFAULT_PRIORITY = "0.8"


# =============================================================================
# Live Fetch Constants
# =============================================================================

# Default per-request timeout in seconds
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0

# Default concurrent requests for live-page mode
DEFAULT_MAX_CONCURRENT_REQUESTS = 5

DEFAULT_USER_AGENT = "SEO-Audit-Bot/1.0"


# =============================================================================
# Reporting Constants
# =============================================================================

# Default page size when paginating the file list
DEFAULT_PER_PAGE = 50
