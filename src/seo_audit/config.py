from dotenv import dotenv_values, load_dotenv
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
import json
import logging
import os
import re

from seo_audit.constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_USER_AGENT,
)

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


class Settings:
    """
    Manages tool settings loaded from environment variables.
    """
    LOG_LEVEL = os.getenv("SEO_AUDIT_LOG_LEVEL", "INFO")
    FETCH_TIMEOUT = float(os.getenv("SEO_AUDIT_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT_SECONDS)))
    MAX_CONCURRENT = int(os.getenv("SEO_AUDIT_MAX_CONCURRENT", str(DEFAULT_MAX_CONCURRENT_REQUESTS)))
    WORKERS = int(os.getenv("SEO_AUDIT_WORKERS", "4"))
    USER_AGENT = os.getenv("SEO_AUDIT_USER_AGENT", DEFAULT_USER_AGENT)


settings = Settings()


# `'url' => env('APP_URL', 'https://example.com')` in config/app.php
APP_URL_CONFIG_PATTERN = re.compile(
    r"""['"]url['"]\s*=>\s*env\(['"]APP_URL['"],\s*['"]([^'"]+)['"]\)""",
    re.IGNORECASE,
)


@dataclass
class ProjectLayout:
    """Locations of the audited project's views and technical artifacts."""
    root: Path

    @property
    def views_dir(self) -> Path:
        return self.root / "resources" / "views"

    @property
    def public_dir(self) -> Path:
        return self.root / "public"

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def routes_file(self) -> Path:
        return self.root / "routes" / "web.php"

    @property
    def env_file(self) -> Path:
        return self.root / ".env"


@dataclass
class AuditThresholds:
    """Configurable thresholds for SEO analysis."""

    # Meta description length bounds (characters)
    meta_description_min: int = 120
    meta_description_max: int = 160

    # Thin content
    thin_content_words: int = 300
    min_text_html_ratio: float = 0.15

    # Pages at least this long should carry JSON-LD
    structured_data_min_words: int = 600

    # Near-duplicate content
    duplicate_content_min_words: int = 200
    duplicate_similarity_threshold: float = 0.85

    # Link graph
    deep_page_depth: int = 3
    deep_page_min_inbound: int = 2

    # Token cap per page digest
    max_digest_tokens: int = 1000

    @classmethod
    def from_env(cls) -> "AuditThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with SEO_THRESHOLD_
        e.g., SEO_THRESHOLD_THIN_CONTENT_WORDS=250

        Returns:
            AuditThresholds with values from environment
        """
        thresholds = cls()
        prefix = "SEO_THRESHOLD_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type in (int, "int"):
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type in (float, "float"):
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_key}: {env_value!r}")

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "AuditThresholds":
        """Load thresholds from a JSON configuration file.

        Args:
            path: Path to JSON configuration file

        Returns:
            AuditThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        with open(file_path, 'r') as f:
            config = json.load(f)

        threshold_config = config.get('thresholds', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary.

        Returns:
            Dictionary of all threshold values
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }


@dataclass
class AuditConfig:
    """Configuration for one audit run."""
    layout: ProjectLayout
    fix_mode: bool = False
    live_mode: bool = False
    base_url_override: Optional[str] = None
    thresholds: AuditThresholds = field(default_factory=AuditThresholds)
    workers: int = settings.WORKERS
    fetch_timeout: float = settings.FETCH_TIMEOUT
    max_concurrent: int = settings.MAX_CONCURRENT
    user_agent: str = settings.USER_AGENT

    @classmethod
    def for_root(cls, root, **kwargs) -> "AuditConfig":
        """Build a configuration for the project rooted at ``root``."""
        return cls(layout=ProjectLayout(root=Path(root)), **kwargs)


def _strip_trailing_slash(url: str) -> str:
    return url.rstrip("/")


def resolve_base_url(layout: ProjectLayout, override: Optional[str] = None) -> Optional[str]:
    """Resolve the site's absolute base URL.

    Precedence: explicit override, APP_URL in the project's .env, then the
    default given to env('APP_URL', ...) in config/app.php.

    Args:
        layout: Project layout
        override: Base URL given on the command line

    Returns:
        Base URL without trailing slash, or None if unknown
    """
    if override:
        return _strip_trailing_slash(override)

    if layout.env_file.is_file():
        env_url = dotenv_values(layout.env_file).get("APP_URL")
        if env_url:
            return _strip_trailing_slash(env_url)

    app_config = layout.config_dir / "app.php"
    try:
        raw = app_config.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    match = APP_URL_CONFIG_PATTERN.search(raw)
    if not match:
        return None
    return _strip_trailing_slash(match.group(1))
