"""Command-line interface for the template SEO auditor."""

import sys
from typing import List, Optional

from seo_audit.auditor import SEOAuditor
from seo_audit.config import AuditConfig, AuditThresholds, settings
from seo_audit.logging_config import get_logger, setup_logging
from seo_audit.report import build_report, save_report, to_json

logger = get_logger(__name__)


def audit_command(args) -> int:
    """Run one audit and emit the JSON report.

    Returns:
        Process exit code
    """
    try:
        if args.thresholds_file:
            thresholds = AuditThresholds.from_file(args.thresholds_file)
        else:
            thresholds = AuditThresholds.from_env()

        config = AuditConfig.for_root(
            args.root,
            fix_mode=args.fix,
            live_mode=args.http,
            base_url_override=args.app_url,
            thresholds=thresholds,
            workers=args.workers,
            fetch_timeout=args.timeout,
            max_concurrent=args.max_concurrent,
        )
        result = SEOAuditor(config).run()

        report = build_report(
            result,
            compact=args.compact,
            include_project_issues=args.include_project_issues,
            file_filter=args.file,
            page=args.page,
            per_page=args.per_page,
        )

        if args.output_file:
            save_report(report, args.output_file)
            print(f"Results written to {args.output_file}", file=sys.stderr)
        else:
            print(to_json(report))

    except Exception as e:
        logger.debug("Audit failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="SEO Audit - Audit Laravel Blade templates and site artifacts for SEO defects"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to stderr",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root containing resources/views, public and routes (default: .)",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Apply placeholder fixes to templates and create missing robots.txt/sitemap.xml",
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Fetch rendered pages for static routes instead of reading templates",
    )
    parser.add_argument(
        "--app-url",
        help="Site base URL (overrides APP_URL from the project's .env and config/app.php)",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Report an issue count per file instead of full issue lists",
    )
    parser.add_argument(
        "--include-project-issues",
        action="store_true",
        help="Keep project issues in compact output",
    )
    parser.add_argument(
        "--file",
        help="Only report files whose path equals or ends with this value",
    )
    parser.add_argument(
        "--page",
        type=int,
        help="Page of the file list to report (1-based)",
    )
    parser.add_argument(
        "--per-page",
        type=int,
        help="Files per page when paginating (default: 50)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.WORKERS,
        help=f"Worker threads for template analysis (default: {settings.WORKERS})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.FETCH_TIMEOUT,
        help=f"Per-request timeout in seconds for --http (default: {settings.FETCH_TIMEOUT})",
    )
    parser.add_argument(
        "--max-concurrent",
        type=int,
        default=settings.MAX_CONCURRENT,
        help=f"Maximum concurrent requests for --http (default: {settings.MAX_CONCURRENT})",
    )
    parser.add_argument(
        "--thresholds-file",
        help="JSON file with analysis thresholds (default: SEO_THRESHOLD_* environment variables)",
    )
    parser.add_argument(
        "--output-file",
        "-f",
        help="Write the JSON report to a file instead of stdout",
    )

    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
    )

    return audit_command(args)


if __name__ == "__main__":
    sys.exit(main())
