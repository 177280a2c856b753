"""
Structured Data Checks

Validates JSON-LD blocks embedded in a page:
- every block must parse as JSON
- objects (and @graph members) are checked against per-@type required fields
- Product offers and BreadcrumbList items get deeper checks
"""

import json
import logging
from typing import Dict, List, Optional

from bs4 import Tag

from seo_audit.constants import (
    JSON_LD_MIME,
    REQUIRED_BREADCRUMB_FIELDS,
    REQUIRED_OFFER_FIELDS,
    REQUIRED_SCHEMA_FIELDS,
)
from seo_audit.dom import line_of, raw_text_of, select_all
from seo_audit.models import Issue, Severity

logger = logging.getLogger(__name__)


def find_json_ld_blocks(root: Optional[Tag]) -> List[Tag]:
    """All <script type="application/ld+json"> elements under ``root``."""
    return select_all(root, "script", type=JSON_LD_MIME)


class StructuredDataAnalyzer:
    """Validate JSON-LD structured data on a page."""

    def __init__(self, required_fields: Optional[Dict[str, List[str]]] = None):
        """Initialize the structured data analyzer.

        Args:
            required_fields: Mapping of schema @type to its required keys
        """
        self.required_fields = required_fields or REQUIRED_SCHEMA_FIELDS

    def analyze(self, blocks: List[Tag]) -> List[Issue]:
        """
        Validate each JSON-LD block.

        Args:
            blocks: JSON-LD script elements in document order

        Returns:
            Issues found across all blocks
        """
        issues: List[Issue] = []

        for block in blocks:
            content = raw_text_of(block).strip()
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                logger.debug(f"Invalid JSON-LD at line {line_of(block)}: {e}")
                issues.append(Issue(
                    kind="invalid_json_ld",
                    severity=Severity.ERROR,
                    message="JSON-LD is not valid JSON.",
                    details={"error": str(e)[:100]},
                    line=line_of(block),
                ))
                continue

            for entry in self._iter_entries(data):
                issues.extend(self.validate_object(entry, line_of(block)))

        return issues

    def _iter_entries(self, data):
        """Yield top-level objects, expanding arrays and @graph containers."""
        entries = data if isinstance(data, list) else [data]
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            graph = entry.get("@graph")
            if isinstance(graph, list):
                for node in graph:
                    if isinstance(node, dict):
                        yield node
                if "@type" not in entry:
                    continue
            yield entry

    def validate_object(self, obj: dict, line: Optional[int] = None) -> List[Issue]:
        """Check one JSON-LD object against the required-field table."""
        issues: List[Issue] = []
        if not isinstance(obj, dict):
            return issues

        declared = obj.get("@type")
        if isinstance(declared, list):
            types = [t for t in declared if isinstance(t, str)]
        elif isinstance(declared, str) and declared:
            types = [declared]
        else:
            return issues

        for schema_type in types:
            required = self.required_fields.get(schema_type)
            if not required:
                continue

            for key in required:
                if not obj.get(key):
                    issues.append(Issue(
                        kind="json_ld_missing_field",
                        severity=Severity.WARNING,
                        message=f"JSON-LD {schema_type} missing {key}.",
                        details={"type": schema_type, "key": key},
                        line=line,
                    ))

            if schema_type == "Product" and not self._has_complete_offer(obj.get("offers")):
                issues.append(Issue(
                    kind="json_ld_product_offers",
                    severity=Severity.WARNING,
                    message="JSON-LD Product offers missing price/priceCurrency/availability.",
                    line=line,
                ))

            if schema_type == "BreadcrumbList" and not self._breadcrumbs_complete(obj.get("itemListElement")):
                issues.append(Issue(
                    kind="json_ld_breadcrumbs",
                    severity=Severity.WARNING,
                    message="BreadcrumbList items should include position, name, and item.",
                    line=line,
                ))

        return issues

    @staticmethod
    def _has_complete_offer(offers) -> bool:
        if isinstance(offers, list):
            offer_list = offers
        elif offers:
            offer_list = [offers]
        else:
            offer_list = []

        return any(
            isinstance(offer, dict) and all(offer.get(key) for key in REQUIRED_OFFER_FIELDS)
            for offer in offer_list
        )

    @staticmethod
    def _breadcrumbs_complete(elements) -> bool:
        items = elements if isinstance(elements, list) else []
        return all(
            isinstance(item, dict) and all(item.get(key) for key in REQUIRED_BREADCRUMB_FIELDS)
            for item in items
        )
