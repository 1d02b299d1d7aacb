"""
Catalogue Service

Drives one catalogue build: page through Shopify, feed the builder,
stop early once the requested number of items is reached.

All-or-nothing: an UpstreamError on any page propagates and no partial
catalogue is returned.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..common.config_loader import CatalogConfig
from ..common.errors import ValidationError
from ..models import Group
from ..shopify.products import ProductFetcher
from .builder import CatalogBuilder, SkipStats

logger = logging.getLogger(__name__)

TRUE_FLAGS = {"1", "true", "yes", "on"}


@dataclass
class CatalogResult:
    """Finished catalogue plus build diagnostics."""
    groups: Tuple[Group, ...]
    stats: SkipStats
    pages_fetched: int = 0
    item_count: int = 0

    def to_dict(self, debug: bool = False) -> Dict[str, Any]:
        """JSON API response body."""
        data = {
            'ok': True,
            'count': len(self.groups),
            'groups': [group.to_dict() for group in self.groups],
        }
        if debug:
            data['debug'] = {
                'pages': self.pages_fetched,
                'items': self.item_count,
                **self.stats.to_dict(),
            }
        return data


def parse_limit(raw: Optional[Any], config: CatalogConfig) -> int:
    """
    Interpret the ?limit= parameter.

    Missing or blank -> config.default_limit; out of range values are
    clamped to [min_limit, max_limit].

    Raises:
        ValidationError: If the value is not a whole number
    """
    if raw is None or str(raw).strip() == "":
        return config.default_limit

    try:
        limit = int(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"limit must be a whole number, got {raw!r}") from e

    return min(max(limit, config.min_limit), config.max_limit)


def parse_flag(raw: Optional[Any]) -> bool:
    """Interpret boolean query parameters such as ?debug=1."""
    return str(raw or "").strip().lower() in TRUE_FLAGS


def fetch_catalog(
    fetcher: ProductFetcher,
    config: CatalogConfig,
    limit: Optional[int] = None,
) -> CatalogResult:
    """
    Fetch products and build the catalogue.

    Args:
        fetcher: Product page source
        config: Catalogue configuration
        limit: Stop fetching further pages once this many items were
            collected (None fetches everything)

    Returns:
        CatalogResult with sorted groups and skip statistics
    """
    builder = CatalogBuilder(config)

    for page in fetcher.iter_pages():
        builder.add_products(page)
        if limit is not None and builder.item_count >= limit:
            logger.info("Item limit %d reached after %d pages", limit, fetcher.pages_fetched)
            break

    return CatalogResult(
        groups=builder.build(),
        stats=builder.stats,
        pages_fetched=fetcher.pages_fetched,
        item_count=builder.item_count,
    )
