"""
Catalogue pipeline.

Modules:
    classification - Category and tread resolution from collection titles
    pricing - Price without IVA and discount tiers
    builder - Grouping, SKU deduplication and ordering
    service - Paginated fetch + build with result cap
"""

from .builder import (
    CatalogBuilder,
    SkipStats,
    build_catalog,
    first_non_empty,
    last_wins_by_sku,
)
from .classification import CategoryAliasTable, resolve_category, resolve_tread
from .pricing import derive_item, discounted_price, price_without_tax, round2
from .service import CatalogResult, fetch_catalog, parse_flag, parse_limit

__all__ = [
    # Classification
    'CategoryAliasTable',
    'resolve_category',
    'resolve_tread',
    # Pricing
    'derive_item',
    'discounted_price',
    'price_without_tax',
    'round2',
    # Builder
    'CatalogBuilder',
    'SkipStats',
    'build_catalog',
    'first_non_empty',
    'last_wins_by_sku',
    # Service
    'CatalogResult',
    'fetch_catalog',
    'parse_flag',
    'parse_limit',
]
