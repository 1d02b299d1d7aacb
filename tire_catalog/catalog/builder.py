"""
Catalogue Builder

Groups classified products into (categoria, grabado) blocks of SKU items.

Merge rules are kept as named policy functions so each can be tested on
its own:
- first_non_empty: a group's image and applications text come from the
  first product that supplies one; later products never overwrite them
- last_wins_by_sku: when the same SKU shows up twice in a group, the
  later variant replaces the earlier one
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..common.config_loader import CatalogConfig
from ..common.constants import DEFAULT_VARIANT_TITLE
from ..common.text_utils import fold
from ..models import Group, Item, RawProduct
from .classification import CategoryAliasTable, resolve_category, resolve_tread
from .pricing import derive_item

logger = logging.getLogger(__name__)

MAX_SKIP_EXAMPLES = 10

SKIP_NO_CATEGORY = "no_category"
SKIP_NO_TREAD = "no_tread"
SKIP_EMPTY_SKU = "empty_sku"


def first_non_empty(current: str, candidate: Optional[str]) -> str:
    """Keep the current value unless it is empty."""
    if current:
        return current
    return candidate or ""


def last_wins_by_sku(items: Iterable[Item]) -> List[Item]:
    """
    Deduplicate items by SKU, keeping the last occurrence.

    Returns the survivors sorted by SKU (plain string comparison).
    """
    by_sku: Dict[str, Item] = {}
    for item in items:
        by_sku[item.sku] = item
    return sorted(by_sku.values(), key=lambda item: item.sku)


@dataclass
class SkipStats:
    """Why products or variants were left out, with a few examples each."""
    counts: Counter = field(default_factory=Counter)
    examples: Dict[str, List[str]] = field(default_factory=dict)

    def record(self, reason: str, example: str) -> None:
        self.counts[reason] += 1
        samples = self.examples.setdefault(reason, [])
        if len(samples) < MAX_SKIP_EXAMPLES:
            samples.append(example)

    def to_dict(self) -> Dict:
        return {
            'skipped': dict(self.counts),
            'examples': {reason: list(samples) for reason, samples in self.examples.items()},
        }


@dataclass
class _GroupDraft:
    """Group under construction; never leaves the builder."""
    categoria: str
    grabado: str
    imagen: str = ""
    apps: str = ""
    items: List[Item] = field(default_factory=list)


class CatalogBuilder:
    """
    Accumulates products into groups, then finalizes them.

    Usage:
        builder = CatalogBuilder(config)
        for product in products:
            builder.add_product(product)
        groups = builder.build()
    """

    def __init__(self, config: CatalogConfig, alias_table: Optional[CategoryAliasTable] = None):
        self.config = config
        self.alias_table = alias_table or CategoryAliasTable.from_config(config)
        self.stats = SkipStats()
        self.item_count = 0
        self._groups: Dict[Tuple[str, str], _GroupDraft] = {}
        self._category_seen: List[str] = []

    def classify(self, product: RawProduct) -> Tuple[Optional[str], Optional[str]]:
        """
        Resolve (category, tread) for a product.

        The tread-name metafield is tried after the collection titles.
        """
        category = resolve_category(
            product.collections, self.config.category_order, self.alias_table
        )
        if category is None:
            return None, None

        candidates = list(product.collections)
        if product.tread_name:
            candidates.append(product.tread_name)
        return category, resolve_tread(candidates, category, self.alias_table)

    def add_product(self, product: RawProduct) -> bool:
        """
        Add one product.

        Returns:
            True if the product was classified into a group
        """
        category, tread = self.classify(product)
        if category is None:
            self.stats.record(SKIP_NO_CATEGORY, product.title)
            return False
        if tread is None:
            self.stats.record(SKIP_NO_TREAD, f"{category}: {product.title}")
            return False

        key = (category, fold(tread))
        group = self._groups.get(key)
        if group is None:
            group = _GroupDraft(categoria=category, grabado=tread)
            self._groups[key] = group
            if category not in self._category_seen:
                self._category_seen.append(category)

        group.imagen = first_non_empty(group.imagen, product.image_url)
        group.apps = first_non_empty(group.apps, product.apps)

        for variant in product.variants:
            if not variant.sku:
                self.stats.record(SKIP_EMPTY_SKU, f"{product.title} / {variant.title or '-'}")
                continue

            medida = variant.title if variant.title != DEFAULT_VARIANT_TITLE else None
            group.items.append(derive_item(
                variant.sku,
                variant.price,
                variant.inventory_quantity,
                tax_rate=self.config.tax_rate,
                medida=medida,
                apps=product.apps,
            ))
            self.item_count += 1

        return True

    def add_products(self, products: Iterable[RawProduct]) -> None:
        for product in products:
            self.add_product(product)

    def _category_rank(self, category: str) -> int:
        order = self.config.category_order
        if category in order:
            return order.index(category)
        # Unknown categories go last, in the order they were first seen
        return len(order) + self._category_seen.index(category)

    def build(self) -> Tuple[Group, ...]:
        """Deduplicate, sort and freeze the groups."""
        drafts = sorted(
            self._groups.values(),
            key=lambda g: (self._category_rank(g.categoria), fold(g.grabado)),
        )

        groups = tuple(
            Group(
                categoria=draft.categoria,
                grabado=draft.grabado,
                imagen=draft.imagen,
                apps=draft.apps,
                items=tuple(last_wins_by_sku(draft.items)),
            )
            for draft in drafts
        )

        logger.info("Built %d groups from %d items (skipped: %s)",
                    len(groups), self.item_count, dict(self.stats.counts) or "none")
        return groups


def build_catalog(raw_products: Iterable[RawProduct], config: CatalogConfig) -> Tuple[Group, ...]:
    """
    Group products into the sorted catalogue.

    Args:
        raw_products: Products in arrival order
        config: Catalogue configuration

    Returns:
        Groups sorted by category order, then tread name
    """
    builder = CatalogBuilder(config)
    builder.add_products(raw_products)
    return builder.build()
