"""
Category and Tread Classification

Maps a product's collection titles to a canonical category and tread
(grabado) name using the configured alias maps.

Every comparison uses folded keys (see common.text_utils.fold), so
"Touring", "TOURING" and "Tóuring" are the same collection.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from ..common.config_loader import CatalogConfig
from ..common.text_utils import fold, normalize_whitespace


def _canonical_name(name: str, known: Sequence[str]) -> str:
    """Spell a configured category the way it is already known."""
    key = fold(name)
    for canonical in known:
        if fold(canonical) == key:
            return canonical
    return normalize_whitespace(name)


@dataclass(frozen=True)
class CategoryAliasTable:
    """
    Folded alias sets per canonical category.

    Built once per request from CatalogConfig and never modified.

    Attributes:
        categories: Every known category in priority order (the canonical
            order first, then configured extras in configuration order)
        category_keys: Category -> folded collection titles identifying it
            (always includes the folded category name)
        tread_keys: Category -> folded collection titles naming a tread
    """

    categories: Tuple[str, ...]
    category_keys: Mapping[str, FrozenSet[str]]
    tread_keys: Mapping[str, FrozenSet[str]]

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "CategoryAliasTable":
        order = tuple(config.category_order)
        categories = list(order)
        category_keys = {c: {fold(c)} for c in order}

        for name, aliases in config.category_aliases.items():
            category = _canonical_name(name, categories)
            if category not in category_keys:
                categories.append(category)
                category_keys[category] = {fold(category)}
            category_keys[category].update(fold(a) for a in aliases if fold(a))

        tread_keys = {}
        for name, aliases in config.tread_aliases.items():
            category = _canonical_name(name, categories)
            tread_keys.setdefault(category, set()).update(fold(a) for a in aliases if fold(a))

        return cls(
            categories=tuple(categories),
            category_keys=MappingProxyType({k: frozenset(v) for k, v in category_keys.items()}),
            tread_keys=MappingProxyType({k: frozenset(v) for k, v in tread_keys.items()}),
        )

    def keys_for(self, category: str) -> FrozenSet[str]:
        """Folded keys identifying a category (its own name included)."""
        return self.category_keys.get(category, frozenset({fold(category)}))

    def treads_for(self, category: str) -> FrozenSet[str]:
        """Folded tread aliases configured for a category."""
        return self.tread_keys.get(category, frozenset())


def _priority(category_order: Sequence[str], alias_table: CategoryAliasTable) -> Iterable[str]:
    seen = set()
    for category in list(category_order) + list(alias_table.categories):
        if category not in seen:
            seen.add(category)
            yield category


def resolve_category(
    collection_titles: Sequence[str],
    category_order: Sequence[str],
    alias_table: CategoryAliasTable,
) -> Optional[str]:
    """
    Pick the product's category from its collection titles.

    Categories are tried in priority order, so a product in both a TOURING
    and an ADVENTURE collection is TOURING no matter how its collections
    are ordered.

    Args:
        collection_titles: Product collection titles
        category_order: Canonical category priority
        alias_table: Folded alias sets

    Returns:
        Canonical category name, or None if nothing matches

    Example:
        >>> resolve_category(["Snake", "touring"], ["TOURING"], table)
        'TOURING'
    """
    folded = {fold(t) for t in collection_titles}
    folded.discard("")
    if not folded:
        return None

    for category in _priority(category_order, alias_table):
        if folded & alias_table.keys_for(category):
            return category

    return None


def resolve_tread(
    collection_titles: Sequence[str],
    category: str,
    alias_table: CategoryAliasTable,
) -> Optional[str]:
    """
    Pick the tread (grabado) name from the product's collection titles.

    Returns the first title whose folded form is a tread alias of the
    category, with its original casing (whitespace normalized).

    Example:
        >>> resolve_tread(["Touring", "Model  X"], "TOURING", table)
        'Model X'
    """
    treads = alias_table.treads_for(category)
    if not treads:
        return None

    for title in collection_titles:
        if fold(title) in treads:
            return normalize_whitespace(title)

    return None
