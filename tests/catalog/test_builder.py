"""Tests for tire_catalog/catalog/builder.py"""

import pytest

from tire_catalog.catalog.builder import (
    MAX_SKIP_EXAMPLES,
    SKIP_EMPTY_SKU,
    SKIP_NO_CATEGORY,
    SKIP_NO_TREAD,
    CatalogBuilder,
    SkipStats,
    build_catalog,
    first_non_empty,
    last_wins_by_sku,
)
from tire_catalog.catalog.pricing import derive_item
from tire_catalog.common.config_loader import CatalogConfig
from tire_catalog.common.constants import CATEGORY_ORDER
from tire_catalog.models import RawVariant


class TestMergePolicies:
    def test_first_non_empty_keeps_current(self):
        assert first_non_empty("a.png", "b.png") == "a.png"

    def test_first_non_empty_fills_blank(self):
        assert first_non_empty("", "b.png") == "b.png"
        assert first_non_empty("", None) == ""

    def test_last_wins_by_sku(self):
        items = [
            derive_item("B", "100", 1),
            derive_item("A", "100", 1),
            derive_item("B", "200", 9),
        ]
        result = last_wins_by_sku(items)
        assert [i.sku for i in result] == ["A", "B"]
        assert result[1].inventario == 9


class TestSkipStats:
    def test_caps_examples(self):
        stats = SkipStats()
        for n in range(MAX_SKIP_EXAMPLES + 5):
            stats.record(SKIP_NO_CATEGORY, f"p{n}")

        data = stats.to_dict()
        assert data["skipped"] == {SKIP_NO_CATEGORY: MAX_SKIP_EXAMPLES + 5}
        assert len(data["examples"][SKIP_NO_CATEGORY]) == MAX_SKIP_EXAMPLES


class TestBuildCatalog:
    def test_single_product_end_to_end(self, make_product):
        config = CatalogConfig(
            category_order=CATEGORY_ORDER,
            category_aliases={"TOURING": ["TOURING"]},
            tread_aliases={"TOURING": ["Model X"]},
        )
        groups = build_catalog([make_product(collections=["Touring", "Model X"])], config)

        assert len(groups) == 1
        group = groups[0]
        assert group.categoria == "TOURING"
        assert group.grabado == "Model X"
        assert len(group.items) == 1
        item = group.items[0]
        assert item.sku == "ABC123"
        assert item.medida == "110/80-17"
        assert item.precio_sin_iva == 100000.0
        assert item.precio35 == 77350.0

    @pytest.mark.parametrize("price", ["1e30", "9e99"])
    def test_out_of_range_price_does_not_abort_build(self, catalog_config, make_product, price):
        product = make_product(variants=[
            RawVariant(sku="A", price=price, inventory_quantity=1),
            RawVariant(sku="B", price="119000", inventory_quantity=2),
        ])
        groups = build_catalog([product], catalog_config)

        items = {item.sku: item for item in groups[0].items}
        assert items["A"].precio_con_iva == 0
        assert items["A"].precio35 == 0
        assert items["B"].precio_sin_iva == 100000.0

    def test_unclassified_products_are_excluded(self, catalog_config, make_product):
        products = [
            make_product(collections=["Ofertas"]),
            make_product(collections=["TOURING", "Desconocido"]),
            make_product(collections=["TOURING", "Snake"]),
        ]
        builder = CatalogBuilder(catalog_config)
        builder.add_products(products)
        groups = builder.build()

        assert len(groups) == 1
        assert builder.stats.counts[SKIP_NO_CATEGORY] == 1
        assert builder.stats.counts[SKIP_NO_TREAD] == 1
        assert builder.item_count == 1

    def test_every_item_belongs_to_exactly_one_group(self, catalog_config, make_product):
        products = [
            make_product(collections=["TOURING", "Snake"],
                         variants=[RawVariant(sku="S1", price="10"), RawVariant(sku="S2", price="20")]),
            make_product(collections=["ADVENTURE", "TOURING", "Model X"],
                         variants=[RawVariant(sku="M1", price="30")]),
            make_product(collections=["Aventura", "Angus"],
                         variants=[RawVariant(sku="A1", price="40")]),
        ]
        groups = build_catalog(products, catalog_config)

        skus = [item.sku for group in groups for item in group.items]
        assert sorted(skus) == ["A1", "M1", "S1", "S2"]
        assert len(skus) == len(set(skus))

    def test_same_tread_merges_case_insensitively(self, catalog_config, make_product):
        products = [
            make_product(collections=["TOURING", "Snake"], variants=[RawVariant(sku="S1", price="10")]),
            make_product(collections=["TOURING", "SNAKE"], variants=[RawVariant(sku="S2", price="10")]),
        ]
        groups = build_catalog(products, catalog_config)

        assert len(groups) == 1
        assert groups[0].grabado == "Snake"
        assert [i.sku for i in groups[0].items] == ["S1", "S2"]

    def test_duplicate_sku_last_wins(self, catalog_config, make_product):
        products = [
            make_product(variants=[RawVariant(sku="DUP", price="100", inventory_quantity=1)]),
            make_product(variants=[RawVariant(sku="DUP", price="200", inventory_quantity=2)]),
        ]
        groups = build_catalog(products, catalog_config)

        assert len(groups[0].items) == 1
        assert groups[0].items[0].inventario == 2
        assert groups[0].items[0].precio_con_iva == 200.0

    def test_image_and_apps_first_non_empty(self, catalog_config, make_product):
        products = [
            make_product(image_url="", apps=""),
            make_product(image_url="https://cdn/first.png", apps="Pulsar"),
            make_product(image_url="https://cdn/second.png", apps="Boxer"),
        ]
        group = build_catalog(products, catalog_config)[0]

        assert group.imagen == "https://cdn/first.png"
        assert group.apps == "Pulsar"

    def test_empty_sku_variants_skipped(self, catalog_config, make_product):
        product = make_product(variants=[RawVariant(sku="", title="90/90-18"),
                                         RawVariant(sku="OK1", price="10")])
        builder = CatalogBuilder(catalog_config)
        builder.add_product(product)
        groups = builder.build()

        assert [i.sku for i in groups[0].items] == ["OK1"]
        assert builder.stats.counts[SKIP_EMPTY_SKU] == 1

    def test_default_title_has_no_medida(self, catalog_config, make_product):
        product = make_product(variants=[RawVariant(sku="X1", price="10", title="Default Title")])
        item = build_catalog([product], catalog_config)[0].items[0]
        assert item.medida is None

    def test_tread_from_metafield(self, catalog_config, make_product):
        product = make_product(collections=["TOURING"], tread_name="Snake")
        groups = build_catalog([product], catalog_config)
        assert groups[0].grabado == "Snake"

    def test_items_sorted_by_sku(self, catalog_config, make_product):
        product = make_product(variants=[RawVariant(sku=s, price="1") for s in ["C", "A", "B"]])
        group = build_catalog([product], catalog_config)[0]
        assert [i.sku for i in group.items] == ["A", "B", "C"]


class TestGroupOrdering:
    def test_category_order_then_tread_name(self, catalog_config, make_product):
        products = [
            make_product(collections=["ADVENTURE", "Angus"], variants=[RawVariant(sku="A1")]),
            make_product(collections=["TOURING", "Snake"], variants=[RawVariant(sku="S1")]),
            make_product(collections=["TOURING", "Model X"], variants=[RawVariant(sku="M1")]),
        ]
        groups = build_catalog(products, catalog_config)

        assert [(g.categoria, g.grabado) for g in groups] == [
            ("TOURING", "Model X"),
            ("TOURING", "Snake"),
            ("ADVENTURE", "Angus"),
        ]

    def test_unknown_categories_sort_last(self, make_product):
        config = CatalogConfig(
            category_order=CATEGORY_ORDER,
            category_aliases={"Enduro": ["Enduro"], "SCOOTER": ["SCOOTER"]},
            tread_aliases={"Enduro": ["Mud"], "SCOOTER": ["City"]},
        )
        products = [
            make_product(collections=["Enduro", "Mud"], variants=[RawVariant(sku="E1")]),
            make_product(collections=["SCOOTER", "City"], variants=[RawVariant(sku="C1")]),
        ]
        groups = build_catalog(products, config)

        assert [g.categoria for g in groups] == ["SCOOTER", "Enduro"]

    def test_tread_sort_ignores_accents_and_case(self, make_product):
        config = CatalogConfig(
            category_order=CATEGORY_ORDER,
            category_aliases={"TOURING": ["TOURING"]},
            tread_aliases={"TOURING": ["beta", "Álamo", "Zeta"]},
        )
        products = [
            make_product(collections=["TOURING", name], variants=[RawVariant(sku=name)])
            for name in ["Zeta", "beta", "Álamo"]
        ]
        groups = build_catalog(products, config)

        assert [g.grabado for g in groups] == ["Álamo", "beta", "Zeta"]


@pytest.mark.parametrize("order", [
    ["TOURING", "ADVENTURE"],
    ["ADVENTURE", "TOURING"],
])
def test_multi_category_product_lands_in_priority_category(order, catalog_config, make_product):
    product = make_product(collections=order + ["Model X", "Angus"])
    groups = build_catalog([product], catalog_config)
    assert [g.categoria for g in groups] == ["TOURING"]
