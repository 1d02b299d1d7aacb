"""Shared test fixtures."""

import pytest

from tire_catalog.common.config_loader import CatalogConfig
from tire_catalog.common.constants import CATEGORY_ORDER
from tire_catalog.models import Group, Item, RawProduct, RawVariant


@pytest.fixture
def catalog_config():
    """Two categories with a couple of treads each."""
    return CatalogConfig(
        category_order=CATEGORY_ORDER,
        category_aliases={
            "TOURING": ["TOURING"],
            "ADVENTURE": ["ADVENTURE", "Aventura"],
        },
        tread_aliases={
            "TOURING": ["Model X", "Snake"],
            "ADVENTURE": ["Angus"],
        },
    )


@pytest.fixture
def make_product():
    """Factory for RawProduct with sensible defaults."""
    def _make(title="Llanta", collections=("TOURING", "Model X"), variants=None,
              image_url="", apps="", tread_name=""):
        if variants is None:
            variants = [RawVariant(sku="ABC123", price="119000.00",
                                   inventory_quantity=5, title="110/80-17")]
        return RawProduct(
            title=title,
            image_url=image_url,
            apps=apps,
            tread_name=tread_name,
            collections=list(collections),
            variants=list(variants),
        )
    return _make


@pytest.fixture
def make_node():
    """Factory for a GraphQL product node as Shopify returns it."""
    def _make(title="Llanta", collections=("TOURING", "Model X"), sku="ABC123",
              price="119000.00", qty=5, variant_title="110/80-17",
              image="https://cdn.shopify.com/llanta.png", apps=None, nombre=None):
        return {
            "title": title,
            "featuredImage": {"url": image} if image else None,
            "apps": {"value": apps} if apps is not None else None,
            "nombre": {"value": nombre} if nombre is not None else None,
            "collections": {"nodes": [{"title": c} for c in collections]},
            "variants": {"nodes": [{
                "sku": sku,
                "title": variant_title,
                "price": price,
                "inventoryQuantity": qty,
            }]},
        }
    return _make


@pytest.fixture
def sample_groups():
    """Finished catalogue with two groups in two categories."""
    return (
        Group(
            categoria="TOURING",
            grabado="Model X",
            imagen="",
            apps="Pulsar 200",
            items=(
                Item(sku="ABC123", inventario=5, precio_sin_iva=100000.0,
                     precio_con_iva=119000.0, precio35=77350.0, precio30=83300.0,
                     precio25=89250.0, precio20=95200.0, medida="110/80-17"),
                Item(sku="ABC124", inventario=0, precio_sin_iva=50000.0,
                     precio_con_iva=59500.0, precio35=38675.0, precio30=41650.0,
                     precio25=44625.0, precio20=47600.0, apps="NKD 125"),
            ),
        ),
        Group(
            categoria="ADVENTURE",
            grabado="Angus",
            imagen="https://cdn.shopify.com/angus.png",
            items=(
                Item(sku="ANG-1", inventario=2, precio_sin_iva=200000.0,
                     precio_con_iva=238000.0, precio35=154700.0, precio30=166600.0,
                     precio25=178500.0, precio20=190400.0),
            ),
        ),
    )
