"""
Catalogue data models.

Raw* classes hold what Shopify returned, already flattened out of the
GraphQL node/edge structure. Item and Group are the finished, immutable
output of the catalogue builder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class RawVariant:
    """Product variant as returned by the Admin API."""
    sku: str = ""
    price: Any = None               # Price including IVA, usually a string
    inventory_quantity: Any = None
    title: str = ""                 # Size, e.g. "110/80-17"


@dataclass
class RawProduct:
    """
    Product as returned by the Admin API.

    Field Groups:
    - Core fields: title and featured image
    - Metafields: free text entered in the Shopify admin
    - Classification: collection titles (category and tread live here)
    - Variants: one per SKU/size
    """

    title: str = ""
    image_url: str = ""
    apps: str = ""                  # custom.modelos_de_aplicacion
    tread_name: str = ""            # custom.nombre_de_la_llanta
    collections: List[str] = field(default_factory=list)
    variants: List[RawVariant] = field(default_factory=list)


@dataclass(frozen=True)
class Item:
    """One SKU line with derived prices."""
    sku: str
    inventario: int
    precio_sin_iva: float
    precio_con_iva: float
    precio35: float
    precio30: float
    precio25: float
    precio20: float
    medida: Optional[str] = None
    apps: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the JSON API field names."""
        data = {'sku': self.sku}
        if self.medida:
            data['medida'] = self.medida
        data.update({
            'inventario': self.inventario,
            'precioCatalogoSinIva': self.precio_sin_iva,
            'precioCatalogoConIva': self.precio_con_iva,
            'precio35': self.precio35,
            'precio30': self.precio30,
            'precio25': self.precio25,
            'precio20': self.precio20,
        })
        if self.apps:
            data['apps'] = self.apps
        return data


@dataclass(frozen=True)
class Group:
    """All SKUs sharing a (categoria, grabado) classification."""
    categoria: str
    grabado: str
    imagen: str = ""
    apps: str = ""
    items: Tuple[Item, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the JSON API field names."""
        return {
            'categoria': self.categoria,
            'grabado': self.grabado,
            'imagen': self.imagen,
            'apps': self.apps,
            'items': [item.to_dict() for item in self.items],
        }
