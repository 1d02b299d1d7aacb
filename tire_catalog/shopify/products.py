"""
Shopify Product Fetcher

Pages through the Admin GraphQL products connection and converts each
node into a RawProduct. Pagination is forward-only and strictly
sequential: each request needs the previous page's endCursor.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..common.errors import UpstreamError
from ..common.text_utils import normalize_whitespace
from ..models import RawProduct, RawVariant
from .api_client import ShopifyAPIClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

PRODUCTS_QUERY = """
query Products($first: Int!, $cursor: String) {
  products(first: $first, after: $cursor) {
    pageInfo { hasNextPage endCursor }
    nodes {
      title
      featuredImage { url }
      apps: metafield(namespace: "custom", key: "modelos_de_aplicacion") { value }
      nombre: metafield(namespace: "custom", key: "nombre_de_la_llanta") { value }
      collections(first: 50) { nodes { title } }
      variants(first: 100) {
        nodes {
          sku
          title
          price
          inventoryQuantity
        }
      }
    }
  }
}
"""


def _metafield_value(node: Dict[str, Any], alias: str) -> str:
    metafield = node.get(alias) or {}
    return normalize_whitespace(metafield.get("value"))


def parse_product(node: Dict[str, Any]) -> RawProduct:
    """
    Convert a GraphQL product node into a RawProduct.

    Missing connections and null fields become empty values; blank
    collection titles are dropped.
    """
    collections = [
        normalize_whitespace(c.get("title"))
        for c in (node.get("collections") or {}).get("nodes") or []
    ]

    variants = [
        RawVariant(
            sku=normalize_whitespace(v.get("sku")),
            price=v.get("price"),
            inventory_quantity=v.get("inventoryQuantity"),
            title=normalize_whitespace(v.get("title")),
        )
        for v in (node.get("variants") or {}).get("nodes") or []
    ]

    return RawProduct(
        title=normalize_whitespace(node.get("title")),
        image_url=normalize_whitespace((node.get("featuredImage") or {}).get("url")),
        apps=_metafield_value(node, "apps"),
        tread_name=_metafield_value(node, "nombre"),
        collections=[c for c in collections if c],
        variants=variants,
    )


class ProductFetcher:
    """
    Fetches products page by page.

    Usage:
        fetcher = ProductFetcher(client, page_size=50)
        for product in fetcher.iter_products():
            ...
    """

    def __init__(self, client: ShopifyAPIClient, page_size: int = DEFAULT_PAGE_SIZE):
        self.client = client
        self.page_size = page_size
        self.pages_fetched = 0

    def fetch_page(self, cursor: Optional[str] = None) -> Tuple[List[RawProduct], Optional[str]]:
        """
        Fetch one page of products.

        Args:
            cursor: endCursor of the previous page (None for the first page)

        Returns:
            Tuple of (products, next cursor or None when this is the last page)

        Raises:
            UpstreamError: If the page is missing products, nodes or pageInfo
        """
        data = self.client.graphql_request(
            PRODUCTS_QUERY, {"first": self.page_size, "cursor": cursor}
        )
        self.pages_fetched += 1

        page = data.get("products")
        if not isinstance(page, dict):
            raise UpstreamError("Shopify response has no products connection")

        nodes = page.get("nodes")
        page_info = page.get("pageInfo")
        if not isinstance(nodes, list) or not isinstance(page_info, dict):
            raise UpstreamError("Shopify products page is missing nodes or pageInfo")

        next_cursor = None
        if page_info.get("hasNextPage"):
            next_cursor = page_info.get("endCursor")
            if not next_cursor:
                raise UpstreamError("Shopify reported another page without an endCursor")

        logger.debug("Page %d: %d products (more: %s)",
                     self.pages_fetched, len(nodes), bool(next_cursor))

        return [parse_product(node) for node in nodes], next_cursor

    def iter_pages(self) -> Iterator[List[RawProduct]]:
        """Yield each page of products until the last page."""
        cursor = None
        while True:
            products, cursor = self.fetch_page(cursor)
            yield products
            if cursor is None:
                break

    def iter_products(self) -> Iterator[RawProduct]:
        """Yield every product across all pages."""
        for page in self.iter_pages():
            yield from page
