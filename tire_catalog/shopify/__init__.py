"""
Shopify integration modules.

Modules:
    api_client - Admin GraphQL client
    products - Paginated product fetch and node parsing
    oauth - App install flow (authorize URL, HMAC check, token exchange)
"""

from .api_client import ShopifyAPIClient
from .oauth import (
    exchange_code_for_token,
    generate_state,
    get_authorization_url,
    shop_domain,
    verify_hmac,
)
from .products import PRODUCTS_QUERY, ProductFetcher, parse_product

__all__ = [
    # API Client
    'ShopifyAPIClient',
    # Products
    'ProductFetcher',
    'PRODUCTS_QUERY',
    'parse_product',
    # OAuth
    'exchange_code_for_token',
    'generate_state',
    'get_authorization_url',
    'shop_domain',
    'verify_hmac',
]
