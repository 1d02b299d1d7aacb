"""
Shopify API Client

Client for the Shopify Admin GraphQL API.
Handles authentication and turns every failure into an UpstreamError.
"""

import logging
from typing import Dict, Optional

import requests

from ..common.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2026-01"


class ShopifyAPIClient:
    """
    Client for the Shopify Admin GraphQL API.

    Handles:
    - Authentication
    - Shop name normalization
    - HTTP, transport and GraphQL errors (raised as UpstreamError)

    There is no retry: a failed request aborts the catalogue build.

    Usage:
        with ShopifyAPIClient(shop="my-store", access_token="shpat_xxx") as client:
            data = client.graphql_request(query, variables)
    """

    def __init__(self, shop: str, access_token: str,
                 api_version: str = DEFAULT_API_VERSION, timeout: int = 30):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com) or full domain
            access_token: Shopify Admin API access token
            api_version: Admin API version, e.g. "2026-01"
            timeout: Request timeout in seconds
        """
        # Normalize shop name
        shop = shop.replace("https://", "").replace("http://", "").strip("/")
        if ".myshopify.com" in shop:
            self.shop = shop.split(".myshopify.com")[0]
        else:
            self.shop = shop

        self.api_version = api_version
        self.timeout = timeout
        self.base_url = f"https://{self.shop}.myshopify.com/admin/api/{api_version}"
        self.graphql_url = f"{self.base_url}/graphql.json"

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })
        self.requests_made = 0

    @classmethod
    def from_credentials(cls, credentials, timeout: int = 30) -> "ShopifyAPIClient":
        """Build a client from a ShopifyCredentials instance."""
        return cls(
            shop=credentials.shop,
            access_token=credentials.access_token,
            api_version=credentials.api_version,
            timeout=timeout,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def graphql_request(self, query: str, variables: Optional[Dict] = None) -> Dict:
        """
        Make a GraphQL API request.

        Args:
            query: GraphQL query
            variables: Query variables

        Returns:
            Response data (without 'data' wrapper)

        Raises:
            UpstreamError: On transport failure, HTTP error status, GraphQL
                errors, or a response without a data payload
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        self.requests_made += 1

        try:
            response = self.session.post(self.graphql_url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error("GraphQL request timeout")
            raise UpstreamError("Shopify request timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error("Request failed: %s", e)
            raise UpstreamError(f"Shopify request failed: {e}") from e

        if response.status_code >= 400:
            logger.error("API Error %d: %s", response.status_code, response.text[:200])
            raise UpstreamError(f"Shopify API error {response.status_code}: {response.text[:200]}")

        try:
            result = response.json()
        except ValueError as e:
            raise UpstreamError("Shopify returned a non-JSON response") from e

        if not isinstance(result, dict):
            raise UpstreamError("Shopify returned an unexpected response")

        # Check for GraphQL errors
        if result.get("errors"):
            logger.error("GraphQL Errors: %s", result['errors'])
            raise UpstreamError(f"GraphQL errors: {result['errors']}")

        data = result.get("data")
        if not isinstance(data, dict) or not data:
            raise UpstreamError("Shopify response has no data")

        return data

    def test_connection(self) -> bool:
        """
        Test API connection by fetching shop info.

        Returns:
            True if connection successful
        """
        try:
            data = self.graphql_request("{ shop { name } }")
        except UpstreamError:
            return False

        shop_name = (data.get("shop") or {}).get("name", "Unknown")
        logger.info("Connected to: %s", shop_name)
        return True
