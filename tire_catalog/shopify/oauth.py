"""
Shopify OAuth

Helpers for the authorization code grant used to install the custom app:
authorize URL, callback HMAC verification, and code-for-token exchange.
Used by the web install routes and by the shopify_oauth.py CLI.
"""

import hashlib
import hmac
import logging
import secrets
import urllib.parse
from typing import Dict, Mapping

import requests

from ..common.errors import UpstreamError

logger = logging.getLogger(__name__)


def shop_domain(shop: str) -> str:
    """
    Normalize a shop name or URL to its myshopify.com domain.

    Example:
        >>> shop_domain("https://my-store.myshopify.com/")
        'my-store.myshopify.com'
        >>> shop_domain("my-store")
        'my-store.myshopify.com'
    """
    shop = shop.replace("https://", "").replace("http://", "").strip().strip("/")
    if ".myshopify.com" in shop:
        return shop.split(".myshopify.com")[0] + ".myshopify.com"
    return f"{shop}.myshopify.com"


def generate_state() -> str:
    """Random value tying the callback to the browser that started the flow."""
    return secrets.token_hex(16)


def get_authorization_url(shop: str, client_id: str, redirect_uri: str,
                          state: str, scopes: str) -> str:
    """Build Shopify authorization URL."""
    params = {
        "client_id": client_id,
        "scope": scopes,
        "redirect_uri": redirect_uri,
        "state": state,
    }

    base_url = f"https://{shop_domain(shop)}/admin/oauth/authorize"
    return f"{base_url}?{urllib.parse.urlencode(params)}"


def _hmac_message(params: Mapping) -> str:
    parts = []
    for key in sorted(k for k in params if k not in ("hmac", "signature")):
        value = params[key]
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        parts.append(f"{key}={value}")
    return "&".join(parts)


def verify_hmac(params: Mapping, secret: str) -> bool:
    """
    Verify the hmac parameter Shopify appends to the callback URL.

    The message is every other parameter (except signature) as key=value,
    sorted by key and joined with '&'; list values are comma-joined.

    Args:
        params: Callback query parameters
        secret: App client secret

    Returns:
        True if the signature matches
    """
    received = params.get("hmac")
    if isinstance(received, (list, tuple)):
        received = received[0] if received else None
    if not received or not secret:
        return False

    digest = hmac.new(
        secret.encode("utf-8"),
        _hmac_message(params).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(digest, str(received))


def exchange_code_for_token(shop: str, client_id: str, client_secret: str,
                            code: str, timeout: int = 30) -> Dict:
    """
    Exchange authorization code for access token.

    Raises:
        UpstreamError: If Shopify rejects the code or cannot be reached
    """
    url = f"https://{shop_domain(shop)}/admin/oauth/access_token"

    data = {
        "client_id": client_id,
        "client_secret": client_secret,
        "code": code,
    }

    try:
        response = requests.post(url, json=data, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise UpstreamError(f"Token exchange failed: {e}") from e

    if response.status_code != 200:
        logger.error("Token exchange failed: %d %s", response.status_code, response.text[:200])
        raise UpstreamError(f"Token exchange failed: {response.status_code} - {response.text[:200]}")

    try:
        token_data = response.json()
    except ValueError as e:
        raise UpstreamError("Token exchange returned a non-JSON response") from e

    if not isinstance(token_data, dict) or not token_data.get("access_token"):
        raise UpstreamError("Token exchange returned no access_token")

    return token_data
