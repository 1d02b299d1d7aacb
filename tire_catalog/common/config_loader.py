"""
Configuration Loader

Loads the static catalogue settings (category order, tax rate, paging
limits) from YAML and combines them with the per-deployment
values read from the environment (shop, token, alias maps).

Nothing here is cached: every request builds a fresh CatalogConfig.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .constants import CATEGORY_ORDER, IVA
from .errors import ConfigError
from .text_utils import normalize_whitespace

DEFAULT_API_VERSION = "2026-01"
DEFAULT_SCOPES = "read_products,read_product_metafields"


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'catalog.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_catalog_settings() -> Dict[str, Any]:
    """
    Load static catalogue settings.

    Returns:
        Dictionary with category_order, tax_rate, page_size,
        limit bounds and the default alias maps.
    """
    return load_config('catalog.yaml')


def parse_alias_map(raw: Any, name: str) -> Dict[str, List[str]]:
    """
    Parse a category -> alias list mapping.

    Accepts either a JSON string (as stored in environment variables) or an
    already-decoded mapping (as read from YAML). Blank aliases are dropped.

    Args:
        raw: JSON text or mapping
        name: Setting name, used in error messages

    Returns:
        Dictionary mapping whitespace-normalized category name to aliases

    Raises:
        ConfigError: If the JSON is malformed or has the wrong shape

    Example:
        >>> parse_alias_map('{"touring": ["Touring", " Sport "]}', "CATEGORY_MAP_JSON")
        {'touring': ['Touring', 'Sport']}
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{name} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{name} must be an object mapping category to a list of names")

    result = {}
    for category, aliases in raw.items():
        key = normalize_whitespace(category)
        if not key:
            raise ConfigError(f"{name} contains an empty category name")
        if isinstance(aliases, str):
            aliases = [aliases]
        if not isinstance(aliases, list):
            raise ConfigError(f"{name}: aliases for {key!r} must be a list")
        result[key] = [normalize_whitespace(a) for a in aliases if normalize_whitespace(a)]

    return result


@dataclass(frozen=True)
class CatalogConfig:
    """
    Everything the catalogue builder needs, passed in explicitly.

    Field Groups:
    - Classification: canonical category order and alias maps
    - Pricing: tax rate (discount tiers are fixed, see constants)
    - Paging: page size and result cap bounds
    """

    category_order: Tuple[str, ...]
    category_aliases: Mapping[str, List[str]]
    tread_aliases: Mapping[str, List[str]]
    tax_rate: float = IVA
    page_size: int = 50
    default_limit: int = 300
    min_limit: int = 1
    max_limit: int = 5000


@dataclass(frozen=True)
class ShopifyCredentials:
    """Admin API access for one shop."""
    shop: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION


@dataclass(frozen=True)
class OAuthSettings:
    """Custom app credentials used by the install flow."""
    shop: str
    api_key: str
    api_secret: str
    app_url: str = ""
    scopes: str = DEFAULT_SCOPES


def _env_value(env: Mapping[str, str], key: str) -> str:
    return (env.get(key) or "").strip()


def load_catalog_config(
    env: Optional[Mapping[str, str]] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> CatalogConfig:
    """
    Build the catalogue configuration.

    CATEGORY_MAP_JSON / TREAD_MAP_JSON in the environment override the
    default maps from catalog.yaml.

    Args:
        env: Environment mapping (defaults to os.environ)
        settings: Static settings (defaults to catalog.yaml)

    Raises:
        ConfigError: If an alias map is missing or malformed
    """
    if env is None:
        env = os.environ
    if settings is None:
        settings = load_catalog_settings()

    raw_categories = _env_value(env, 'CATEGORY_MAP_JSON') or settings.get('category_aliases')
    raw_treads = _env_value(env, 'TREAD_MAP_JSON') or settings.get('tread_aliases')

    if not raw_categories:
        raise ConfigError("Missing CATEGORY_MAP_JSON")
    if not raw_treads:
        raise ConfigError("Missing TREAD_MAP_JSON")

    category_aliases = parse_alias_map(raw_categories, 'CATEGORY_MAP_JSON')
    tread_aliases = parse_alias_map(raw_treads, 'TREAD_MAP_JSON')
    if not category_aliases:
        raise ConfigError("CATEGORY_MAP_JSON defines no categories")

    return CatalogConfig(
        category_order=tuple(
            normalize_whitespace(c) for c in settings.get('category_order', CATEGORY_ORDER)
        ),
        category_aliases=category_aliases,
        tread_aliases=tread_aliases,
        tax_rate=float(settings.get('tax_rate', IVA)),
        page_size=int(settings.get('page_size', 50)),
        default_limit=int(settings.get('default_limit', 300)),
        min_limit=int(settings.get('min_limit', 1)),
        max_limit=int(settings.get('max_limit', 5000)),
    )


def load_shopify_credentials(env: Optional[Mapping[str, str]] = None) -> ShopifyCredentials:
    """
    Read shop and Admin API token from the environment.

    Raises:
        ConfigError: If SHOPIFY_SHOP or SHOPIFY_ADMIN_TOKEN is missing
    """
    if env is None:
        env = os.environ

    token = _env_value(env, 'SHOPIFY_ADMIN_TOKEN')
    if not token:
        raise ConfigError("Missing SHOPIFY_ADMIN_TOKEN. Install the app first at /api/auth/start")

    shop = _env_value(env, 'SHOPIFY_SHOP')
    if not shop:
        raise ConfigError("Missing SHOPIFY_SHOP")

    return ShopifyCredentials(
        shop=shop,
        access_token=token,
        api_version=_env_value(env, 'SHOPIFY_API_VERSION') or DEFAULT_API_VERSION,
    )


def load_oauth_settings(env: Optional[Mapping[str, str]] = None) -> OAuthSettings:
    """
    Read the custom app credentials for the OAuth install flow.

    Raises:
        ConfigError: If SHOPIFY_SHOP, SHOPIFY_API_KEY or SHOPIFY_API_SECRET is missing
    """
    if env is None:
        env = os.environ

    missing = [k for k in ('SHOPIFY_SHOP', 'SHOPIFY_API_KEY', 'SHOPIFY_API_SECRET')
               if not _env_value(env, k)]
    if missing:
        raise ConfigError(f"Missing {', '.join(missing)}")

    return OAuthSettings(
        shop=_env_value(env, 'SHOPIFY_SHOP'),
        api_key=_env_value(env, 'SHOPIFY_API_KEY'),
        api_secret=_env_value(env, 'SHOPIFY_API_SECRET'),
        app_url=_env_value(env, 'APP_URL').rstrip('/'),
        scopes=_env_value(env, 'SHOPIFY_SCOPES') or DEFAULT_SCOPES,
    )
