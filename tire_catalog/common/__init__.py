# Common utilities
from .config_loader import (
    CatalogConfig,
    OAuthSettings,
    ShopifyCredentials,
    load_catalog_config,
    load_catalog_settings,
    load_config,
    load_oauth_settings,
    load_shopify_credentials,
    parse_alias_map,
)
from .errors import CatalogError, ConfigError, UpstreamError, ValidationError
from .log_config import setup_logging
from .text_utils import fold, format_cop, normalize_whitespace
