"""Tests for tire_catalog/common/config_loader.py"""

import pytest

from tire_catalog.common.config_loader import (
    DEFAULT_API_VERSION,
    DEFAULT_SCOPES,
    load_catalog_config,
    load_catalog_settings,
    load_config,
    load_oauth_settings,
    load_shopify_credentials,
    parse_alias_map,
)
from tire_catalog.common.constants import CATEGORY_ORDER
from tire_catalog.common.errors import ConfigError


@pytest.fixture
def settings():
    return {
        "category_order": list(CATEGORY_ORDER),
        "tax_rate": 0.19,
        "page_size": 25,
        "category_aliases": {"TOURING": ["TOURING"]},
        "tread_aliases": {"TOURING": ["Snake"]},
    }


class TestParseAliasMap:
    def test_parses_json_string(self):
        result = parse_alias_map('{"TOURING": ["Touring", " Sport  Touring "]}', "CATEGORY_MAP_JSON")
        assert result == {"TOURING": ["Touring", "Sport Touring"]}

    def test_accepts_mapping(self):
        assert parse_alias_map({"SCOOTER": ["Scooter"]}, "X") == {"SCOOTER": ["Scooter"]}

    def test_single_string_alias(self):
        assert parse_alias_map({"SCOOTER": "Scooter"}, "X") == {"SCOOTER": ["Scooter"]}

    def test_drops_blank_aliases(self):
        assert parse_alias_map({"SCOOTER": ["", "  ", "Scooter"]}, "X") == {"SCOOTER": ["Scooter"]}

    def test_malformed_json_raises(self):
        with pytest.raises(ConfigError, match="CATEGORY_MAP_JSON is not valid JSON"):
            parse_alias_map("{not json", "CATEGORY_MAP_JSON")

    def test_non_object_raises(self):
        with pytest.raises(ConfigError, match="must be an object"):
            parse_alias_map('["TOURING"]', "CATEGORY_MAP_JSON")

    def test_non_list_aliases_raise(self):
        with pytest.raises(ConfigError, match="must be a list"):
            parse_alias_map({"TOURING": 3}, "TREAD_MAP_JSON")

    def test_empty_category_name_raises(self):
        with pytest.raises(ConfigError, match="empty category name"):
            parse_alias_map({"  ": ["x"]}, "TREAD_MAP_JSON")


class TestLoadCatalogConfig:
    def test_uses_yaml_maps_without_env(self, settings):
        config = load_catalog_config(env={}, settings=settings)
        assert config.category_aliases == {"TOURING": ["TOURING"]}
        assert config.tread_aliases == {"TOURING": ["Snake"]}
        assert config.page_size == 25
        assert config.category_order == CATEGORY_ORDER

    def test_env_overrides_yaml(self, settings):
        env = {
            "CATEGORY_MAP_JSON": '{"SCOOTER": ["Scooter"]}',
            "TREAD_MAP_JSON": '{"SCOOTER": ["City"]}',
        }
        config = load_catalog_config(env=env, settings=settings)
        assert config.category_aliases == {"SCOOTER": ["Scooter"]}
        assert config.tread_aliases == {"SCOOTER": ["City"]}

    def test_missing_category_map_raises(self):
        with pytest.raises(ConfigError, match="Missing CATEGORY_MAP_JSON"):
            load_catalog_config(env={}, settings={"tread_aliases": {"TOURING": ["Snake"]}})

    def test_missing_tread_map_raises(self):
        with pytest.raises(ConfigError, match="Missing TREAD_MAP_JSON"):
            load_catalog_config(env={}, settings={"category_aliases": {"TOURING": ["TOURING"]}})

    def test_blank_env_value_falls_back_to_yaml(self, settings):
        config = load_catalog_config(env={"CATEGORY_MAP_JSON": "   "}, settings=settings)
        assert config.category_aliases == {"TOURING": ["TOURING"]}

    def test_defaults(self, settings):
        config = load_catalog_config(env={}, settings=settings)
        assert config.default_limit == 300
        assert config.min_limit == 1
        assert config.max_limit == 5000


class TestLoadShopifyCredentials:
    def test_reads_env(self):
        creds = load_shopify_credentials({"SHOPIFY_SHOP": "paytton", "SHOPIFY_ADMIN_TOKEN": "shpat_x"})
        assert creds.shop == "paytton"
        assert creds.access_token == "shpat_x"
        assert creds.api_version == DEFAULT_API_VERSION

    def test_api_version_override(self):
        creds = load_shopify_credentials({
            "SHOPIFY_SHOP": "paytton",
            "SHOPIFY_ADMIN_TOKEN": "shpat_x",
            "SHOPIFY_API_VERSION": "2025-10",
        })
        assert creds.api_version == "2025-10"

    def test_missing_token_raises(self):
        with pytest.raises(ConfigError, match="SHOPIFY_ADMIN_TOKEN"):
            load_shopify_credentials({"SHOPIFY_SHOP": "paytton"})

    def test_missing_shop_raises(self):
        with pytest.raises(ConfigError, match="SHOPIFY_SHOP"):
            load_shopify_credentials({"SHOPIFY_ADMIN_TOKEN": "shpat_x"})


class TestLoadOAuthSettings:
    def test_reads_env(self):
        settings = load_oauth_settings({
            "SHOPIFY_SHOP": "paytton",
            "SHOPIFY_API_KEY": "key",
            "SHOPIFY_API_SECRET": "secret",
            "APP_URL": "https://catalogo.example.com/",
        })
        assert settings.app_url == "https://catalogo.example.com"
        assert settings.scopes == DEFAULT_SCOPES

    def test_lists_missing_keys(self):
        with pytest.raises(ConfigError, match="SHOPIFY_API_KEY, SHOPIFY_API_SECRET"):
            load_oauth_settings({"SHOPIFY_SHOP": "paytton"})


class TestLoadConfig:
    def test_loads_catalog_yaml(self):
        settings = load_catalog_settings()
        assert settings["category_order"][0] == "TOURING"
        assert settings["tax_rate"] == 0.19
        assert "TOURING" in settings["category_aliases"]

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")

    def test_shipped_defaults_build_a_config(self):
        config = load_catalog_config(env={})
        assert "MRF" in config.tread_aliases["TOURING"]
