"""API endpoints for the tire catalogue.

Every request builds the catalogue from scratch:
1. Read credentials and alias maps (ConfigError before any network call)
2. Page through Shopify products
3. Classify, price and group them
4. Render as JSON, XLSX or PDF
"""

import logging
import os
from typing import Optional

import requests
from flask import Blueprint, Response, jsonify, request

from ..catalog import CatalogResult, fetch_catalog, parse_flag, parse_limit
from ..common.config_loader import load_catalog_config, load_shopify_credentials
from ..common.errors import UpstreamError
from ..export import (
    PDF_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    CatalogPDFExporter,
    CatalogXLSXExporter,
)
from ..shopify import ProductFetcher, ShopifyAPIClient
from .config import DOWNLOAD_BASENAME, TRIGGER_TIMEOUT

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


def load_catalog(limit_arg: Optional[str] = None, use_default_limit: bool = True) -> CatalogResult:
    """
    Fetch and build the catalogue for the current request.

    Args:
        limit_arg: Raw ?limit= value
        use_default_limit: When no limit is given, apply the configured
            default (JSON) instead of fetching everything (downloads)

    Raises:
        ConfigError: Missing token, shop or alias maps
        ValidationError: Malformed limit
        UpstreamError: Shopify failure on any page
    """
    credentials = load_shopify_credentials()
    config = load_catalog_config()

    limit = None
    if limit_arg is not None or use_default_limit:
        limit = parse_limit(limit_arg, config)

    with ShopifyAPIClient.from_credentials(credentials) as client:
        fetcher = ProductFetcher(client, page_size=config.page_size)
        return fetch_catalog(fetcher, config, limit=limit)


def _download(data: bytes, content_type: str, extension: str) -> Response:
    return Response(
        data,
        mimetype=content_type,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_BASENAME}.{extension}"'},
    )


@api.route("/catalogo-json", methods=["GET"])
def catalogo_json():
    """Grouped catalogue as JSON. Query: limit, debug."""
    debug = parse_flag(request.args.get("debug"))
    result = load_catalog(request.args.get("limit"))
    logger.info("Catalogue JSON: %d groups, %d pages", len(result.groups), result.pages_fetched)
    return jsonify(result.to_dict(debug=debug))


@api.route("/catalogo", methods=["GET"])
def catalogo_xlsx():
    """Catalogue workbook download. Query: limit, embedImages."""
    embed_images = parse_flag(request.args.get("embedImages"))
    result = load_catalog(request.args.get("limit"), use_default_limit=False)
    data = CatalogXLSXExporter(embed_images=embed_images).to_bytes(result.groups)
    return _download(data, XLSX_CONTENT_TYPE, "xlsx")


@api.route("/catalogo-pdf", methods=["GET"])
def catalogo_pdf():
    """Printable catalogue download. Query: limit, images (default on)."""
    images_arg = request.args.get("images")
    include_images = True if images_arg is None else parse_flag(images_arg)
    result = load_catalog(request.args.get("limit"), use_default_limit=False)
    data = CatalogPDFExporter(include_images=include_images).to_bytes(result.groups)
    return _download(data, PDF_CONTENT_TYPE, "pdf")


@api.route("/trigger-catalogo", methods=["GET", "POST"])
def trigger_catalogo():
    """Ask the external generator for a fresh catalogue file and return its URL."""
    if request.method != "POST":
        return jsonify({"error": "Method not allowed"}), 405

    generate_url = os.getenv("CATALOGO_GENERATE_URL", "").strip()
    token = os.getenv("CATALOGO_BEARER_TOKEN", "").strip()
    if not generate_url or not token:
        return jsonify({"error": "Missing CATALOGO_GENERATE_URL / CATALOGO_BEARER_TOKEN"}), 500

    try:
        response = requests.post(
            generate_url,
            json={},
            headers={"Authorization": f"Bearer {token}"},
            timeout=TRIGGER_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise UpstreamError(f"Catalogue generator unreachable: {e}") from e

    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    if not response.ok:
        logger.error("Catalogue generator returned %d", response.status_code)
        raise UpstreamError(data.get("error") or "Error generating catalogue")

    return jsonify({"downloadUrl": data.get("downloadUrl")})
