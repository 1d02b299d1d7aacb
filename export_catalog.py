#!/usr/bin/env python3
"""
Export the tire catalogue from Shopify to JSON, XLSX or PDF.

Reads SHOPIFY_SHOP / SHOPIFY_ADMIN_TOKEN and the alias maps from the
environment (or .env), fetches every product and writes the grouped
catalogue.

Usage:
    # Full catalogue as a workbook
    python3 export_catalog.py --format xlsx --output output/catalogo.xlsx

    # Workbook with tire images embedded
    python3 export_catalog.py --format xlsx --embed-images

    # Printable PDF without images, first 100 items
    python3 export_catalog.py --format pdf --no-images --limit 100

    # JSON as served by /api/catalogo-json, with skip diagnostics
    python3 export_catalog.py --format json --debug
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from dotenv import load_dotenv

from tire_catalog.catalog import fetch_catalog, parse_limit
from tire_catalog.common import (
    CatalogError,
    load_catalog_config,
    load_shopify_credentials,
    setup_logging,
)
from tire_catalog.export import CatalogPDFExporter, CatalogXLSXExporter
from tire_catalog.shopify import ProductFetcher, ShopifyAPIClient

load_dotenv(Path(__file__).parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = {
    "json": "output/catalogo.json",
    "xlsx": "output/catalogo.xlsx",
    "pdf": "output/catalogo.pdf",
}


def write_json(result, output_path: str, debug: bool) -> None:
    os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(debug=debug), f, indent=2, ensure_ascii=False)


def main():
    parser = argparse.ArgumentParser(
        description="Export the Shopify tire catalogue"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "xlsx", "pdf"],
        default="xlsx",
        help="Output format (default: xlsx)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output path (default: output/catalogo.<format>)"
    )
    parser.add_argument(
        "--limit", "-l",
        help="Stop after this many items (default: all)"
    )
    parser.add_argument(
        "--embed-images",
        action="store_true",
        help="Embed tire images in the XLSX"
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Leave images out of the PDF"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Include skip statistics in the JSON output"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    output_path = args.output or DEFAULT_OUTPUT[args.format]

    try:
        credentials = load_shopify_credentials()
        config = load_catalog_config()
        limit = parse_limit(args.limit, config) if args.limit is not None else None

        with ShopifyAPIClient.from_credentials(credentials) as client:
            fetcher = ProductFetcher(client, page_size=config.page_size)
            result = fetch_catalog(fetcher, config, limit=limit)

        if args.format == "json":
            write_json(result, output_path, args.debug)
        elif args.format == "xlsx":
            CatalogXLSXExporter(embed_images=args.embed_images).export(result.groups, output_path)
        else:
            CatalogPDFExporter(include_images=not args.no_images).export(result.groups, output_path)

    except CatalogError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(f"{len(result.groups)} groups, {result.item_count} items "
          f"({result.pages_fetched} pages) -> {output_path}")


if __name__ == "__main__":
    main()
