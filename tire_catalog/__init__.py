"""
Shopify Tire Catalogue Tool

Modules:
    models      - Data models (RawProduct, RawVariant, Item, Group)
    common      - Shared utilities (config loader, text folding, logging, errors)
    shopify     - Shopify Admin API client, product pagination, OAuth install flow
    catalog     - Category/tread classification, pricing, grouping
    export      - XLSX and PDF catalogue renderers
    web         - Flask app serving the JSON API, downloads and browser UI
"""
