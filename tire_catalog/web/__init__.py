"""
Web layer: Flask app, catalogue API blueprint and OAuth install routes.

Run locally with:
    python -m tire_catalog.web.app
"""
