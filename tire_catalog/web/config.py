"""Centralized configuration for the catalogue web app."""

import os

# Flask app settings (allow env overrides; default debug off for safety)
# Hosting platforms set PORT dynamically; fall back to FLASK_PORT or 5000 for local.
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"

# Cookie carrying the OAuth state between /api/auth/start and the callback
OAUTH_STATE_COOKIE = "shopify_oauth_state"

# External catalogue generator call (POST /api/trigger-catalogo)
TRIGGER_TIMEOUT = int(os.getenv("CATALOGO_TRIGGER_TIMEOUT", "120"))

DOWNLOAD_BASENAME = "catalogo_paytton"
