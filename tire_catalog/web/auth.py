"""OAuth install routes for the Shopify custom app.

/api/auth/start redirects the merchant to Shopify's consent screen;
/api/auth/callback checks state and HMAC, exchanges the code and shows
the Admin API token to store as SHOPIFY_ADMIN_TOKEN.
"""

import logging

from flask import Blueprint, Response, redirect, request

from ..common.config_loader import load_oauth_settings
from ..shopify.oauth import (
    exchange_code_for_token,
    generate_state,
    get_authorization_url,
    verify_hmac,
)
from .config import OAUTH_STATE_COOKIE

logger = logging.getLogger(__name__)

auth = Blueprint("auth", __name__, url_prefix="/api/auth")


def _base_url(app_url: str) -> str:
    return app_url or request.host_url.rstrip("/")


def _text(body: str, status: int) -> Response:
    return Response(body, status=status, mimetype="text/plain")


@auth.route("/start", methods=["GET"])
def start():
    """Begin the install flow."""
    settings = load_oauth_settings()
    state = generate_state()
    redirect_uri = f"{_base_url(settings.app_url)}/api/auth/callback"

    install_url = get_authorization_url(
        settings.shop, settings.api_key, redirect_uri, state, settings.scopes
    )

    response = redirect(install_url, code=302)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        path="/",
        httponly=True,
        samesite="Lax",
        secure=request.is_secure or settings.app_url.startswith("https://"),
    )
    return response


@auth.route("/callback", methods=["GET"])
def callback():
    """Finish the install flow and display the access token."""
    settings = load_oauth_settings()

    state = request.args.get("state")
    state_cookie = request.cookies.get(OAUTH_STATE_COOKIE)
    if not state_cookie or state_cookie != state:
        return _text("Invalid state. Retry /api/auth/start", 400)

    if not verify_hmac(request.args.to_dict(flat=False), settings.api_secret):
        logger.warning("OAuth callback with invalid HMAC")
        return _text("Invalid HMAC. Retry /api/auth/start", 400)

    code = request.args.get("code")
    if not code:
        return _text("Callback did not include a code.", 400)

    token_data = exchange_code_for_token(
        settings.shop, settings.api_key, settings.api_secret, code
    )
    logger.info("App installed, scopes: %s", token_data.get("scope", "N/A"))

    response = _text(
        "App installed.\n\n"
        "Store this in your environment variables:\n\n"
        f"SHOPIFY_ADMIN_TOKEN={token_data['access_token']}\n\n"
        "Then open: /api/catalogo-json",
        200,
    )
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    return response
