#!/usr/bin/env python3
"""
Install the catalogue app on a shop from the terminal.

Runs the OAuth authorization code grant against a one-shot callback
server on localhost, verifies state and HMAC, and writes the resulting
Admin API token to .env as SHOPIFY_ADMIN_TOKEN, where the web app and
export_catalog.py pick it up.

Shop, client id and secret default to SHOPIFY_SHOP / SHOPIFY_API_KEY /
SHOPIFY_API_SECRET.

Usage:
    python3 shopify_oauth.py
    python3 shopify_oauth.py --shop paytton --client-id KEY --client-secret SECRET --port 8888
    python3 shopify_oauth.py --check
"""

import argparse
import os
import sys
import threading
import urllib.parse
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Dict, List, Optional

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from dotenv import load_dotenv, set_key

from tire_catalog.common import CatalogError, setup_logging
from tire_catalog.common.config_loader import DEFAULT_SCOPES
from tire_catalog.shopify import ShopifyAPIClient
from tire_catalog.shopify.oauth import (
    exchange_code_for_token,
    generate_state,
    get_authorization_url,
    verify_hmac,
)

ENV_FILE = Path(__file__).parent / ".env"
load_dotenv(ENV_FILE)

CALLBACK_TIMEOUT = 300

PAGE = (
    "<html><body style='font-family: sans-serif; text-align: center; padding-top: 40px;'>"
    "<h2>{title}</h2><p>{body}</p></body></html>"
)


class CallbackServer:
    """
    Serves exactly one request on /callback and keeps its query parameters.

    Usage:
        server = CallbackServer(8888)
        server.start()
        params = server.wait(timeout=300)
    """

    def __init__(self, port: int):
        self.port = port
        self.params: Optional[Dict[str, List[str]]] = None
        self._httpd = HTTPServer(("localhost", port), self._handler_class())
        self._thread = threading.Thread(target=self._httpd.handle_request, daemon=True)

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}/callback"

    def _handler_class(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                query = urllib.parse.parse_qs(urllib.parse.urlparse(self.path).query)
                server.params = query
                if "code" in query:
                    page = PAGE.format(title="App authorized",
                                       body="Return to the terminal to finish.")
                    self.send_response(200)
                else:
                    error = query.get("error", ["no code in callback"])[0]
                    page = PAGE.format(title="Authorization failed", body=error)
                    self.send_response(400)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.end_headers()
                self.wfile.write(page.encode("utf-8"))

            def log_message(self, format, *args):
                return

        return Handler

    def start(self) -> None:
        self._thread.start()

    def wait(self, timeout: int) -> Optional[Dict[str, List[str]]]:
        self._thread.join(timeout=timeout)
        self._httpd.server_close()
        return self.params


def authorize(shop: str, client_id: str, client_secret: str, scopes: str,
              port: int, open_browser: bool = True) -> dict:
    """
    Run the browser round trip and exchange the code.

    Returns:
        Token response with access_token and scope

    Raises:
        CatalogError: On timeout, state/HMAC mismatch or a refused exchange
    """
    state = generate_state()
    server = CallbackServer(port)
    auth_url = get_authorization_url(shop, client_id, server.redirect_uri, state, scopes)

    print(f"Shop:         {shop}")
    print(f"Scopes:       {scopes}")
    print(f"Redirect URI: {server.redirect_uri}  (must be allowed in the app settings)")
    print(f"\nAuthorize here if no browser opens:\n{auth_url}\n")

    server.start()
    if open_browser:
        webbrowser.open(auth_url)

    params = server.wait(CALLBACK_TIMEOUT)
    if not params or "code" not in params:
        raise CatalogError("No authorization code received")
    if params.get("state", [None])[0] != state:
        raise CatalogError("State mismatch on the callback")
    if not verify_hmac(params, client_secret):
        raise CatalogError("Invalid HMAC on the callback")

    return exchange_code_for_token(shop, client_id, client_secret, params["code"][0])


def check_token(shop: str, access_token: str) -> bool:
    """Run a minimal GraphQL query with the token."""
    with ShopifyAPIClient(shop=shop, access_token=access_token) as client:
        ok = client.test_connection()
    print(f"{'OK' if ok else 'FAILED'}: {client.shop}.myshopify.com")
    return ok


def main():
    parser = argparse.ArgumentParser(description="Get an Admin API token for the catalogue app")
    parser.add_argument("--shop", "-s", default=os.getenv("SHOPIFY_SHOP"),
                        help="Shop name or domain (default: SHOPIFY_SHOP)")
    parser.add_argument("--client-id", "-i", default=os.getenv("SHOPIFY_API_KEY"),
                        help="App client id (default: SHOPIFY_API_KEY)")
    parser.add_argument("--client-secret", "-c", default=os.getenv("SHOPIFY_API_SECRET"),
                        help="App client secret (default: SHOPIFY_API_SECRET)")
    parser.add_argument("--scopes", default=os.getenv("SHOPIFY_SCOPES") or DEFAULT_SCOPES,
                        help=f"Comma-separated access scopes (default: {DEFAULT_SCOPES})")
    parser.add_argument("--port", "-p", type=int, default=8888,
                        help="Localhost port for the callback (default: 8888)")
    parser.add_argument("--no-browser", action="store_true",
                        help="Print the authorization URL without opening a browser")
    parser.add_argument("--no-save", action="store_true",
                        help="Print the token instead of writing it to .env")
    parser.add_argument("--check", action="store_true",
                        help="Only check SHOPIFY_ADMIN_TOKEN against the shop")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (debug) logging")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    if not args.shop:
        parser.error("--shop or SHOPIFY_SHOP is required")

    if args.check:
        token = os.getenv("SHOPIFY_ADMIN_TOKEN")
        if not token:
            print("Error: SHOPIFY_ADMIN_TOKEN is not set")
            sys.exit(1)
        sys.exit(0 if check_token(args.shop, token) else 1)

    if not args.client_id or not args.client_secret:
        parser.error("--client-id and --client-secret (or SHOPIFY_API_KEY / SHOPIFY_API_SECRET) are required")

    try:
        token_data = authorize(args.shop, args.client_id, args.client_secret,
                               args.scopes, args.port, open_browser=not args.no_browser)
    except CatalogError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    access_token = token_data["access_token"]
    print(f"Granted scopes: {token_data.get('scope', 'N/A')}")

    if args.no_save:
        print(f"\nSHOPIFY_ADMIN_TOKEN={access_token}")
    else:
        ENV_FILE.touch(exist_ok=True)
        set_key(str(ENV_FILE), "SHOPIFY_ADMIN_TOKEN", access_token)
        print(f"SHOPIFY_ADMIN_TOKEN written to {ENV_FILE}")

    check_token(args.shop, access_token)


if __name__ == "__main__":
    main()
