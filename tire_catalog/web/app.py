"""Flask web app for the tire catalogue.

Serves the browser catalogue page, the JSON API consumed by it, the
XLSX/PDF downloads and the Shopify app install routes.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template

from ..common.config_loader import load_catalog_settings
from ..common.constants import CATEGORY_ORDER
from ..common.errors import CatalogError
from ..common.log_config import setup_logging
from .api import api
from .auth import auth
from .config import FLASK_DEBUG, FLASK_HOST, FLASK_PORT

# Load environment variables from the project .env file
env_path = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.register_blueprint(api)
app.register_blueprint(auth)


@app.errorhandler(CatalogError)
def handle_catalog_error(error: CatalogError):
    """Report configuration, validation and upstream errors as JSON."""
    if error.status_code >= 500:
        logger.error("%s: %s", type(error).__name__, error.message)
    else:
        logger.warning("%s: %s", type(error).__name__, error.message)
    return jsonify({"error": error.message}), error.status_code


@app.route("/", methods=["GET"])
def index() -> str:
    """Render the catalogue page."""
    settings = load_catalog_settings()
    return render_template(
        "index.html",
        category_order=list(settings.get("category_order", CATEGORY_ORDER)),
        default_limit=settings.get("default_limit", 300),
    )


def main():
    setup_logging(verbose=FLASK_DEBUG, timestamps=True)
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)


if __name__ == "__main__":
    main()
