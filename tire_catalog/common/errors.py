"""
Catalogue errors.

Every error carries the HTTP status the web layer answers with, so the
Flask error handler and the CLI scripts can report them the same way.
"""


class CatalogError(Exception):
    """Base class for errors surfaced to the caller as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(CatalogError):
    """Required credential, shop or alias map is absent or malformed."""

    status_code = 400


class UpstreamError(CatalogError):
    """Shopify returned errors, an HTTP failure, or an unparseable page."""

    status_code = 500


class ValidationError(CatalogError):
    """A query parameter could not be interpreted."""

    status_code = 400
