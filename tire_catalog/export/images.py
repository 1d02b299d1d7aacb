"""
Image Fetcher

Downloads group images for embedding in XLSX/PDF exports. A missing or
broken image never fails an export: it is logged and the cell is left
without a picture.
"""

import logging
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)


class ImageFetcher:
    """
    Fetches image bytes, once per URL for the lifetime of one export.

    Usage:
        with ImageFetcher() as images:
            data = images.get("https://cdn.shopify.com/...png")
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 15):
        self.session = session or requests.Session()
        self.timeout = timeout
        self._cache: Dict[str, Optional[bytes]] = {}

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def get(self, url: str) -> Optional[bytes]:
        """
        Return image bytes, or None if the URL is blank or the download failed.
        """
        if not url or not url.startswith("http"):
            return None
        if url not in self._cache:
            self._cache[url] = self._download(url)
        return self._cache[url]

    def _download(self, url: str) -> Optional[bytes]:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Image download failed for %s: %s", url, e)
            return None
        return response.content
