"""
Fetcher:
- GET the server directory (JSON list) with requests
- or read the same JSON from a local file
No retries: transport errors go straight to the caller.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .errors import CatalogFetchError

CATALOG_URL = (
    "https://api.nordvpn.com/v1/servers?limit=9999"
    "&filters[servers_technologies][identifier]=wireguard_udp"
)
DEFAULT_TIMEOUT = 25


def _check_catalog(payload: Any, origin: str) -> List[Any]:
    if not isinstance(payload, list):
        raise CatalogFetchError(
            f"{origin}: expected a JSON list, got {type(payload).__name__}"
        )
    return payload


class CatalogFetcher:
    def __init__(self, config: Optional[Dict] = None, session: Optional[requests.Session] = None):
        self.config = config or {}
        catalog_cfg = self.config.get("catalog", {}) or {}

        self.url = catalog_cfg.get("url") or CATALOG_URL
        self.timeout = catalog_cfg.get("timeout", DEFAULT_TIMEOUT)
        self.path = catalog_cfg.get("path")
        self.session = session or requests.Session()

    def fetch(self) -> List[Any]:
        if self.path:
            return self.load_file(self.path)
        return self.fetch_url(self.url)

    def fetch_url(self, url: str) -> List[Any]:
        resp = self.session.get(
            url,
            timeout=self.timeout,
            headers={"User-Agent": "Mozilla/5.0", "Accept": "application/json"},
            allow_redirects=True,
        )
        resp.raise_for_status()
        try:
            payload = resp.json()
        except ValueError as exc:
            raise CatalogFetchError(f"{url}: response is not JSON") from exc
        return _check_catalog(payload, url)

    @staticmethod
    def load_file(path: str) -> List[Any]:
        text = Path(path).read_text(encoding="utf-8")
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise CatalogFetchError(f"{path}: not valid JSON") from exc
        return _check_catalog(payload, str(path))
