import json
from pathlib import Path
from typing import Any

import requests

from deck_server.errors import NotFound, Unavailable
from server_logs.loggers import reference_logger


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class ReferenceDataProxy:
    """Serves the oracle card catalog and the featured decks verbatim.

    Each source is either an http(s) URL or a path to a local JSON file.
    Nothing is cached and failed fetches are not retried.
    """

    def __init__(self, oracle_cards_source: str, featured_decks_source: str, timeout: float = 10.0):
        self.oracle_cards_source = str(oracle_cards_source)
        self.featured_decks_source = str(featured_decks_source)
        self.timeout = timeout

    def get_catalog(self) -> Any:
        return self._load("oracle cards", self.oracle_cards_source)

    def get_featured_decks(self) -> Any:
        return self._load("featured decks", self.featured_decks_source)

    def _load(self, label: str, source: str) -> Any:
        if is_url(source):
            return self._fetch(label, source)
        return self._read(label, Path(source))

    def _fetch(self, label, url):
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            reference_logger.error("reference_fetch_failed", source=url, error=str(e))
            raise Unavailable(f"Failed to fetch {label}") from e

        if response.status_code == 404:
            reference_logger.warning("reference_missing", source=url)
            raise NotFound(f"No {label} available")
        if not response.ok:
            reference_logger.error("reference_fetch_failed", source=url, status=response.status_code)
            raise Unavailable(f"Failed to fetch {label}")

        try:
            return response.json()
        except ValueError as e:
            reference_logger.error("reference_invalid_json", source=url, error=str(e))
            raise Unavailable(f"Failed to fetch {label}") from e

    def _read(self, label, path: Path):
        if not path.is_file():
            reference_logger.warning("reference_missing", source=str(path))
            raise NotFound(f"No {label} available")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            reference_logger.error("reference_read_failed", source=str(path), error=str(e))
            raise Unavailable(f"Failed to load {label}") from e
