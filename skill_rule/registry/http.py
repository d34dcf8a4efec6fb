"""Registry served over plain HTTP(S).

The base URL must serve an ``index.json`` manifest::

    {"categories": {"flutter": ["rules/flutter/bloc.rule.md", ...]}}

Each listed path is fetched relative to the base URL.
"""

import logging
from typing import Any
from urllib.parse import urlparse

from skill_rule.constants import HTTP_INDEX_FILENAME
from skill_rule.errors import InvalidRegistryUrlError, RegistryError
from skill_rule.registry import transport
from skill_rule.registry.base import IRegistryAdapter
from skill_rule.rules.models import Rule

logger = logging.getLogger(__name__)


class HttpRegistryAdapter(IRegistryAdapter):
    def __init__(self, url: str, token: str | None = None) -> None:
        super().__init__()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidRegistryUrlError(url, "HTTP")
        self.base_url = url.rstrip("/")
        self.token = token
        self._index: dict[str, list[str]] | None = None

    @property
    def location(self) -> str:
        return self.base_url

    @property
    def headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def fetch_category(self, category: str) -> list[Rule]:
        rules: list[Rule] = []
        for path in sorted(self._load_index().get(category, [])):
            rule = self._parse(self._fetch_file(path), path)
            if rule is not None:
                rules.append(rule)
        return rules

    def fetch_rule(self, path: str) -> Rule | None:
        try:
            text = self._fetch_file(path)
        except RegistryError:
            return None
        return self._parse(text, path)

    def list_categories(self) -> list[str]:
        return sorted(self._load_index())

    def is_available(self) -> bool:
        try:
            self._load_index()
        except RegistryError as exc:
            logger.debug("HTTP registry unavailable: %s", exc)
            return False
        return True

    def _load_index(self) -> dict[str, list[str]]:
        if self._index is None:
            url = f"{self.base_url}/{HTTP_INDEX_FILENAME}"
            payload = transport.fetch_json(url, headers=self.headers)
            self._index = self._normalize_index(url, payload)
        return self._index

    def _fetch_file(self, path: str) -> str:
        return transport.fetch_text(
            f"{self.base_url}/{path.lstrip('/')}", headers=self.headers
        )

    @staticmethod
    def _normalize_index(url: str, payload: Any) -> dict[str, list[str]]:
        categories = payload.get("categories") if isinstance(payload, dict) else None
        if not isinstance(categories, dict):
            raise RegistryError(f"Registry index missing 'categories' mapping: {url}")
        index: dict[str, list[str]] = {}
        for name, paths in categories.items():
            if not isinstance(paths, list):
                continue
            index[str(name)] = [str(path) for path in paths if isinstance(path, str)]
        return index
