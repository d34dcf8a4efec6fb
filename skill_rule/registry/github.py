import logging
import os
import re
from typing import Any

from skill_rule.constants import (
    DEFAULT_BRANCH,
    GITHUB_TOKEN_ENV,
    RULE_SUFFIX,
    RULES_DIRNAME,
    SKILL_FILENAME,
)
from skill_rule.errors import InvalidRegistryUrlError, RegistryError
from skill_rule.registry import transport
from skill_rule.registry.base import IRegistryAdapter
from skill_rule.rules.models import Rule

logger = logging.getLogger(__name__)

_GITHUB_URL_RE = re.compile(r"github\.com[/:]([^/]+)/([^/#?]+)")

API_ROOT = "https://api.github.com"
RAW_ROOT = "https://raw.githubusercontent.com"


def parse_github_url(url: str) -> tuple[str, str]:
    match = _GITHUB_URL_RE.search(url)
    if not match:
        raise InvalidRegistryUrlError(url, "GitHub")
    owner = match.group(1)
    repo = match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


class GitHubRegistryAdapter(IRegistryAdapter):
    def __init__(
        self, url: str, branch: str | None = None, token: str | None = None
    ) -> None:
        super().__init__()
        self.owner, self.repo = parse_github_url(url)
        self.branch = branch or DEFAULT_BRANCH
        self.token = token or os.environ.get(GITHUB_TOKEN_ENV) or None
        self._tree: list[dict[str, Any]] | None = None

    @property
    def location(self) -> str:
        return f"github.com/{self.owner}/{self.repo}@{self.branch}"

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_category(self, category: str) -> list[Rule]:
        prefix = f"{RULES_DIRNAME}/{category}/"
        paths = sorted(
            item["path"]
            for item in self._load_tree()
            if item.get("type") == "blob"
            and item["path"].startswith(prefix)
            and self._is_rule_path(item["path"])
        )

        rules: list[Rule] = []
        for path in paths:
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
        categories: set[str] = set()
        for item in self._load_tree():
            if item.get("type") != "tree":
                continue
            parts = item["path"].split("/")
            if len(parts) == 2 and parts[0] == RULES_DIRNAME and parts[1]:
                categories.add(parts[1])
        return sorted(categories)

    def is_available(self) -> bool:
        try:
            transport.fetch_json(
                f"{API_ROOT}/repos/{self.owner}/{self.repo}", headers=self.headers
            )
        except RegistryError as exc:
            logger.debug("GitHub registry unavailable: %s", exc)
            return False
        return True

    def _load_tree(self) -> list[dict[str, Any]]:
        if self._tree is None:
            url = (
                f"{API_ROOT}/repos/{self.owner}/{self.repo}"
                f"/git/trees/{self.branch}?recursive=1"
            )
            payload = transport.fetch_json(url, headers=self.headers)
            if not isinstance(payload, dict) or not isinstance(
                payload.get("tree"), list
            ):
                raise RegistryError(f"Unexpected tree response from {url}")
            if payload.get("truncated"):
                logger.warning("GitHub tree listing truncated for %s", self.location)
            self._tree = [
                item
                for item in payload["tree"]
                if isinstance(item, dict) and isinstance(item.get("path"), str)
            ]
        return self._tree

    def _fetch_file(self, path: str) -> str:
        url = f"{RAW_ROOT}/{self.owner}/{self.repo}/{self.branch}/{path}"
        return transport.fetch_text(url)

    @staticmethod
    def _is_rule_path(path: str) -> bool:
        return path.endswith(RULE_SUFFIX) or path.rsplit("/", 1)[-1] == SKILL_FILENAME
