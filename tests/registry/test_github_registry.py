"""Tests for the GitHub registry adapter with a faked transport."""

import pytest

from skill_rule.errors import InvalidRegistryUrlError, RegistryError
from skill_rule.registry.github import GitHubRegistryAdapter, parse_github_url

TREE_URL = (
    "https://api.github.com/repos/acme/rules/git/trees/main?recursive=1"
)
RAW = "https://raw.githubusercontent.com/acme/rules/main"


@pytest.fixture
def github(fake_http):
    fake_http.add_json("https://api.github.com/repos/acme/rules", {"name": "rules"})
    fake_http.add_json(
        TREE_URL,
        {
            "truncated": False,
            "tree": [
                {"path": "rules", "type": "tree"},
                {"path": "rules/react", "type": "tree"},
                {"path": "rules/go", "type": "tree"},
                {"path": "rules/react/nested", "type": "tree"},
                {"path": "rules/react/hooks.rule.md", "type": "blob"},
                {"path": "rules/react/nested/SKILL.md", "type": "blob"},
                {"path": "rules/react/README.md", "type": "blob"},
                {"path": "rules/go/errors.rule.md", "type": "blob"},
            ],
        },
    )
    fake_http.responses[f"{RAW}/rules/react/hooks.rule.md"] = (
        "---\nid: react-hooks\nversion: 1.1.0\n---\nhooks body\n"
    )
    fake_http.responses[f"{RAW}/rules/react/nested/SKILL.md"] = "skill body\n"
    return fake_http


def test_parse_github_url() -> None:
    assert parse_github_url("https://github.com/acme/rules") == ("acme", "rules")
    assert parse_github_url("https://github.com/acme/rules.git") == ("acme", "rules")
    assert parse_github_url("git@github.com:acme/rules.git") == ("acme", "rules")


def test_invalid_url_raises() -> None:
    with pytest.raises(InvalidRegistryUrlError):
        GitHubRegistryAdapter("https://gitlab.com/acme/rules")


def test_fetch_category(github) -> None:
    adapter = GitHubRegistryAdapter("https://github.com/acme/rules")

    rules = adapter.fetch_category("react")

    assert sorted(rule.id for rule in rules) == ["react-hooks", "react-nested"]
    hooks = next(rule for rule in rules if rule.id == "react-hooks")
    assert hooks.meta.version == "1.1.0"
    assert hooks.source_path == "rules/react/hooks.rule.md"
    assert f"{RAW}/rules/react/README.md" not in github.urls()


def test_tree_is_fetched_once(github) -> None:
    adapter = GitHubRegistryAdapter("https://github.com/acme/rules")

    adapter.list_categories()
    adapter.fetch_category("react")

    assert github.urls().count(TREE_URL) == 1


def test_list_categories(github) -> None:
    adapter = GitHubRegistryAdapter("https://github.com/acme/rules")

    assert adapter.list_categories() == ["go", "react"]


def test_missing_file_raises_registry_error(github) -> None:
    adapter = GitHubRegistryAdapter("https://github.com/acme/rules")

    with pytest.raises(RegistryError):
        adapter.fetch_category("go")


def test_is_available(github) -> None:
    assert GitHubRegistryAdapter("https://github.com/acme/rules").is_available()
    assert not GitHubRegistryAdapter("https://github.com/acme/missing").is_available()


def test_token_header_from_config_and_env(github, monkeypatch) -> None:
    GitHubRegistryAdapter("https://github.com/acme/rules", token="abc").is_available()
    assert github.requested[-1][1]["Authorization"] == "Bearer abc"

    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    GitHubRegistryAdapter("https://github.com/acme/rules").is_available()
    assert github.requested[-1][1]["Authorization"] == "Bearer from-env"


def test_custom_branch(fake_http) -> None:
    fake_http.add_json(
        "https://api.github.com/repos/acme/rules/git/trees/dev?recursive=1",
        {"tree": [{"path": "rules/go", "type": "tree"}]},
    )
    adapter = GitHubRegistryAdapter("https://github.com/acme/rules", branch="dev")

    assert adapter.list_categories() == ["go"]
    assert adapter.location == "github.com/acme/rules@dev"
