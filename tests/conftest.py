import sys
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


RULE_FILES: dict[str, str] = {
    "rules/react/hooks.rule.md": (
        "---\n"
        "id: react-hooks\n"
        "version: 1.2.0\n"
        "triggers: [useEffect, '*.tsx']\n"
        "---\n"
        "\n"
        "# Hooks\n"
        "\n"
        "Keep effects small. See [patterns](./patterns.md) <!-- load: eager -->\n"
    ),
    "rules/react/state.rule.md": (
        "---\n"
        "id: react-state\n"
        "version: 1.0.0\n"
        "triggers: [useState]\n"
        "---\n"
        "\n"
        "# State\n"
    ),
    "rules/react/legacy.rule.md": "# Legacy\n\nNo frontmatter here.\n",
    "rules/typescript/strict.rule.md": (
        "---\n"
        "id: typescript-strict\n"
        "version: 2.0.0\n"
        "triggers: ['*.ts']\n"
        "---\n"
        "\n"
        "Enable strict mode.\n"
    ),
    "rules/flutter/bloc/SKILL.md": (
        "---\n"
        "id: flutter-bloc\n"
        "triggers: [bloc]\n"
        "---\n"
        "\n"
        "Use cubits for simple state.\n"
    ),
    "rules/flutter/bloc/README.txt": "not a rule\n",
}


@dataclass
class FakeHttp:
    responses: dict[str, str] = field(default_factory=dict)
    requested: list[tuple[str, dict[str, str]]] = field(default_factory=list)

    def add_json(self, url: str, payload: Any) -> None:
        self.responses[url] = json.dumps(payload)

    def urls(self) -> list[str]:
        return [url for url, _ in self.requested]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def registry_root(tmp_path: Path) -> Path:
    root = tmp_path / "registry"
    for relative, text in RULE_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_config(project_root: Path, write_json) -> Callable[..., Path]:
    def _write(**overrides: Any) -> Path:
        payload: dict[str, Any] = {
            "registry": {"type": "github", "url": "https://github.com/ngxtm/skill-rule"},
            "agents": ["cursor", "claude"],
            "categories": {"react": {"enabled": True}},
        }
        payload.update(overrides)
        path = project_root / ".rules.json"
        write_json(path, payload)
        return path

    return _write


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    """Replace the registry HTTP transport with an in-memory URL map."""
    from skill_rule.errors import RegistryRequestError
    from skill_rule.registry import transport

    fake = FakeHttp()

    def _fetch_text(url: str, headers=None, timeout: int = 20) -> str:
        fake.requested.append((url, dict(headers or {})))
        if url not in fake.responses:
            raise RegistryRequestError(url, "HTTP 404")
        return fake.responses[url]

    monkeypatch.setattr(transport, "fetch_text", _fetch_text)
    return fake
