import logging
from pathlib import Path

from skill_rule.constants import RULE_SUFFIX, RULES_DIRNAME, SKILL_FILENAME
from skill_rule.registry.base import IRegistryAdapter
from skill_rule.rules.models import Rule

logger = logging.getLogger(__name__)


def is_rule_file(path: Path) -> bool:
    return path.is_file() and (
        path.name.endswith(RULE_SUFFIX) or path.name == SKILL_FILENAME
    )


class LocalRegistryAdapter(IRegistryAdapter):
    def __init__(self, base_path: Path | str) -> None:
        super().__init__()
        self._base_path = Path(base_path).expanduser()

    @property
    def location(self) -> str:
        return str(self._base_path)

    @property
    def rules_dir(self) -> Path:
        return self._base_path / RULES_DIRNAME

    def fetch_category(self, category: str) -> list[Rule]:
        category_dir = self.rules_dir / category
        if not category_dir.is_dir():
            return []

        rules: list[Rule] = []
        for path in sorted(category_dir.rglob("*")):
            if not is_rule_file(path):
                continue
            relative = path.relative_to(self._base_path).as_posix()
            text = self._read(path, relative)
            if text is None:
                continue
            rule = self._parse(text, relative)
            if rule is not None:
                rules.append(rule)
        return rules

    def fetch_rule(self, path: str) -> Rule | None:
        full_path = self._base_path / path
        if not full_path.is_file():
            return None
        text = self._read(full_path, path)
        if text is None:
            return None
        return self._parse(text, path)

    def list_categories(self) -> list[str]:
        if not self.rules_dir.is_dir():
            return []
        return sorted(
            child.name
            for child in self.rules_dir.iterdir()
            if child.is_dir() and not child.name.startswith(".")
        )

    def is_available(self) -> bool:
        return self.rules_dir.is_dir()

    def _read(self, path: Path, source_path: str) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("skipping rule with invalid UTF-8: %s", source_path)
            self.warnings.append(f"Rule skipped (not valid UTF-8): {source_path}")
            return None
