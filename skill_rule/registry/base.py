import logging
from abc import ABC, abstractmethod

from skill_rule.errors import RuleParseError
from skill_rule.rules.models import Rule
from skill_rule.rules.parser import parse_rule_text

logger = logging.getLogger(__name__)


class IRegistryAdapter(ABC):
    """Source of rule documents, organised by category."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    @property
    @abstractmethod
    def location(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def fetch_category(self, category: str) -> list[Rule]:
        raise NotImplementedError

    @abstractmethod
    def fetch_rule(self, path: str) -> Rule | None:
        raise NotImplementedError

    @abstractmethod
    def list_categories(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def is_available(self) -> bool:
        raise NotImplementedError

    def _parse(self, text: str, source_path: str) -> Rule | None:
        try:
            return parse_rule_text(text, source_path)
        except RuleParseError as exc:
            logger.warning("skipping rule: %s", exc)
            self.warnings.append(f"Rule skipped ({exc.detail}): {source_path}")
            return None
