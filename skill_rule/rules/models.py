"""Rule data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LoadMode(str, Enum):
    EAGER = "eager"
    ON_DEMAND = "on-demand"


@dataclass(frozen=True)
class RuleReference:
    name: str
    path: str
    load_mode: LoadMode = LoadMode.ON_DEMAND


@dataclass(frozen=True)
class RuleMeta:
    id: str
    version: str
    category: str
    triggers: list[str] = field(default_factory=list)
    extends: str | None = None


@dataclass(frozen=True)
class Rule:
    meta: RuleMeta
    content: str
    source_path: str
    references: list[RuleReference] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.meta.id

    @property
    def category(self) -> str:
        return self.meta.category

    @property
    def short_name(self) -> str:
        prefix = f"{self.meta.category}-"
        if self.meta.id.startswith(prefix) and len(self.meta.id) > len(prefix):
            return self.meta.id[len(prefix) :]
        return self.meta.id
