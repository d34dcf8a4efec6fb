from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class ActionKind(str, Enum):
    WRITE_TEXT = "write_text"


class ActionStatus(str, Enum):
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"


@dataclass
class Action:
    kind: ActionKind
    path: Path
    status: ActionStatus
    detail: str
    payload: Optional[Any] = None
    rule_id: Optional[str] = None
    category: Optional[str] = None
    agent: Optional[str] = None
    source: Optional[str] = None


@dataclass
class SyncPlan:
    actions: list[Action]
    errors: list[Exception]
    skipped: list[str]

    def is_valid(self) -> bool:
        return not self.errors

    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ActionStatus}
        for action in self.actions:
            counts[action.status.value] += 1
        counts["actions"] = len(self.actions)
        counts["errors"] = len(self.errors)
        counts["skipped"] = len(self.skipped)
        return counts

    def rule_ids_for_agent(self, agent: str) -> set[str]:
        return {
            action.rule_id
            for action in self.actions
            if action.agent == agent and action.rule_id is not None
        }

    def pending(self) -> list[Action]:
        return [action for action in self.actions if action.status != ActionStatus.NOOP]


@dataclass
class SyncResult:
    plan: SyncPlan
    applied: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return not self.plan.errors and self.failed == 0


@dataclass(frozen=True)
class CategoryRow:
    name: str
    rules: int
    enabled: bool
