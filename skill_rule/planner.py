import logging
from pathlib import Path

from skill_rule.agents import agent_metadata, is_valid_agent
from skill_rule.config.models import ProjectConfig
from skill_rule.constants import RULE_SUFFIX
from skill_rule.errors import (
    CategoryFetchError,
    RegistryUnavailableError,
    SyncAppError,
)
from skill_rule.models import Action, ActionKind, ActionStatus, SyncPlan
from skill_rule.registry.base import IRegistryAdapter
from skill_rule.rules.filters import SkipReason, select_rules
from skill_rule.rules.models import Rule
from skill_rule.rules.parser import serialize_rule
from skill_rule.utils import read_text_safe

logger = logging.getLogger(__name__)


def rule_target_path(project_root: Path, agent: str, rule: Rule) -> Path:
    rules_dir = agent_metadata(agent).rules_dir(project_root)
    return rules_dir / rule.category / f"{rule.short_name}{RULE_SUFFIX}"


class SyncPlanner:
    def __init__(
        self,
        config: ProjectConfig,
        registry: IRegistryAdapter,
        project_root: Path,
    ) -> None:
        self.config = config
        self.registry = registry
        self.project_root = project_root

        self.actions: list[Action] = []
        self.errors: list[Exception] = []
        self.skipped: list[str] = []

    def build(self) -> SyncPlan:
        agents = self._valid_agents()
        if not self.registry.is_available():
            self.errors.append(RegistryUnavailableError(self.registry.location))
            return self._plan()

        for category in self.config.enabled_categories():
            self._plan_category(category, agents)

        self.skipped.extend(self.registry.warnings)
        return self._plan()

    def _plan(self) -> SyncPlan:
        return SyncPlan(actions=self.actions, errors=self.errors, skipped=self.skipped)

    def _valid_agents(self) -> list[str]:
        agents: list[str] = []
        for agent in self.config.agents:
            if not is_valid_agent(agent):
                self.errors.append(SyncAppError(f"Unknown agent: {agent}"))
                continue
            if agent not in agents:
                agents.append(agent)
        return agents

    def _plan_category(self, category: str, agents: list[str]) -> None:
        try:
            rules = self.registry.fetch_category(category)
        except (SyncAppError, OSError) as exc:
            self.errors.append(CategoryFetchError(category, str(exc)))
            return
        logger.debug("fetched %d rule(s) for %s", len(rules), category)

        if not rules:
            self.skipped.append(f"No rules found for category: {category}")
            return

        result = select_rules(
            rules, self.config.categories[category], self.config.overrides
        )
        for rule, reason in result.skipped:
            if reason == SkipReason.NOT_INCLUDED:
                continue
            self.skipped.append(f"Rule {reason.value}: {rule.id}")

        targets: dict[str, str] = {}
        for rule in result.selected:
            # ids sharing a short name map to one file; first id wins
            owner = targets.setdefault(rule.short_name, rule.id)
            if owner != rule.id:
                self.skipped.append(
                    f"Rule {rule.id} skipped: target "
                    f"{category}/{rule.short_name}{RULE_SUFFIX} already used by {owner}"
                )
                continue
            content = serialize_rule(rule)
            for agent in agents:
                self.actions.append(self._plan_write(rule, agent, content))

    def _plan_write(self, rule: Rule, agent: str, content: str) -> Action:
        target = rule_target_path(self.project_root, agent, rule)
        current = read_text_safe(target)
        if current is None:
            status = ActionStatus.CREATE
            detail = "create rule"
        elif current == content:
            status = ActionStatus.NOOP
            detail = "already in sync"
        else:
            status = ActionStatus.UPDATE
            detail = f"update rule ({rule.meta.version})"
        return Action(
            ActionKind.WRITE_TEXT,
            target,
            status,
            detail,
            payload=content,
            rule_id=rule.id,
            category=rule.category,
            agent=agent,
            source=rule.source_path,
        )
