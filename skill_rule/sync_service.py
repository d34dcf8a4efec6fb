import logging
from pathlib import Path

from skill_rule.config.models import ProjectConfig
from skill_rule.executor import SyncExecutor
from skill_rule.models import SyncPlan, SyncResult
from skill_rule.planner import SyncPlanner
from skill_rule.registry import IRegistryAdapter, create_registry

logger = logging.getLogger(__name__)


class SyncService:
    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root

    def registry_for(self, config: ProjectConfig) -> IRegistryAdapter:
        return create_registry(config.registry, project_root=self.project_root)

    def plan(
        self, config: ProjectConfig, registry: IRegistryAdapter | None = None
    ) -> SyncPlan:
        registry = registry or self.registry_for(config)
        logger.debug("planning sync from %s", registry.location)
        return SyncPlanner(
            config=config, registry=registry, project_root=self.project_root
        ).build()

    def apply(self, plan: SyncPlan) -> tuple[int, int, list[str]]:
        return SyncExecutor().execute(plan)

    def sync(
        self,
        config: ProjectConfig,
        dry_run: bool = False,
        registry: IRegistryAdapter | None = None,
    ) -> SyncResult:
        plan = self.plan(config, registry=registry)
        result = SyncResult(plan=plan, dry_run=dry_run)
        if dry_run or plan.errors:
            return result
        result.applied, result.failed, result.failures = self.apply(plan)
        return result
