from pathlib import Path

from rich.console import Console

from skill_rule.agents import AgentMetadata
from skill_rule.models import CategoryRow, SyncPlan
from skill_rule.tui.enums import UIStyle
from skill_rule.tui.sections import UISection
from skill_rule.tui.tables import (
    AgentsTable,
    ApplyTable,
    CategoriesTable,
    PlanTable,
)
from skill_rule.utils import compact_home_paths_in_text


class SyncConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_plan(
        self, plan: SyncPlan, mode: str, registry: str, root: Path | None = None
    ) -> None:
        self.console.print(
            UISection.wrap(
                "sync overview",
                PlanTable.summary_block(plan, mode=mode, registry=registry),
                style=UIStyle.BLUE.value,
            )
        )

        groups = PlanTable.split_by_agent(plan)
        for agent, actions in groups.items():
            self.console.print(
                UISection.wrap(
                    f"{agent} rules",
                    PlanTable.actions_table(actions, root=root),
                    style=UIStyle.CYAN.value,
                )
            )
        if not groups:
            self.console.print(
                UISection.note(
                    "actions", "No rules to sync.", style=UIStyle.DIM.value
                )
            )

        if plan.errors:
            errors_text = "\n".join(
                [f"- {compact_home_paths_in_text(str(item))}" for item in plan.errors]
            )
            self.console.print(
                UISection.note("errors", errors_text, style=UIStyle.RED.value)
            )

        if plan.skipped:
            skipped_text = "\n".join(
                [f"- {compact_home_paths_in_text(item)}" for item in plan.skipped]
            )
            self.console.print(
                UISection.note("skipped", skipped_text, style=UIStyle.YELLOW.value)
            )

    def render_apply_result(
        self, applied: int, failed: int, failures: list[str]
    ) -> None:
        self.console.print(ApplyTable.stats_panel(applied=applied, failed=failed))
        if failures:
            failure_text = "\n".join(
                [f"- {compact_home_paths_in_text(item)}" for item in failures]
            )
            self.console.print(
                UISection.note("failures", failure_text, style=UIStyle.RED.value)
            )

    def render_dry_run(self) -> None:
        self.console.print(
            UISection.note(
                "dry run",
                "No files were written.\n- sr sync",
                style=UIStyle.DIM.value,
            )
        )

    def render_agents(self, items: list[AgentMetadata], configured: set[str]) -> None:
        self.console.print(
            UISection.wrap(
                "supported agents",
                AgentsTable.agents_table(items, configured),
                style=UIStyle.BLUE.value,
            )
        )

    def render_categories(self, items: list[CategoryRow], registry: str) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "categories",
                    f"No categories found in {registry}.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "available categories",
                CategoriesTable.categories_table(items),
                style=UIStyle.BLUE.value,
                subtitle=registry,
            )
        )

    def render_detected(
        self, detected: dict[str, list[str]], names: dict[str, str]
    ) -> None:
        if not detected:
            self.console.print(
                UISection.note(
                    "frameworks",
                    "No frameworks detected.\nAdd categories manually with: sr add <category>",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                f"detected {len(detected)} framework(s)",
                CategoriesTable.detected_table(detected, names),
                style=UIStyle.GREEN.value,
            )
        )

    def render_config_created(
        self, path: str, agents: list[str], categories: list[str]
    ) -> None:
        self.console.print(
            UISection.note(
                "config",
                f"Created [bold]{compact_home_paths_in_text(path)}[/bold]\n"
                f"Agents: {', '.join(agents)}\n"
                f"Categories: {', '.join(categories) or '(none)'}",
                style=UIStyle.GREEN.value,
            )
        )
        self.console.print(
            UISection.note("next", "Fetch rules with:\n- sr sync", style=UIStyle.DIM.value)
        )

    def render_added(self, added: list[str], existing: list[str], errors: list[str]) -> None:
        lines = [f"[green]+ {item}[/green]" for item in added]
        lines.extend(f"[dim]= {item} (already configured)[/dim]" for item in existing)
        if lines:
            self.console.print(
                UISection.note("categories", "\n".join(lines), style=UIStyle.GREEN.value)
            )
        if errors:
            self.console.print(
                UISection.note(
                    "warnings",
                    "\n".join(f"- {item}" for item in errors),
                    style=UIStyle.YELLOW.value,
                )
            )

    def render_message(self, title: str, message: str, style: str = UIStyle.YELLOW.value) -> None:
        self.console.print(UISection.note(title, message, style=style))
