from collections import Counter
from pathlib import Path

from rich.panel import Panel
from rich.table import Column, Table

from skill_rule.agents import AgentMetadata
from skill_rule.models import Action, CategoryRow, SyncPlan
from skill_rule.tui.enums import ACTION_STATUS_STYLE, UIStyle
from skill_rule.utils import compact_home_path


class PlanTable:
    @staticmethod
    def summary_block(plan: SyncPlan, mode: str, registry: str):
        counts = Counter(action.status.value for action in plan.actions)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]
        agents = sorted({action.agent for action in plan.actions if action.agent})

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode)
        table.add_row("Registry", registry)
        table.add_row("Agents", ", ".join(agents) or "none")
        table.add_row("Actions", str(len(plan.actions)))
        table.add_row("Statuses", "  ".join(chips))
        return table

    @staticmethod
    def split_by_agent(plan: SyncPlan) -> dict[str, list[Action]]:
        groups: dict[str, list[Action]] = {}
        for action in plan.actions:
            groups.setdefault(action.agent or "unknown", []).append(action)
        return groups

    @staticmethod
    def actions_table(actions: list[Action], root: Path | None = None) -> Table:
        table = Table(
            Column(header="Rule", width=28, overflow="ellipsis"),
            Column(header="Status", width=8),
            Column(header="Target", overflow="ellipsis", max_width=58),
            Column(header="Reason", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )

        for action in actions:
            status_value = action.status.value
            status_style = ACTION_STATUS_STYLE.get(action.status, UIStyle.WHITE.value)
            status_text = f"[{status_style}]{status_value}[/{status_style}]"
            target = action.path
            if root is not None and target.is_relative_to(root):
                target = target.relative_to(root)
            table.add_row(
                action.rule_id or "", status_text, compact_home_path(target), action.detail
            )
        return table


class ApplyTable:
    @staticmethod
    def stats_panel(applied: int, failed: int) -> Panel:
        stats: dict[str, str] = {
            "applied": str(applied),
            "failed": str(failed),
        }
        table = Table(show_header=False, box=None)
        for key, value in stats.items():
            table.add_row(f"[bold]{key}[/bold]", value)
        return Panel(
            table,
            title="sync",
            border_style=UIStyle.GREEN.value if failed == 0 else UIStyle.RED.value,
        )


class AgentsTable:
    @staticmethod
    def agents_table(items: list[AgentMetadata], configured: set[str]) -> Table:
        table = Table(
            Column(header="Agent", width=14),
            Column(header="Name", width=16),
            Column(header="Rules", overflow="ellipsis"),
            Column(header="Configured", width=10),
            expand=True,
            header_style="bold",
        )
        for item in items:
            agent_id = item.agent_id.value
            marker = (
                f"[{UIStyle.GREEN.value}]yes[/{UIStyle.GREEN.value}]"
                if agent_id in configured
                else f"[{UIStyle.DIM.value}]no[/{UIStyle.DIM.value}]"
            )
            table.add_row(agent_id, item.label, item.rules_path, marker)
        return table


class CategoriesTable:
    @staticmethod
    def categories_table(items: list[CategoryRow]) -> Table:
        table = Table(
            Column(header="Category", width=20),
            Column(header="Rules", width=8, justify="right"),
            Column(header="Enabled", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            style = UIStyle.GREEN.value if item.enabled else UIStyle.DIM.value
            label = "enabled" if item.enabled else "-"
            table.add_row(item.name, str(item.rules), f"[{style}]{label}[/{style}]")
        return table

    @staticmethod
    def detected_table(detected: dict[str, list[str]], names: dict[str, str]) -> Table:
        table = Table(
            Column(header="Framework", width=20),
            Column(header="Locations", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for category, locations in detected.items():
            table.add_row(names.get(category, category), ", ".join(locations))
        return table
