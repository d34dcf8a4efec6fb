"""Interactive Textual-based selector for pending sync writes."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, SelectionList, Static
from textual.widgets.selection_list import Selection

from skill_rule.models import ActionStatus, SyncPlan


class SyncSelectorApp(App[list[int]]):
    """Pick which rule writes of a sync plan to apply."""

    TITLE = "Sync Selector"
    CSS_DEFAULT = """
    Screen {
        layout: vertical;
    }
    #info {
        height: 3;
        content-align: center middle;
        background: $primary-darken-2;
        color: $text;
        padding: 0 1;
    }
    SelectionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("a", "select_all", "Select All"),
        Binding("n", "select_none", "Select None"),
        Binding("enter", "confirm", "Confirm"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, plan: SyncPlan) -> None:
        super().__init__()
        self._plan = plan

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(
            f"Pending writes: {len(self._plan.pending())} | "
            f"Use [a] select all, [n] select none, [enter] confirm",
            id="info",
        )

        selections: list[Selection[int]] = []
        for i, action in enumerate(self._plan.actions):
            if action.status == ActionStatus.NOOP:
                continue
            label = f"[{action.agent}] {action.status.value}: {action.rule_id}"
            selections.append(Selection(label, i, True))

        yield SelectionList[int](*selections)
        yield Footer()

    def action_select_all(self) -> None:
        sel = self.query_one(SelectionList)
        sel.select_all()

    def action_select_none(self) -> None:
        sel = self.query_one(SelectionList)
        sel.deselect_all()

    def action_confirm(self) -> None:
        sel = self.query_one(SelectionList)
        self.exit(list(sel.selected))

    def action_quit_app(self) -> None:
        self.exit([])


def filter_plan_by_selection(plan: SyncPlan, selected_indices: list[int]) -> SyncPlan:
    """Create a new plan containing only the selected actions."""
    selected_set = set(selected_indices)
    filtered = [action for i, action in enumerate(plan.actions) if i in selected_set]
    return SyncPlan(actions=filtered, errors=plan.errors, skipped=plan.skipped)
