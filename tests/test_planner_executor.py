from pathlib import Path

import pytest

from skill_rule.config.models import CategoryConfig, ProjectConfig, RegistryConfig
from skill_rule.errors import CategoryFetchError, RegistryUnavailableError
from skill_rule.executor import SyncExecutor
from skill_rule.models import Action, ActionKind, ActionStatus, SyncPlan
from skill_rule.planner import SyncPlanner, rule_target_path
from skill_rule.registry.local import LocalRegistryAdapter
from skill_rule.rules.parser import serialize_rule


def _config(registry_root: Path, **kwargs) -> ProjectConfig:
    kwargs.setdefault("agents", ["cursor", "claude"])
    kwargs.setdefault("categories", {"react": CategoryConfig()})
    return ProjectConfig(registry=RegistryConfig.local(str(registry_root)), **kwargs)


def _plan(registry_root: Path, project_root: Path, **kwargs) -> SyncPlan:
    config = _config(registry_root, **kwargs)
    return SyncPlanner(
        config=config,
        registry=LocalRegistryAdapter(registry_root),
        project_root=project_root,
    ).build()


def test_plan_creates_one_write_per_rule_and_agent(
    registry_root: Path, project_root: Path
) -> None:
    plan = _plan(registry_root, project_root)

    assert plan.is_valid()
    assert len(plan.actions) == 6
    assert all(action.kind == ActionKind.WRITE_TEXT for action in plan.actions)
    assert all(action.status == ActionStatus.CREATE for action in plan.actions)
    expected = {"react-hooks", "react-state", "react-legacy"}
    assert plan.rule_ids_for_agent("cursor") == expected
    assert plan.rule_ids_for_agent("claude") == expected
    assert plan.rule_ids_for_agent("copilot") == set()


def test_target_paths_use_category_and_short_name(
    registry_root: Path, project_root: Path
) -> None:
    plan = _plan(registry_root, project_root, agents=["copilot"])

    paths = sorted(action.path for action in plan.actions)

    assert paths == [
        project_root / ".github" / "rules" / "react" / "hooks.rule.md",
        project_root / ".github" / "rules" / "react" / "legacy.rule.md",
        project_root / ".github" / "rules" / "react" / "state.rule.md",
    ]


def test_skill_rule_target_path(registry_root: Path, project_root: Path) -> None:
    rule = LocalRegistryAdapter(registry_root).fetch_category("flutter")[0]

    target = rule_target_path(project_root, "gemini", rule)

    assert target == project_root / ".gemini" / "rules" / "flutter" / "bloc.rule.md"


def test_materialized_set_follows_filters(
    registry_root: Path, project_root: Path
) -> None:
    plan = _plan(
        registry_root,
        project_root,
        categories={
            "react": CategoryConfig(include=["hooks", "state"], exclude=["state"]),
            "typescript": CategoryConfig(),
            "flutter": CategoryConfig(enabled=False),
        },
        overrides=["typescript-strict"],
    )

    assert plan.rule_ids_for_agent("cursor") == {"react-hooks"}
    assert "Rule excluded: react-state" in plan.skipped
    assert "Rule overridden: typescript-strict" in plan.skipped
    assert not any("react-legacy" in item for item in plan.skipped)


def test_apply_then_replan_is_noop(registry_root: Path, project_root: Path) -> None:
    plan = _plan(registry_root, project_root)

    applied, failed, failures = SyncExecutor().execute(plan)

    assert (applied, failed, failures) == (6, 0, [])
    second = _plan(registry_root, project_root)
    assert len(second.actions) == 6
    assert all(action.status == ActionStatus.NOOP for action in second.actions)
    assert second.pending() == []
    assert SyncExecutor().execute(second) == (0, 0, [])


def test_written_file_carries_serialized_rule(
    registry_root: Path, project_root: Path
) -> None:
    plan = _plan(registry_root, project_root, agents=["cursor"])
    SyncExecutor().execute(plan)

    rule = next(
        rule
        for rule in LocalRegistryAdapter(registry_root).fetch_category("react")
        if rule.id == "react-hooks"
    )
    target = project_root / ".cursor" / "rules" / "react" / "hooks.rule.md"
    assert target.read_text(encoding="utf-8") == serialize_rule(rule)


def test_changed_local_file_is_planned_as_update(
    registry_root: Path, project_root: Path
) -> None:
    SyncExecutor().execute(_plan(registry_root, project_root, agents=["cursor"]))
    target = project_root / ".cursor" / "rules" / "react" / "hooks.rule.md"
    target.write_text("edited locally\n", encoding="utf-8")

    plan = _plan(registry_root, project_root, agents=["cursor"])

    statuses = {action.rule_id: action.status for action in plan.actions}
    assert statuses["react-hooks"] == ActionStatus.UPDATE
    assert statuses["react-state"] == ActionStatus.NOOP
    SyncExecutor().execute(plan)
    assert target.read_text(encoding="utf-8").startswith("---\nid: react-hooks\n")


def test_unknown_agent_is_reported(registry_root: Path, project_root: Path) -> None:
    plan = _plan(registry_root, project_root, agents=["cursor", "vim"])

    assert not plan.is_valid()
    assert "Unknown agent: vim" in [str(error) for error in plan.errors]
    assert plan.rule_ids_for_agent("cursor")


def test_unavailable_registry_stops_planning(tmp_path: Path, project_root: Path) -> None:
    plan = _plan(tmp_path / "missing", project_root)

    assert plan.actions == []
    assert len(plan.errors) == 1
    assert isinstance(plan.errors[0], RegistryUnavailableError)


def test_empty_category_is_skipped(registry_root: Path, project_root: Path) -> None:
    plan = _plan(registry_root, project_root, categories={"rust": CategoryConfig()})

    assert plan.is_valid()
    assert plan.actions == []
    assert plan.skipped == ["No rules found for category: rust"]


def test_malformed_rule_is_skipped(registry_root: Path, project_root: Path) -> None:
    (registry_root / "rules" / "react" / "broken.rule.md").write_text(
        "---\nid: [x\n---\n", encoding="utf-8"
    )

    plan = _plan(registry_root, project_root, agents=["cursor"])

    assert plan.is_valid()
    assert len(plan.actions) == 3
    assert any("rules/react/broken.rule.md" in item for item in plan.skipped)


def test_category_fetch_failure_is_an_error(
    registry_root: Path, project_root: Path, monkeypatch
) -> None:
    registry = LocalRegistryAdapter(registry_root)

    def _boom(category: str):
        raise OSError("disk gone")

    monkeypatch.setattr(registry, "fetch_category", _boom)
    plan = SyncPlanner(
        config=_config(registry_root), registry=registry, project_root=project_root
    ).build()

    assert len(plan.errors) == 1
    assert isinstance(plan.errors[0], CategoryFetchError)
    assert plan.errors[0].category == "react"


def test_plan_summary(registry_root: Path, project_root: Path) -> None:
    summary = _plan(registry_root, project_root).summary()

    assert summary["create"] == 6
    assert summary["noop"] == 0
    assert summary["actions"] == 6
    assert summary["errors"] == 0


def test_executor_reports_write_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    plan = SyncPlan(
        actions=[
            Action(
                ActionKind.WRITE_TEXT,
                blocker / "react" / "hooks.rule.md",
                ActionStatus.CREATE,
                "create rule",
                payload="text",
                rule_id="react-hooks",
                agent="cursor",
            ),
            Action(
                ActionKind.WRITE_TEXT,
                tmp_path / "ok" / "state.rule.md",
                ActionStatus.CREATE,
                "create rule",
                payload="text",
                rule_id="react-state",
                agent="cursor",
            ),
        ],
        errors=[],
        skipped=[],
    )

    applied, failed, failures = SyncExecutor().execute(plan)

    assert (applied, failed) == (1, 1)
    assert "react-hooks" in failures[0]
    assert (tmp_path / "ok" / "state.rule.md").read_text(encoding="utf-8") == "text"


@pytest.mark.parametrize("payload", [None, 42])
def test_executor_rejects_missing_payload(tmp_path: Path, payload) -> None:
    plan = SyncPlan(
        actions=[
            Action(
                ActionKind.WRITE_TEXT,
                tmp_path / "x.rule.md",
                ActionStatus.CREATE,
                "create rule",
                payload=payload,
            )
        ],
        errors=[],
        skipped=[],
    )

    applied, failed, failures = SyncExecutor().execute(plan)

    assert (applied, failed) == (0, 1)
    assert failures[0].startswith("Missing text payload")
    assert not (tmp_path / "x.rule.md").exists()


def test_non_utf8_rule_does_not_break_planning(
    registry_root: Path, project_root: Path
) -> None:
    (registry_root / "rules" / "react" / "bad.rule.md").write_bytes(
        b"---\nid: react-bad\n---\n\xff\xfe body\n"
    )

    plan = _plan(registry_root, project_root, agents=["cursor"])

    assert plan.is_valid()
    assert plan.rule_ids_for_agent("cursor") == {
        "react-hooks",
        "react-legacy",
        "react-state",
    }
    assert any("rules/react/bad.rule.md" in item for item in plan.skipped)


def test_short_name_clash_keeps_first_id(
    registry_root: Path, project_root: Path
) -> None:
    (registry_root / "rules" / "react" / "other.rule.md").write_text(
        "---\nid: hooks\n---\nother hooks\n", encoding="utf-8"
    )

    plan = _plan(registry_root, project_root, agents=["cursor"])

    targets = [action.path for action in plan.actions]
    assert len(targets) == len(set(targets)) == 3
    assert plan.rule_ids_for_agent("cursor") == {"hooks", "react-legacy", "react-state"}
    assert any(
        item.startswith("Rule react-hooks skipped") and "already used by hooks" in item
        for item in plan.skipped
    )

    SyncExecutor().execute(plan)
    second = _plan(registry_root, project_root, agents=["cursor"])
    assert [action.status for action in second.actions] == [ActionStatus.NOOP] * 3
