from typing import Optional, Protocol

from skill_rule.models import Action, ActionKind, ActionStatus, SyncPlan


class ActionHandler(Protocol):
    def handle(self, action: Action) -> tuple[bool, Optional[str]]: ...


class WriteTextHandler:
    def handle(self, action: Action) -> tuple[bool, Optional[str]]:
        if action.status == ActionStatus.NOOP:
            return False, None
        if not isinstance(action.payload, str):
            return False, f"Missing text payload for write action: {action.path}"

        action.path.parent.mkdir(parents=True, exist_ok=True)
        action.path.write_text(action.payload, encoding="utf-8")
        return True, None


class SyncExecutor:
    def __init__(self) -> None:
        self.handlers: dict[ActionKind, ActionHandler] = {
            ActionKind.WRITE_TEXT: WriteTextHandler(),
        }

    def execute(self, plan: SyncPlan) -> tuple[int, int, list[str]]:
        applied = 0
        failed = 0
        failures: list[str] = []

        for action in plan.actions:
            try:
                handler = self.handlers.get(action.kind)
                if handler is None:
                    failed += 1
                    failures.append(f"Unknown action kind: {action.kind.value}")
                    continue

                changed, failure = handler.handle(action)
                if failure is not None:
                    failed += 1
                    failures.append(failure)
                    continue
                if changed:
                    applied += 1
            except OSError as exc:
                failed += 1
                failures.append(
                    f"Failed to write {action.rule_id} to {action.agent} "
                    f"({action.path}): {exc}"
                )

        return applied, failed, failures
