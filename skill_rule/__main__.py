import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from skill_rule import __version__
from skill_rule.agents import (
    DEFAULT_INIT_AGENTS,
    all_agents,
    detect_agents,
    is_valid_agent,
)
from skill_rule.config import CategoryConfig, ConfigRepository, ProjectConfig, RegistryConfig
from skill_rule.detect import (
    FRAMEWORKS,
    FrameworkDetector,
    framework_name,
    is_valid_category,
)
from skill_rule.errors import SyncAppError
from skill_rule.models import CategoryRow, SyncPlan, SyncResult
from skill_rule.registry import create_registry
from skill_rule.sync_service import SyncService
from skill_rule.tui import SyncConsoleUI
from skill_rule.tui.enums import UIStyle
from skill_rule.tui.selector import SyncSelectorApp, filter_plan_by_selection
from skill_rule.utils import split_csv

logger = logging.getLogger("skill_rule")


def _root(obj: Dict[str, Any]) -> Path:
    return obj["root"]


def _load_config(repository: ConfigRepository) -> ProjectConfig:
    try:
        return repository.load()
    except SyncAppError as exc:
        raise click.ClickException(str(exc))


def _local_option(help_text: str):
    return click.option(
        "--local",
        "local_path",
        type=click.Path(path_type=Path),
        default=None,
        help=help_text,
    )


def _render_sync(
    ui: SyncConsoleUI, service: SyncService, result: SyncResult, registry: str
) -> None:
    mode = "dry-run" if result.dry_run else "sync"
    ui.render_plan(result.plan, mode=mode, registry=registry, root=service.project_root)
    if result.dry_run:
        ui.render_dry_run()
        if result.plan.errors:
            raise click.exceptions.Exit(1)
        return
    if result.plan.errors:
        raise click.ClickException("Sync aborted due to registry/config errors above.")
    ui.render_apply_result(result.applied, result.failed, result.failures)
    if result.failed:
        raise click.exceptions.Exit(1)


def _run_sync(
    ui: SyncConsoleUI,
    service: SyncService,
    config: ProjectConfig,
    dry_run: bool = False,
    interactive: bool = False,
) -> None:
    try:
        registry = service.registry_for(config)
        if not interactive:
            result = service.sync(config, dry_run=dry_run, registry=registry)
            _render_sync(ui, service, result, registry.location)
            return
        plan = service.plan(config, registry=registry)
    except SyncAppError as exc:
        raise click.ClickException(str(exc))

    result = SyncResult(plan=plan, dry_run=dry_run)
    if not plan.errors and not dry_run and plan.pending():
        selected = SyncSelectorApp(plan).run() or []
        scoped: SyncPlan = filter_plan_by_selection(plan, selected)
        result = SyncResult(plan=scoped)
        result.applied, result.failed, result.failures = service.apply(scoped)
    _render_sync(ui, service, result, registry.location)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-C",
    "--cwd",
    "root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project directory (defaults to the current directory).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="sr")
@click.pass_context
def cli(ctx: click.Context, root: Optional[Path], verbose: bool) -> None:
    """Sync coding rules to AI agents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"root": (root or Path.cwd()).resolve()}


@cli.command(help="Initialize rules config for this project.")
@click.option("-a", "--agents", "agents_opt", default=None, help="Comma-separated agent list.")
@click.option("-r", "--registry", "registry_url", default=None, help="Registry URL.")
@click.option("-s", "--scan", default=None, help="Additional directories to scan (comma-separated).")
@click.option("-y", "--yes", is_flag=True, help="Skip prompts, use defaults.")
@click.pass_obj
def init(
    obj: Dict[str, Any],
    agents_opt: Optional[str],
    registry_url: Optional[str],
    scan: Optional[str],
    yes: bool,
) -> None:
    ui = SyncConsoleUI(Console())
    root = _root(obj)
    repository = ConfigRepository(root)

    if repository.exists():
        ui.render_message("config", f"Config already exists: {repository.config_path}")
        return

    detected = FrameworkDetector().detect(root, split_csv(scan))
    ui.render_detected(detected, {fw.id: fw.name for fw in FRAMEWORKS})

    if agents_opt is not None:
        requested = split_csv(agents_opt)
    else:
        requested = [agent.value for agent in detect_agents(root)] or [
            agent.value for agent in DEFAULT_INIT_AGENTS
        ]
    agents = [agent for agent in requested if is_valid_agent(agent)]
    for invalid in sorted(set(requested) - set(agents)):
        ui.render_message("agents", f"Unknown agent ignored: {invalid}")
    if not agents:
        raise click.ClickException("No valid agents specified.")

    interactive = not yes and sys.stdin.isatty()
    categories: dict[str, CategoryConfig] = {}
    for category in detected:
        if interactive and not click.confirm(
            f"Enable {framework_name(category)} rules?", default=True
        ):
            continue
        categories[category] = CategoryConfig(enabled=True)

    try:
        repository.create(agents=agents, categories=categories, registry_url=registry_url)
    except SyncAppError as exc:
        raise click.ClickException(str(exc))
    ui.render_config_created(str(repository.config_path), agents, list(categories))


@cli.command(help="Sync rules from registry to local agent directories.")
@_local_option("Sync from a local registry path.")
@click.option("--dry-run", is_flag=True, help="Show what would be synced without writing.")
@click.option("-i", "--interactive", is_flag=True, help="Choose which rule writes to apply.")
@click.pass_obj
def sync(
    obj: Dict[str, Any], local_path: Optional[Path], dry_run: bool, interactive: bool
) -> None:
    ui = SyncConsoleUI(Console())
    root = _root(obj)
    config = _load_config(ConfigRepository(root))
    if local_path is not None:
        config.registry = RegistryConfig.local(str(local_path))
    _run_sync(ui, SyncService(root), config, dry_run=dry_run, interactive=interactive)


@cli.command("list", help="List available categories from registry.")
@_local_option("Use a local registry path.")
@click.pass_obj
def list_categories(obj: Dict[str, Any], local_path: Optional[Path]) -> None:
    ui = SyncConsoleUI(Console())
    root = _root(obj)
    repository = ConfigRepository(root)
    config = _load_config(repository) if repository.exists() else ProjectConfig()
    if local_path is not None:
        config.registry = RegistryConfig.local(str(local_path))

    try:
        registry = create_registry(config.registry, project_root=root)
        if not registry.is_available():
            raise click.ClickException(f"Registry not available: {registry.location}")
        rows = [
            CategoryRow(
                name=category,
                rules=len(registry.fetch_category(category)),
                enabled=category in config.enabled_categories(),
            )
            for category in registry.list_categories()
        ]
    except SyncAppError as exc:
        raise click.ClickException(str(exc))

    ui.render_categories(rows, registry.location)
    if registry.warnings:
        ui.render_message("skipped", "\n".join(f"- {item}" for item in registry.warnings))


@cli.command(help="List supported AI agents.")
@click.pass_obj
def agents(obj: Dict[str, Any]) -> None:
    ui = SyncConsoleUI(Console())
    repository = ConfigRepository(_root(obj))
    configured: set[str] = set()
    if repository.exists():
        configured = set(_load_config(repository).agents)
    ui.render_agents(all_agents(), configured)


@cli.command(help="Add paths (./lib) or category names (react, nestjs) to config.")
@click.argument("items", nargs=-1, required=True)
@click.option("--sync/--no-sync", "run_sync", default=True, help="Sync after adding.")
@click.pass_obj
def add(obj: Dict[str, Any], items: tuple[str, ...], run_sync: bool) -> None:
    ui = SyncConsoleUI(Console())
    root = _root(obj)
    repository = ConfigRepository(root)
    config = _load_config(repository)
    detector = FrameworkDetector()

    added: list[str] = []
    existing: list[str] = []
    errors: list[str] = []
    for item in items:
        is_path = item.startswith(("./", "/", ".\\"))
        if is_path:
            candidates = detector.detect_in_path(root, item)
            if not candidates:
                errors.append(f"No frameworks detected in: {item}")
                continue
        elif is_valid_category(item):
            candidates = [item]
        else:
            errors.append(f"Unknown category: {item}")
            continue

        for category in candidates:
            if category in config.categories:
                if not is_path:
                    existing.append(category)
                continue
            config.categories[category] = CategoryConfig(enabled=True)
            added.append(category)

    if added:
        try:
            repository.save(config)
        except SyncAppError as exc:
            raise click.ClickException(str(exc))
    ui.render_added([framework_name(item) for item in added], existing, errors)

    if not added:
        return
    if not run_sync:
        ui.render_message("next", "Fetch rules with:\n- sr sync", style=UIStyle.DIM.value)
        return
    _run_sync(ui, SyncService(root), config)


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
