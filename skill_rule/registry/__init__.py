from pathlib import Path

from skill_rule.config.models import RegistryConfig, RegistryType
from skill_rule.errors import UnknownRegistryTypeError
from skill_rule.registry.base import IRegistryAdapter
from skill_rule.registry.github import GitHubRegistryAdapter
from skill_rule.registry.http import HttpRegistryAdapter
from skill_rule.registry.local import LocalRegistryAdapter


def create_registry(
    config: RegistryConfig, project_root: Path | None = None
) -> IRegistryAdapter:
    if config.type == RegistryType.LOCAL:
        base = Path(config.url).expanduser()
        if not base.is_absolute() and project_root is not None:
            base = project_root / base
        return LocalRegistryAdapter(base)
    if config.type == RegistryType.GITHUB:
        return GitHubRegistryAdapter(config.url, config.branch, config.token)
    if config.type == RegistryType.HTTP:
        return HttpRegistryAdapter(config.url, config.token)
    raise UnknownRegistryTypeError(str(config.type))


__all__ = [
    "GitHubRegistryAdapter",
    "HttpRegistryAdapter",
    "IRegistryAdapter",
    "LocalRegistryAdapter",
    "create_registry",
]
