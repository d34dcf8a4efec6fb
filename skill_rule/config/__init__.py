from skill_rule.config.models import (
    CategoryConfig,
    ProjectConfig,
    RegistryConfig,
    RegistryType,
)
from skill_rule.config.repository import ConfigRepository

__all__ = [
    "CategoryConfig",
    "ConfigRepository",
    "ProjectConfig",
    "RegistryConfig",
    "RegistryType",
]
