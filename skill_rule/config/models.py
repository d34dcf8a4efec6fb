"""Project config (``.rules.json``) data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from skill_rule.constants import DEFAULT_BRANCH, DEFAULT_REGISTRY_URL


class RegistryType(str, Enum):
    GITHUB = "github"
    LOCAL = "local"
    HTTP = "http"


@dataclass
class RegistryConfig:
    type: RegistryType = RegistryType.GITHUB
    url: str = DEFAULT_REGISTRY_URL
    branch: str | None = DEFAULT_BRANCH
    token: str | None = None

    @classmethod
    def local(cls, path: str) -> "RegistryConfig":
        return cls(type=RegistryType.LOCAL, url=path, branch=None)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "RegistryConfig":
        return cls(
            type=RegistryType(payload.get("type", RegistryType.GITHUB.value)),
            url=str(payload.get("url", DEFAULT_REGISTRY_URL)),
            branch=payload.get("branch"),
            token=payload.get("token"),
        )

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type.value, "url": self.url}
        if self.branch:
            payload["branch"] = self.branch
        if self.token:
            payload["token"] = self.token
        return payload


@dataclass
class CategoryConfig:
    enabled: bool = True
    version: str | None = None
    include: list[str] | None = None
    exclude: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CategoryConfig":
        include = payload.get("include")
        return cls(
            enabled=bool(payload.get("enabled", True)),
            version=payload.get("version"),
            include=[str(item) for item in include] if include is not None else None,
            exclude=[str(item) for item in payload.get("exclude", [])],
        )

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"enabled": self.enabled}
        if self.version:
            payload["version"] = self.version
        if self.include is not None:
            payload["include"] = list(self.include)
        if self.exclude:
            payload["exclude"] = list(self.exclude)
        return payload


@dataclass
class ProjectConfig:
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    agents: list[str] = field(default_factory=lambda: ["cursor", "claude", "copilot"])
    categories: dict[str, CategoryConfig] = field(default_factory=dict)
    overrides: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ProjectConfig":
        defaults = cls()
        return cls(
            registry=RegistryConfig.from_dict(payload.get("registry", {})),
            agents=[str(item) for item in payload.get("agents", defaults.agents)],
            categories={
                str(name): CategoryConfig.from_dict(value)
                for name, value in payload.get("categories", {}).items()
            },
            overrides=[str(item) for item in payload.get("overrides", [])],
        )

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "registry": self.registry.as_dict(),
            "agents": list(self.agents),
            "categories": {
                name: category.as_dict() for name, category in self.categories.items()
            },
        }
        if self.overrides:
            payload["overrides"] = list(self.overrides)
        return payload

    def enabled_categories(self) -> list[str]:
        return sorted(name for name, cfg in self.categories.items() if cfg.enabled)
