"""Framework detection with monorepo workspace support."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import yaml

from skill_rule.utils import read_json_safe

DEFAULT_SCAN_DIRS: tuple[str, ...] = ("apps", "packages", "src-tauri")


@dataclass(frozen=True)
class FrameworkDef:
    id: str
    name: str
    detection_files: tuple[str, ...] = ()
    detection_deps: tuple[str, ...] = ()


FRAMEWORKS: tuple[FrameworkDef, ...] = (
    FrameworkDef("flutter", "Flutter", ("pubspec.yaml",), ("flutter",)),
    FrameworkDef("react", "React", (), ("react", "react-dom")),
    FrameworkDef(
        "nextjs",
        "Next.js",
        ("next.config.js", "next.config.mjs", "next.config.ts"),
        ("next",),
    ),
    FrameworkDef("nestjs", "NestJS", (), ("@nestjs/core",)),
    FrameworkDef("rust", "Rust", ("Cargo.toml",)),
    FrameworkDef("golang", "Go", ("go.mod",)),
    FrameworkDef("typescript", "TypeScript", ("tsconfig.json",), ("typescript",)),
)


def framework_name(category: str) -> str:
    for framework in FRAMEWORKS:
        if framework.id == category:
            return framework.name
    return category


def is_valid_category(category: str) -> bool:
    return any(framework.id == category for framework in FRAMEWORKS)


class FrameworkDetector:
    def detect(
        self, root: Path, scan_dirs: Iterable[str] | None = None
    ) -> dict[str, list[str]]:
        """Map each detected category to the relative locations it was found in."""
        detected: dict[str, list[str]] = {}
        custom_dirs = list(scan_dirs or [])
        workspace_dirs = self.workspace_dirs(root)

        self._detect_in_dir(root, ".", detected)
        for location in _unique([*workspace_dirs, *custom_dirs]):
            path = root / location
            if path.is_dir():
                self._detect_in_dir(path, location, detected)

        if not workspace_dirs:
            for base in DEFAULT_SCAN_DIRS:
                base_path = root / base
                if not base_path.is_dir() or base in custom_dirs:
                    continue
                for child in sorted(base_path.iterdir()):
                    if child.is_dir():
                        self._detect_in_dir(child, f"{base}/{child.name}", detected)
        return detected

    def detect_in_path(self, root: Path, target: str) -> list[str]:
        path = root / target
        if not path.is_dir():
            return []
        detected: dict[str, list[str]] = {}
        self._detect_in_dir(path, target, detected)
        return list(detected)

    def workspace_dirs(self, root: Path) -> list[str]:
        patterns: list[str] = []
        patterns.extend(self._pnpm_patterns(root))

        package, _ = read_json_safe(root / "package.json")
        if isinstance(package, dict):
            workspaces = package.get("workspaces")
            if isinstance(workspaces, dict):
                workspaces = workspaces.get("packages", [])
            if isinstance(workspaces, list):
                patterns.extend(str(item) for item in workspaces)

        lerna, _ = read_json_safe(root / "lerna.json")
        if isinstance(lerna, dict) and isinstance(lerna.get("packages"), list):
            patterns.extend(str(item) for item in lerna["packages"])

        return self._resolve_patterns(root, _unique(patterns))

    @staticmethod
    def _pnpm_patterns(root: Path) -> list[str]:
        path = root / "pnpm-workspace.yaml"
        if not path.is_file():
            return []
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            return []
        if not isinstance(payload, dict) or not isinstance(payload.get("packages"), list):
            return []
        return [str(item) for item in payload["packages"]]

    @staticmethod
    def _resolve_patterns(root: Path, patterns: list[str]) -> list[str]:
        dirs: list[str] = []
        for pattern in patterns:
            if "*" in pattern:
                base = pattern.split("*", 1)[0].rstrip("/")
                base_path = root / base if base else root
                if not base_path.is_dir():
                    continue
                for child in sorted(base_path.iterdir()):
                    if child.is_dir() and not child.name.startswith("."):
                        dirs.append(f"{base}/{child.name}" if base else child.name)
            elif (root / pattern).exists():
                dirs.append(pattern)
        return dirs

    def _detect_in_dir(
        self, path: Path, location: str, results: dict[str, list[str]]
    ) -> None:
        deps = self._package_deps(path)
        for framework in FRAMEWORKS:
            found = any((path / name).exists() for name in framework.detection_files)
            if not found:
                found = any(dep in deps for dep in framework.detection_deps)
            if found:
                locations = results.setdefault(framework.id, [])
                if location not in locations:
                    locations.append(location)

    @staticmethod
    def _package_deps(path: Path) -> set[str]:
        package, _ = read_json_safe(path / "package.json")
        if not isinstance(package, dict):
            return set()
        deps: set[str] = set()
        for key in ("dependencies", "devDependencies"):
            section: Any = package.get(key)
            if isinstance(section, dict):
                deps.update(section)
        return deps


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
