"""Parse and serialize rules with YAML frontmatter."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Any

import yaml

from skill_rule.constants import (
    DEFAULT_RULE_VERSION,
    REFERENCE_SUFFIXES,
    RULE_SUFFIX,
    RULES_DIRNAME,
    SKILL_FILENAME,
    UNKNOWN_CATEGORY,
)
from skill_rule.errors import RuleParseError
from skill_rule.rules.models import LoadMode, Rule, RuleMeta, RuleReference

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
_LINK_RE = re.compile(
    r"\[([^\]]+)\]\(([^)]+)\)(?:\s*<!--\s*load:\s*(eager|on-demand)\s*-->)?"
)


def split_frontmatter(text: str, source_path: str) -> tuple[dict[str, Any], str]:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        raw = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        raise RuleParseError(source_path, str(exc).splitlines()[0]) from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RuleParseError(source_path, "frontmatter must be a mapping")
    return raw, text[match.end() :]


def category_from_path(source_path: str) -> str:
    parts = PurePosixPath(source_path).parts
    if RULES_DIRNAME in parts:
        index = parts.index(RULES_DIRNAME) + 1
        # the segment after rules/ must be a directory, not the file itself
        if index < len(parts) - 1:
            return parts[index]
    return UNKNOWN_CATEGORY


def infer_rule_id(source_path: str) -> str:
    path = PurePosixPath(source_path)
    parts = path.parts
    if RULES_DIRNAME in parts:
        tail = parts[parts.index(RULES_DIRNAME) + 1 :]
        if len(tail) >= 2 and tail[-1].endswith(RULE_SUFFIX):
            return f"{tail[0]}-{tail[-1][: -len(RULE_SUFFIX)]}"
        if len(tail) >= 3 and tail[-1] == SKILL_FILENAME:
            return f"{tail[0]}-{tail[-2]}"
    text = str(path)
    if text.endswith(RULE_SUFFIX):
        text = text[: -len(RULE_SUFFIX)]
    elif text.endswith(".md"):
        text = text[: -len(".md")]
    return text.replace("/", "-")


def parse_references(content: str) -> list[RuleReference]:
    references: list[RuleReference] = []
    for match in _LINK_RE.finditer(content):
        path = match.group(2)
        if not path.endswith(REFERENCE_SUFFIXES):
            continue
        mode = LoadMode(match.group(3)) if match.group(3) else LoadMode.ON_DEMAND
        references.append(
            RuleReference(name=match.group(1), path=path, load_mode=mode)
        )
    return references


def parse_rule_text(text: str, source_path: str) -> Rule:
    raw, content = split_frontmatter(text, source_path)

    triggers = raw.get("triggers", [])
    if not isinstance(triggers, list):
        triggers = []

    rule_id = raw.get("id")
    extends = raw.get("extends")
    meta = RuleMeta(
        id=str(rule_id) if rule_id else infer_rule_id(source_path),
        version=str(raw.get("version") or DEFAULT_RULE_VERSION),
        category=category_from_path(source_path),
        triggers=[str(item) for item in triggers],
        extends=str(extends) if extends else None,
    )
    return Rule(
        meta=meta,
        content=content,
        source_path=source_path,
        references=parse_references(content),
    )


def serialize_rule(rule: Rule) -> str:
    fm: dict[str, Any] = {
        "id": rule.meta.id,
        "version": rule.meta.version,
        "triggers": list(rule.meta.triggers),
    }
    if rule.meta.extends:
        fm["extends"] = rule.meta.extends

    parts: list[str] = []
    parts.append("---")
    dumped = yaml.safe_dump(
        fm, default_flow_style=None, sort_keys=False, allow_unicode=True
    )
    parts.append(dumped.rstrip())
    parts.append("---")
    parts.append("")
    return "\n".join(parts) + rule.content.lstrip("\n")
