"""Category include/exclude and global override resolution.

The materialized set for an agent is::

    rules in enabled categories
      ∩ not excluded by the category
      ∩ included by the category (when an include list is given)
      − globally overridden ids

Entries match a rule by its full id or by its short name (id without the
``<category>-`` prefix). A rule listed in both ``include`` and ``exclude``
is excluded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from skill_rule.config.models import CategoryConfig
from skill_rule.rules.models import Rule


class SkipReason(str, Enum):
    EXCLUDED = "excluded"
    OVERRIDDEN = "overridden"
    NOT_INCLUDED = "not included"


@dataclass
class FilterResult:
    selected: list[Rule] = field(default_factory=list)
    skipped: list[tuple[Rule, SkipReason]] = field(default_factory=list)

    @property
    def selected_ids(self) -> set[str]:
        return {rule.id for rule in self.selected}


def matches_any(rule: Rule, entries: Iterable[str]) -> bool:
    keys = {rule.id, rule.short_name}
    return any(entry in keys for entry in entries)


def skip_reason(
    rule: Rule, category: CategoryConfig, overrides: Iterable[str] = ()
) -> SkipReason | None:
    if matches_any(rule, category.exclude):
        return SkipReason.EXCLUDED
    if category.include is not None and not matches_any(rule, category.include):
        return SkipReason.NOT_INCLUDED
    if matches_any(rule, overrides):
        return SkipReason.OVERRIDDEN
    return None


def select_rules(
    rules: Iterable[Rule], category: CategoryConfig, overrides: Iterable[str] = ()
) -> FilterResult:
    override_list = list(overrides)
    result = FilterResult()
    if not category.enabled:
        return result

    seen: set[str] = set()
    for rule in sorted(rules, key=lambda item: (item.id, item.source_path)):
        # first source wins when a registry carries duplicate ids
        if rule.id in seen:
            continue
        seen.add(rule.id)

        reason = skip_reason(rule, category, override_list)
        if reason is None:
            result.selected.append(rule)
        else:
            result.skipped.append((rule, reason))
    return result
