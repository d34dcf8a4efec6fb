from skill_rule.rules.filters import FilterResult, SkipReason, select_rules
from skill_rule.rules.models import LoadMode, Rule, RuleMeta, RuleReference
from skill_rule.rules.parser import parse_rule_text, serialize_rule

__all__ = [
    "FilterResult",
    "LoadMode",
    "Rule",
    "RuleMeta",
    "RuleReference",
    "SkipReason",
    "parse_rule_text",
    "select_rules",
    "serialize_rule",
]
