"""Rules: Ordered rule tables driving every parser decision."""

from goaltracker.rules.loader import clear_cache, get_rules, list_rulesets, load_rules
from goaltracker.rules.models import PatternRule, RuleTables, contains_any, first_match

__all__ = [
    "PatternRule",
    "RuleTables",
    "clear_cache",
    "contains_any",
    "first_match",
    "get_rules",
    "list_rulesets",
    "load_rules",
]
