"""
Rule Loader: Load and parse rule tables from YAML files.

Rulesets are looked up by name in rulesets/, or loaded from an explicit
path. The GOALTRACKER_RULESET environment variable selects the default.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from goaltracker.core.errors import RulesetError
from goaltracker.ir.enums import GoalCategory, SubjectKey
from goaltracker.rules.models import (
    GoalCategoryRule,
    GoalInfoRules,
    PatternRule,
    RuleTables,
    SubjectRule,
    TrackerRules,
    TranscriptRules,
)

# Default ruleset directory
RULESETS_DIR = Path(__file__).parent / "rulesets"
DEFAULT_RULESET = "default"


def load_rules(name: str = DEFAULT_RULESET) -> RuleTables:
    """
    Load a ruleset by name or path.

    Args:
        name: Ruleset name (without .yaml extension) or a path to a YAML file

    Returns:
        Parsed RuleTables

    Raises:
        FileNotFoundError: If the ruleset file doesn't exist
        RulesetError: If the ruleset is malformed
    """
    path = RULESETS_DIR / f"{name}.yaml"
    if not path.exists():
        candidate = Path(name)
        if candidate.suffix in (".yaml", ".yml") and candidate.exists():
            path = candidate
        else:
            raise FileNotFoundError(f"Ruleset not found: {name}")
    return load_rules_from_path(path)


def load_rules_from_path(path: Union[str, Path]) -> RuleTables:
    """Load a ruleset from an arbitrary path."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulesetError(f"{path}: invalid YAML: {e}") from e
    return parse_rules(data, source=str(path))


def parse_rules(data: Any, source: str = "<dict>") -> RuleTables:
    """Parse a ruleset from a dictionary."""
    if not isinstance(data, dict):
        raise RulesetError(f"{source}: ruleset must be a mapping")
    try:
        return RuleTables(
            version=str(data.get("version", "1.0")),
            name=data.get("name", "unnamed"),
            description=data.get("description", ""),
            goal_info=_parse_goal_info(data["goal_info"]),
            tracker=_parse_tracker(data["tracker"]),
            transcript=_parse_transcript(data["transcript"]),
        )
    except KeyError as e:
        raise RulesetError(f"{source}: missing required key {e}") from e
    except (TypeError, ValueError, re.error) as e:
        raise RulesetError(f"{source}: {e}") from e


def parse_pattern(data: dict) -> PatternRule:
    """Parse a single named pattern rule."""
    return PatternRule(
        name=data["name"],
        pattern=data["pattern"],
        ignore_case=data.get("ignore_case", True),
    )


def _parse_goal_info(data: dict) -> GoalInfoRules:
    categories = [
        GoalCategoryRule(
            category=GoalCategory(cat["category"]),
            triggers=list(cat["triggers"]),
            stops=list(cat.get("stops", [])),
        )
        for cat in data["goal_categories"]
    ]
    return GoalInfoRules(
        name_labels=list(data["name_labels"]),
        name_fallback=parse_pattern(data["name_fallback"]),
        week_triggers=list(data["week_triggers"]),
        week_patterns=[parse_pattern(p) for p in data["week_patterns"]],
        date_triggers=list(data["date_triggers"]),
        date_patterns=[parse_pattern(p) for p in data["date_patterns"]],
        goal_label=parse_pattern(data["goal_label"]),
        goal_categories=categories,
        generic_goal_stops=list(data.get("generic_goal_stops", [])),
        goal_min_length=int(data.get("goal_min_length", 50)),
        goal_terminator=data.get("goal_terminator", "."),
    )


def _parse_tracker(data: dict) -> TrackerRules:
    return TrackerRules(
        subjects=[
            SubjectRule(subject=SubjectKey(s["subject"]), keywords=list(s["keywords"]))
            for s in data["subjects"]
        ],
        check_glyphs=data.get("check_glyphs", ""),
        completion_markers=list(data.get("completion_markers", [])),
        exact_marks=list(data.get("exact_marks", [])),
        strip_glyphs=data.get("strip_glyphs", ""),
        strip_patterns=[parse_pattern(p) for p in data.get("strip_patterns", [])],
        note_markers=list(data.get("note_markers", [])),
        min_description_length=int(data.get("min_description_length", 2)),
    )


def _parse_transcript(data: dict) -> TranscriptRules:
    return TranscriptRules(
        bullet_markers=list(data["bullet_markers"]),
        header_max_words=int(data.get("header_max_words", 5)),
        sub_bullet_min_indent=int(data.get("sub_bullet_min_indent", 2)),
        excluded_sections=list(data.get("excluded_sections", [])),
        strategy_sections=list(data.get("strategy_sections", [])),
        behavior_markers=list(data.get("behavior_markers", [])),
        assessor_markers=list(data.get("assessor_markers", [])),
        strategy_markers=list(data.get("strategy_markers", [])),
        sub_bullet_markers=list(data.get("sub_bullet_markers", [])),
        behavior_prefixes=list(data.get("behavior_prefixes", [])),
    )


def list_rulesets() -> list[str]:
    """List available ruleset names."""
    return sorted(p.stem for p in RULESETS_DIR.glob("*.yaml"))


# Cache for loaded rulesets
_cache: dict[str, RuleTables] = {}


def get_rules(name: Optional[str] = None, use_cache: bool = True) -> RuleTables:
    """
    Get a ruleset, using cache by default.

    With no name, GOALTRACKER_RULESET (or 'default') is used.
    """
    if name is None:
        name = os.environ.get("GOALTRACKER_RULESET", DEFAULT_RULESET)

    if use_cache and name in _cache:
        return _cache[name]

    rules = load_rules(name)
    _cache[name] = rules
    return rules


def clear_cache() -> None:
    """Clear the ruleset cache."""
    _cache.clear()
