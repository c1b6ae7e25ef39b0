"""
Rule Models: Data structures for the extraction rule tables.

Every heuristic the parsers apply is a row in one of these tables:
ordered (name, pattern) lists evaluated in priority order, and keyword
lists mapped to categories. Changing behavior means editing a ruleset
file, not the parsers.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from goaltracker.ir.enums import GoalCategory, SubjectKey


def contains_any(text: str, keywords: list[str]) -> bool:
    """Case-insensitive substring test against a keyword list."""
    lowered = text.lower()
    return any(k.lower() in lowered for k in keywords)


@dataclass
class PatternRule:
    """
    A named regex in an ordered rule chain.

    The first capture group is the extracted value; without a group the
    whole match is used.
    """
    name: str
    pattern: str
    ignore_case: bool = True
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.ignore_case else 0
        self._regex = re.compile(self.pattern, flags)

    def search(self, text: str) -> Optional[str]:
        """Return the captured value, or None if the pattern does not match."""
        m = self._regex.search(text)
        if m is None:
            return None
        return m.group(1) if m.groups() else m.group(0)

    def sub(self, repl: str, text: str) -> str:
        return self._regex.sub(repl, text)

    def fullmatch(self, text: str) -> bool:
        return self._regex.fullmatch(text) is not None


def first_match(rules: list[PatternRule], text: str) -> Optional[tuple[str, str]]:
    """
    Evaluate an ordered rule chain against text.

    Returns (rule_name, value) for the first rule that matches.
    """
    for rule in rules:
        value = rule.search(text)
        if value is not None:
            return rule.name, value
    return None


# ============================================================================
# Goal Information Rules
# ============================================================================

@dataclass
class GoalCategoryRule:
    """Trigger and stop labels for one habit-goal category."""
    category: GoalCategory
    triggers: list[str]
    stops: list[str]


@dataclass
class GoalInfoRules:
    """Rules for the goal-information FieldExtractor."""
    name_labels: list[str]
    name_fallback: PatternRule
    week_triggers: list[str]
    week_patterns: list[PatternRule]
    date_triggers: list[str]
    date_patterns: list[PatternRule]
    goal_label: PatternRule
    goal_categories: list[GoalCategoryRule]
    generic_goal_stops: list[str]
    goal_min_length: int = 50
    goal_terminator: str = "."

    def category_rule(self, category: GoalCategory) -> GoalCategoryRule:
        for rule in self.goal_categories:
            if rule.category == category:
                return rule
        raise KeyError(category)


# ============================================================================
# Tracker Rules
# ============================================================================

@dataclass
class SubjectRule:
    """Keywords that classify a tracker row into a subject."""
    subject: SubjectKey
    keywords: list[str]


@dataclass
class TrackerRules:
    """Rules for the TrackerResolver."""
    subjects: list[SubjectRule]
    check_glyphs: str
    completion_markers: list[str]
    exact_marks: list[str]
    strip_glyphs: str
    strip_patterns: list[PatternRule]
    note_markers: list[str]
    min_description_length: int = 2

    def classify(self, text: str) -> Optional[SubjectKey]:
        """First subject (in table order) whose keyword occurs in text."""
        for rule in self.subjects:
            if contains_any(text, rule.keywords):
                return rule.subject
        return None


# ============================================================================
# Transcript Rules
# ============================================================================

@dataclass
class TranscriptRules:
    """
    Rules for the TranscriptSynthesizer.

    The student-voice and assessor-voice lists are heuristics; they are
    kept here verbatim so output stays reproducible when they change.
    """
    bullet_markers: list[str]
    header_max_words: int
    sub_bullet_min_indent: int
    excluded_sections: list[str]
    strategy_sections: list[str]
    behavior_markers: list[str]
    assessor_markers: list[str]
    strategy_markers: list[str]
    sub_bullet_markers: list[str]
    behavior_prefixes: list[str]


# ============================================================================
# Ruleset
# ============================================================================

@dataclass
class RuleTables:
    """A complete, named ruleset for all three parsers."""
    version: str
    name: str
    description: str
    goal_info: GoalInfoRules
    tracker: TrackerRules
    transcript: TranscriptRules
