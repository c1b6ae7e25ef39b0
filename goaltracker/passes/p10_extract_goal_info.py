"""
Pass 10: Goal Information Extraction

Extracts the flat GoalInfo record from the goal-information document:
- Student name ("Student Name: X", or X on the next line)
- Week number ("Week #4", "Week 4", "Wk 4")
- Meeting date ("5/12/25", "May 12, 2025", "5-12-25")
- Work habit and character habit goal text

Every line is offered to an ordered table of field rules. For each field
the first line that yields a value wins; later lines never overwrite it.
The student name is ranked by label instead: a "Student Name" line beats
any generic "Name:" line wherever the two appear.
Nothing here raises: a field no rule fills stays empty.
"""

from typing import Callable, Optional

from goaltracker.core.context import ReportContext
from goaltracker.core.cursor import LineCursor
from goaltracker.core.logging import get_pass_logger
from goaltracker.ir.enums import DiagnosticCode, GoalCategory, GoalField
from goaltracker.ir.schema import GoalInfo
from goaltracker.rules.loader import get_rules
from goaltracker.rules.models import GoalInfoRules, contains_any, first_match

PASS_NAME = "p10_extract_goal_info"
log = get_pass_logger(PASS_NAME)

# (rule_name, value)
Hit = tuple[str, str]
FieldHandler = Callable[[list[str], int, GoalInfoRules], Optional[Hit]]


# ============================================================================
# Field Rules
# ============================================================================

def _name_after_label(lines: list[str], i: int) -> Optional[str]:
    """'Student Name: Amari Jones', or a bare label with the name on the next line."""
    _, sep, rest = lines[i].partition(":")
    if sep and rest.strip():
        return rest.strip()
    return LineCursor(lines, i + 1).peek()


def _labelled_name(lines: list[str], rules: GoalInfoRules) -> Optional[Hit]:
    """
    Name labels are ranked in table order: a 'Student Name' line anywhere
    in the document outranks an earlier generic 'Name:' line such as
    'Learning Guide Name: Ms. Lee'. Within one label the first line wins.
    """
    for label in rules.name_labels:
        for i, line in enumerate(lines):
            if not contains_any(line, [label]):
                continue
            value = _name_after_label(lines, i)
            if value:
                return f"name_label:{label}", value
    return None


def _week_number(lines: list[str], i: int, rules: GoalInfoRules) -> Optional[Hit]:
    line = lines[i]
    if not contains_any(line, rules.week_triggers):
        return None
    return first_match(rules.week_patterns, line)


def _meeting_date(lines: list[str], i: int, rules: GoalInfoRules) -> Optional[Hit]:
    line = lines[i]
    if not contains_any(line, rules.date_triggers):
        return None
    return first_match(rules.date_patterns, line)


def _goal_text(category: GoalCategory) -> FieldHandler:
    """Build the handler collecting one habit goal's text after its label."""

    def handler(lines: list[str], i: int, rules: GoalInfoRules) -> Optional[Hit]:
        cat_rule = rules.category_rule(category)
        if not contains_any(lines[i], cat_rule.triggers):
            return None

        stops = cat_rule.stops + rules.generic_goal_stops

        def is_label_or_blank(line: str) -> bool:
            return not line.strip() or rules.goal_label.fullmatch(line.strip())

        def starts_other_section(line: str) -> bool:
            return not line.strip() or contains_any(line, stops)

        def long_enough(taken: list[str]) -> bool:
            text = " ".join(taken)
            return len(text) > rules.goal_min_length and text.endswith(rules.goal_terminator)

        cursor = LineCursor(lines, i + 1)
        cursor.skip_while(is_label_or_blank)
        taken = cursor.take_until(starts_other_section, done=long_enough)

        text = " ".join(taken).strip()
        if not text:
            return None
        return f"{category.value}_label", text

    handler.__name__ = f"_{category.value}_goal"
    return handler


# Evaluated for every line, in this order
FIELD_RULES: list[tuple[GoalField, FieldHandler]] = [
    (GoalField.WEEK_NUMBER, _week_number),
    (GoalField.MEETING_DATE, _meeting_date),
    *((category.field, _goal_text(category)) for category in GoalCategory),
]


# ============================================================================
# Document-level rules (labelled name, then fallbacks)
# ============================================================================

def _fallback_name(lines: list[str], rules: GoalInfoRules) -> Optional[Hit]:
    """A document that opens with 'First Last' names the student."""
    if lines and rules.name_fallback.fullmatch(lines[0]):
        return rules.name_fallback.name, lines[0]
    return None


def _fallback_date(lines: list[str], rules: GoalInfoRules) -> Optional[Hit]:
    """A line that is nothing but a date."""
    for line in lines:
        for rule in rules.date_patterns:
            if rule.fullmatch(line):
                return f"{rule.name}_standalone", line
    return None


DOCUMENT_RULES: list[tuple[GoalField, Callable[[list[str], GoalInfoRules], Optional[Hit]]]] = [
    (GoalField.STUDENT_NAME, _labelled_name),
    (GoalField.STUDENT_NAME, _fallback_name),
    (GoalField.MEETING_DATE, _fallback_date),
]


# ============================================================================
# Extraction
# ============================================================================

def extract_goal_info(lines: list[str], rules: Optional[GoalInfoRules] = None) -> GoalInfo:
    """
    Parse goal-information lines into a GoalInfo record.

    Args:
        lines: Trimmed, non-blank lines in document order
        rules: Goal-info rule table (default ruleset if None)

    Returns:
        A complete GoalInfo; unmatched fields are empty strings
    """
    if rules is None:
        rules = get_rules().goal_info

    values: dict[GoalField, str] = {}

    for i in range(len(lines)):
        for goal_field, handler in FIELD_RULES:
            if goal_field in values:
                continue
            hit = handler(lines, i, rules)
            if hit is None:
                continue
            rule_name, value = hit
            values[goal_field] = value
            log.verbose(
                "field_extracted",
                field=goal_field.value,
                rule=rule_name,
                line=i,
            )

    for goal_field, rule in DOCUMENT_RULES:
        if goal_field in values:
            continue
        hit = rule(lines, rules)
        if hit is not None:
            rule_name, value = hit
            values[goal_field] = value
            log.verbose("field_extracted_document", field=goal_field.value, rule=rule_name)

    return GoalInfo(**{f.value: v for f, v in values.items()})


def _names_agree(a: str, b: str) -> bool:
    a, b = a.strip().lower(), b.strip().lower()
    return bool(a and b) and (a in b or b in a)


def extract_goal_fields(ctx: ReportContext) -> ReportContext:
    """
    Extract GoalInfo from the goal-information lines.

    Emits informational diagnostics for fields that stayed empty and a
    warning when the document names a different student than the one
    the caller confirmed.
    """
    rules = ctx.rules.goal_info if ctx.rules else None
    info = extract_goal_info(ctx.goal_info_lines, rules)
    ctx.goal_info = info

    missing = [f.value for f in GoalField if not getattr(info, f.value)]
    for name in missing:
        ctx.add_diagnostic(
            level="info",
            code=DiagnosticCode.GOAL_FIELD_MISSING.value,
            message=f"Goal information has no {name.replace('_', ' ')}",
            source=PASS_NAME,
            affected_ids=[name],
        )

    if info.student_name and not _names_agree(info.student_name, ctx.student_name):
        ctx.add_diagnostic(
            level="warning",
            code=DiagnosticCode.STUDENT_NAME_MISMATCH.value,
            message=(
                f"Goal information names '{info.student_name}', "
                f"report is for '{ctx.student_name}'"
            ),
            source=PASS_NAME,
        )

    log.info(
        "goal_info_extracted",
        lines=len(ctx.goal_info_lines),
        filled=len(GoalField) - len(missing),
        missing=missing,
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="extracted_goal_info",
        before=f"{len(ctx.goal_info_lines)} lines",
        after=f"{len(GoalField) - len(missing)}/{len(GoalField)} fields",
    )

    return ctx
