"""
Pass 20: Tracker Resolution

Turns the work-completion grid into a six-subject TrackerResult:

1. Column resolution: the first cell (rows top to bottom, cells left to
   right) that contains the student name, or is contained by it, fixes
   the student's column. Its row is the header row.
2. Subject classification: each other row's first cell is looked up in
   the ordered subject keyword table.
3. Extraction: the student's cell gives the task description and
   completion; a following unclassified row can carry completion notes.

A student who is not in the grid yields the all-empty result. This pass
never raises for content reasons.
"""

import re
from typing import Optional

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.ir.enums import DiagnosticCode, SubjectKey
from goaltracker.ir.schema import SubjectTask, TrackerResult
from goaltracker.rules.loader import get_rules
from goaltracker.rules.models import TrackerRules, contains_any

PASS_NAME = "p20_resolve_tracker"
log = get_pass_logger(PASS_NAME)


# ============================================================================
# Column Resolution
# ============================================================================

def names_match(cell: str, student_name: str) -> bool:
    """Case-insensitive containment in either direction. Empty never matches."""
    cell = cell.strip().lower()
    name = student_name.strip().lower()
    if not cell or not name:
        return False
    return name in cell or cell in name


def resolve_student_column(
    rows: list[list[str]],
    student_name: str,
) -> Optional[tuple[int, int]]:
    """
    Find the student's column.

    Returns:
        (header_row_index, column_index) of the first matching cell,
        or None if no cell matches
    """
    for r, row in enumerate(rows):
        for c, cell in enumerate(row):
            if names_match(cell, student_name):
                return r, c
    return None


# ============================================================================
# Cell Interpretation
# ============================================================================

def classify_subject(first_cell: str, rules: TrackerRules) -> Optional[SubjectKey]:
    """Subject for a row, from its first cell. None if no keyword matches."""
    return rules.classify(first_cell)


def is_complete(cell: str, rules: TrackerRules) -> bool:
    """A check glyph, a completion word, or a bare 'x' mark."""
    if any(glyph in cell for glyph in rules.check_glyphs):
        return True
    if contains_any(cell, rules.completion_markers):
        return True
    return cell.strip().lower() in (m.lower() for m in rules.exact_marks)


def clean_description(cell: str, rules: TrackerRules) -> str:
    """The cell text with checkbox and check-mark glyphs removed."""
    text = cell
    for rule in rules.strip_patterns:
        text = rule.sub(" ", text)
    for glyph in rules.strip_glyphs:
        text = text.replace(glyph, " ")
    return re.sub(r"\s+", " ", text).strip()


def _cell(row: list[str], column: int) -> str:
    return row[column].strip() if column < len(row) else ""


def _read_task(row: list[str], column: int, rules: TrackerRules) -> SubjectTask:
    cell = _cell(row, column)
    description = clean_description(cell, rules)
    if len(description) < rules.min_description_length:
        description = row[0].strip()
    return SubjectTask(description=description, complete=is_complete(cell, rules))


def _read_notes(
    rows: list[list[str]],
    r: int,
    column: int,
    header_row: int,
    rules: TrackerRules,
) -> str:
    """Notes live in the student's cell of an unclassified row right below."""
    n = r + 1
    if n >= len(rows) or n == header_row:
        return ""
    row = rows[n]
    if row and classify_subject(row[0], rules) is not None:
        return ""
    cell = _cell(row, column)
    if cell and contains_any(cell, rules.note_markers):
        return cell
    return ""


# ============================================================================
# Resolution
# ============================================================================

def resolve_tracker(
    rows: list[list[str]],
    student_name: str,
    rules: Optional[TrackerRules] = None,
) -> TrackerResult:
    """
    Parse a tracker grid into a TrackerResult for one student.

    Args:
        rows: Rows of trimmed cell strings
        student_name: Caller-confirmed student name (non-empty)
        rules: Tracker rule table (default ruleset if None)

    Returns:
        TrackerResult with all six subjects; all empty if the student
        has no column
    """
    if rules is None:
        rules = get_rules().tracker

    located = resolve_student_column(rows, student_name)
    if located is None:
        log.verbose("student_not_found", student=student_name, rows=len(rows))
        return TrackerResult.empty()

    header_row, column = located
    log.verbose("student_column_resolved", header_row=header_row, column=column)

    tasks: dict[SubjectKey, SubjectTask] = {}
    for r, row in enumerate(rows):
        if r == header_row or not row:
            continue

        subject = classify_subject(row[0], rules)
        if subject is None:
            log.debug("row_unclassified", row=r, first_cell=row[0][:40])
            continue

        if not _cell(row, column):
            log.debug("student_cell_empty", row=r, subject=subject.value)
            continue

        task = _read_task(row, column, rules)
        notes = _read_notes(rows, r, column, header_row, rules)
        if notes:
            task = task.model_copy(update={"notes": notes})

        # Later rows for the same subject replace earlier ones
        tasks[subject] = task
        log.verbose(
            "subject_extracted",
            row=r,
            subject=subject.value,
            complete=task.complete,
        )

    return TrackerResult(tasks=tasks)


def resolve_tracker_grid(ctx: ReportContext) -> ReportContext:
    """Resolve the tracker grid for the confirmed student."""
    rules = ctx.rules.tracker if ctx.rules else None
    located = resolve_student_column(ctx.tracker_rows, ctx.student_name)
    ctx.student_column = located[1] if located else None
    ctx.tracker = resolve_tracker(ctx.tracker_rows, ctx.student_name, rules)

    if located is None:
        ctx.add_diagnostic(
            level="warning",
            code=DiagnosticCode.STUDENT_NOT_IN_TRACKER.value,
            message=f"No tracker column matches '{ctx.student_name}'",
            source=PASS_NAME,
        )

    found = [key.value for key, task in ctx.tracker.items() if task.description]
    log.info(
        "tracker_resolved",
        rows=len(ctx.tracker_rows),
        column=ctx.student_column,
        subjects=found,
        completed=sum(1 for _, task in ctx.tracker.items() if task.complete),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="resolved_tracker",
        before=f"{len(ctx.tracker_rows)} rows",
        after=f"{len(found)} subjects",
        affected_ids=found,
    )

    return ctx
