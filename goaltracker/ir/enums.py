"""
IR Enums: Subject keys, statuses, and diagnostic codes.

No stringly-typed constants scattered across passes.
"""

from enum import Enum


# ============================================================================
# Tracker Subjects
# ============================================================================

class SubjectKey(str, Enum):
    """
    The six fixed work categories tracked every week.

    Declaration order is the canonical record order. The report uses
    its own display order (see REPORT_SUBJECT_ORDER).
    """

    READING = "reading"
    WRITING = "writing"
    COMPUTATION = "computation"
    COMMUNICATION = "communication"
    OBSERVATION = "observation"
    CTWS = "ctws"

    @property
    def display_name(self) -> str:
        """Heading used for this subject in the rendered report."""
        return SUBJECT_DISPLAY_NAMES[self]

    @classmethod
    def from_string(cls, s: str) -> "SubjectKey":
        """Parse a subject from a key or display name (case-insensitive)."""
        value = s.strip().lower()
        for key in cls:
            if key.value == value:
                return key
        raise ValueError(f"Unknown subject: {s!r}")


SUBJECT_DISPLAY_NAMES: dict[SubjectKey, str] = {
    SubjectKey.READING: "Reading",
    SubjectKey.WRITING: "Writing",
    SubjectKey.COMPUTATION: "Computation",
    SubjectKey.COMMUNICATION: "Communication",
    SubjectKey.OBSERVATION: "Observation",
    SubjectKey.CTWS: "CTWS",
}

# Order of the Deliberate Practice Work Completion table
REPORT_SUBJECT_ORDER: tuple[SubjectKey, ...] = (
    SubjectKey.READING,
    SubjectKey.WRITING,
    SubjectKey.COMPUTATION,
    SubjectKey.COMMUNICATION,
    SubjectKey.CTWS,
    SubjectKey.OBSERVATION,
)


# ============================================================================
# Goal Info Fields
# ============================================================================

class GoalField(str, Enum):
    """Fields of the goal-information record."""

    STUDENT_NAME = "student_name"
    WEEK_NUMBER = "week_number"
    MEETING_DATE = "meeting_date"
    WORK_HABIT_GOAL = "work_habit_goal"
    CHARACTER_HABIT_GOAL = "character_habit_goal"


class GoalCategory(str, Enum):
    """Habit goal categories in the goal-information document."""

    WORK_HABIT = "work_habit"
    CHARACTER_HABIT = "character_habit"

    @property
    def field(self) -> GoalField:
        if self is GoalCategory.WORK_HABIT:
            return GoalField.WORK_HABIT_GOAL
        return GoalField.CHARACTER_HABIT_GOAL


# ============================================================================
# Diagnostics & Status
# ============================================================================

class DiagnosticLevel(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ReportStatus(str, Enum):
    """Overall generation status."""

    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Machine-readable diagnostic codes emitted by passes and the engine."""

    PIPELINE_NOT_FOUND = "PIPELINE_NOT_FOUND"
    PASS_ERROR = "PASS_ERROR"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STUDENT_NOT_IN_TRACKER = "STUDENT_NOT_IN_TRACKER"
    STUDENT_NAME_MISMATCH = "STUDENT_NAME_MISMATCH"
    GOAL_FIELD_MISSING = "GOAL_FIELD_MISSING"
    NO_TRANSCRIPT_CONTENT = "NO_TRANSCRIPT_CONTENT"
    NO_WORK_TASKS = "NO_WORK_TASKS"
    OVERRIDE_APPLIED = "OVERRIDE_APPLIED"
