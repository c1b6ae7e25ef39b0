"""
IR Schema: Pydantic models for the parsed records and the report result.

Each parser produces one complete record per invocation. Records are
frozen: downstream passes derive new records instead of editing them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from goaltracker.ir.enums import DiagnosticLevel, ReportStatus, SubjectKey

IR_VERSION = "0.1.0"


# ============================================================================
# Goal Information
# ============================================================================

class GoalInfo(BaseModel):
    """Weekly identity and habit goals parsed from the goal-information document."""

    model_config = ConfigDict(frozen=True)

    student_name: str = Field(default="", description="Student name as written in the document")
    week_number: str = Field(default="", description="Week number digits, e.g. '4'")
    meeting_date: str = Field(default="", description="1:1 meeting date, verbatim")
    work_habit_goal: str = Field(default="", description="Work habit goal text")
    character_habit_goal: str = Field(default="", description="Character habit goal text")


# ============================================================================
# Tracker
# ============================================================================

class SubjectTask(BaseModel):
    """One subject's weekly task for the student."""

    model_config = ConfigDict(frozen=True)

    description: str = Field(default="", description="Task text from the tracker cell")
    complete: bool = Field(default=False, description="Whether the cell marks the task done")
    notes: str = Field(default="", description="Completion notes, if any")


class TrackerResult(BaseModel):
    """
    Completion record for all six subjects.

    Always holds exactly one SubjectTask per SubjectKey. Missing subjects
    are filled with an empty task at construction time; unknown keys are
    rejected.
    """

    model_config = ConfigDict(frozen=True)

    tasks: dict[SubjectKey, SubjectTask] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _fill_all_subjects(cls, data: Any) -> Any:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return data

        given = data.get("tasks") or {}
        tasks: dict[SubjectKey, Any] = {}
        for key, task in given.items():
            tasks[SubjectKey(key)] = task
        for key in SubjectKey:
            tasks.setdefault(key, SubjectTask())

        return {**data, "tasks": {key: tasks[key] for key in SubjectKey}}

    @classmethod
    def empty(cls) -> "TrackerResult":
        """The all-empty result (student not found, or nothing matched)."""
        return cls()

    def get(self, subject: SubjectKey) -> SubjectTask:
        return self.tasks[subject]

    def items(self) -> Iterator[tuple[SubjectKey, SubjectTask]]:
        """Iterate subjects in canonical SubjectKey order."""
        for key in SubjectKey:
            yield key, self.tasks[key]

    def is_empty(self) -> bool:
        """True if no subject has any description, completion, or notes."""
        return all(task == SubjectTask() for task in self.tasks.values())

    def replace(self, subject: SubjectKey, task: SubjectTask) -> "TrackerResult":
        """Return a new result with one subject's task swapped out."""
        tasks = dict(self.tasks)
        tasks[subject] = task
        return TrackerResult(tasks=tasks)


# ============================================================================
# Transcript
# ============================================================================

class TranscriptRecord(BaseModel):
    """
    Student-voice behaviors and proposed strategies from the 1:1 transcript.

    Insertion order is preserved and duplicates are allowed: the report
    takes the first N of each list.
    """

    model_config = ConfigDict(frozen=True)

    behaviors: list[str] = Field(default_factory=list, description="Student-voice fragments")
    strategies: list[str] = Field(default_factory=list, description="Strategies discussed")

    def is_empty(self) -> bool:
        return not self.behaviors and not self.strategies


# ============================================================================
# Trace, Diagnostics, Result
# ============================================================================

class TraceEntry(BaseModel):
    """A single pipeline trace entry."""

    id: str
    timestamp: datetime
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None
    affected_ids: list[str] = Field(default_factory=list)


class Diagnostic(BaseModel):
    """A diagnostic message."""

    id: str
    level: DiagnosticLevel
    code: str
    message: str
    source: str
    affected_ids: list[str] = Field(default_factory=list)


class ReportResult(BaseModel):
    """The complete output of one report generation."""

    version: str = Field(default=IR_VERSION, description="IR schema version")
    request_id: str = Field(..., description="Unique generation ID")
    timestamp: datetime = Field(..., description="When generation started")
    processing_duration_ms: float = Field(default=0.0, description="Wall time for all passes")

    student_name: str = Field(..., description="Caller-confirmed student name")

    # Parsed records
    goal_info: GoalInfo = Field(default_factory=GoalInfo)
    tracker: TrackerResult = Field(default_factory=TrackerResult)
    transcript: TranscriptRecord = Field(default_factory=TranscriptRecord)

    # Output
    report_text: Optional[str] = Field(
        None,
        description="Rendered report; None whenever generation failed",
    )
    status: ReportStatus = Field(default=ReportStatus.SUCCESS)

    # Metadata
    trace: list[TraceEntry] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def has_diagnostic(self, code: str) -> bool:
        return any(d.code == code for d in self.diagnostics)
