"""
Request and per-run context for the report pipeline.

A ReportContext is created per request and threaded through every pass.
Passes replace the records they own (goal_info, tracker, transcript)
with new frozen models instead of editing them in place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from goaltracker.documents.text import TranscriptLine
from goaltracker.ir.enums import DiagnosticCode, DiagnosticLevel, ReportStatus, SubjectKey
from goaltracker.ir.schema import (
    Diagnostic,
    GoalInfo,
    ReportResult,
    TraceEntry,
    TrackerResult,
    TranscriptRecord,
)
from goaltracker.rules.models import RuleTables


@dataclass
class ReportRequest:
    """Input to the report pipeline: three decoded documents and a name."""

    student_name: str
    transcript_text: str
    tracker_rows: list[list[str]]
    goal_info_text: str
    completion_overrides: dict[SubjectKey, bool] = field(default_factory=dict)
    ruleset: Optional[str] = None
    request_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.request_id is None:
            self.request_id = str(uuid4())


@dataclass
class ReportContext:
    """Working state for one report run."""

    # Input
    request: ReportRequest
    rules: Optional[RuleTables] = None

    # Parser input (populated by p00_normalize)
    goal_info_lines: list[str] = field(default_factory=list)
    transcript_lines: list[TranscriptLine] = field(default_factory=list)
    tracker_rows: list[list[str]] = field(default_factory=list)

    # Parsed records (one pass each)
    goal_info: GoalInfo = field(default_factory=GoalInfo)
    tracker: TrackerResult = field(default_factory=TrackerResult)
    transcript: TranscriptRecord = field(default_factory=TranscriptRecord)

    # Tracker column of the student, None if not found
    student_column: Optional[int] = None

    # Trace and diagnostics
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Output
    rendered_text: Optional[str] = None
    status: ReportStatus = ReportStatus.SUCCESS

    # Internal
    start_time: datetime = field(default_factory=datetime.now)

    @property
    def student_name(self) -> str:
        return self.request.student_name

    @classmethod
    def from_request(cls, request: ReportRequest) -> "ReportContext":
        return cls(request=request)

    def add_trace(
        self,
        pass_name: str,
        action: str,
        before: Optional[str] = None,
        after: Optional[str] = None,
        affected_ids: Optional[list[str]] = None,
    ) -> None:
        """Record what a pass did, with optional before/after summaries."""
        self.trace.append(TraceEntry(
            id=str(uuid4()),
            timestamp=datetime.now(),
            pass_name=pass_name,
            action=action,
            before=before,
            after=after,
            affected_ids=list(affected_ids or []),
        ))

    def add_diagnostic(
        self,
        level: str,
        code: str,
        message: str,
        source: str,
        affected_ids: Optional[list[str]] = None,
    ) -> None:
        self.diagnostics.append(Diagnostic(
            id=str(uuid4()),
            level=DiagnosticLevel(level),
            code=code,
            message=message,
            source=source,
            affected_ids=list(affected_ids or []),
        ))

    def fail(self, code: DiagnosticCode, message: str, source: str = "engine") -> None:
        """Mark the run as failed and drop any report rendered so far."""
        self.status = ReportStatus.ERROR
        self.rendered_text = None
        self.add_diagnostic("error", code.value, message, source)

    def to_result(self) -> ReportResult:
        elapsed = datetime.now() - self.start_time
        failed = self.status == ReportStatus.ERROR
        return ReportResult(
            request_id=self.request.request_id or str(uuid4()),
            timestamp=self.start_time,
            processing_duration_ms=elapsed.total_seconds() * 1000,
            student_name=self.student_name,
            goal_info=self.goal_info,
            tracker=self.tracker,
            transcript=self.transcript,
            report_text=None if failed else self.rendered_text,
            status=self.status,
            trace=self.trace,
            diagnostics=self.diagnostics,
        )
