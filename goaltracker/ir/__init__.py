"""
IR: Intermediate Representation

The parsed records are the source of truth for the report.
The report text is a rendering of the records.
"""

from goaltracker.ir.enums import (
    REPORT_SUBJECT_ORDER,
    DiagnosticCode,
    DiagnosticLevel,
    GoalCategory,
    GoalField,
    ReportStatus,
    SubjectKey,
)
from goaltracker.ir.schema import (
    Diagnostic,
    GoalInfo,
    ReportResult,
    SubjectTask,
    TraceEntry,
    TrackerResult,
    TranscriptRecord,
)

__all__ = [
    # Enums
    "SubjectKey",
    "GoalField",
    "GoalCategory",
    "DiagnosticCode",
    "DiagnosticLevel",
    "ReportStatus",
    "REPORT_SUBJECT_ORDER",
    # Models
    "GoalInfo",
    "SubjectTask",
    "TrackerResult",
    "TranscriptRecord",
    "TraceEntry",
    "Diagnostic",
    "ReportResult",
]
