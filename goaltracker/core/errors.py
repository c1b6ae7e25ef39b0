"""
Errors: Boundary failures.

Parsers never raise: an unmatched rule just leaves a field empty. These
exceptions cover what happens before parsing starts (missing inputs,
unreadable documents) and a pipeline that could not produce a report.
"""

from typing import Optional


class GoalTrackerError(Exception):
    """Base class for all goal tracker errors."""


class MissingDocumentError(GoalTrackerError):
    """One of the three required documents was not provided."""

    def __init__(self, document_name: str):
        self.document_name = document_name
        super().__init__(
            f"Missing required input: {document_name}. "
            "Please provide all three required inputs (either as files or text)"
        )


class MissingStudentNameError(GoalTrackerError):
    """The caller did not confirm a student name."""

    def __init__(self) -> None:
        super().__init__("A student name is required to locate the tracker column")


class DocumentConversionError(GoalTrackerError):
    """A document could not be converted to text or rows."""

    def __init__(self, document_name: str, reason: str):
        self.document_name = document_name
        self.reason = reason
        super().__init__(f"Error reading {document_name}: {reason}")


class ReportGenerationError(GoalTrackerError):
    """The pipeline finished without producing a report."""

    def __init__(self, message: str, request_id: Optional[str] = None):
        self.request_id = request_id
        super().__init__(message)


class RulesetError(GoalTrackerError):
    """A rule table file is malformed."""
