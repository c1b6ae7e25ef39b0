"""
Pipelines: Pipeline registration and the top-level report entry point.

`generate_report` is the boundary: it validates the inputs, loads every
document, and only then runs the default pipeline. A boundary failure
raises before any parsing; a pipeline failure raises instead of
returning a partial report.
"""

from typing import Optional, Union

from goaltracker.core.context import ReportRequest
from goaltracker.core.engine import DEFAULT_PIPELINE, Engine, Pipeline, get_engine
from goaltracker.core.errors import (
    MissingDocumentError,
    MissingStudentNameError,
    ReportGenerationError,
)
from goaltracker.core.logging import LogChannel, get_logger
from goaltracker.documents.loaders import DocumentSource, load_grid, load_text, require
from goaltracker.ir.enums import ReportStatus, SubjectKey
from goaltracker.ir.schema import ReportResult
from goaltracker.passes import (
    apply_overrides,
    compose,
    extract_goal_fields,
    normalize,
    package,
    resolve_tracker_grid,
    synthesize,
)

log = get_logger(LogChannel.PIPELINE)

TRANSCRIPT_DOCUMENT = "1:1 Transcript"
TRACKER_DOCUMENT = "Goal Tracker"
GOAL_INFO_DOCUMENT = "Goal Information"

TextInput = Union[DocumentSource, str, None]
GridInput = Union[DocumentSource, str, list[list[str]], None]


def setup_default_pipeline(engine: Engine) -> None:
    """Register the default report pipeline."""
    default_pipeline = Pipeline(
        id=DEFAULT_PIPELINE,
        name="Default Goal Tracker Pipeline",
        passes=[
            normalize,
            extract_goal_fields,
            resolve_tracker_grid,
            apply_overrides,      # After tracker resolution, before rendering
            synthesize,
            compose,
            package,
        ],
    )
    engine.register_pipeline(default_pipeline)


def _as_source(value: Union[DocumentSource, str, None], name: str) -> Optional[DocumentSource]:
    if value is None or isinstance(value, DocumentSource):
        return value
    return DocumentSource.from_text(name, value)


def build_request(
    student_name: Optional[str],
    transcript: TextInput,
    tracker: GridInput,
    goal_info: TextInput,
    completion_overrides: Optional[dict[SubjectKey, bool]] = None,
    ruleset: Optional[str] = None,
) -> ReportRequest:
    """
    Validate the inputs and load all three documents.

    Plain strings are inline text; a list of rows is an already-split
    tracker grid.

    Raises:
        MissingStudentNameError: Name missing or blank (checked first)
        MissingDocumentError: A document was not provided
        DocumentConversionError: A document could not be read
    """
    if not student_name or not student_name.strip():
        raise MissingStudentNameError()

    transcript_src = require(_as_source(transcript, TRANSCRIPT_DOCUMENT), TRANSCRIPT_DOCUMENT)
    if isinstance(tracker, list):
        if not tracker:
            raise MissingDocumentError(TRACKER_DOCUMENT)
        tracker_rows = tracker
        tracker_src = None
    else:
        tracker_src = require(_as_source(tracker, TRACKER_DOCUMENT), TRACKER_DOCUMENT)
    goal_info_src = require(_as_source(goal_info, GOAL_INFO_DOCUMENT), GOAL_INFO_DOCUMENT)

    # All documents load before anything is parsed
    transcript_text = load_text(transcript_src)
    if tracker_src is not None:
        tracker_rows = load_grid(tracker_src)
    goal_info_text = load_text(goal_info_src)

    return ReportRequest(
        student_name=student_name.strip(),
        transcript_text=transcript_text,
        tracker_rows=tracker_rows,
        goal_info_text=goal_info_text,
        completion_overrides=dict(completion_overrides or {}),
        ruleset=ruleset,
    )


def run_request(request: ReportRequest, engine: Optional[Engine] = None) -> ReportResult:
    """Run a prepared request through the default pipeline."""
    engine = engine or get_engine()
    if DEFAULT_PIPELINE not in engine.list_pipelines():
        setup_default_pipeline(engine)
    return engine.generate(request, DEFAULT_PIPELINE)


def generate_report(
    student_name: Optional[str],
    transcript: TextInput,
    tracker: GridInput,
    goal_info: TextInput,
    completion_overrides: Optional[dict[SubjectKey, bool]] = None,
    ruleset: Optional[str] = None,
) -> str:
    """
    Generate the weekly goal tracker report for one student.

    Args:
        student_name: Caller-confirmed student name
        transcript: 1:1 transcript (DocumentSource or inline text)
        tracker: Goal tracker grid (DocumentSource, grid text, or rows)
        goal_info: Goal information (DocumentSource or inline text)
        completion_overrides: Manual per-subject completion flags
        ruleset: Ruleset name or YAML path (default ruleset if None)

    Returns:
        The report text

    Raises:
        GoalTrackerError: On a boundary failure, or ReportGenerationError
        if the pipeline did not produce a report
    """
    request = build_request(
        student_name,
        transcript,
        tracker,
        goal_info,
        completion_overrides=completion_overrides,
        ruleset=ruleset,
    )
    result = run_request(request)

    if result.status not in (ReportStatus.SUCCESS, ReportStatus.PARTIAL) or result.report_text is None:
        errors = [d.message for d in result.diagnostics if d.level.value == "error"]
        log.error("report_failed", request_id=result.request_id, errors=errors)
        raise ReportGenerationError(
            "; ".join(errors) or "Report generation failed",
            request_id=result.request_id,
        )

    return result.report_text
