"""
Pass 25: Manual Completion Overrides

Applies reviewer-supplied completion flags on top of the resolved
tracker, for weeks where the tracker cell did not capture completion.

Only `complete` changes. A subject with no description gets its display
name as description so the override shows up in the report.
"""

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.ir.enums import DiagnosticCode, SubjectKey
from goaltracker.ir.schema import TrackerResult

PASS_NAME = "p25_apply_overrides"
log = get_pass_logger(PASS_NAME)


def override_completion(
    tracker: TrackerResult,
    overrides: dict[SubjectKey, bool],
) -> TrackerResult:
    """Return a new TrackerResult with the given completion flags applied."""
    result = tracker
    for subject, complete in overrides.items():
        task = result.get(subject)
        update: dict = {"complete": complete}
        if not task.description:
            update["description"] = subject.display_name
        result = result.replace(subject, task.model_copy(update=update))
    return result


def apply_overrides(ctx: ReportContext) -> ReportContext:
    """Apply ReportRequest.completion_overrides to ctx.tracker."""
    overrides = ctx.request.completion_overrides
    if not overrides:
        return ctx

    ctx.tracker = override_completion(ctx.tracker, overrides)

    for subject, complete in overrides.items():
        ctx.add_diagnostic(
            level="info",
            code=DiagnosticCode.OVERRIDE_APPLIED.value,
            message=f"{subject.display_name} manually marked {'Done' if complete else 'Incomplete'}",
            source=PASS_NAME,
            affected_ids=[subject.value],
        )

    log.info("overrides_applied", subjects=sorted(s.value for s in overrides))

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="applied_overrides",
        affected_ids=[s.value for s in overrides],
    )

    return ctx
