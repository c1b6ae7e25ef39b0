"""
Pass 80: final check before the result leaves the pipeline.

A run that reaches this point without report text is downgraded to
PARTIAL so callers can tell it apart from a clean run.
"""

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.ir.enums import DiagnosticCode, ReportStatus

PASS_NAME = "p80_package"
log = get_pass_logger(PASS_NAME)


def package(ctx: ReportContext) -> ReportContext:
    missing_text = not ctx.rendered_text
    if missing_text:
        log.warning("no_report_text")
        ctx.add_diagnostic(
            level="error",
            code=DiagnosticCode.VALIDATION_FAILED.value,
            message="No report text produced",
            source=PASS_NAME,
        )
        if ctx.status == ReportStatus.SUCCESS:
            ctx.status = ReportStatus.PARTIAL

    filled = [key.value for key, task in ctx.tracker.items() if task.description]
    log.info(
        "packaged",
        status=ctx.status.value,
        tasks=len(filled),
        behaviors=len(ctx.transcript.behaviors),
        strategies=len(ctx.transcript.strategies),
        diagnostics=len(ctx.diagnostics),
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="packaged",
        after=f"status={ctx.status.value}",
        affected_ids=filled,
    )
    return ctx
