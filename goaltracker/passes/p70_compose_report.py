"""
Pass 70: Report Composition

Combines the goal information, tracker result, and transcript record
into the weekly report text. Composition is pure: any record, even an
all-empty one, renders to a complete report with every header present.
"""

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.ir.enums import DiagnosticCode
from goaltracker.ir.schema import GoalInfo, TrackerResult, TranscriptRecord
from goaltracker.render.template import MAX_BEHAVIORS, MAX_STRATEGIES, TemplateRenderer

PASS_NAME = "p70_compose_report"
log = get_pass_logger(PASS_NAME)

_renderer = TemplateRenderer()


def compose_report(
    info: GoalInfo,
    tracker: TrackerResult,
    transcript: TranscriptRecord,
) -> str:
    """Render the weekly report for one student."""
    return _renderer.render(info, tracker, transcript)


def compose(ctx: ReportContext) -> ReportContext:
    """Render the report from the three parsed records."""
    text = compose_report(ctx.goal_info, ctx.tracker, ctx.transcript)
    ctx.rendered_text = text

    tasks = [key.value for key, task in ctx.tracker.items() if task.description]
    if not tasks:
        ctx.add_diagnostic(
            level="info",
            code=DiagnosticCode.NO_WORK_TASKS.value,
            message="No work tasks recorded this week",
            source=PASS_NAME,
        )

    log.info(
        "report_composed",
        chars=len(text),
        tasks=len(tasks),
        behaviors=min(len(ctx.transcript.behaviors), MAX_BEHAVIORS),
        strategies=min(len(ctx.transcript.strategies), MAX_STRATEGIES),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="composed_report",
        after=f"{len(text)} chars",
        affected_ids=tasks,
    )

    return ctx
