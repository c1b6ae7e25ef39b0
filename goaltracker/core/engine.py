"""
Engine: runs a registered pipeline over one report request.

Passes run strictly in order against a shared ReportContext. The first
pass that raises stops the run; the result then carries status ERROR,
a PASS_ERROR diagnostic and no report text.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from goaltracker.core.context import ReportContext, ReportRequest
from goaltracker.core.logging import ReportLogger
from goaltracker.ir.enums import DiagnosticCode
from goaltracker.ir.schema import ReportResult

PassFn = Callable[[ReportContext], ReportContext]

DEFAULT_PIPELINE = "default"


@dataclass
class Pipeline:
    id: str
    name: str
    passes: list[PassFn] = field(default_factory=list)


class Engine:
    """Holds the registered pipelines and executes requests against them."""

    def __init__(self) -> None:
        self._pipelines: dict[str, Pipeline] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        self._pipelines[pipeline.id] = pipeline

    def list_pipelines(self) -> list[str]:
        return list(self._pipelines)

    def generate(self, request: ReportRequest, pipeline_id: Optional[str] = None) -> ReportResult:
        """
        Produce a ReportResult for ``request``.

        An unregistered ``pipeline_id`` yields an ERROR result with a
        PIPELINE_NOT_FOUND diagnostic rather than raising.
        """
        ctx = ReportContext.from_request(request)
        pipeline = self._pipelines.get(pipeline_id or DEFAULT_PIPELINE)
        if pipeline is None:
            ctx.fail(
                DiagnosticCode.PIPELINE_NOT_FOUND,
                f"Pipeline '{pipeline_id}' not registered",
            )
            return ctx.to_result()

        rlog = ReportLogger(request.request_id, student=request.student_name)
        ctx = self._run(pipeline, ctx, rlog)
        rlog.report_complete(
            status=ctx.status.value,
            pipeline=pipeline.id,
            behaviors=len(ctx.transcript.behaviors),
            strategies=len(ctx.transcript.strategies),
            diagnostics=len(ctx.diagnostics),
        )
        return ctx.to_result()

    @staticmethod
    def _run(pipeline: Pipeline, ctx: ReportContext, rlog: ReportLogger) -> ReportContext:
        for pass_fn in pipeline.passes:
            name = pass_fn.__name__
            rlog.pass_start(name)
            try:
                ctx = pass_fn(ctx)
            except Exception as exc:
                rlog.pass_error(name, exc)
                ctx.fail(DiagnosticCode.PASS_ERROR, f"Pass '{name}' failed: {exc}")
                ctx.add_trace(pass_name=name, action="error")
                return ctx
            rlog.pass_end(name)
        return ctx


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Process-wide engine; pipelines are registered by the caller."""
    global _engine
    if _engine is None:
        _engine = Engine()
    return _engine
