"""
Pass 00: load the rule tables and turn the raw documents into parser input.

Goal information becomes trimmed non-blank lines, the transcript keeps
its indentation per line, and tracker cells are trimmed with empty rows
dropped. Text is NFC-normalized and BOM/NBSP characters are cleaned up.
The request itself is never modified.
"""

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.documents.text import normalize_rows, split_lines, split_transcript_lines
from goaltracker.rules.loader import get_rules

PASS_NAME = "p00_normalize"
log = get_pass_logger(PASS_NAME)


def normalize(ctx: ReportContext) -> ReportContext:
    req = ctx.request

    ctx.rules = get_rules(req.ruleset)
    log.verbose("ruleset_loaded", ruleset=ctx.rules.name, version=ctx.rules.version)

    ctx.goal_info_lines = split_lines(req.goal_info_text)
    ctx.transcript_lines = split_transcript_lines(req.transcript_text)
    ctx.tracker_rows = normalize_rows(req.tracker_rows)

    dropped = len(req.tracker_rows) - len(ctx.tracker_rows)
    if dropped:
        log.debug("tracker_rows_dropped", count=dropped)
    log.info(
        "normalized",
        goal_info_lines=len(ctx.goal_info_lines),
        transcript_lines=len(ctx.transcript_lines),
        tracker_rows=len(ctx.tracker_rows),
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="normalized_input",
        before=f"{len(req.tracker_rows)} tracker rows",
        after=(
            f"{len(ctx.goal_info_lines)} goal lines, "
            f"{len(ctx.transcript_lines)} transcript lines, "
            f"{len(ctx.tracker_rows)} tracker rows"
        ),
    )
    return ctx
