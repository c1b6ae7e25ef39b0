"""
Pass 30: Transcript Synthesis

Pulls student-voice behaviors and proposed strategies out of the 1:1
transcript notes.

The notes are a sequence of section headers and bullets:
- A non-bullet line ending in ':' or a short capitalized line opens a section
- Bullets under Learning Guide background sections (academic overview,
  cognitive processing, learning environment) are the LG's assessment,
  not the student's voice, and are skipped
- Top-level bullets with student-voice markers become behaviors, unless
  they read as an assessment ("struggles with", "strong performance")
- Bullets in strategy sections, or marked "Strategy:"/"Solution:"/
  "proposed", become strategies (a bullet can be both)
- Indented sub-bullets only count as behaviors when they carry reported
  speech ("expressed", "would", "→")

Behaviors are then stripped of a leading "Student "/"The student " so the
report can re-attach its own subject.
"""

from typing import Optional

from goaltracker.core.context import ReportContext
from goaltracker.core.logging import get_pass_logger
from goaltracker.documents.text import TranscriptLine
from goaltracker.ir.enums import DiagnosticCode
from goaltracker.ir.schema import TranscriptRecord
from goaltracker.rules.loader import get_rules
from goaltracker.rules.models import TranscriptRules, contains_any

PASS_NAME = "p30_synthesize_transcript"
log = get_pass_logger(PASS_NAME)


# ============================================================================
# Line Classification
# ============================================================================

def bullet_marker(text: str, rules: TranscriptRules) -> Optional[str]:
    """The bullet marker the line starts with, if any."""
    for marker in rules.bullet_markers:
        if text.startswith(marker):
            return marker
    return None


def strip_bullet(text: str, rules: TranscriptRules) -> str:
    marker = bullet_marker(text, rules)
    if marker is None:
        return text.strip()
    return text[len(marker):].strip()


def is_section_header(text: str, rules: TranscriptRules) -> bool:
    """A non-bullet line that ends with ':' or is a short capitalized line."""
    if bullet_marker(text, rules) is not None:
        return False
    if text.endswith(":"):
        return True
    return "A" <= text[:1] <= "Z" and len(text.split()) <= rules.header_max_words


def is_sub_bullet(line: TranscriptLine, rules: TranscriptRules) -> bool:
    return line.indent >= rules.sub_bullet_min_indent and bullet_marker(line.text, rules) is not None


def normalize_behavior(text: str, rules: TranscriptRules) -> str:
    """Drop a leading 'Student '/'The student ' so the fragment reads POV-neutral."""
    for prefix in rules.behavior_prefixes:
        if text.startswith(prefix):
            text = text[len(prefix):]
    return text


# ============================================================================
# Synthesis
# ============================================================================

def synthesize_transcript(
    lines: list[TranscriptLine],
    rules: Optional[TranscriptRules] = None,
) -> TranscriptRecord:
    """
    Collect behaviors and strategies from transcript lines.

    Args:
        lines: Trimmed, non-blank transcript lines with indentation
        rules: Transcript rule table (default ruleset if None)

    Returns:
        TranscriptRecord; both lists empty if nothing matched
    """
    if rules is None:
        rules = get_rules().transcript

    behaviors: list[str] = []
    strategies: list[str] = []
    section = ""
    skipped = 0

    for line in lines:
        text = line.text

        if is_section_header(text, rules):
            section = text.lower()
            log.debug("section_opened", section=section)
            continue

        if contains_any(section, rules.excluded_sections):
            skipped += 1
            continue

        if bullet_marker(text, rules) is None:
            continue

        content = strip_bullet(text, rules)

        if is_sub_bullet(line, rules):
            if contains_any(text, rules.sub_bullet_markers):
                behaviors.append(content)
                log.debug("sub_bullet_captured", text=content[:60])
            continue

        if contains_any(text, rules.assessor_markers):
            log.debug("assessment_dropped", text=content[:60])
            continue

        if contains_any(text, rules.behavior_markers):
            behaviors.append(content)

        if contains_any(section, rules.strategy_sections) or contains_any(text, rules.strategy_markers):
            strategies.append(content)

    if skipped:
        log.verbose("background_bullets_skipped", count=skipped)

    return TranscriptRecord(
        behaviors=[normalize_behavior(b, rules) for b in behaviors],
        strategies=strategies,
    )


def synthesize(ctx: ReportContext) -> ReportContext:
    """Build the TranscriptRecord from the transcript lines."""
    rules = ctx.rules.transcript if ctx.rules else None
    record = synthesize_transcript(ctx.transcript_lines, rules)
    ctx.transcript = record

    if record.is_empty():
        ctx.add_diagnostic(
            level="info",
            code=DiagnosticCode.NO_TRANSCRIPT_CONTENT.value,
            message="No student-voice behaviors or strategies found in the transcript",
            source=PASS_NAME,
        )

    log.info(
        "transcript_synthesized",
        lines=len(ctx.transcript_lines),
        behaviors=len(record.behaviors),
        strategies=len(record.strategies),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="synthesized_transcript",
        before=f"{len(ctx.transcript_lines)} lines",
        after=f"{len(record.behaviors)} behaviors, {len(record.strategies)} strategies",
    )

    return ctx
