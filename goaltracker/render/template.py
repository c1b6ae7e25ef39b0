"""
Template Renderer: Deterministic rendering of the weekly report.

Same records always produce the same text. The renderer does no
extraction; it only orders, truncates, and interpolates.
"""

from goaltracker.ir.enums import REPORT_SUBJECT_ORDER
from goaltracker.ir.schema import GoalInfo, TrackerResult, TranscriptRecord

MAX_BEHAVIORS = 5
MAX_STRATEGIES = 3

DEFAULT_NARRATIVE = (
    "Student and Learning Guide discussed progress on work habits and goals "
    "during this week's 1:1 session."
)
NO_TASKS_PLACEHOLDER = "*No work tasks recorded this week*"
STRATEGIES_LEAD = "We discussed the following strategies: "
STATUS_DONE = "Done"
STATUS_INCOMPLETE = "Incomplete"

REPORT_TEMPLATE = """\
**Notes for Week {week_number}**

**1:1 Date - {meeting_date}**

**Summaries**

**Learning Guide Comments**
{narrative}

**Deliberate Practice Work Completion (Week of {meeting_date})**

{completion}

**Parent Reflection/Comments to Student**
[To be completed by parent]"""


class TemplateRenderer:
    """
    Template-based renderer for the weekly goal tracker.

    Headers are fixed and always emitted in the same order, whatever
    the records hold.
    """

    def render_completion(self, tracker: TrackerResult) -> str:
        """Subjects with a task, in report order, one entry per subject."""
        entries: list[str] = []
        for subject in REPORT_SUBJECT_ORDER:
            task = tracker.get(subject)
            if not task.description:
                continue
            status = STATUS_DONE if task.complete else STATUS_INCOMPLETE
            lines = [subject.display_name, task.description, status]
            if task.notes:
                lines.append(task.notes)
            entries.append("\n".join(lines))

        if not entries:
            return NO_TASKS_PLACEHOLDER
        return "\n\n".join(entries)

    def render_narrative(self, transcript: TranscriptRecord) -> str:
        """Learning Guide comments synthesized from behaviors and strategies."""
        paragraphs: list[str] = []

        behaviors = transcript.behaviors[:MAX_BEHAVIORS]
        if behaviors:
            sentences = [f"Student {b[:1].lower()}{b[1:]}" for b in behaviors]
            paragraphs.append(". ".join(sentences) + ".")

        strategies = transcript.strategies[:MAX_STRATEGIES]
        if strategies:
            paragraphs.append(STRATEGIES_LEAD + "; ".join(strategies) + ".")

        narrative = "\n\n".join(paragraphs)
        if not narrative.strip():
            return DEFAULT_NARRATIVE
        return narrative

    def render(
        self,
        info: GoalInfo,
        tracker: TrackerResult,
        transcript: TranscriptRecord,
    ) -> str:
        """
        Render the full report.

        Args:
            info: Week number and meeting date are interpolated verbatim
            tracker: Source of the completion section
            transcript: Source of the Learning Guide comments

        Returns:
            The report text
        """
        return REPORT_TEMPLATE.format(
            week_number=info.week_number,
            meeting_date=info.meeting_date,
            narrative=self.render_narrative(transcript),
            completion=self.render_completion(tracker),
        )
