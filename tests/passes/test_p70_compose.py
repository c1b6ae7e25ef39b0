"""
Unit tests for p70_compose_report (ReportComposer) and the template renderer.
"""

from goaltracker.core.context import ReportContext, ReportRequest
from goaltracker.ir.enums import DiagnosticCode, SubjectKey
from goaltracker.ir.schema import GoalInfo, SubjectTask, TrackerResult, TranscriptRecord
from goaltracker.passes.p70_compose_report import compose, compose_report
from goaltracker.render.template import DEFAULT_NARRATIVE, NO_TASKS_PLACEHOLDER, TemplateRenderer

HEADERS = [
    "**Notes for Week ",
    "**1:1 Date - ",
    "**Summaries**",
    "**Learning Guide Comments**",
    "**Deliberate Practice Work Completion (Week of ",
    "**Parent Reflection/Comments to Student**",
]


class TestCompletionSection:
    """Tests for the work completion table."""

    def test_fixed_subject_order(self):
        """Verify CTWS renders before Observation and after Communication."""
        tracker = TrackerResult(tasks={
            SubjectKey.OBSERVATION: SubjectTask(description="Bird journal"),
            SubjectKey.CTWS: SubjectTask(description="Bridge", complete=True),
            SubjectKey.READING: SubjectTask(description="3 units", complete=True),
        })
        text = TemplateRenderer().render_completion(tracker)
        assert text == (
            "Reading\n3 units\nDone\n\n"
            "CTWS\nBridge\nDone\n\n"
            "Observation\nBird journal\nIncomplete"
        )

    def test_notes_rendered(self):
        tracker = TrackerResult(tasks={
            SubjectKey.COMPUTATION: SubjectTask(description="Lesson 4", complete=True, notes="did extra"),
        })
        text = TemplateRenderer().render_completion(tracker)
        assert text == "Computation\nLesson 4\nDone\ndid extra"

    def test_placeholder_when_empty(self):
        assert TemplateRenderer().render_completion(TrackerResult.empty()) == NO_TASKS_PLACEHOLDER


class TestNarrative:
    """Tests for the Learning Guide comments."""

    def test_default_when_nothing_captured(self):
        assert TemplateRenderer().render_narrative(TranscriptRecord()) == DEFAULT_NARRATIVE
        assert DEFAULT_NARRATIVE == (
            "Student and Learning Guide discussed progress on work habits "
            "and goals during this week's 1:1 session."
        )

    def test_behaviors_lowercased_and_prefixed(self):
        record = TranscriptRecord(behaviors=["Distracted during math block", "feels tired"])
        text = TemplateRenderer().render_narrative(record)
        assert text == "Student distracted during math block. Student feels tired."

    def test_behaviors_capped_at_five(self):
        record = TranscriptRecord(behaviors=[f"feels {i}" for i in range(8)])
        text = TemplateRenderer().render_narrative(record)
        assert text.count("Student ") == 5
        assert "feels 5" not in text

    def test_strategies_paragraph(self):
        record = TranscriptRecord(
            behaviors=["feels tired"],
            strategies=["A", "B", "C", "D"],
        )
        text = TemplateRenderer().render_narrative(record)
        assert text == (
            "Student feels tired.\n\n"
            "We discussed the following strategies: A; B; C."
        )

    def test_strategies_only(self):
        text = TemplateRenderer().render_narrative(TranscriptRecord(strategies=["Timer"]))
        assert text == "We discussed the following strategies: Timer."


class TestComposeReport:
    """Tests for the full report."""

    def test_exact_report(self):
        info = GoalInfo(week_number="4", meeting_date="5/12/25")
        tracker = TrackerResult(tasks={SubjectKey.READING: SubjectTask(description="3 units")})
        text = compose_report(info, tracker, TranscriptRecord())
        assert text == (
            "**Notes for Week 4**\n\n"
            "**1:1 Date - 5/12/25**\n\n"
            "**Summaries**\n\n"
            "**Learning Guide Comments**\n"
            f"{DEFAULT_NARRATIVE}\n\n"
            "**Deliberate Practice Work Completion (Week of 5/12/25)**\n\n"
            "Reading\n3 units\nIncomplete\n\n"
            "**Parent Reflection/Comments to Student**\n"
            "[To be completed by parent]"
        )

    def test_headers_in_order_for_empty_records(self):
        """Verify every header renders, in order, even with nothing parsed."""
        text = compose_report(GoalInfo(), TrackerResult.empty(), TranscriptRecord())
        positions = [text.index(h) for h in HEADERS]
        assert positions == sorted(positions)
        assert "**Notes for Week **" in text
        assert NO_TASKS_PLACEHOLDER in text

    def test_values_interpolated_verbatim(self):
        info = GoalInfo(week_number="12", meeting_date="May 12, 2025")
        text = compose_report(info, TrackerResult.empty(), TranscriptRecord())
        assert "**1:1 Date - May 12, 2025**" in text
        assert "(Week of May 12, 2025)" in text


class TestComposePass:
    """Tests for the pipeline pass wrapper."""

    def _ctx(self):
        req = ReportRequest(student_name="Amari", transcript_text="", tracker_rows=[], goal_info_text="")
        return ReportContext.from_request(req)

    def test_sets_rendered_text(self):
        ctx = compose(self._ctx())
        assert ctx.rendered_text.startswith("**Notes for Week")
        assert ctx.trace[-1].pass_name == "p70_compose_report"

    def test_no_tasks_diagnosed(self):
        ctx = compose(self._ctx())
        assert any(d.code == DiagnosticCode.NO_WORK_TASKS.value for d in ctx.diagnostics)
