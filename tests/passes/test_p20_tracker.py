"""
Unit tests for p20_resolve_tracker (TrackerResolver).
"""

from goaltracker.core.context import ReportContext, ReportRequest
from goaltracker.ir.enums import DiagnosticCode, SubjectKey
from goaltracker.ir.schema import SubjectTask
from goaltracker.passes.p20_resolve_tracker import (
    clean_description,
    is_complete,
    names_match,
    resolve_student_column,
    resolve_tracker,
    resolve_tracker_grid,
)


class TestColumnResolution:
    """Tests for locating the student's column."""

    def test_exact_header(self):
        rows = [["Name", "Amari", "Gelsa"], ["Lexia", "3 units", "2 units"]]
        assert resolve_student_column(rows, "Amari") == (0, 1)

    def test_cell_contained_in_name(self):
        """Verify a first-name header matches a full student name."""
        rows = [["Name", "Amari", "Gelsa"]]
        assert resolve_student_column(rows, "Gelsa Ruiz") == (0, 2)

    def test_name_contained_in_cell(self):
        rows = [["Name", "AMARI JONES (AL2)"]]
        assert resolve_student_column(rows, "amari jones") == (0, 1)

    def test_first_match_scanning_rows_then_columns(self):
        """Verify the earliest row wins, then the leftmost cell."""
        rows = [
            ["Week 4", "", ""],
            ["Name", "Amari", "Amari J"],
            ["Amari", "x", "x"],
        ]
        assert resolve_student_column(rows, "Amari") == (1, 1)

    def test_empty_cells_never_match(self):
        assert not names_match("", "Amari")
        assert not names_match("Amari", "")

    def test_not_found(self):
        assert resolve_student_column([["Name", "Gelsa"]], "Amari") is None


class TestCellInterpretation:
    """Tests for completion and description cleanup."""

    def test_check_glyph_is_complete(self, rules):
        assert is_complete("3 units ✓", rules.tracker)
        assert is_complete("☑", rules.tracker)

    def test_completion_words(self, rules):
        assert is_complete("Done", rules.tracker)
        assert is_complete("completed Friday", rules.tracker)

    def test_bare_x(self, rules):
        assert is_complete("X", rules.tracker)
        assert is_complete(" x ", rules.tracker)

    def test_bracketed_x(self, rules):
        assert is_complete("Lesson 4 [x]", rules.tracker)

    def test_plain_text_is_incomplete(self, rules):
        assert not is_complete("3 units", rules.tracker)
        assert not is_complete("6 lessons", rules.tracker)

    def test_clean_description_strips_marks(self, rules):
        assert clean_description("3 units ✓", rules.tracker) == "3 units"
        assert clean_description("☐ Lesson 4", rules.tracker) == "Lesson 4"
        assert clean_description("Lesson 4 [x]", rules.tracker) == "Lesson 4"


class TestResolveTracker:
    """Tests for full grid resolution."""

    def test_basic_grid(self, rules):
        """Verify the reading task from a two-student grid."""
        rows = [["Name", "Amari", "Gelsa"], ["Lexia", "3 units", "2 units"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.get(SubjectKey.READING) == SubjectTask(description="3 units", complete=False)

    def test_always_six_subjects(self, rules):
        rows = [["Name", "Amari"], ["Lexia", "3 units"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert set(result.tasks) == set(SubjectKey)

    def test_student_not_found_is_empty(self, rules, tracker_rows):
        result = resolve_tracker(tracker_rows, "Nobody Here", rules.tracker)
        assert result.is_empty()
        assert set(result.tasks) == set(SubjectKey)

    def test_unclassified_rows_skipped(self, rules):
        rows = [["Name", "Amari"], ["Lunch duty", "yes"], ["Typing", "10 min"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.get(SubjectKey.WRITING).description == "10 min"
        assert sum(1 for _, t in result.items() if t.description) == 1

    def test_empty_student_cell_skipped(self, rules):
        rows = [["Name", "Amari", "Gelsa"], ["CTWS", "", "Project"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.get(SubjectKey.CTWS) == SubjectTask()

    def test_short_description_falls_back_to_row_label(self, rules):
        """Verify a bare mark uses the row's first cell as description."""
        rows = [["Name", "Amari"], ["Observation", "x"]]
        task = resolve_tracker(rows, "Amari", rules.tracker).get(SubjectKey.OBSERVATION)
        assert task.description == "Observation"
        assert task.complete

    def test_first_keyword_category_wins(self, rules):
        """Verify 'Reading/Writing' classifies as reading (table order)."""
        rows = [["Name", "Amari"], ["Reading/Writing block", "Chapter 3"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.get(SubjectKey.READING).description == "Chapter 3"
        assert result.get(SubjectKey.WRITING).description == ""

    def test_ctws_variants(self, rules):
        rows = [["Name", "Amari"], ["CT/WS", "Bridge build"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.get(SubjectKey.CTWS).description == "Bridge build"

    def test_completion_notes_from_row_below(self, rules, tracker_rows):
        result = resolve_tracker(tracker_rows, "Amari Jones", rules.tracker)
        computation = result.get(SubjectKey.COMPUTATION)
        assert computation.description == "Lesson 4"
        assert computation.complete
        assert computation.notes == "finished early, did extra"

    def test_sample_grid(self, rules, tracker_rows):
        result = resolve_tracker(tracker_rows, "Amari Jones", rules.tracker)
        assert result.get(SubjectKey.READING) == SubjectTask(description="3 units", complete=True)
        assert result.get(SubjectKey.WRITING) == SubjectTask(description="15 min typing.com", complete=False)
        assert result.get(SubjectKey.COMMUNICATION) == SubjectTask()
        assert result.get(SubjectKey.CTWS).description == "Ecosystem project"
        assert result.get(SubjectKey.OBSERVATION).description == "Bird journal"

    def test_other_student_column(self, rules, tracker_rows):
        result = resolve_tracker(tracker_rows, "Gelsa", rules.tracker)
        assert result.get(SubjectKey.WRITING) == SubjectTask(description="done", complete=True)
        assert result.get(SubjectKey.OBSERVATION) == SubjectTask(description="Observation", complete=True)
        assert result.get(SubjectKey.CTWS) == SubjectTask()

    def test_short_rows(self, rules):
        """Verify rows shorter than the student column are treated as empty."""
        rows = [["Name", "Gelsa", "Amari"], ["Lexia", "2 units"]]
        result = resolve_tracker(rows, "Amari", rules.tracker)
        assert result.is_empty()


class TestResolveTrackerGridPass:
    """Tests for the pipeline pass wrapper."""

    def _ctx(self, rows, rules, name):
        req = ReportRequest(student_name=name, transcript_text="", tracker_rows=rows, goal_info_text="")
        ctx = ReportContext.from_request(req)
        ctx.rules = rules
        ctx.tracker_rows = rows
        return ctx

    def test_sets_column_and_tracker(self, rules, tracker_rows):
        ctx = resolve_tracker_grid(self._ctx(tracker_rows, rules, "Amari Jones"))
        assert ctx.student_column == 1
        assert ctx.tracker.get(SubjectKey.READING).complete
        assert ctx.trace[-1].pass_name == "p20_resolve_tracker"

    def test_missing_student_warns(self, rules, tracker_rows):
        ctx = resolve_tracker_grid(self._ctx(tracker_rows, rules, "Nobody Here"))
        assert ctx.student_column is None
        assert ctx.tracker.is_empty()
        assert any(d.code == DiagnosticCode.STUDENT_NOT_IN_TRACKER.value for d in ctx.diagnostics)
