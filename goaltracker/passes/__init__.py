"""Passes: Pipeline stages for goal tracker report generation."""

from goaltracker.passes.p00_normalize import normalize
from goaltracker.passes.p10_extract_goal_info import extract_goal_fields, extract_goal_info
from goaltracker.passes.p20_resolve_tracker import resolve_tracker, resolve_tracker_grid
from goaltracker.passes.p25_apply_overrides import apply_overrides, override_completion
from goaltracker.passes.p30_synthesize_transcript import synthesize, synthesize_transcript
from goaltracker.passes.p70_compose_report import compose, compose_report
from goaltracker.passes.p80_package import package

__all__ = [
    # Pipeline passes
    "normalize",
    "extract_goal_fields",
    "resolve_tracker_grid",
    "apply_overrides",
    "synthesize",
    "compose",
    "package",
    # Pure parsers
    "extract_goal_info",
    "resolve_tracker",
    "override_completion",
    "synthesize_transcript",
    "compose_report",
]
