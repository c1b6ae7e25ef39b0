"""
Goal Tracker: Weekly progress report generator.

A deterministic, rule-based pipeline that turns a 1:1 meeting transcript,
a work-completion tracker grid, and a goal-information document into one
formatted weekly goal tracker for a single student.

No learning, no guessing beyond the rule tables: same inputs, same report.
"""

__version__ = "0.1.0"
