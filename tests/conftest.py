"""
Shared fixtures: one realistic week of documents for one student.
"""

import pytest

from goaltracker.rules.loader import clear_cache, get_rules


GOAL_INFO_TEXT = """\
Student Name: Amari Jones
Week #4
Date: 5/12/25

Work Habit Goal:
Goal:
I will start my Lexia units within five minutes of arriving each morning.

Character Habit Goal:
Goal:
I will ask a peer for help before asking my Learning Guide.
"""

TRANSCRIPT_TEXT = """\
Academic Overview:
- Student struggles with fractions
- Strong performance in reading fluency

Session Notes:
- Student feels tired after lunch
- Distracted during math block
  - Student expressed that noise makes it hard to focus
  - Talked about the weekend
- The student prefers working at the standing desk
- Strong performance on typing, student prefers speed drills

Support Strategies:
- Use noise-cancelling headphones during math
- Check in after lunch
- Strategy: break Zearn into two sessions
- Move seat away from the door
"""

TRACKER_ROWS = [
    ["Name", "Amari Jones", "Gelsa Ruiz"],
    ["Lexia", "3 units ✓", "2 units"],
    ["Typing", "15 min typing.com", "done"],
    ["Zearn", "Lesson 4 [x]", "Lesson 2"],
    ["", "finished early, did extra", ""],
    ["CTWS", "Ecosystem project", ""],
    ["Observation", "Bird journal", "x"],
]


@pytest.fixture(autouse=True)
def _fresh_rules(monkeypatch):
    """Every test sees the default ruleset, freshly loaded."""
    monkeypatch.delenv("GOALTRACKER_RULESET", raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def rules():
    return get_rules()


@pytest.fixture
def goal_info_text():
    return GOAL_INFO_TEXT


@pytest.fixture
def transcript_text():
    return TRANSCRIPT_TEXT


@pytest.fixture
def tracker_rows():
    return [list(row) for row in TRACKER_ROWS]
