"""
Unit tests for the rule table loader and rule models.
"""

import pytest
import yaml

from goaltracker.core.errors import RulesetError
from goaltracker.documents.text import split_transcript_lines
from goaltracker.ir.enums import GoalCategory, SubjectKey
from goaltracker.passes.p30_synthesize_transcript import synthesize_transcript
from goaltracker.rules.loader import (
    RULESETS_DIR,
    get_rules,
    list_rulesets,
    load_rules,
    load_rules_from_path,
    parse_rules,
)
from goaltracker.rules.models import PatternRule, contains_any, first_match


class TestLoading:
    """Tests for loading rulesets."""

    def test_default_is_listed(self):
        assert "default" in list_rulesets()

    def test_default_loads(self):
        rules = load_rules("default")
        assert rules.name == "default"
        assert [s.subject for s in rules.tracker.subjects] == [
            SubjectKey.READING,
            SubjectKey.WRITING,
            SubjectKey.COMPUTATION,
            SubjectKey.COMMUNICATION,
            SubjectKey.OBSERVATION,
            SubjectKey.CTWS,
        ]

    def test_missing_ruleset(self):
        with pytest.raises(FileNotFoundError):
            load_rules("no_such_ruleset")

    def test_malformed_ruleset(self):
        with pytest.raises(RulesetError):
            parse_rules({"goal_info": {}})

    def test_invalid_yaml(self, tmp_path):
        """Verify a YAML syntax error surfaces as RulesetError."""
        path = tmp_path / "broken.yaml"
        path.write_text("goal_info: [unclosed\n  : :", encoding="utf-8")
        with pytest.raises(RulesetError):
            load_rules_from_path(path)

    def test_invalid_regex(self):
        """Verify an uncompilable pattern surfaces as RulesetError."""
        data = yaml.safe_load((RULESETS_DIR / "default.yaml").read_text(encoding="utf-8"))
        data["goal_info"]["week_patterns"][0]["pattern"] = "week(("
        with pytest.raises(RulesetError):
            parse_rules(data)

    def test_non_mapping(self):
        with pytest.raises(RulesetError):
            parse_rules(["not", "a", "mapping"])

    def test_get_rules_is_cached(self):
        assert get_rules() is get_rules()

    def test_env_selects_ruleset(self, monkeypatch, tmp_path):
        data = yaml.safe_load((RULESETS_DIR / "default.yaml").read_text(encoding="utf-8"))
        data["name"] = "custom"
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        monkeypatch.setenv("GOALTRACKER_RULESET", str(path))
        assert get_rules().name == "custom"


class TestDefaultTables:
    """Tests that the default tables carry the documented keyword lists."""

    def test_transcript_keywords(self):
        t = load_rules().transcript
        assert t.behavior_markers == [
            "distracted", "feels", "prefers", "remembers", "forgets", "helps", "creates anxiety",
        ]
        assert t.assessor_markers == [
            "strong performance", "excellent quality", "struggles with", "often incomplete",
        ]
        assert t.excluded_sections == ["academic overview", "cognitive processing", "learning environment"]
        assert t.strategy_sections == ["support strategies", "next steps"]

    def test_goal_categories(self):
        g = load_rules().goal_info
        assert g.category_rule(GoalCategory.WORK_HABIT).stops == ["character habit"]
        assert g.category_rule(GoalCategory.CHARACTER_HABIT).stops == ["work habit"]


class TestSwappableTables:
    """Tests that behavior follows the loaded table."""

    def test_custom_behavior_markers(self, tmp_path):
        data = yaml.safe_load((RULESETS_DIR / "default.yaml").read_text(encoding="utf-8"))
        data["transcript"]["behavior_markers"] = ["enjoys"]
        path = tmp_path / "enjoys.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        rules = load_rules(str(path))
        lines = split_transcript_lines("Notes:\n- Enjoys group work\n- Feels tired")
        record = synthesize_transcript(lines, rules.transcript)
        assert record.behaviors == ["Enjoys group work"]


class TestRuleModels:
    """Tests for pattern rules and chains."""

    def test_capture_group_value(self):
        rule = PatternRule(name="week", pattern=r"week\s*(\d+)")
        assert rule.search("WEEK 7") == "7"

    def test_whole_match_without_group(self):
        rule = PatternRule(name="x", pattern=r"\d+")
        assert rule.search("abc 42") == "42"

    def test_case_sensitive_rule(self):
        rule = PatternRule(name="cap", pattern=r"[A-Z][a-z]+", ignore_case=False)
        assert rule.search("lower Upper") == "Upper"

    def test_first_match_order(self):
        chain = [
            PatternRule(name="a", pattern=r"(\d+)/"),
            PatternRule(name="b", pattern=r"(\d+)"),
        ]
        assert first_match(chain, "5/12") == ("a", "5")
        assert first_match(chain, "12") == ("b", "12")
        assert first_match(chain, "none") is None

    def test_contains_any(self):
        assert contains_any("Feels Tired", ["feels"])
        assert not contains_any("", ["feels"])
