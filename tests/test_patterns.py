"""Tests for the question template table and progression lookup."""

import copy

import pytest

from elicitation import (
    DEFAULT_QUESTION,
    ELICITATION_PATTERNS,
    UNIVERSAL_ELICITATION_AREAS,
    PatternConfigurationError,
    check_pattern_completeness,
    fill_placeholders,
    has_placeholders,
    get_question_progression,
    validate_elicitation_patterns,
)


class TestTemplateTable:
    """The shipped table covers every area and depth."""

    def test_shipped_table_is_complete(self):
        assert check_pattern_completeness() == []
        validate_elicitation_patterns()

    def test_every_universal_area_has_five_depths(self):
        for area in UNIVERSAL_ELICITATION_AREAS:
            assert sorted(ELICITATION_PATTERNS[area]) == [f"depth{d}" for d in range(5)]

    def test_missing_depth_is_reported(self):
        patterns = copy.deepcopy(ELICITATION_PATTERNS)
        del patterns["Success Metrics"]["depth4"]
        assert check_pattern_completeness(patterns) == ["Success Metrics/depth4"]

    def test_blank_template_counts_as_missing(self):
        patterns = copy.deepcopy(ELICITATION_PATTERNS)
        patterns["Budget & Resources"]["depth2"] = "   "
        assert "Budget & Resources/depth2" in check_pattern_completeness(patterns)

    def test_missing_area_reports_all_depths(self):
        patterns = copy.deepcopy(ELICITATION_PATTERNS)
        del patterns["Stakeholders & Politics"]
        missing = check_pattern_completeness(patterns)
        assert len(missing) == 5
        assert all(m.startswith("Stakeholders & Politics/") for m in missing)

    def test_validate_raises_on_gap(self):
        patterns = copy.deepcopy(ELICITATION_PATTERNS)
        del patterns["Current State Assessment"]["depth3"]
        with pytest.raises(PatternConfigurationError, match="Current State Assessment/depth3"):
            validate_elicitation_patterns(patterns)

    def test_configuration_error_is_value_error(self):
        assert issubclass(PatternConfigurationError, ValueError)


class TestGetQuestionProgression:
    """Test template lookup by area and depth."""

    def test_unknown_area_returns_default(self):
        assert get_question_progression("Astrology", 1, []) == DEFAULT_QUESTION

    def test_depth_lookup(self):
        assert get_question_progression("Success Metrics", 0, []) == (
            "How will you measure success in the first 90 days?"
        )
        assert get_question_progression("Success Metrics", 3, ["x"]) == (
            ELICITATION_PATTERNS["Success Metrics"]["depth3"]
        )

    def test_depth_past_table_falls_back_to_depth0(self):
        assert get_question_progression("Success Metrics", 5, []) == (
            ELICITATION_PATTERNS["Success Metrics"]["depth0"]
        )

    def test_pain_placeholder_filled_from_last_note(self):
        question = get_question_progression(
            "Pain Points & Challenges",
            1,
            ["first note", "The main problem: invoices are keyed in twice. Nobody owns it."],
        )
        assert question == "How much time/money does invoices are keyed in twice cost you monthly?"

    def test_placeholder_left_when_note_has_no_match(self):
        question = get_question_progression("Pain Points & Challenges", 1, ["nothing specific"])
        assert "[specific pain mentioned]" in question


class TestFillPlaceholders:
    """Test placeholder extraction from notes."""

    def test_system_placeholder_uses_capitalised_phrase(self):
        filled = fill_placeholders("How does [specific system mentioned] fit?", "we run on Oracle Fusion today")
        assert filled == "How does Oracle Fusion fit?"

    def test_amount_placeholder(self):
        filled = fill_placeholders("Is [specific amount mentioned] accurate?", "it takes 12 hours per week")
        assert filled == "Is 12 hours accurate?"

    def test_unknown_placeholders_untouched(self):
        template = "What about [business metric]?"
        assert fill_placeholders(template, "Revenue dropped 10%") == template

    def test_requirement_placeholder(self):
        filled = fill_placeholders(
            "What happens if [specific requirement] can't be met exactly as specified?",
            "The plant requires full audit trails, always.",
        )
        assert filled == "What happens if full audit trails can't be met exactly as specified?"

    def test_has_placeholders(self):
        assert has_placeholders("What about [business metric]?")
        assert not has_placeholders("What about revenue?")
