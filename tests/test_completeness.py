"""Tests for the session completeness rollup."""

import pytest

from contracts import QualityLevel
from elicitation import calculate_discovery_completeness, classify_percentage


HIGH_NOTE = "We need 3 hours to fix this critical system integration issue"


class TestCalculateDiscoveryCompleteness:
    """Test scoring, thresholds and gap reporting."""

    def test_single_note_area_is_a_gap(self):
        report = calculate_discovery_completeness({"A": ["only one note"]})
        assert report.percentage == 0
        assert report.quality == QualityLevel.LOW
        assert report.gaps == ["A: Needs more exploration (1/2 minimum)"]

    def test_empty_area_is_a_gap(self):
        report = calculate_discovery_completeness({"A": []})
        assert report.gaps == ["A: Needs more exploration (0/2 minimum)"]

    def test_high_quality_area_scores_full(self):
        report = calculate_discovery_completeness({"A": [HIGH_NOTE, "and more detail"]})
        assert report.percentage == 100
        assert report.quality == QualityLevel.HIGH
        assert report.gaps == []

    def test_notes_are_joined_before_assessment(self):
        """Signals spread over several notes combine."""
        report = calculate_discovery_completeness({
            "A": ["the ERP system is slow", "it costs 40 hours a month", "we need a fix"],
        })
        assert report.percentage == 100

    def test_zero_areas(self):
        report = calculate_discovery_completeness({})
        assert report.percentage == 0
        assert report.quality == QualityLevel.LOW
        assert report.gaps == []

    def test_medium_and_low_points(self):
        """Medium scores 2 of 3, low scores 1 of 3."""
        report = calculate_discovery_completeness({
            "Medium": ["the workflow takes 4 days", "nothing else"],
            "Low": ["fine", "all good"],
        })
        # (2 + 1) / 6
        assert report.percentage == 50
        assert report.quality == QualityLevel.LOW

    def test_missing_quantification_gap(self):
        report = calculate_discovery_completeness({
            "Pain Points": ["critical workflow issue", "we need it fixed"],
        })
        assert report.gaps == ["Pain Points: Missing quantification/metrics"]

    def test_technical_gap_only_for_tech_areas(self):
        notes = ["critical issue costing 5 days", "we need it fixed"]
        report = calculate_discovery_completeness({
            "Technical Requirements": notes,
            "Budget": notes,
        })
        assert report.gaps == ["Technical Requirements: Needs technical specifics"]

    def test_tech_match_is_case_sensitive(self):
        notes = ["critical issue costing 5 days", "we need it fixed"]
        report = calculate_discovery_completeness({"technology review": notes})
        assert report.gaps == []

    def test_gaps_follow_area_order(self):
        report = calculate_discovery_completeness({
            "B": ["one"],
            "A": ["one", "two"],
            "Current Technology Stack": ["x"],
        })
        assert report.gaps == [
            "B: Needs more exploration (1/2 minimum)",
            "A: Missing quantification/metrics",
            "Current Technology Stack: Needs more exploration (1/2 minimum)",
        ]

    def test_rounds_half_up(self):
        """1 point of 6 is 16.67 -> 17; 3 of 8 areas at low is 12.5 -> 13."""
        one_low = {"A": ["a", "b"], "B": []}
        assert calculate_discovery_completeness(one_low).percentage == 17

        areas = {f"Area {i}": [] for i in range(8)}
        areas["Area 0"] = ["a", "b"]
        areas["Area 1"] = ["a", "b"]
        areas["Area 2"] = ["a", "b"]
        # 3 points of 24
        assert calculate_discovery_completeness(areas).percentage == 13


class TestClassifyPercentage:
    """Test quality thresholds."""

    @pytest.mark.parametrize("percentage,expected", [
        (100, QualityLevel.HIGH),
        (80, QualityLevel.HIGH),
        (79, QualityLevel.MEDIUM),
        (60, QualityLevel.MEDIUM),
        (59, QualityLevel.LOW),
        (0, QualityLevel.LOW),
    ])
    def test_thresholds(self, percentage, expected):
        assert classify_percentage(percentage) == expected
