"""
Unit tests for progress analytics and recommendations.
"""

import pytest

from math_adventure.models.mastery import SkillMastery
from math_adventure.models.types import Attempt
from math_adventure.utils.progress import (
    generate_recommendations,
    mastery_by_level,
    mastery_summary,
    response_time_summary,
    weakest_skills,
)


@pytest.fixture
def records():
    return {
        "addition": SkillMastery("addition", attempts=10, successes=9, level=3),
        "subtraction": SkillMastery("subtraction", attempts=4, successes=2, level=1),
        "multiplication": SkillMastery("multiplication", attempts=2, successes=0, level=1),
        "division": SkillMastery("division"),
    }


class TestMasterySummary:
    def test_empty(self):
        summary = mastery_summary({})
        assert summary["count"] == 0
        assert summary["mean"] == 0.0

    def test_attempted_skills_only(self, records):
        summary = mastery_summary(records)
        assert summary["count"] == 3
        assert summary["mean"] == pytest.approx((0.9 + 0.5 + 0.0) / 3, abs=1e-4)
        assert summary["median"] == pytest.approx(0.5)
        assert summary["max"] == pytest.approx(0.9)
        assert summary["min"] == 0.0

    def test_include_unattempted(self, records):
        assert mastery_summary(records, include_unattempted=True)["count"] == 4


class TestResponseTimes:
    def test_per_sub_type_and_overall(self):
        history = [
            Attempt("addition", "easy", True, 2000),
            Attempt("addition", "easy", False, 4000),
            Attempt("subtraction", "easy", True, 9000),
        ]
        summary = response_time_summary(history)
        assert summary["addition"]["mean"] == 3000
        assert summary["subtraction"]["count"] == 1
        assert summary["overall"]["median"] == 4000
        assert summary["overall"]["max"] == 9000

    def test_empty_history(self):
        assert response_time_summary([]) == {"overall": mastery_summary({})}


class TestLevels:
    def test_mastery_by_level(self, records):
        assert mastery_by_level(records) == {1: 3, 2: 0, 3: 1, 4: 0, 5: 0}

    def test_mastery_by_level_empty(self):
        assert mastery_by_level({}) == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_weakest_skills(self, records):
        assert weakest_skills(records, n=2) == ["multiplication", "subtraction"]


class TestRecommendations:
    def test_weak_skill_needs_three_attempts(self, records):
        recommendations = generate_recommendations(records, accuracy=0.7)
        assert recommendations == ["Practice more subtraction problems"]

    def test_high_accuracy(self):
        assert generate_recommendations({}, accuracy=0.95) == ["Try a higher difficulty level"]

    def test_low_accuracy(self):
        assert generate_recommendations({}, accuracy=0.3) == ["Take your time and use the visual aids"]

    def test_underscores_become_spaces(self):
        records = {"making_change": SkillMastery("making_change", attempts=5, successes=1)}
        assert generate_recommendations(records, 0.6)[0] == "Practice more making change problems"
