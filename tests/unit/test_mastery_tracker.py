"""
Unit tests for per-skill mastery tracking.

Tests:
- Counter updates
- Promotion rule (every-update and crossing modes)
- Level cap and non-regression
- Tolerant loading of saved records
"""

import pytest

from math_adventure.config import EngineConfig
from math_adventure.models.mastery import MasteryTracker, SkillMastery


class TestSkillMastery:
    def test_success_rate_zero_without_attempts(self):
        assert SkillMastery("addition").success_rate == 0.0

    def test_success_rate(self):
        assert SkillMastery("addition", attempts=4, successes=3).success_rate == 0.75

    def test_from_dict_clamps_inconsistent_values(self):
        record = SkillMastery.from_dict("addition", {"attempts": 3, "successes": 7, "level": 9})
        assert record.successes == 3
        assert record.level == 5

    def test_from_dict_fills_missing_fields(self):
        record = SkillMastery.from_dict("addition", {})
        assert (record.attempts, record.successes, record.level) == (0, 0, 1)


class TestMasteryTracker:
    """Test suite for MasteryTracker."""

    def test_seeded_with_default_records(self):
        tracker = MasteryTracker(["addition", "subtraction"])
        assert len(tracker) == 2
        assert tracker.get("addition").level == 1

    def test_get_creates_unseen_skill(self):
        tracker = MasteryTracker()
        assert "division" not in tracker
        record = tracker.get("division")
        assert record.attempts == 0
        assert "division" in tracker

    def test_update_counts_attempts_and_successes(self):
        tracker = MasteryTracker(["addition"])
        tracker.update("addition", True)
        tracker.update("addition", False)
        record = tracker.get("addition")
        assert record.attempts == 2
        assert record.successes == 1

    def test_promotion_at_threshold(self):
        """9 attempts / 8 successes plus one correct answer promotes 1 -> 2."""
        tracker = MasteryTracker(records={"addition": {"attempts": 9, "successes": 8, "level": 1}})

        record = tracker.update("addition", True)

        assert record.attempts == 10
        assert record.successes == 9
        assert record.level == 2

    def test_no_promotion_below_min_attempts(self):
        tracker = MasteryTracker(["addition"])
        for _ in range(9):
            tracker.update("addition", True)
        assert tracker.get("addition").level == 1

    def test_no_promotion_below_success_rate(self):
        tracker = MasteryTracker(records={"addition": {"attempts": 9, "successes": 6, "level": 1}})
        tracker.update("addition", True)
        assert tracker.get("addition").level == 1

    def test_every_update_mode_promotes_repeatedly(self):
        """Once over the threshold, each further update promotes again."""
        tracker = MasteryTracker(records={"addition": {"attempts": 9, "successes": 9, "level": 1}})
        levels = [tracker.update("addition", True).level for _ in range(3)]
        assert levels == [2, 3, 4]

    def test_level_capped_at_max(self):
        tracker = MasteryTracker(records={"addition": {"attempts": 20, "successes": 20, "level": 4}})
        for _ in range(5):
            tracker.update("addition", True)
        assert tracker.get("addition").level == 5

    def test_level_never_decreases(self):
        tracker = MasteryTracker(records={"addition": {"attempts": 10, "successes": 10, "level": 3}})
        previous = tracker.get("addition").level
        for _ in range(30):
            level = tracker.update("addition", False).level
            assert level >= previous
            previous = level

    def test_successes_never_exceed_attempts(self):
        tracker = MasteryTracker(["addition"])
        for i in range(25):
            record = tracker.update("addition", i % 3 != 0)
            assert 0 <= record.successes <= record.attempts

    def test_merge_never_lowers_level(self):
        tracker = MasteryTracker(records={"addition": {"attempts": 10, "successes": 9, "level": 4}})
        tracker.merge({"addition": {"attempts": 12, "successes": 10, "level": 2}})
        record = tracker.get("addition")
        assert record.level == 4
        assert record.attempts == 12

    def test_snapshot_is_independent(self):
        tracker = MasteryTracker(["addition"])
        snapshot = tracker.snapshot()
        tracker.update("addition", True)
        assert snapshot["addition"].attempts == 0

    def test_dict_round_trip_keeps_records(self):
        tracker = MasteryTracker(["addition"])
        tracker.update("addition", True)
        restored = MasteryTracker.from_dict(tracker.to_dict())
        assert restored.get("addition").successes == 1


class TestCrossingMode:
    @pytest.fixture
    def tracker(self):
        return MasteryTracker(
            records={"addition": {"attempts": 9, "successes": 9, "level": 1}},
            engine_config=EngineConfig(promotion_mode="crossing"),
        )

    def test_promotes_once_on_crossing(self, tracker):
        levels = [tracker.update("addition", True).level for _ in range(3)]
        assert levels == [2, 2, 2]

    def test_promotes_again_after_dropping_below(self, tracker):
        tracker.update("addition", True)  # crossing: level 2
        for _ in range(3):
            tracker.update("addition", False)  # 10/13 < 0.8
        assert tracker.get("addition").level == 2

        for _ in range(3):
            tracker.update("addition", True)  # 13/16 >= 0.8
        assert tracker.get("addition").level == 3
