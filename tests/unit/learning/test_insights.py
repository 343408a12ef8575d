"""Tests for cadence/learning/insights.py

Insights summarize a learned pattern for previews. Nothing is said until
there are at least three data points.
"""

from cadence import WEEKDAYS, WEEKEND
from cadence.learning.insights import (
    average_to_level,
    best_block_for_hard_tasks,
    best_days,
    best_hours,
    build_energy_insights,
    weekly_narration_ready,
)
from cadence.models import ActivityBlock, BlockStatus, EnergyLevel, EnergyPattern


def make_block(block_id, name, start, end, energy, days=WEEKDAYS, status=BlockStatus.ACTIVE):
    return ActivityBlock(
        id=block_id,
        user_id="u1",
        name=name,
        start_time=start,
        end_time=end,
        days=list(days),
        energy_profile=energy,
        status=status,
    )


class TestHelpers:
    """Tests for ranking and labelling helpers."""

    def test_average_to_level_thresholds(self):
        assert average_to_level(3.5) == "high"
        assert average_to_level(3.49) == "medium"
        assert average_to_level(2.51) == "medium"
        assert average_to_level(2.5) == "low"

    def test_best_hours_top_three(self):
        pattern = EnergyPattern(
            user_id="u", hourly_averages={8: 3.0, 9: 4.5, 10: 4.0, 15: 2.0, 20: 3.5}
        )
        assert best_hours(pattern) == [9, 10, 20]

    def test_best_days_top_two(self):
        pattern = EnergyPattern(
            user_id="u", day_of_week_averages={"monday": 2.0, "tuesday": 4.0, "friday": 3.0}
        )
        assert best_days(pattern) == ["tuesday", "friday"]

    def test_weekly_narration_threshold(self):
        assert weekly_narration_ready(EnergyPattern(user_id="u", data_points=6)) is False
        assert weekly_narration_ready(EnergyPattern(user_id="u", data_points=7)) is True


class TestBestBlockForHardTasks:
    """Tests for picking where demanding work should go."""

    def test_prefers_high_profile_without_history(self):
        blocks = [
            make_block("mid", "Midday", "12:00", "14:00", EnergyLevel.MEDIUM),
            make_block("focus", "Focus Time", "09:00", "12:00", EnergyLevel.HIGH),
        ]
        pattern = EnergyPattern(user_id="u")
        assert best_block_for_hard_tasks(pattern, blocks, "wednesday").id == "focus"

    def test_learned_average_beats_profile(self):
        blocks = [
            make_block("focus", "Focus Time", "09:00", "12:00", EnergyLevel.HIGH),
            make_block("aft", "Afternoon", "14:00", "17:00", EnergyLevel.MEDIUM),
        ]
        pattern = EnergyPattern(user_id="u", block_averages={"focus": 2.0, "aft": 4.5})
        assert best_block_for_hard_tasks(pattern, blocks, "wednesday").id == "aft"

    def test_skips_low_paused_and_off_day_blocks(self):
        blocks = [
            make_block("morning", "Morning Routine", "07:00", "09:00", EnergyLevel.LOW),
            make_block(
                "focus", "Focus Time", "09:00", "12:00", EnergyLevel.HIGH, status=BlockStatus.PAUSED
            ),
            make_block("weekend", "Weekend", "09:00", "18:00", EnergyLevel.VARIABLE, days=WEEKEND),
        ]
        assert best_block_for_hard_tasks(EnergyPattern(user_id="u"), blocks, "wednesday") is None


class TestBuildEnergyInsights:
    """Tests for the assembled summary."""

    def test_none_below_minimum_points(self):
        sparse = EnergyPattern(user_id="u", data_points=2)
        assert build_energy_insights(sparse, [], "monday") is None

    def test_summary(self):
        pattern = EnergyPattern(
            user_id="u",
            hourly_averages={8: 4.0, 9: 4.5, 10: 4.0, 11: 4.0, 14: 2.0, 15: 2.0, 16: 2.5, 17: 2.5},
            day_of_week_averages={"monday": 3.0, "wednesday": 4.0},
            data_points=8,
        )
        blocks = [make_block("focus", "Focus Time", "09:00", "12:00", EnergyLevel.HIGH)]

        insights = build_energy_insights(pattern, blocks, "wednesday")

        assert insights.data_points == 8
        assert insights.best_hours == [9, 8, 10]
        assert insights.best_days == ["wednesday", "monday"]
        assert insights.predicted_morning_energy == "high"
        assert insights.predicted_afternoon_energy == "low"
        assert insights.best_block_for_hard_tasks == "Focus Time (09:00-12:00)"
        assert insights.weekly_ready is True

    def test_missing_hours_count_as_neutral(self):
        pattern = EnergyPattern(user_id="u", data_points=3)
        insights = build_energy_insights(pattern, [], "sunday")

        assert insights.predicted_morning_energy == "medium"
        assert insights.predicted_afternoon_energy == "medium"
        assert insights.best_block_for_hard_tasks is None
        assert insights.weekly_ready is False
