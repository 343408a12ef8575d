"""
Energy insights derived from a learned pattern.

Used for the morning preview and for "when am I usually sharpest?". Below
the minimum data points there is nothing honest to say, so callers get None
and should say they're still learning.
"""

from __future__ import annotations

from statistics import mean

from cadence import NEUTRAL_ENERGY
from cadence.models import ActivityBlock, EnergyInsights, EnergyLevel, EnergyPattern

MORNING_HOURS = [8, 9, 10, 11]
AFTERNOON_HOURS = [14, 15, 16, 17]

MIN_INSIGHT_POINTS = 3
WEEKLY_NARRATION_POINTS = 7


def average_to_level(avg: float) -> str:
    if avg >= 3.5:
        return "high"
    if avg <= 2.5:
        return "low"
    return "medium"


def _band_average(pattern: EnergyPattern, hours: list[int]) -> float:
    return mean(pattern.hourly_averages.get(h, NEUTRAL_ENERGY) for h in hours)


def best_hours(pattern: EnergyPattern, count: int = 3) -> list[int]:
    ranked = sorted(pattern.hourly_averages.items(), key=lambda item: item[1], reverse=True)
    return [hour for hour, _ in ranked[:count]]


def best_days(pattern: EnergyPattern, count: int = 2) -> list[str]:
    ranked = sorted(pattern.day_of_week_averages.items(), key=lambda item: item[1], reverse=True)
    return [day for day, _ in ranked[:count]]


def best_block_for_hard_tasks(
    pattern: EnergyPattern, blocks: list[ActivityBlock], weekday: str
) -> ActivityBlock | None:
    """Highest-energy block running on ``weekday``, skipping low-energy blocks."""
    candidates = [
        b
        for b in blocks
        if b.is_active and weekday in b.days and b.energy_profile != EnergyLevel.LOW
    ]
    if not candidates:
        return None

    def expected(block: ActivityBlock) -> float:
        learned = pattern.block_averages.get(block.id)
        if learned is not None:
            return learned
        return 4 if block.energy_profile == EnergyLevel.HIGH else NEUTRAL_ENERGY

    # max() keeps the first of equal candidates, i.e. the earliest block
    return max(candidates, key=expected)


def weekly_narration_ready(
    pattern: EnergyPattern, threshold: int = WEEKLY_NARRATION_POINTS
) -> bool:
    return pattern.data_points >= threshold


def build_energy_insights(
    pattern: EnergyPattern,
    blocks: list[ActivityBlock],
    weekday: str,
    min_points: int = MIN_INSIGHT_POINTS,
    weekly_points: int = WEEKLY_NARRATION_POINTS,
) -> EnergyInsights | None:
    """Summarize ``pattern``; None until it holds ``min_points`` observations."""
    if pattern.data_points < min_points:
        return None

    hard_block = best_block_for_hard_tasks(pattern, blocks, weekday)
    hard_label = None
    if hard_block is not None:
        hard_label = f"{hard_block.name} ({hard_block.start_time}-{hard_block.end_time})"

    return EnergyInsights(
        data_points=pattern.data_points,
        best_hours=best_hours(pattern),
        best_days=best_days(pattern),
        predicted_morning_energy=average_to_level(_band_average(pattern, MORNING_HOURS)),
        predicted_afternoon_energy=average_to_level(_band_average(pattern, AFTERNOON_HOURS)),
        best_block_for_hard_tasks=hard_label,
        weekly_ready=weekly_narration_ready(pattern, weekly_points),
    )
