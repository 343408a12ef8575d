"""Learning - Energy rhythm from self-reports and conversation

Components:
    energy.py: EMA primitive, energy prediction, per-user pattern store
        - Explicit 1-5 logs (hour, weekday, block)
        - Conversational statements (time-of-day bands, weekdays)

    insights.py: Human-sized summaries of a learned pattern
        - Best hours and days
        - Predicted morning/afternoon energy
        - Best block for demanding work

Safety Rules:
    1. Energy levels are rhythms, not moral judgments
    2. Nothing to say until there are enough data points
    3. A missing average is neutral (3), never an error
"""

from cadence.learning.energy import (
    TIME_OF_DAY_HOURS,
    EnergyPatternStore,
    ema,
    level_to_numeric,
    predict_energy,
)
from cadence.learning.insights import build_energy_insights, weekly_narration_ready

__all__ = [
    "TIME_OF_DAY_HOURS",
    "EnergyPatternStore",
    "build_energy_insights",
    "ema",
    "level_to_numeric",
    "predict_energy",
    "weekly_narration_ready",
]
