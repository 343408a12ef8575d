"""Default activity blocks seeded the first time a user's catalog is empty."""

from cadence import DAY_NAMES, WEEKDAYS, WEEKEND

DEFAULT_BLOCKS: list[dict] = [
    {
        "name": "Morning Routine",
        "start_time": "07:00",
        "end_time": "09:00",
        "days": WEEKDAYS,
        "energy_profile": "low",
        "task_categories": ["personal", "routine"],
        "flex_level": "soft",
    },
    {
        "name": "Focus Time",
        "start_time": "09:00",
        "end_time": "12:00",
        "days": WEEKDAYS,
        "energy_profile": "high",
        "task_categories": ["work", "creative", "thinking"],
        "flex_level": "flexible",
    },
    {
        "name": "Midday",
        "start_time": "12:00",
        "end_time": "14:00",
        "days": WEEKDAYS,
        "energy_profile": "medium",
        "task_categories": ["errands", "calls", "admin"],
        "flex_level": "flexible",
    },
    {
        "name": "Afternoon",
        "start_time": "14:00",
        "end_time": "17:00",
        "days": WEEKDAYS,
        "energy_profile": "medium",
        "task_categories": ["work", "admin"],
        "flex_level": "flexible",
    },
    {
        "name": "Evening",
        "start_time": "17:00",
        "end_time": "21:00",
        "days": DAY_NAMES,
        "energy_profile": "low",
        "task_categories": ["personal", "errands", "relaxation"],
        "flex_level": "soft",
    },
    {
        "name": "Weekend",
        "start_time": "09:00",
        "end_time": "18:00",
        "days": WEEKEND,
        "energy_profile": "variable",
        "task_categories": ["personal", "errands", "projects"],
        "flex_level": "soft",
    },
]
