"""Cadence - Adaptive scheduling and energy learning

Philosophy:
    Learn the user's rhythm from what they tell us, not from forms.
    A tired afternoon is information, not a failure.
    Suggest a good slot - never demand a perfect plan.

Components:
    timewindow.py: Resolve a block to concrete start/end instants on a date
    learning/: Energy pattern store, observation ingest, insights
        - Explicit 1-5 self-reports (low learning rate)
        - Conversational statements ("I'm sharper in the mornings")
    blocks/: Activity block catalog with six seeded defaults
    scheduling/: Task-to-block scorer and multi-day suggestion ranker
    engine.py: Facade used by the chat orchestrator
    storage/: Key-value persistence adapters (memory, SQLite, Redis)

Configuration: args/scheduling.yaml
    - Timezone and storage backend
    - Learning rates and TTLs
    - Scoring weights and reason thresholds
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "scheduling.yaml"
DB_PATH = DATA_DIR / "scheduling.db"

DEFAULT_TIMEZONE = "America/Los_Angeles"

# Indexed by date.weekday() (Monday = 0)
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
WEEKDAYS = DAY_NAMES[:5]
WEEKEND = DAY_NAMES[5:]

# Numeric anchors on the 1-5 self-report scale
ENERGY_ANCHORS = {"low": 2, "medium": 3, "high": 4}
NEUTRAL_ENERGY = 3

__version__ = "0.4.0"

__all__ = [
    "ARGS_DIR",
    "CONFIG_PATH",
    "DATA_DIR",
    "DAY_NAMES",
    "DB_PATH",
    "DEFAULT_TIMEZONE",
    "ENERGY_ANCHORS",
    "NEUTRAL_ENERGY",
    "PROJECT_ROOT",
    "WEEKDAYS",
    "WEEKEND",
    "__version__",
]
