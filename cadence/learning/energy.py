"""
Tool: Energy Pattern Store
Purpose: Learn a user's energy rhythm online from two kinds of observation

Signals:
- Explicit self-report: "energy 2" -> a stored EnergyLog plus EMA updates
  on the hour, the weekday and (if known) the block it was logged in
- Conversational statement: "I'm usually wiped in the afternoons" -> EMA
  updates on a whole time-of-day band and/or a weekday, weighted higher
  than passive logs because the user told us directly

Learning rates (args/scheduling.yaml -> learning):
    explicit log, hourly/daily   0.1
    explicit log, block          0.15
    one-off statement            0.2
    "usually" / "always"         0.3

Storage:
    energy_pattern:{user}            whole-record JSON, no TTL
    energy_log:{user}:{id}           90-day TTL
    energy_logs:{user}:{YYYY-MM-DD}  id index, 90-day TTL

Every update is read-modify-write of the whole pattern with no lock: two
concurrent writers for one user race and the later one wins. A user's turns
are expected to arrive one at a time.
"""

from __future__ import annotations

import math
import uuid
from datetime import date, datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from cadence import DAY_NAMES, ENERGY_ANCHORS, NEUTRAL_ENERGY
from cadence.config import SchedulingConfig
from cadence.logging_config import get_logger
from cadence.models import EnergyLog, EnergyPattern
from cadence.storage.base import KeyValueStore
from cadence.storage.keys import KeySpace
from cadence.timewindow import day_name, local_now, resolve_timezone

logger = get_logger(__name__)

# Time-of-day band -> hours updated by a conversational statement
TIME_OF_DAY_HOURS: dict[str, list[int]] = {
    "morning": [6, 7, 8, 9, 10],
    "midday": [11, 12, 13],
    "afternoon": [14, 15, 16, 17],
    "evening": [18, 19, 20, 21],
    "night": [22, 23, 0, 1, 2],
}

HOUR_WEIGHT = 0.4
DAY_WEIGHT = 0.3
BLOCK_WEIGHT = 0.3

SECONDS_PER_DAY = 24 * 60 * 60


def ema(current: float | None, value: float, alpha: float) -> float:
    """Exponential moving average; the first observation seeds the average."""
    if current is None:
        return float(value)
    return alpha * value + (1 - alpha) * current


def level_to_numeric(level: str | None) -> float:
    """Map low/medium/high to the 1-5 scale; anything else is neutral."""
    if level is None:
        return NEUTRAL_ENERGY
    return ENERGY_ANCHORS.get(str(level).lower(), NEUTRAL_ENERGY)


def clamp_level(level: float) -> int:
    """Nearest whole level in 1..5; halves round up (4.5 -> 5)."""
    return int(min(5, max(1, math.floor(level + 0.5))))


def predict_energy(
    pattern: EnergyPattern, hour: int, weekday: str, block_id: str | None = None
) -> float:
    """
    Blend hourly, weekday and block averages into a 1-5 prediction.

    Missing hourly/weekday averages count as 3. Without a block average the
    two-term blend is renormalized by its weight sum (0.7).

    Returns:
        Prediction rounded to one decimal
    """
    hourly = pattern.hourly_averages.get(hour)
    daily = pattern.day_of_week_averages.get(weekday)
    block_avg = pattern.block_averages.get(block_id) if block_id else None

    prediction = (hourly if hourly is not None else NEUTRAL_ENERGY) * HOUR_WEIGHT + (
        daily if daily is not None else NEUTRAL_ENERGY
    ) * DAY_WEIGHT

    if block_avg is not None:
        prediction += block_avg * BLOCK_WEIGHT
    else:
        prediction = prediction / (HOUR_WEIGHT + DAY_WEIGHT)

    return round(prediction, 1)


class EnergyPatternStore:
    """Reads and EMA-updates per-user energy patterns and explicit logs."""

    def __init__(
        self,
        store: KeyValueStore,
        config: SchedulingConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.config = config or SchedulingConfig()
        self.keys = KeySpace(self.config.storage.key_prefix)
        self.tz: ZoneInfo = resolve_timezone(self.config.timezone)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Pattern record
    # ------------------------------------------------------------------

    def get_energy_pattern(self, user_id: str) -> EnergyPattern:
        """Current pattern, or an empty one if the user has none yet."""
        data = self.store.get_json(self.keys.energy_pattern(user_id))
        if not isinstance(data, dict):
            return EnergyPattern(user_id=user_id, last_updated=self._clock())
        try:
            pattern = EnergyPattern.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unreadable energy pattern for {user_id}, starting fresh: {e}")
            return EnergyPattern(user_id=user_id, last_updated=self._clock())
        pattern.user_id = user_id
        return pattern

    def save_energy_pattern(self, pattern: EnergyPattern) -> None:
        pattern.last_updated = self._clock()
        self.store.set_json(self.keys.energy_pattern(pattern.user_id), pattern.to_dict())

    # ------------------------------------------------------------------
    # Explicit self-reports
    # ------------------------------------------------------------------

    def record_explicit_log(
        self,
        user_id: str,
        level: float,
        timestamp: datetime | None = None,
        context: str | None = None,
        block_id: str | None = None,
    ) -> EnergyLog:
        """
        Store a 1-5 self-report and fold it into the user's pattern.

        Args:
            user_id: User identifier
            level: Reported energy; clamped to 1..5
            timestamp: When the user felt this (defaults to now)
            context: Free text ("after lunch")
            block_id: Block the user was in, if known

        Returns:
            The stored EnergyLog
        """
        now = self._clock()
        moment = local_now(self.tz, timestamp or now)
        level = clamp_level(level)

        log = EnergyLog(
            id=uuid.uuid4().hex[:12],
            user_id=user_id,
            timestamp=moment,
            level=level,
            context=context,
            block_id=block_id,
            created_at=now,
        )

        ttl = self.config.learning.energy_log_ttl_days * SECONDS_PER_DAY
        self.store.set_json(self.keys.energy_log(user_id, log.id), log.to_dict(), ttl)
        self.store.add_to_index(
            self.keys.energy_logs(user_id, moment.date().isoformat()), log.id, ttl
        )

        learning = self.config.learning
        pattern = self.get_energy_pattern(user_id)
        hour = moment.hour
        weekday = day_name(moment.date())

        pattern.hourly_averages[hour] = ema(
            pattern.hourly_averages.get(hour), level, learning.log_hourly_alpha
        )
        pattern.day_of_week_averages[weekday] = ema(
            pattern.day_of_week_averages.get(weekday), level, learning.log_daily_alpha
        )
        if block_id:
            pattern.block_averages[block_id] = ema(
                pattern.block_averages.get(block_id), level, learning.log_block_alpha
            )

        pattern.data_points += 1
        self.save_energy_pattern(pattern)

        logger.info(
            f"Energy log {level} for {user_id} at {weekday} {hour:02d}h"
            f" (block={block_id}, data_points={pattern.data_points})"
        )
        return log

    # ------------------------------------------------------------------
    # Conversational statements
    # ------------------------------------------------------------------

    def record_observed_preference(
        self,
        user_id: str,
        energy_level: str,
        time_of_day: str | None = None,
        day_of_week: str | None = None,
        is_pattern: bool = False,
    ) -> EnergyPattern:
        """
        Fold an inferred statement ("I crash after lunch") into the pattern.

        Args:
            user_id: User identifier
            energy_level: low/medium/high; unknown labels count as medium
            time_of_day: morning/midday/afternoon/evening/night band to update
            day_of_week: Weekday name to update
            is_pattern: True for habitual language ("usually", "always")

        Returns:
            The updated pattern
        """
        learning = self.config.learning
        numeric = level_to_numeric(energy_level)
        alpha = learning.pattern_alpha if is_pattern else learning.observation_alpha

        pattern = self.get_energy_pattern(user_id)
        updated: list[str] = []

        hours = TIME_OF_DAY_HOURS.get(str(time_of_day).lower()) if time_of_day else None
        if hours:
            for hour in hours:
                pattern.hourly_averages[hour] = ema(
                    pattern.hourly_averages.get(hour), numeric, alpha
                )
            updated.append(f"hours:{time_of_day}")
        elif time_of_day:
            logger.debug(f"Ignoring unknown time of day {time_of_day!r}")

        weekday = day_of_week.lower() if day_of_week else None
        if weekday in DAY_NAMES:
            pattern.day_of_week_averages[weekday] = ema(
                pattern.day_of_week_averages.get(weekday), numeric, alpha
            )
            updated.append(f"day:{weekday}")
        elif day_of_week:
            logger.debug(f"Ignoring unknown weekday {day_of_week!r}")

        pattern.data_points += 1
        self.save_energy_pattern(pattern)

        logger.info(
            f"Energy preference {energy_level!r} for {user_id} (alpha={alpha},"
            f" updated={', '.join(updated) or 'nothing'}, data_points={pattern.data_points})"
        )
        return pattern

    # ------------------------------------------------------------------
    # Log history
    # ------------------------------------------------------------------

    def get_energy_logs_for_day(self, user_id: str, day: date | None = None) -> list[EnergyLog]:
        """Explicit logs for a civil day (default today), oldest first."""
        day = day or local_now(self.tz, self._clock()).date()
        log_ids = self.store.read_index(self.keys.energy_logs(user_id, day.isoformat()))

        logs = []
        for log_id in log_ids:
            data = self.store.get_json(self.keys.energy_log(user_id, log_id))
            if not isinstance(data, dict):
                continue
            try:
                logs.append(EnergyLog.from_dict(data))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable energy log {log_id} for {user_id}: {e}")

        return sorted(logs, key=lambda log: log.timestamp)

    def get_latest_energy_log(self, user_id: str) -> EnergyLog | None:
        logs = self.get_energy_logs_for_day(user_id)
        return logs[-1] if logs else None
