"""
Time-Window Resolver

Turns a recurring block ("Mon-Fri 09:00-12:00") plus a civil date into
absolute start/end instants in the user's timezone.

Rules:
    - A date whose weekday is not in block.days is "not applicable" (None)
    - Times are HH:MM local to the user; start must be before end
    - Overnight windows (22:00-02:00) are not supported and never apply
    - "Already elapsed" only means something when the date is today
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cadence import DAY_NAMES, DEFAULT_TIMEZONE
from cadence.logging_config import get_logger
from cadence.models import ActivityBlock

logger = get_logger(__name__)


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the named zone, or the fixed default if missing or unknown."""
    if not name:
        return ZoneInfo(DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, falling back to {DEFAULT_TIMEZONE}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def parse_hhmm(value: str) -> time | None:
    """Parse "HH:MM" (or "H:MM"); None if malformed."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def local_now(tz: ZoneInfo, now: datetime | None = None) -> datetime:
    """``now`` expressed in ``tz``; naive values are taken as already local."""
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


@dataclass(frozen=True)
class TimeSlot:
    """A block's concrete window on one date."""

    start: datetime
    end: datetime

    @property
    def day(self) -> date:
        return self.start.date()

    def has_elapsed(self, now: datetime) -> bool:
        current = local_now(self.start.tzinfo, now)
        if current.date() != self.day:
            return False
        return self.end < current

    def contains(self, moment: datetime) -> bool:
        current = local_now(self.start.tzinfo, moment)
        return self.start <= current < self.end


def resolve_slot(block: ActivityBlock, target_date: date, tz: ZoneInfo) -> TimeSlot | None:
    """Concrete window for ``block`` on ``target_date``, or None if it doesn't apply."""
    if day_name(target_date) not in block.days:
        return None

    start = parse_hhmm(block.start_time)
    end = parse_hhmm(block.end_time)
    if start is None or end is None or start >= end:
        return None

    return TimeSlot(
        start=datetime.combine(target_date, start, tzinfo=tz),
        end=datetime.combine(target_date, end, tzinfo=tz),
    )


def midpoint_hour(block: ActivityBlock) -> int:
    """Whole hour halfway between the block's start and end hours."""
    start = parse_hhmm(block.start_time)
    end = parse_hhmm(block.end_time)
    if start is None or end is None:
        return 12
    return (start.hour + end.hour) // 2


def block_contains(block: ActivityBlock, moment: datetime, tz: ZoneInfo) -> bool:
    current = local_now(tz, moment)
    slot = resolve_slot(block, current.date(), tz)
    return slot is not None and slot.contains(current)


def find_current_block(
    blocks: list[ActivityBlock], now: datetime, tz: ZoneInfo
) -> ActivityBlock | None:
    """First active block whose window contains ``now``."""
    for block in blocks:
        if block.is_active and block_contains(block, now, tz):
            return block
    return None
