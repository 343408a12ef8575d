"""
Scheduling Data Models

Records persisted as flat JSON documents (EnergyLog, EnergyPattern,
ActivityBlock) and the ephemeral values passed between the scorer, the
ranker and the caller (TaskSchedulingInfo, BlockScore, EnergyInsights).

Datetimes are serialized with isoformat(); hour keys of
EnergyPattern.hourly_averages become strings in JSON and are restored to
ints on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any


class EnergyLevel(StrEnum):
    """Energy profile of a block or requirement of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    VARIABLE = "variable"  # block only: use the learned prediction


class FlexLevel(StrEnum):
    """How strictly a block's timing is enforced."""

    FIXED = "fixed"
    FLEXIBLE = "flexible"
    SOFT = "soft"


class BlockStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"


class TimeOfDay(StrEnum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    """Stored instant as an aware datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, str):
        try:
            return _aware(datetime.fromisoformat(value))
        except ValueError:
            pass
    if isinstance(value, (int, float)):
        # Millisecond epoch timestamps from older records
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return _utcnow()


def _float_map(raw: Any, key_type=str) -> dict:
    """Numeric map from JSON, dropping entries that aren't numbers."""
    result = {}
    if not isinstance(raw, dict):
        return result
    for key, value in raw.items():
        try:
            result[key_type(key)] = float(value)
        except (TypeError, ValueError):
            continue
    return result


def _parse_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return default


@dataclass
class EnergyLog:
    """An explicit 1-5 self-report. Immutable once written."""

    id: str
    user_id: str
    timestamp: datetime
    level: int  # 1 = exhausted, 5 = energized
    context: str | None = None  # "just woke up", "after lunch"
    block_id: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "context": self.context,
            "block_id": self.block_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnergyLog:
        return cls(
            id=data["id"],
            user_id=str(data["user_id"]),
            timestamp=_parse_datetime(data.get("timestamp")),
            level=int(data.get("level", 3)),
            context=data.get("context"),
            block_id=data.get("block_id"),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class EnergyPattern:
    """Learned energy aggregates for one user, updated only by EMA."""

    user_id: str
    hourly_averages: dict[int, float] = field(default_factory=dict)
    day_of_week_averages: dict[str, float] = field(default_factory=dict)
    block_averages: dict[str, float] = field(default_factory=dict)
    # task type -> energy -> completion rate; reserved, not learned yet
    task_type_success_rates: dict[str, dict[str, float]] = field(default_factory=dict)
    data_points: int = 0
    last_updated: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "hourly_averages": {str(h): v for h, v in self.hourly_averages.items()},
            "day_of_week_averages": dict(self.day_of_week_averages),
            "block_averages": dict(self.block_averages),
            "task_type_success_rates": self.task_type_success_rates,
            "data_points": self.data_points,
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnergyPattern:
        return cls(
            user_id=str(data.get("user_id", "")),
            hourly_averages=_float_map(data.get("hourly_averages"), int),
            day_of_week_averages=_float_map(data.get("day_of_week_averages")),
            block_averages=_float_map(data.get("block_averages")),
            task_type_success_rates=data.get("task_type_success_rates") or {},
            data_points=int(data.get("data_points") or 0),
            last_updated=_parse_datetime(data.get("last_updated")),
        )


@dataclass
class ActivityBlock:
    """A named recurring window ("Focus Time", Mon-Fri 09:00-12:00)."""

    id: str
    user_id: str
    name: str
    start_time: str  # "HH:MM", local to the user's timezone
    end_time: str
    days: list[str]
    energy_profile: EnergyLevel = EnergyLevel.MEDIUM
    task_categories: list[str] = field(default_factory=list)
    flex_level: FlexLevel = FlexLevel.FLEXIBLE
    is_default: bool = False
    status: BlockStatus = BlockStatus.ACTIVE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == BlockStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "days": list(self.days),
            "energy_profile": self.energy_profile.value,
            "task_categories": list(self.task_categories),
            "flex_level": self.flex_level.value,
            "is_default": self.is_default,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityBlock:
        return cls(
            id=data["id"],
            user_id=str(data["user_id"]),
            name=str(data.get("name") or ""),
            start_time=str(data.get("start_time") or "00:00"),
            end_time=str(data.get("end_time") or "00:00"),
            days=[str(d).lower() for d in data.get("days") or []],
            energy_profile=_parse_enum(
                EnergyLevel, data.get("energy_profile"), EnergyLevel.MEDIUM
            ),
            task_categories=[str(c) for c in data.get("task_categories") or []],
            flex_level=_parse_enum(FlexLevel, data.get("flex_level"), FlexLevel.FLEXIBLE),
            is_default=bool(data.get("is_default", False)),
            status=_parse_enum(BlockStatus, data.get("status"), BlockStatus.ACTIVE),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class TaskSchedulingInfo:
    """What the caller knows about a task when asking where it fits."""

    content: str
    energy_required: str | None = None
    context_tags: list[str] = field(default_factory=list)  # @home, @computer, @errands
    estimated_minutes: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskSchedulingInfo:
        return cls(
            content=data.get("content", ""),
            energy_required=data.get("energy_required"),
            context_tags=list(data.get("context_tags") or []),
            estimated_minutes=data.get("estimated_minutes"),
        )


@dataclass
class BlockScore:
    """Suitability of one block on one date for a task."""

    block: ActivityBlock
    score: float
    reasons: list[str] = field(default_factory=list)
    date: date | None = None
    breakdown: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_id": self.block.id,
            "block_name": self.block.name,
            "start_time": self.block.start_time,
            "end_time": self.block.end_time,
            "date": self.date.isoformat() if self.date else None,
            "score": round(self.score, 3),
            "reasons": list(self.reasons),
            "breakdown": {k: round(v, 3) for k, v in self.breakdown.items()},
        }


@dataclass
class EnergyInsights:
    """Summary of a learned pattern, for morning previews and "show my energy"."""

    data_points: int
    best_hours: list[int]
    best_days: list[str]
    predicted_morning_energy: str
    predicted_afternoon_energy: str
    best_block_for_hard_tasks: str | None = None
    weekly_ready: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_points": self.data_points,
            "best_hours": list(self.best_hours),
            "best_days": list(self.best_days),
            "predicted_morning_energy": self.predicted_morning_energy,
            "predicted_afternoon_energy": self.predicted_afternoon_energy,
            "best_block_for_hard_tasks": self.best_block_for_hard_tasks,
            "weekly_ready": self.weekly_ready,
        }
