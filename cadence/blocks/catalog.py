"""
Tool: Block Catalog
Purpose: Per-user activity blocks - the recurring windows tasks get placed into

A block is a named window ("Focus Time", Mon-Fri 09:00-12:00) with an
expected energy profile and the kinds of work it suits. Users rename, pause
and reshape them over time; six defaults are seeded on first use so a new
user gets useful suggestions immediately.

Storage:
    block:{user}:{id}                        one JSON record per block
    blocks:{user}                            id index, creation ordered
    block_tasks:{user}:{block}:{YYYY-MM-DD}  task ids assigned for a day, 2-day TTL

Block ids are weak references elsewhere (energy pattern block averages,
energy logs). Deleting a block leaves those entries in place.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from cadence import DAY_NAMES
from cadence.blocks.defaults import DEFAULT_BLOCKS
from cadence.config import SchedulingConfig
from cadence.logging_config import get_logger
from cadence.models import ActivityBlock, BlockStatus, EnergyLevel, FlexLevel
from cadence.storage.base import KeyValueStore
from cadence.storage.keys import KeySpace
from cadence.timewindow import find_current_block, local_now, parse_hhmm, resolve_timezone

logger = get_logger(__name__)

BLOCK_TASKS_TTL = 2 * 24 * 60 * 60

# Fields callers may change through update_block()
EDITABLE_FIELDS = {
    "name",
    "start_time",
    "end_time",
    "days",
    "energy_profile",
    "task_categories",
    "flex_level",
    "status",
}


class InvalidBlockError(ValueError):
    """A block definition that can never resolve to a window."""


def _normalize_time(value: str, field_name: str) -> str:
    parsed = parse_hhmm(value)
    if parsed is None:
        raise InvalidBlockError(f"Invalid {field_name}: {value!r} (expected HH:MM)")
    return parsed.strftime("%H:%M")


def _normalize_days(days: list[str]) -> list[str]:
    normalized = []
    for day in days:
        name = str(day).strip().lower()
        if name not in DAY_NAMES:
            raise InvalidBlockError(f"Invalid day: {day!r}")
        if name not in normalized:
            normalized.append(name)
    if not normalized:
        raise InvalidBlockError("A block needs at least one day")
    # Keep calendar order regardless of input order
    return sorted(normalized, key=DAY_NAMES.index)


def _parse_choice(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise InvalidBlockError(f"Invalid {field_name}: {value!r} (expected one of {choices})")


def validate_block(block: ActivityBlock) -> ActivityBlock:
    """Normalize a block in place; raise InvalidBlockError if it can't be scheduled."""
    block.name = (block.name or "").strip()
    if not block.name:
        raise InvalidBlockError("Block name is required")

    block.start_time = _normalize_time(block.start_time, "start_time")
    block.end_time = _normalize_time(block.end_time, "end_time")
    if block.start_time >= block.end_time:
        # Overnight windows would need to wrap into the next day
        raise InvalidBlockError(
            f"start_time must be before end_time ({block.start_time} >= {block.end_time})"
        )

    block.days = _normalize_days(block.days)
    block.energy_profile = _parse_choice(EnergyLevel, block.energy_profile, "energy_profile")
    block.flex_level = _parse_choice(FlexLevel, block.flex_level, "flex_level")
    block.status = _parse_choice(BlockStatus, block.status, "status")
    block.task_categories = [str(c).strip() for c in block.task_categories if str(c).strip()]
    return block


class BlockCatalog:
    """CRUD and lookup for a user's activity blocks."""

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
    # CRUD
    # ------------------------------------------------------------------

    def create_block(
        self,
        user_id: str,
        name: str,
        start_time: str,
        end_time: str,
        days: list[str],
        energy_profile: str = "medium",
        task_categories: list[str] | None = None,
        flex_level: str = "flexible",
        is_default: bool = False,
        status: str = "active",
    ) -> ActivityBlock:
        """
        Create and persist a block.

        Raises:
            InvalidBlockError: malformed times, start >= end, unknown days or labels
        """
        now = self._clock()
        block = validate_block(
            ActivityBlock(
                id=uuid.uuid4().hex[:12],
                user_id=user_id,
                name=name,
                start_time=start_time,
                end_time=end_time,
                days=list(days),
                energy_profile=energy_profile,
                task_categories=list(task_categories or []),
                flex_level=flex_level,
                is_default=is_default,
                status=status,
                created_at=now,
                updated_at=now,
            )
        )

        self.store.set_json(self.keys.block(user_id, block.id), block.to_dict())
        self.store.add_to_index(self.keys.blocks(user_id), block.id)

        logger.debug(f"Created block {block.name!r} ({block.id}) for {user_id}")
        return block

    def get_block(self, user_id: str, block_id: str) -> ActivityBlock | None:
        data = self.store.get_json(self.keys.block(user_id, block_id))
        if not isinstance(data, dict):
            return None
        try:
            return ActivityBlock.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unreadable block record {block_id} for {user_id}: {e}")
            return None

    def save_block(self, block: ActivityBlock) -> ActivityBlock:
        """Persist a block edited in memory; stamps updated_at."""
        validate_block(block)
        block.updated_at = self._clock()
        self.store.set_json(self.keys.block(block.user_id, block.id), block.to_dict())
        return block

    def update_block(
        self, user_id: str, block_id: str, /, **changes: Any
    ) -> ActivityBlock | None:
        """Apply ``changes`` to a stored block; None if it doesn't exist.

        The ids are positional-only so ``user_id=`` lands in ``changes`` and
        is refused like any other non-editable field.
        """
        block = self.get_block(user_id, block_id)
        if block is None:
            return None

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidBlockError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        for field_name, value in changes.items():
            setattr(block, field_name, value)
        return self.save_block(block)

    def delete_block(self, user_id: str, block_id: str) -> ActivityBlock | None:
        """Remove a block; returns what was deleted, or None if it didn't exist."""
        block = self.get_block(user_id, block_id)
        if block is None:
            return None

        self.store.remove_from_index(self.keys.blocks(user_id), block_id)
        self.store.delete(self.keys.block(user_id, block_id))

        logger.info(f"Deleted block {block.name!r} ({block_id}) for {user_id}")
        return block

    def pause_block(self, user_id: str, block_id: str) -> ActivityBlock | None:
        return self.update_block(user_id, block_id, status=BlockStatus.PAUSED)

    def resume_block(self, user_id: str, block_id: str) -> ActivityBlock | None:
        return self.update_block(user_id, block_id, status=BlockStatus.ACTIVE)

    # ------------------------------------------------------------------
    # Listing and lookup
    # ------------------------------------------------------------------

    def get_all_blocks(self, user_id: str) -> list[ActivityBlock]:
        """Every block, paused included, ordered by start time then creation."""
        blocks = []
        for position, block_id in enumerate(self.store.read_index(self.keys.blocks(user_id))):
            block = self.get_block(user_id, block_id)
            if block is not None:
                blocks.append((position, block))

        blocks.sort(key=lambda item: (item[1].start_time, item[1].created_at, item[0]))
        return [block for _, block in blocks]

    def get_active_blocks(self, user_id: str) -> list[ActivityBlock]:
        return [b for b in self.get_all_blocks(user_id) if b.is_active]

    def find_block_by_name(self, user_id: str, name: str) -> ActivityBlock | None:
        """
        Case-insensitive lookup where either name may contain the other.

        "focus" finds "Focus Time"; "my evening block" finds "Evening".
        The first block in catalog order wins.
        """
        query = (name or "").strip().lower()
        if not query:
            return None

        for block in self.get_all_blocks(user_id):
            block_name = block.name.lower()
            if query in block_name or block_name in query:
                return block
        return None

    def get_current_block(self, user_id: str, now: datetime | None = None) -> ActivityBlock | None:
        """Active block whose window contains ``now`` (default: the clock)."""
        return find_current_block(self.get_active_blocks(user_id), now or self._clock(), self.tz)

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def initialize_defaults(self, user_id: str) -> list[ActivityBlock]:
        """Seed the six default blocks unless the user already has any block."""
        existing = self.get_all_blocks(user_id)
        if existing:
            return existing

        created = [
            self.create_block(user_id, is_default=True, **template) for template in DEFAULT_BLOCKS
        ]
        logger.info(f"Seeded {len(created)} default blocks for {user_id}")
        return created

    # ------------------------------------------------------------------
    # Task assignments (bookkeeping only)
    # ------------------------------------------------------------------

    def _day_key(self, day: date | None) -> str:
        return (day or local_now(self.tz, self._clock()).date()).isoformat()

    def assign_task_to_block(
        self, user_id: str, task_id: str, block_id: str, day: date | None = None
    ) -> None:
        key = self.keys.block_tasks(user_id, block_id, self._day_key(day))
        self.store.add_to_index(key, task_id, BLOCK_TASKS_TTL)

    def get_tasks_for_block(
        self, user_id: str, block_id: str, day: date | None = None
    ) -> list[str]:
        return self.store.read_index(self.keys.block_tasks(user_id, block_id, self._day_key(day)))

    def remove_task_from_block(
        self, user_id: str, task_id: str, block_id: str, day: date | None = None
    ) -> bool:
        key = self.keys.block_tasks(user_id, block_id, self._day_key(day))
        return self.store.remove_from_index(key, task_id, BLOCK_TASKS_TTL)
