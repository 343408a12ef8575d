"""
Tool: Scheduling Engine
Purpose: The one object the chat orchestrator talks to

Wires the block catalog, the energy pattern store and the scorer/ranker to a
single key-value store and configuration. Every call is a short synchronous
computation; nothing is cached between calls, so any number of engines may
share one store.

Usage:
    from cadence.engine import SchedulingEngine

    engine = SchedulingEngine()
    engine.initialize_default_blocks("alice")
    engine.record_explicit_log("alice", 4, context="after coffee")
    engine.suggest_blocks_for_task("alice", {"content": "Write report",
                                             "energy_required": "high"})
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable

from cadence.blocks.catalog import BlockCatalog
from cadence.config import SchedulingConfig, load_config
from cadence.learning.energy import EnergyPatternStore
from cadence.learning.insights import build_energy_insights
from cadence.logging_config import get_logger, user_context
from cadence.models import (
    ActivityBlock,
    BlockScore,
    EnergyInsights,
    EnergyLog,
    EnergyPattern,
    TaskSchedulingInfo,
)
from cadence.scheduling.ranker import (
    current_energy_label,
    filter_tasks_for_energy,
    suggest_blocks_for_task,
)
from cadence.scheduling.scorer import score_block_for_task
from cadence.storage import create_store
from cadence.storage.base import KeyValueStore
from cadence.timewindow import day_name, local_now

logger = get_logger(__name__)

TaskLike = TaskSchedulingInfo | dict[str, Any]


def _as_task(task: TaskLike) -> TaskSchedulingInfo:
    if isinstance(task, TaskSchedulingInfo):
        return task
    return TaskSchedulingInfo.from_dict(task)


class SchedulingEngine:
    """Facade over blocks, energy learning and suggestions for many users."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        config: SchedulingConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or load_config()
        self.store = store if store is not None else create_store(self.config)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self.blocks = BlockCatalog(self.store, self.config, self._clock)
        self.energy = EnergyPatternStore(self.store, self.config, self._clock)
        self.tz = self.blocks.tz

    def now(self) -> datetime:
        """Current instant in the user timezone."""
        return local_now(self.tz, self._clock())

    # ------------------------------------------------------------------
    # Energy learning
    # ------------------------------------------------------------------

    def record_explicit_log(
        self,
        user_id: str,
        level: float,
        context: str | None = None,
        block_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> EnergyLog:
        """Store a 1-5 self-report; without ``block_id`` it goes to the block in progress."""
        with user_context(user_id):
            if block_id is None:
                current = self.blocks.get_current_block(user_id, timestamp)
                if current is not None:
                    block_id = current.id
            return self.energy.record_explicit_log(
                user_id, level, timestamp=timestamp, context=context, block_id=block_id
            )

    def record_observed_preference(
        self,
        user_id: str,
        energy_level: str,
        time_of_day: str | None = None,
        day_of_week: str | None = None,
        is_pattern: bool = False,
    ) -> EnergyPattern:
        with user_context(user_id):
            return self.energy.record_observed_preference(
                user_id,
                energy_level,
                time_of_day=time_of_day,
                day_of_week=day_of_week,
                is_pattern=is_pattern,
            )

    def get_energy_pattern(self, user_id: str) -> EnergyPattern:
        return self.energy.get_energy_pattern(user_id)

    def get_energy_logs_for_day(self, user_id: str, day: date | None = None) -> list[EnergyLog]:
        return self.energy.get_energy_logs_for_day(user_id, day)

    def get_energy_insights(self, user_id: str) -> EnergyInsights | None:
        """Summary for previews; None while there are too few data points."""
        learning = self.config.learning
        pattern = self.energy.get_energy_pattern(user_id)
        return build_energy_insights(
            pattern,
            self.blocks.get_active_blocks(user_id),
            day_name(self.now().date()),
            min_points=learning.min_insight_points,
            weekly_points=learning.weekly_narration_points,
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def list_active_blocks(self, user_id: str) -> list[ActivityBlock]:
        return self.blocks.get_active_blocks(user_id)

    def list_all_blocks(self, user_id: str) -> list[ActivityBlock]:
        return self.blocks.get_all_blocks(user_id)

    def find_block_by_name(self, user_id: str, name: str) -> ActivityBlock | None:
        return self.blocks.find_block_by_name(user_id, name)

    def initialize_default_blocks(self, user_id: str) -> list[ActivityBlock]:
        with user_context(user_id):
            return self.blocks.initialize_defaults(user_id)

    def get_current_block(self, user_id: str, now: datetime | None = None) -> ActivityBlock | None:
        return self.blocks.get_current_block(user_id, now)

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def score_block_for_task(
        self,
        user_id: str,
        task: TaskLike,
        block: ActivityBlock,
        target_date: date | None = None,
    ) -> BlockScore:
        pattern = self.energy.get_energy_pattern(user_id)
        return score_block_for_task(
            _as_task(task),
            block,
            pattern,
            target_date=target_date,
            now=self.now(),
            tz=self.tz,
            scoring=self.config.scoring,
        )

    def suggest_blocks_for_task(
        self,
        user_id: str,
        task: TaskLike,
        max_suggestions: int | None = None,
        days_to_check: int | None = None,
        exclude_block_ids: Iterable[str] = (),
    ) -> list[BlockScore]:
        """Best (block, date) slots for a task, highest score first."""
        ranking = self.config.ranking
        if max_suggestions is None:
            max_suggestions = ranking.max_suggestions
        if days_to_check is None:
            days_to_check = ranking.days_to_check

        with user_context(user_id):
            # One pattern snapshot for the whole sweep
            pattern = self.energy.get_energy_pattern(user_id)
            suggestions = suggest_blocks_for_task(
                _as_task(task),
                self.blocks.get_active_blocks(user_id),
                pattern,
                max_suggestions=max_suggestions,
                days_to_check=days_to_check,
                exclude_block_ids=exclude_block_ids,
                now=self.now(),
                tz=self.tz,
                scoring=self.config.scoring,
            )
            logger.info(f"Prepared {len(suggestions)} suggestions for {user_id}")
            return suggestions

    def tasks_for_current_energy(
        self, user_id: str, tasks: list[TaskLike]
    ) -> list[TaskSchedulingInfo]:
        """Filter ``tasks`` down to what suits the user's predicted energy right now."""
        now = self.now()
        pattern = self.energy.get_energy_pattern(user_id)
        block = self.blocks.get_current_block(user_id, now)
        label = current_energy_label(pattern, now, self.tz, block)
        return filter_tasks_for_energy([_as_task(t) for t in tasks], label)
