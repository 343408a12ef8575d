"""Tests for cadence/engine.py

The engine is the facade the chat orchestrator uses. These tests run it
end to end on the in-memory store with the fixed Wednesday 08:00 clock.
"""

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from cadence.config import RankingConfig, SchedulingConfig, StorageConfig
from cadence.engine import SchedulingEngine
from cadence.models import TaskSchedulingInfo
from cadence.storage.base import StorageUnavailableError
from cadence.storage.memory import MemoryStore

LA = ZoneInfo("America/Los_Angeles")


class BrokenStore(MemoryStore):
    """Store whose backend is down."""

    def get(self, key):
        raise StorageUnavailableError(self.name, "get")


# ─────────────────────────────────────────────────────────────────────────────
# Construction Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestConstruction:
    """Tests for wiring from config."""

    def test_builds_store_from_config(self):
        engine = SchedulingEngine(config=SchedulingConfig(storage=StorageConfig(backend="memory")))
        assert isinstance(engine.store, MemoryStore)
        assert engine.tz.key == "America/Los_Angeles"

    def test_now_is_in_user_timezone(self, engine):
        assert engine.now() == datetime(2026, 10, 14, 8, 0, tzinfo=LA)
        assert engine.now().tzinfo == LA


# ─────────────────────────────────────────────────────────────────────────────
# Block Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestBlocks:
    """Tests for block listing through the facade."""

    def test_initialize_defaults_twice(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        engine.initialize_default_blocks(mock_user_id)

        assert len(engine.list_all_blocks(mock_user_id)) == 6
        assert len(engine.list_active_blocks(mock_user_id)) == 6

    def test_paused_blocks_hidden_from_active(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        evening = engine.find_block_by_name(mock_user_id, "evening")
        engine.blocks.pause_block(mock_user_id, evening.id)

        assert len(engine.list_active_blocks(mock_user_id)) == 5
        assert len(engine.list_all_blocks(mock_user_id)) == 6

    def test_current_block(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        assert engine.get_current_block(mock_user_id).name == "Morning Routine"


# ─────────────────────────────────────────────────────────────────────────────
# Energy Learning Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestEnergyLearning:
    """Tests for explicit logs and observations through the facade."""

    def test_log_attributed_to_current_block(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        morning = engine.find_block_by_name(mock_user_id, "morning")

        log = engine.record_explicit_log(mock_user_id, 2, context="just woke up")

        assert log.block_id == morning.id
        assert engine.get_energy_pattern(mock_user_id).block_averages == {morning.id: 2.0}

    def test_log_attribution_follows_timestamp(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        focus = engine.find_block_by_name(mock_user_id, "focus")

        log = engine.record_explicit_log(
            mock_user_id, 5, timestamp=datetime(2026, 10, 14, 10, 30, tzinfo=LA)
        )

        assert log.block_id == focus.id

    def test_explicit_block_id_is_kept(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        log = engine.record_explicit_log(mock_user_id, 4, block_id="custom")
        assert log.block_id == "custom"

    def test_log_outside_any_block(self, engine, clock, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        clock.set(datetime(2026, 10, 14, 23, 30, tzinfo=LA))

        log = engine.record_explicit_log(mock_user_id, 1)

        assert log.block_id is None
        assert engine.get_energy_pattern(mock_user_id).block_averages == {}

    def test_data_points_count_both_signals(self, engine, mock_user_id):
        engine.record_explicit_log(mock_user_id, 3)
        engine.record_observed_preference(mock_user_id, "low", time_of_day="afternoon")
        engine.record_observed_preference(
            mock_user_id, "high", day_of_week="monday", is_pattern=True
        )

        assert engine.get_energy_pattern(mock_user_id).data_points == 3

    def test_logs_for_today(self, engine, mock_user_id):
        engine.record_explicit_log(mock_user_id, 3)
        assert len(engine.get_energy_logs_for_day(mock_user_id)) == 1

    def test_insights_gated_on_data_points(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        engine.record_explicit_log(mock_user_id, 4)
        engine.record_explicit_log(mock_user_id, 4)
        assert engine.get_energy_insights(mock_user_id) is None

        engine.record_explicit_log(mock_user_id, 4)
        insights = engine.get_energy_insights(mock_user_id)

        assert insights.data_points == 3
        assert insights.best_hours == [8]
        assert insights.best_days == ["wednesday"]
        assert insights.best_block_for_hard_tasks == "Focus Time (09:00-12:00)"
        assert insights.weekly_ready is False


# ─────────────────────────────────────────────────────────────────────────────
# Suggestion Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSuggestions:
    """Tests for scoring and ranking through the facade."""

    def test_suggests_focus_time_for_hard_task(self, engine, mock_user_id, sample_task):
        engine.initialize_default_blocks(mock_user_id)

        suggestions = engine.suggest_blocks_for_task(mock_user_id, sample_task)

        assert len(suggestions) == 3
        assert {s.block.name for s in suggestions} == {"Focus Time"}
        assert suggestions[0].date.isoformat() == "2026-10-14"
        assert suggestions[0].score == pytest.approx(0.585)

    def test_fetches_pattern_once_per_sweep(self, engine, mock_user_id, sample_task):
        engine.initialize_default_blocks(mock_user_id)

        with patch.object(
            engine.energy, "get_energy_pattern", wraps=engine.energy.get_energy_pattern
        ) as get_pattern:
            engine.suggest_blocks_for_task(mock_user_id, sample_task, max_suggestions=50)

        get_pattern.assert_called_once_with(mock_user_id)

    def test_ranking_config_applies(self, memory_store, clock, mock_user_id, sample_task):
        config = SchedulingConfig(
            storage=StorageConfig(backend="memory"),
            ranking=RankingConfig(max_suggestions=1),
        )
        engine = SchedulingEngine(store=memory_store, config=config, clock=clock)
        engine.initialize_default_blocks(mock_user_id)

        assert len(engine.suggest_blocks_for_task(mock_user_id, sample_task)) == 1

    def test_exclusions(self, engine, mock_user_id, sample_task):
        engine.initialize_default_blocks(mock_user_id)
        focus = engine.find_block_by_name(mock_user_id, "focus")

        suggestions = engine.suggest_blocks_for_task(
            mock_user_id, sample_task, exclude_block_ids=[focus.id]
        )

        assert all(s.block.id != focus.id for s in suggestions)

    def test_no_blocks_no_suggestions(self, engine, mock_user_id, sample_task):
        assert engine.suggest_blocks_for_task(mock_user_id, sample_task) == []

    def test_score_single_block(self, engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        focus = engine.find_block_by_name(mock_user_id, "focus")
        task = TaskSchedulingInfo(content="x", energy_required="high", context_tags=["@work"])

        result = engine.score_block_for_task(mock_user_id, task, focus)

        # 0.30 energy + 0.25 category + 0.125 history + 0.16 duration
        assert result.score == pytest.approx(0.835)
        assert "matches: work" in result.reasons

    def test_learning_changes_suggestions(self, engine, mock_user_id):
        """A strong Afternoon record should lift it above Midday for a medium task."""
        engine.initialize_default_blocks(mock_user_id)
        afternoon = engine.find_block_by_name(mock_user_id, "afternoon")
        for _ in range(3):
            engine.record_explicit_log(mock_user_id, 5, block_id=afternoon.id)

        task = {"content": "Sort receipts", "energy_required": "medium"}
        best = engine.suggest_blocks_for_task(mock_user_id, task, max_suggestions=1)[0]

        assert best.block.id == afternoon.id

    def test_tasks_for_current_energy(self, engine, mock_user_id):
        tasks = [
            {"content": "a", "energy_required": "high"},
            {"content": "b", "energy_required": "medium"},
            {"content": "c", "energy_required": "low"},
        ]
        # No data yet: predicted energy is neutral (medium)
        fits = engine.tasks_for_current_energy(mock_user_id, tasks)
        assert [t.content for t in fits] == ["b", "c"]


# ─────────────────────────────────────────────────────────────────────────────
# Failure Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestStorageFailures:
    """Backend outages propagate to the caller."""

    def test_storage_error_propagates(self, config, clock, mock_user_id):
        engine = SchedulingEngine(store=BrokenStore(), config=config, clock=clock)

        with pytest.raises(StorageUnavailableError):
            engine.get_energy_pattern(mock_user_id)

        with pytest.raises(StorageUnavailableError):
            engine.record_explicit_log(mock_user_id, 3)
