"""Shared test fixtures for Cadence tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A fixed clock (Wednesday 2026-10-14, 08:00 America/Los_Angeles)
- In-memory store, config and wired components
- Standard test user/task/block data

Usage:
    def test_something(engine, mock_user_id):
        engine.initialize_default_blocks(mock_user_id)
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from cadence.blocks.catalog import BlockCatalog
from cadence.config import SchedulingConfig, StorageConfig
from cadence.engine import SchedulingEngine
from cadence.learning.energy import EnergyPatternStore
from cadence.logging_config import setup_logging
from cadence.storage.memory import MemoryStore


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

LA = ZoneInfo("America/Los_Angeles")


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route structlog through stdlib so log lines never land on stdout."""
    setup_logging(level="DEBUG")


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


# ─────────────────────────────────────────────────────────────────────────────
# Clock Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakeClock:
    """Settable clock returning aware datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def tz() -> ZoneInfo:
    return LA


@pytest.fixture
def fixed_now() -> datetime:
    """Wednesday morning, before the default Focus Time block starts."""
    return datetime(2026, 10, 14, 8, 0, tzinfo=LA)


@pytest.fixture
def clock(fixed_now: datetime) -> FakeClock:
    return FakeClock(fixed_now)


# ─────────────────────────────────────────────────────────────────────────────
# Component Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def config() -> SchedulingConfig:
    """Default config on the in-memory backend."""
    return SchedulingConfig(
        timezone="America/Los_Angeles",
        storage=StorageConfig(backend="memory"),
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def catalog(memory_store, config, clock) -> BlockCatalog:
    return BlockCatalog(memory_store, config, clock)


@pytest.fixture
def energy_store(memory_store, config, clock) -> EnergyPatternStore:
    return EnergyPatternStore(memory_store, config, clock)


@pytest.fixture
def engine(memory_store, config, clock) -> SchedulingEngine:
    return SchedulingEngine(store=memory_store, config=config, clock=clock)


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


# ─────────────────────────────────────────────────────────────────────────────
# Task / Block Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_task() -> dict:
    """Sample task data for testing.

    Returns:
        dict with TaskSchedulingInfo fields
    """
    return {
        "content": "Draft the quarterly report",
        "energy_required": "high",
        "context_tags": ["@computer"],
        "estimated_minutes": 90,
    }


@pytest.fixture
def sample_block() -> dict:
    """Sample block definition for BlockCatalog.create_block().

    Returns:
        dict with block fields
    """
    return {
        "name": "Focus Time",
        "start_time": "09:00",
        "end_time": "12:00",
        "days": ["monday", "tuesday", "wednesday", "thursday", "friday"],
        "energy_profile": "high",
        "task_categories": ["work", "creative"],
        "flex_level": "flexible",
    }
