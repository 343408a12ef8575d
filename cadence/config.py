from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from cadence import CONFIG_PATH, DB_PATH, DEFAULT_TIMEZONE
from cadence.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Storage (args/scheduling.yaml -> storage)
# =============================================================================

class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    backend: Literal["memory", "sqlite", "redis"] = Field(default="sqlite")
    sqlite_path: str = Field(default=str(DB_PATH))
    redis_url: str = Field(default="redis://localhost:6379/0")
    key_prefix: str = Field(default="")


# =============================================================================
# Learning (args/scheduling.yaml -> learning)
# =============================================================================

class LearningConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    log_hourly_alpha: float = Field(default=0.1, ge=0.0, le=1.0)
    log_daily_alpha: float = Field(default=0.1, ge=0.0, le=1.0)
    log_block_alpha: float = Field(default=0.15, ge=0.0, le=1.0)
    observation_alpha: float = Field(default=0.2, ge=0.0, le=1.0)
    pattern_alpha: float = Field(default=0.3, ge=0.0, le=1.0)
    energy_log_ttl_days: int = Field(default=90, ge=1)
    min_insight_points: int = Field(default=3, ge=0)
    weekly_narration_points: int = Field(default=7, ge=0)


# =============================================================================
# Scoring (args/scheduling.yaml -> scoring)
# =============================================================================

class ScoringWeights(BaseModel):
    model_config = ConfigDict(extra="allow")
    energy: float = Field(default=0.30, ge=0.0, le=1.0)
    category: float = Field(default=0.25, ge=0.0, le=1.0)
    history: float = Field(default=0.25, ge=0.0, le=1.0)
    duration: float = Field(default=0.20, ge=0.0, le=1.0)


class ScoringConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    energy_reason_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    category_reason_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    history_reason_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    duration_placeholder: float = Field(default=0.8, ge=0.0, le=1.0)


class RankingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_suggestions: int = Field(default=3, ge=1)
    days_to_check: int = Field(default=7, ge=1)


class SchedulingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    learning: LearningConfig = Field(default_factory=LearningConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)


# Environment variable -> (section, field); section None means top level
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "CADENCE_TIMEZONE": (None, "timezone"),
    "CADENCE_KEY_PREFIX": ("storage", "key_prefix"),
    "CADENCE_STORAGE": ("storage", "backend"),
    "CADENCE_REDIS_URL": ("storage", "redis_url"),
}


def _apply_env_overrides(raw: dict) -> dict:
    for env_name, (section, field_name) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        if section is None:
            raw[field_name] = value
        else:
            target = raw.get(section)
            if not isinstance(target, dict):
                target = {}
                raw[section] = target
            target[field_name] = value
    return raw


def load_config(path: Path | None = None) -> SchedulingConfig:
    """Load args/scheduling.yaml, falling back to defaults when it is missing or invalid."""
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        section = raw.get("scheduling", raw)
        if not isinstance(section, dict):
            raise ValueError("scheduling section must be a mapping")
        return SchedulingConfig.model_validate(_apply_env_overrides(dict(section)))
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path.name}: {e}, using defaults")
        return SchedulingConfig()
