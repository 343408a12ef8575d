"""
Tool: Suggestion Ranker
Purpose: Find the best few (block, date) slots for a task over the coming days

Core Principle:
    A short list, best first. The caller usually offers the top slot and
    keeps the rest as "or maybe...".

Sweep:
    for each of the next N days (today first)
        for each active block, in catalog order (start time, then creation)
            score it; keep it if score > 0
    stable sort by score, highest first -> ties stay in sweep order
    (earliest date, then earlier start time, then older block)
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from cadence.config import ScoringConfig
from cadence.learning.energy import predict_energy
from cadence.learning.insights import average_to_level
from cadence.logging_config import get_logger
from cadence.models import (
    ActivityBlock,
    BlockScore,
    EnergyPattern,
    TaskSchedulingInfo,
)
from cadence.scheduling.scorer import score_block_for_task
from cadence.timewindow import day_name, local_now, resolve_timezone

logger = get_logger(__name__)

DEFAULT_MAX_SUGGESTIONS = 3
DEFAULT_DAYS_TO_CHECK = 7

# Current energy -> task energy requirements that fit it
ENERGY_FITS: dict[str, set[str]] = {
    "high": {"high", "medium"},
    "medium": {"medium", "low"},
    "low": {"low"},
    "variable": {"high", "medium", "low"},
}

URGENT_WORDS = re.compile(r"urgent|important|deadline|asap", re.IGNORECASE)
EASY_WORDS = re.compile(r"quick|simple|just|check|review", re.IGNORECASE)


def suggest_blocks_for_task(
    task: TaskSchedulingInfo,
    blocks: list[ActivityBlock],
    pattern: EnergyPattern,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    days_to_check: int = DEFAULT_DAYS_TO_CHECK,
    exclude_block_ids: Iterable[str] = (),
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
    scoring: ScoringConfig | None = None,
) -> list[BlockScore]:
    """
    Rank upcoming (block, date) slots for a task.

    Args:
        task: What the caller knows about the task
        blocks: The user's blocks; paused ones are skipped
        pattern: One snapshot of the user's energy pattern for the whole sweep
        max_suggestions: Maximum entries returned
        days_to_check: Lookahead window in days, today included
        exclude_block_ids: Blocks the user already rejected
        now: Current instant (default: now in ``tz``)
        tz: User timezone

    Returns:
        Up to ``max_suggestions`` BlockScores with score > 0, highest first
    """
    if max_suggestions <= 0 or days_to_check <= 0:
        return []

    tz = tz or resolve_timezone(None)
    current = local_now(tz, now)
    today = current.date()
    excluded = set(exclude_block_ids)
    candidates = [b for b in blocks if b.is_active and b.id not in excluded]
    if not candidates:
        return []

    scored: list[BlockScore] = []
    for offset in range(days_to_check):
        target: date = today + timedelta(days=offset)
        for block in candidates:
            result = score_block_for_task(
                task, block, pattern, target_date=target, now=current, tz=tz, scoring=scoring
            )
            if result.score > 0:
                scored.append(result)

    scored.sort(key=lambda s: s.score, reverse=True)
    top = scored[:max_suggestions]

    logger.debug(
        f"Ranked {len(scored)} slots for {task.content[:60]!r}, returning {len(top)}"
    )
    return top


def infer_task_energy(task: TaskSchedulingInfo) -> str:
    """Energy requirement from the task itself, guessing from its wording if unset."""
    if task.energy_required in ("high", "medium", "low"):
        return task.energy_required

    words = task.content.split()
    if URGENT_WORDS.search(task.content) or len(words) > 10:
        return "high"
    if EASY_WORDS.search(task.content) or len(words) < 5:
        return "low"
    return "medium"


def filter_tasks_for_energy(
    tasks: list[TaskSchedulingInfo], current_energy: str
) -> list[TaskSchedulingInfo]:
    """Tasks that are doable at ``current_energy`` (unknown levels fit everything)."""
    fits = ENERGY_FITS.get(str(current_energy).lower(), ENERGY_FITS["variable"])
    return [task for task in tasks if infer_task_energy(task) in fits]


def current_energy_label(
    pattern: EnergyPattern, now: datetime, tz: ZoneInfo, block: ActivityBlock | None = None
) -> str:
    """Predicted energy right now, as the label filter_tasks_for_energy expects."""
    current = local_now(tz, now)
    predicted = predict_energy(
        pattern, current.hour, day_name(current.date()), block.id if block else None
    )
    return average_to_level(predicted)
