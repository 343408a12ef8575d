"""
Tool: Task-Block Scorer
Purpose: How well does this block, on this date, suit this task? (0.0 - 1.0)

Four weighted sub-scores, each 0-1:
    energy    (0.30)  task energy vs block energy profile; a "variable"
                      block uses the learned prediction at its midpoint hour
    category  (0.25)  task context tags vs block categories; no tags = 0.5
    history   (0.25)  learned block average on the 1-5 scale; none = 0.5
    duration  (0.20)  fixed 0.8 - block capacity is not tracked yet

Gates (score 0): the block doesn't run that weekday, or it's today and the
block has already ended.

Scoring is pure: the caller passes the user's pattern in, so a ranker can
score a week of blocks against one snapshot.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from cadence.config import ScoringConfig
from cadence.learning.energy import level_to_numeric, predict_energy
from cadence.logging_config import get_logger
from cadence.models import (
    ActivityBlock,
    BlockScore,
    EnergyLevel,
    EnergyPattern,
    TaskSchedulingInfo,
)
from cadence.timewindow import day_name, local_now, midpoint_hour, resolve_slot, resolve_timezone

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5
MAX_ENERGY_GAP = 3  # gap at which the energy score reaches 0

REASON_NOT_ACTIVE = "block not active on this day"
REASON_PASSED = "block time has passed"
REASON_ENERGY = "energy match"
REASON_HISTORY = "good track record"


def normalize_tag(tag: str) -> str:
    return str(tag).strip().lstrip("@").lower()


def score_energy_match(
    task_energy: str | None, block_energy: str, predicted_energy: float
) -> float:
    """1.0 for identical energy, falling linearly to 0 at a 3-point gap."""
    task_numeric = level_to_numeric(task_energy)
    if block_energy == EnergyLevel.VARIABLE:
        block_numeric = predicted_energy
    else:
        block_numeric = level_to_numeric(block_energy)
    return max(0.0, 1 - abs(task_numeric - block_numeric) / MAX_ENERGY_GAP)


def score_category_match(
    task_tags: list[str] | None, block_categories: list[str]
) -> tuple[float, list[str]]:
    """
    Share of task tags that overlap a block category.

    "@computer" matches "computer work" and "comp" matches "computer": either
    string may contain the other.

    Returns:
        Tuple of (score, matched tags); (0.5, []) when the task has no tags
    """
    tags = [normalize_tag(t) for t in (task_tags or []) if normalize_tag(t)]
    if not tags:
        return NEUTRAL_SCORE, []

    categories = [c.lower() for c in block_categories]
    matched = [tag for tag in tags if any(cat in tag or tag in cat for cat in categories)]
    return len(matched) / len(tags), matched


def score_history(pattern: EnergyPattern, block_id: str) -> float:
    """Learned block average mapped from 1-5 onto 0-1; neutral if never logged."""
    avg = pattern.block_averages.get(block_id)
    if avg is None:
        return NEUTRAL_SCORE
    return min(1.0, max(0.0, (avg - 1) / 4))


def score_block_for_task(
    task: TaskSchedulingInfo,
    block: ActivityBlock,
    pattern: EnergyPattern,
    target_date: date | None = None,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
    scoring: ScoringConfig | None = None,
) -> BlockScore:
    """
    Score one (task, block, date) combination.

    Args:
        task: What the caller knows about the task
        block: Candidate block
        pattern: The user's learned energy pattern
        target_date: Civil date to place the task on (default: today)
        now: Current instant, for the "already over" gate
        tz: User timezone (default: America/Los_Angeles)
        scoring: Weights and reason thresholds

    Returns:
        BlockScore with score in [0, 1] and the labels worth mentioning
    """
    tz = tz or resolve_timezone(None)
    scoring = scoring or ScoringConfig()
    current = local_now(tz, now)
    day = target_date or current.date()

    slot = resolve_slot(block, day, tz)
    if slot is None:
        return BlockScore(block=block, score=0.0, reasons=[REASON_NOT_ACTIVE], date=day)
    if slot.has_elapsed(current):
        return BlockScore(block=block, score=0.0, reasons=[REASON_PASSED], date=day)

    weights = scoring.weights
    reasons: list[str] = []

    predicted = predict_energy(pattern, midpoint_hour(block), day_name(day), block.id)
    energy = score_energy_match(task.energy_required, block.energy_profile, predicted)
    if energy > scoring.energy_reason_threshold:
        reasons.append(REASON_ENERGY)

    category, matched = score_category_match(task.context_tags, block.task_categories)
    if category > scoring.category_reason_threshold:
        reasons.append(f"matches: {', '.join(matched)}")

    history = score_history(pattern, block.id)
    if history > scoring.history_reason_threshold:
        reasons.append(REASON_HISTORY)

    # Placeholder until per-block remaining capacity is tracked
    duration = scoring.duration_placeholder

    total = (
        energy * weights.energy
        + category * weights.category
        + history * weights.history
        + duration * weights.duration
    )
    total = min(1.0, max(0.0, total))

    logger.debug(
        f"Scored {block.name!r} on {day.isoformat()}: {total:.3f} "
        f"(energy={energy:.2f} category={category:.2f} history={history:.2f})"
    )

    return BlockScore(
        block=block,
        score=total,
        reasons=reasons,
        date=day,
        breakdown={
            "energy": energy,
            "category": category,
            "history": history,
            "duration": duration,
        },
    )
