"""Scheduling - Where should this task go?

Components:
    scorer.py: 0-1 suitability of one block on one date for a task
    ranker.py: Best few (block, date) slots over the coming week,
        plus filtering a task list down to what fits current energy
"""

from cadence.scheduling.ranker import (
    current_energy_label,
    filter_tasks_for_energy,
    infer_task_energy,
    suggest_blocks_for_task,
)
from cadence.scheduling.scorer import score_block_for_task

__all__ = [
    "current_energy_label",
    "filter_tasks_for_energy",
    "infer_task_energy",
    "score_block_for_task",
    "suggest_blocks_for_task",
]
