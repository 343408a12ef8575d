#!/usr/bin/env python3
"""
Cadence CLI - inspect and poke a user's scheduling state

Operator tool for debugging what the engine has learned. Every command
prints JSON to stdout; logs go to stderr.

Usage:
    cadence init-blocks --user alice
    cadence blocks --user alice [--all]
    cadence log-energy --user alice --level 4 [--context "after coffee"]
    cadence observe --user alice --energy low --time-of-day afternoon [--pattern]
    cadence pattern --user alice
    cadence insights --user alice
    cadence suggest --user alice --task "Write report" --energy high --tag @computer
"""

import argparse
import json
import sys
from pathlib import Path

from cadence import __version__
from cadence.config import load_config
from cadence.engine import SchedulingEngine
from cadence.logging_config import setup_logging
from cadence.models import TaskSchedulingInfo, TimeOfDay
from cadence.storage.base import StorageUnavailableError


def _print(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _engine(args) -> SchedulingEngine:
    config = load_config(Path(args.config) if args.config else None)
    if args.storage:
        config.storage.backend = args.storage
    return SchedulingEngine(config=config)


def cmd_init_blocks(args):
    """Seed the default blocks for a user."""
    blocks = _engine(args).initialize_default_blocks(args.user)
    _print({"success": True, "blocks": [b.to_dict() for b in blocks]})
    return 0


def cmd_blocks(args):
    """List a user's blocks."""
    engine = _engine(args)
    if args.all:
        blocks = engine.list_all_blocks(args.user)
    else:
        blocks = engine.list_active_blocks(args.user)
    current = engine.get_current_block(args.user)
    _print(
        {
            "success": True,
            "current_block": current.id if current else None,
            "blocks": [b.to_dict() for b in blocks],
        }
    )
    return 0


def cmd_log_energy(args):
    """Record an explicit 1-5 energy self-report."""
    log = _engine(args).record_explicit_log(
        args.user, args.level, context=args.context, block_id=args.block
    )
    _print({"success": True, "log": log.to_dict()})
    return 0


def cmd_observe(args):
    """Record an energy statement inferred from conversation."""
    pattern = _engine(args).record_observed_preference(
        args.user,
        args.energy,
        time_of_day=args.time_of_day,
        day_of_week=args.day,
        is_pattern=args.pattern,
    )
    _print({"success": True, "pattern": pattern.to_dict()})
    return 0


def cmd_pattern(args):
    """Show the learned energy pattern."""
    engine = _engine(args)
    _print(
        {
            "success": True,
            "pattern": engine.get_energy_pattern(args.user).to_dict(),
            "today": [log.to_dict() for log in engine.get_energy_logs_for_day(args.user)],
        }
    )
    return 0


def cmd_insights(args):
    """Summarize the learned pattern."""
    insights = _engine(args).get_energy_insights(args.user)
    if insights is None:
        _print({"success": True, "insights": None, "message": "Still learning"})
        return 0
    _print({"success": True, "insights": insights.to_dict()})
    return 0


def cmd_suggest(args):
    """Rank blocks for a task over the coming days."""
    task = TaskSchedulingInfo(
        content=args.task,
        energy_required=args.energy,
        context_tags=args.tag or [],
        estimated_minutes=args.minutes,
    )
    suggestions = _engine(args).suggest_blocks_for_task(
        args.user,
        task,
        max_suggestions=args.max,
        days_to_check=args.days,
        exclude_block_ids=args.exclude or [],
    )
    _print({"success": True, "suggestions": [s.to_dict() for s in suggestions]})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cadence",
        description="Inspect adaptive scheduling and energy-learning state",
    )
    parser.add_argument("--version", action="version", version=f"cadence {__version__}")
    parser.add_argument("--config", help="Path to scheduling.yaml")
    parser.add_argument(
        "--storage", choices=["memory", "sqlite", "redis"], help="Override the storage backend"
    )
    parser.add_argument("--log-level", dest="log_level", help="DEBUG shows per-block scoring")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def user_command(name: str, help_text: str, func) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--user", required=True, help="User ID")
        sub.set_defaults(func=func)
        return sub

    user_command("init-blocks", "Seed the six default blocks", cmd_init_blocks)

    blocks = user_command("blocks", "List blocks", cmd_blocks)
    blocks.add_argument("--all", action="store_true", help="Include paused blocks")

    log_energy = user_command("log-energy", "Record a 1-5 energy level", cmd_log_energy)
    log_energy.add_argument("--level", type=int, required=True, help="Energy 1-5")
    log_energy.add_argument("--context", help="What was going on")
    log_energy.add_argument("--block", help="Block ID (default: the block in progress)")

    observe = user_command("observe", "Record an inferred energy statement", cmd_observe)
    observe.add_argument("--energy", required=True, choices=["low", "medium", "high"])
    observe.add_argument(
        "--time-of-day", dest="time_of_day", choices=[t.value for t in TimeOfDay]
    )
    observe.add_argument("--day", help="Weekday name")
    observe.add_argument(
        "--pattern", action="store_true", help="Habitual statement (usually, always)"
    )

    user_command("pattern", "Show the learned energy pattern", cmd_pattern)
    user_command("insights", "Summarize the learned pattern", cmd_insights)

    suggest = user_command("suggest", "Suggest blocks for a task", cmd_suggest)
    suggest.add_argument("--task", required=True, help="Task description")
    suggest.add_argument("--energy", choices=["low", "medium", "high"])
    suggest.add_argument("--tag", action="append", help="Context tag (repeatable)")
    suggest.add_argument("--minutes", type=int, help="Estimated minutes")
    suggest.add_argument("--max", type=int, help="Maximum suggestions")
    suggest.add_argument("--days", type=int, help="Days to look ahead")
    suggest.add_argument("--exclude", action="append", help="Block ID to skip (repeatable)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except StorageUnavailableError as e:
        _print({"success": False, "error": str(e)})
        return 2


if __name__ == "__main__":
    sys.exit(main())
