"""
Command line entry point for the Tournament Scheduling System.

Works on a JSON tournament snapshot (events with venues and courts, teams,
games, brackets). ``generate`` adds a pool or bracket to the snapshot,
``schedule`` previews or applies court and time assignments for one day,
and ``worker`` starts the Celery worker.
"""

import sys
import os
import json
import logging
import argparse
from datetime import datetime

from tournament_scheduler.core.exceptions import SchedulerError
from tournament_scheduler.core.logging_config import setup_logging
from tournament_scheduler.services.auto_scheduler import (
    AutoScheduleService, MODE_APPLY, MODE_PREVIEW, format_preview
)
from tournament_scheduler.services.bracket_generator import BracketGenerator, GENERATION_TYPES
from tournament_scheduler.services.schedule_store import InMemoryScheduleStore
from tournament_scheduler.services.validator import ScheduleValidator


def _split_ids(value):
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def load_snapshot(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_snapshot(path, data):
    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    os.replace(tmp_path, path)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='tournament-scheduler',
        description='Tournament Scheduler - Generate pools and brackets and place games on courts'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate = subparsers.add_parser('generate', help='Create a pool or bracket in the snapshot')
    generate.add_argument('snapshot', help='Path to the tournament snapshot (JSON)')
    generate.add_argument('--event', required=True, help='Event id')
    generate.add_argument('--type', required=True, choices=GENERATION_TYPES, help='POOL or BRACKET')
    generate.add_argument('--name', required=True, help='Bracket/Pool name')
    generate.add_argument('--teams', required=True, help='Comma-separated team ids')
    generate.add_argument('--seeds', help='Comma-separated seed order (brackets only)')
    generate.add_argument('--pool-code', help='Pool code, e.g. A')
    generate.add_argument('--age-group', help='Age group, e.g. 12U')
    generate.add_argument('--division', help='Division name')
    generate.add_argument('--output', help='Write the updated snapshot here instead of in place')

    schedule = subparsers.add_parser('schedule', help='Assign courts and start times for one day')
    schedule.add_argument('snapshot', help='Path to the tournament snapshot (JSON)')
    schedule.add_argument('--event', required=True, help='Event id')
    schedule.add_argument('--date', required=True, help='Tournament day, YYYY-MM-DD')
    schedule.add_argument('--start-time', help='First slot start, HH:MM')
    schedule.add_argument('--end-time', help='End of the day window, HH:MM')
    schedule.add_argument('--game-duration', type=int, help='Game length in minutes')
    schedule.add_argument('--min-rest', type=int, help='Minimum rest between games in minutes')
    schedule.add_argument('--timezone', help='IANA timezone of the tournament day')
    schedule.add_argument('--apply', action='store_true', help='Save the assignments to the snapshot')
    schedule.add_argument('--output', help='Write the updated snapshot here instead of in place')

    worker = subparsers.add_parser('worker', help='Start a Celery worker for auto-scheduling tasks')
    worker.add_argument('--concurrency', type=int, default=2, help='Worker processes')

    return parser


def run_generate(args):
    print("\n[STEP 1] Loading snapshot...")
    store = InMemoryScheduleStore.from_snapshot(load_snapshot(args.snapshot))

    print(f"\n[STEP 2] Generating {args.type.lower()} '{args.name}'...")
    settings = {
        "poolCode": args.pool_code,
        "ageGroup": args.age_group,
        "division": args.division,
        "seeds": _split_ids(args.seeds) or None
    }
    generator = BracketGenerator(store)
    result = generator.generate(args.event, args.type, args.name, _split_ids(args.teams), settings)

    print(f"\n{result.message}")
    print(f"  - Bracket: {result.bracket.id} ({result.bracket.type.value})")
    for game in result.games:
        print(f"  - {game}")

    output = args.output or args.snapshot
    print(f"\n[STEP 3] Writing snapshot to {output}...")
    save_snapshot(output, store.to_snapshot())
    return 0


def run_schedule(args):
    print("\n[STEP 1] Loading snapshot...")
    store = InMemoryScheduleStore.from_snapshot(load_snapshot(args.snapshot))
    service = AutoScheduleService(store)

    settings = {
        "startTime": args.start_time,
        "endTime": args.end_time,
        "gameDuration": args.game_duration,
        "minRestMinutes": args.min_rest,
        "timezone": args.timezone
    }

    print(f"\n[STEP 2] Scheduling event {args.event} on {args.date}...")
    result, scheduler_settings = service.plan(args.event, args.date, settings)

    print("\n[STEP 3] Validating schedule...")
    validation_result = ScheduleValidator(scheduler_settings).validate_result(result)
    print(validation_result.get_summary())

    if args.apply:
        payload = service.commit(result)
        output = args.output or args.snapshot
        print(f"\n[STEP 4] Writing snapshot to {output}...")
        save_snapshot(output, store.to_snapshot())
    else:
        payload = format_preview(result, scheduler_settings)

    print(json.dumps(payload, indent=2))

    print("\n" + "=" * 80)
    print(f"SCHEDULING COMPLETE ({MODE_APPLY if args.apply else MODE_PREVIEW})")
    print("=" * 80)
    print(f"Games scheduled: {result.stats.scheduled_count} of {result.stats.total_games}")
    print(f"Unscheduled: {result.stats.unscheduled_count}")
    print(f"Court utilization: {result.stats.utilization_percent}%")
    print(f"Schedule valid: {'Yes' if validation_result.is_valid else 'No (with violations)'}")
    print("=" * 80)
    return 0


def run_worker(args):
    from tournament_scheduler.core.celery_app import celery_app

    print("Starting Celery worker...")
    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        f"--concurrency={args.concurrency}",
        "--pool=solo" if os.name == "nt" else "--pool=prefork"  # Use solo pool on Windows
    ])
    return 0


COMMANDS = {
    'generate': run_generate,
    'schedule': run_schedule,
    'worker': run_worker,
}


def main(argv=None):
    """
    Main function of the command line tool.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    print("\n" + "=" * 80)
    print("TOURNAMENT SCHEDULER")
    print("=" * 80)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)

    try:
        return COMMANDS[args.command](args)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user.")
        return 1

    except (SchedulerError, OSError, json.JSONDecodeError) as e:
        print(f"\nERROR: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
