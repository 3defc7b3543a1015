"""
Command-line interface for the glacier restore tool.

Usage:
    python glacier_restore_cli.py list
    python glacier_restore_cli.py dry-run my-bucket
    python glacier_restore_cli.py restore my-bucket --tier bulk --days 2
    python glacier_restore_cli.py status my-bucket
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from threading import Event

from . import config
from .aws_clients import create_s3_client
from .commands import RestoreEngine
from .exceptions import ConfigurationError, ListingFailed
from .models import RestorePlan
from .reporting import (
    format_bytes,
    print_bucket_table,
    print_plan,
    print_status_summary,
    print_submission_outcome,
)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with list/dry-run/restore/status subcommands."""
    parser = argparse.ArgumentParser(
        prog="glacier-restore",
        description="Plan, request and track restores of S3 Glacier and Deep Archive objects.",
    )
    parser.add_argument("--env-file", help="Path to .env file with AWS credentials (default: AWS_ENV_FILE or ~/.env)")
    parser.add_argument("--region", help="AWS region for the S3 client")
    parser.add_argument(
        "--workers",
        type=_positive_int,
        help=(
            "Concurrent S3 requests for restore/status "
            f"(default: GLACIER_MAX_WORKERS or {config.DEFAULT_MAX_WORKERS}; 1 = sequential)"
        ),
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True
    subparsers.add_parser("list", help="List all S3 buckets and their sizes")
    dry_run = subparsers.add_parser("dry-run", help="Show which objects a restore would request")
    dry_run.add_argument("bucket", help="Bucket name")
    restore = subparsers.add_parser("restore", help="Request restores for all archived objects in a bucket")
    restore.add_argument("bucket", help="Bucket name")
    restore.add_argument(
        "--tier",
        type=str.lower,
        choices=[tier.lower() for tier in config.VALID_RESTORE_TIERS],
        help=f"Retrieval tier (default: GLACIER_RESTORE_TIER or {config.DEFAULT_RESTORE_TIER.lower()})",
    )
    restore.add_argument(
        "--days",
        type=_positive_int,
        help=f"Days to keep restored copies available (default: GLACIER_RESTORE_DAYS or {config.DEFAULT_RESTORE_DAYS})",
    )
    restore.add_argument("--yes", action="store_true", help="Skip the confirmation prompt.")
    status = subparsers.add_parser("status", help="Check status of restores in a bucket")
    status.add_argument("bucket", help="Bucket name")
    return parser


def _show_plan(plan: RestorePlan) -> bool:
    print_plan(plan)
    return True


def _confirm_plan(plan: RestorePlan) -> bool:
    print_plan(plan)
    print()
    resp = input(f"Request restore of {plan.object_count:,} object(s) ({format_bytes(plan.total_bytes)})? [y/N] ")
    if resp.strip().lower() not in {"y", "yes"}:
        print("Aborted by user.")
        return False
    return True


def _install_interrupt_handler(cancel_event: Event):
    """First Ctrl+C stops new requests; a second one aborts immediately."""

    def _handler(_signum, _frame):
        cancel_event.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)
        print("\nInterrupted: finishing in-flight requests (Ctrl+C again to abort)...", file=sys.stderr)

    return signal.signal(signal.SIGINT, _handler)


def run_command(args: argparse.Namespace, engine: RestoreEngine) -> int:
    """Execute one parsed command against the engine and print its result."""
    if args.command == "list":
        print_bucket_table(engine.run_list())
    elif args.command == "dry-run":
        print_plan(engine.run_dry_run(args.bucket))
        print()
        print("Dry run only: no restore requests were made.")
    elif args.command == "restore":
        confirm = _show_plan if args.yes else _confirm_plan
        run = engine.run_restore(args.bucket, args.tier, args.days, confirm=confirm)
        if run.plan.is_empty:
            print_plan(run.plan)
        if run.outcome is not None:
            print_submission_outcome(run.outcome)
    elif args.command == "status":
        print_status_summary(engine.run_status(args.bucket))
    else:  # pragma: no cover - argparse restricts choices
        raise ValueError(f"Unknown command: {args.command}")
    return 0


def _apply_settings(args: argparse.Namespace, settings: config.Settings) -> None:
    """Fill options not given on the command line from validated settings."""
    if args.workers is None:
        args.workers = settings.max_workers
    if getattr(args, "tier", None) is None:
        args.tier = settings.restore_tier.lower()
    if getattr(args, "days", None) is None:
        args.days = settings.restore_days


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    try:
        settings = config.load_settings()
        _apply_settings(args, settings)
        s3 = create_s3_client(args.env_file, args.region)
    except ConfigurationError as exc:
        logging.error("%s", exc)
        return 1

    cancel_event = Event()
    previous_handler = _install_interrupt_handler(cancel_event)
    engine = RestoreEngine(
        s3,
        max_workers=args.workers,
        cancel_event=cancel_event,
        excluded_buckets=settings.excluded_buckets,
        progress_every=settings.progress_every,
    )
    try:
        return run_command(args, engine)
    except ListingFailed as exc:
        logging.error("%s", exc)
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)
