"""
main.py
-------
Entry point for SubTrack.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Start the Flask REST API.
    - Run the daily renewal reminder scheduler, inside the web process
      or as a standalone daemon.

Usage:
    python main.py                 # web server + reminder scheduler thread
    python main.py web             # web server only
    python main.py scheduler       # reminder daemon only
    python main.py remind-now      # run today's reminder job once and exit
    python main.py init-db         # create tables and exit
"""

import argparse
import signal
import sys

import config
from app import build_repositories, create_app
from services.email_service import EmailSender
from services.reminder_service import ReminderService
from services.scheduler import build_background_scheduler, build_blocking_scheduler, run_logged
from utils.clock import get_timezone, system_clock
from utils.logger import get_logger

logger = get_logger(__name__)


def _init_database() -> None:
    from db.connection import init_pool
    from db.init_db import create_tables

    logger.info("Initializing database...")
    init_pool()
    create_tables()


def _close_database() -> None:
    from db.connection import close_pool
    close_pool()


def build_reminder_service(subscription_repo, user_repo) -> ReminderService:
    tz = get_timezone()
    return ReminderService(subscription_repo, user_repo, EmailSender(), system_clock(tz), tz)


def _scheduler_args(reminders: ReminderService) -> tuple:
    """Job and trigger time: REMINDER_HOUR:REMINDER_MINUTE in TIMEZONE."""
    return reminders.run, config.REMINDER_HOUR, config.REMINDER_MINUTE, reminders.tz


def shutdown(scheduler=None) -> None:
    """Stop the reminder scheduler, waiting for a running scan, then close the pool."""
    if scheduler is not None and scheduler.running:
        logger.info("Waiting for scheduled jobs to finish...")
        scheduler.shutdown(wait=True)
    if config.STORAGE_BACKEND == "postgres":
        _close_database()
    logger.info("SubTrack stopped.")


def _signal_handler(signum, frame):
    logger.info("Received shutdown signal. Stopping gracefully...")
    raise SystemExit(0)


def main() -> None:
    parser = argparse.ArgumentParser(description="SubTrack subscription tracker")
    parser.add_argument(
        "mode",
        nargs="?",
        default="all",
        choices=("all", "web", "scheduler", "remind-now", "init-db"),
        help="What to run (default: web server with the reminder scheduler)",
    )
    parser.add_argument("--host", default=config.APP_HOST, help="Web app host")
    parser.add_argument("--port", type=int, default=config.APP_PORT, help="Web app port")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    args = parser.parse_args()

    # ── 1. Storage ────────────────────────────────────────
    if config.STORAGE_BACKEND == "postgres":
        _init_database()
    if args.mode == "init-db":
        _close_database()
        return

    subscription_repo, user_repo = build_repositories(config.STORAGE_BACKEND)
    reminders = build_reminder_service(subscription_repo, user_repo)
    scheduler = None

    try:
        # ── 2a. One-off reminder run ──────────────────────
        if args.mode == "remind-now":
            run_logged(reminders.run)
            return

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        # ── 2b. Standalone reminder daemon ────────────────
        if args.mode == "scheduler":
            scheduler = build_blocking_scheduler(*_scheduler_args(reminders))
            logger.info("Reminder daemon running. Press Ctrl+C to stop.")
            try:
                scheduler.start()
            except SystemExit:
                pass
            return

        # ── 2c. Web server (optionally with scheduler thread) ──
        if args.mode == "all":
            # Flask's reloader would start a second scheduler
            if args.debug:
                logger.warning("Debug mode: reloader disabled so reminders are scheduled once.")
            scheduler = build_background_scheduler(*_scheduler_args(reminders))
            scheduler.start()

        app = create_app(subscription_repo=subscription_repo, user_repo=user_repo)
        logger.info(f"SubTrack API running at http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False)
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        shutdown(scheduler)


if __name__ == "__main__":
    sys.exit(main())
