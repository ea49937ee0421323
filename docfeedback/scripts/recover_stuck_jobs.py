"""
Stuck feedback job recovery utility.

Usage:
    python -m docfeedback.scripts.recover_stuck_jobs list [--limit 20]
    python -m docfeedback.scripts.recover_stuck_jobs recover [--threshold-seconds 3600]

Purpose:
- Show recent feedback jobs with status, progress and step
- Mark PROCESSING jobs that stopped updating as FAILED so owners can retry

Dependencies: sqlalchemy, docfeedback.application.services
System role: Operator helper for the job record store
"""

import argparse
import asyncio
import logging
import sys

from docfeedback.application.services import FeedbackJobService
from docfeedback.boundary.db import get_async_session_factory
from docfeedback.boundary.db.CRUD import feedback_job_crud
from docfeedback.configs import get_settings
from docfeedback.observability import configure_logging

logger = logging.getLogger(__name__)


async def list_jobs(limit: int) -> None:
    """Print the most recent jobs across all users."""
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        jobs = await feedback_job_crud.list_recent(session, limit=limit)

    if not jobs:
        print("No feedback jobs found")
        return
    for job in jobs:
        print(
            f"{job.id}  {job.status.value:<10} {job.progress:>3}%  "
            f"{(job.current_step or '-'):<30} user={job.user_id} "
            f"updated={job.updated_at.isoformat()}"
        )
        if job.error:
            print(f"    error: {job.error}")


async def recover(threshold_seconds: float) -> int:
    """Fail stuck PROCESSING jobs; returns how many were recovered."""
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        recovered = await FeedbackJobService(session).recover_stale_jobs(threshold_seconds)

    for job_id in recovered:
        print(f"Marked FAILED: {job_id}")
    print(f"{len(recovered)} stuck job(s) recovered")
    return len(recovered)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="recover_stuck_jobs", description=__doc__.split("\n\n")[0])
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="Show recent jobs")
    list_parser.add_argument("--limit", type=int, default=20)

    recover_parser = commands.add_parser("recover", help="Fail stuck PROCESSING jobs")
    recover_parser.add_argument(
        "--threshold-seconds",
        type=float,
        default=settings.feedback_job.stale_job_threshold_seconds,
    )

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    try:
        if args.command == "list":
            asyncio.run(list_jobs(args.limit))
        else:
            asyncio.run(recover(args.threshold_seconds))
    except Exception as e:
        logger.error(f"{__name__}:main - {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
