from __future__ import annotations

import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from leaderboards.config.settings import Settings
from leaderboards.database.session import Database
from leaderboards.database.tx import run_in_transaction
from leaderboards.errors import LeaderboardError
from leaderboards.services.cycle import AutoCycleResult, run_leaderboard_auto_cycle

log = logging.getLogger(__name__)


# -------------------------------------------------
# Main job: roll leaderboards forward
# -------------------------------------------------

async def run_leaderboard_cycle(db: Database, *, now: datetime | None = None) -> AutoCycleResult | None:
    """
    One auto-cycle run in its own unit of work.
    Failures roll the whole run back and are logged; the next tick retries.
    """
    try:
        return await run_in_transaction(
            db,
            lambda session: run_leaderboard_auto_cycle(session, now=now),
        )
    except LeaderboardError:
        log.exception("Leaderboard auto-cycle failed")
        return None


# -------------------------------------------------
# Scheduler setup
# -------------------------------------------------

def build_scheduler(db: Database, settings: Settings) -> AsyncIOScheduler:
    """
    Creates and returns an AsyncIOScheduler with our jobs registered.
    """
    scheduler = AsyncIOScheduler(timezone="UTC")

    if not settings.cycle_enabled:
        log.warning("Leaderboard auto-cycle disabled (CYCLE_ENABLED=false)")
        return scheduler

    # single writer: never overlap two cycle runs
    scheduler.add_job(
        run_leaderboard_cycle,
        trigger=CronTrigger(minute=f"*/{settings.cycle_interval_minutes}", timezone="UTC"),
        kwargs={"db": db},
        id="run_leaderboard_cycle",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
        misfire_grace_time=300,
    )

    return scheduler
