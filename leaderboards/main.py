# leaderboards/main.py
import asyncio
import logging

from leaderboards.config import Settings
from leaderboards.database import Database
from leaderboards.scheduler import setup_scheduler
from leaderboards.scheduler.jobs import run_leaderboard_cycle


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy / scheduler logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "apscheduler",
        "aiosqlite",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("leaderboards")

    db = Database(settings.database_url)
    await db.init_models()
    log.info("DB initialized")

    # catch up on anything that expired while we were down
    if settings.cycle_enabled:
        await run_leaderboard_cycle(db)

    scheduler = setup_scheduler(db=db, settings=settings)
    log.info("Scheduler started (every %s min)", settings.cycle_interval_minutes)

    try:
        await asyncio.Event().wait()
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    finally:
        scheduler.shutdown(wait=False)
        await db.close()
        log.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
