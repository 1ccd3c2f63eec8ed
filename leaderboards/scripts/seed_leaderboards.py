# leaderboards/scripts/seed_leaderboards.py
from __future__ import annotations

import asyncio

from sqlalchemy import select

from leaderboards.config import settings
from leaderboards.database.models import (
    Leaderboard,
    LeaderboardPrize,
    LeaderboardTimeframe,
    ParticipantType,
)
from leaderboards.database.session import Database
from leaderboards.scheduler.jobs import run_leaderboard_cycle


SEED_LEADERBOARDS = [
    {
        "name": "Booking Boss",
        "slug": "booking-boss-monthly",
        "description": "Studio with the most bookings this month",
        "participant_type": ParticipantType.STUDIO,
        "timeframe": LeaderboardTimeframe.MONTHLY,
        "metric_name": "bookings",
        "metric_unit": "bookings",
        "prizes": [
            (1, "$800 Cash", "CASH", 800),
            (2, "$400 Cash", "CASH", 400),
            (3, "$200 Cash", "CASH", 200),
        ],
    },
    {
        "name": "Viral Sensation",
        "slug": "most-views-studio",
        "description": "Total views across social platforms",
        "participant_type": ParticipantType.STUDIO,
        "timeframe": LeaderboardTimeframe.WEEKLY,
        "metric_name": "views",
        "metric_unit": "views",
        "prizes": [
            (1, "$200 Cash", "CASH", 200),
            (2, "$100 Cash", "CASH", 100),
            (3, "Social Badge", "BADGE", 50),
        ],
    },
    {
        "name": "Retention Royalty",
        "slug": "retention-quarterly",
        "description": "Highest client retention this quarter",
        "participant_type": ParticipantType.STUDIO,
        "timeframe": LeaderboardTimeframe.QUARTERLY,
        "metric_name": "retention",
        "metric_unit": "%",
        "prizes": [
            (1, "$600 Cash", "CASH", 600),
            (2, "$300 Cash", "CASH", 300),
        ],
    },
    {
        "name": "Social Media Star",
        "slug": "social-star-teacher",
        "description": "Teacher whose content triggered the most conversations",
        "participant_type": ParticipantType.TEACHER,
        "timeframe": LeaderboardTimeframe.WEEKLY,
        "metric_name": "social",
        "metric_unit": "interactions",
        "prizes": [
            (1, "$100 Cash", "CASH", 100),
            (2, "Featured Spotlight", "FEATURE_SPOTLIGHT", 50),
        ],
    },
    {
        "name": "Fastest Sub-Hour Check-in",
        "slug": "fastest-checkin-teacher",
        "description": "Lowest average minutes between booking and check-in",
        "participant_type": ParticipantType.TEACHER,
        "timeframe": LeaderboardTimeframe.MONTHLY,
        "higher_is_better": False,
        "metric_name": "checkin",
        "metric_unit": "min",
        "prizes": [
            (1, "Swag Pack", "MERCHANDISE", 75),
        ],
    },
]


async def main() -> None:
    db = Database(settings.database_url)
    await db.init_models()

    created = 0
    async with db.session() as session:
        for spec in SEED_LEADERBOARDS:
            existing = await session.execute(select(Leaderboard.id).where(Leaderboard.slug == spec["slug"]))
            if existing.scalar_one_or_none():
                continue

            leaderboard = Leaderboard(
                name=spec["name"],
                slug=spec["slug"],
                description=spec["description"],
                participant_type=spec["participant_type"],
                timeframe=spec["timeframe"],
                higher_is_better=spec.get("higher_is_better", True),
                metric_name=spec["metric_name"],
                metric_unit=spec["metric_unit"],
            )
            leaderboard.prizes = [
                LeaderboardPrize(position=position, name=name, prize_type=prize_type, prize_value=value)
                for position, name, prize_type, value in spec["prizes"]
            ]
            session.add(leaderboard)
            created += 1

        await session.commit()

    # open the current period for every board
    result = await run_leaderboard_cycle(db)

    await db.close()
    print(f"Seeded {created} leaderboards; cycle: {result}")


if __name__ == "__main__":
    asyncio.run(main())
