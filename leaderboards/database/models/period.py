# leaderboards/database/models/period.py
from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaderboards.database.base import Base
from leaderboards.database.models.leaderboard import Leaderboard, new_id

if TYPE_CHECKING:
    from leaderboards.database.models.entry import LeaderboardEntry
    from leaderboards.database.models.winner import LeaderboardWinner


class PeriodStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"

    @property
    def is_terminal(self) -> bool:
        return self is not PeriodStatus.ACTIVE


class LeaderboardPeriod(Base):
    """
    One time window of a leaderboard's competition.
    Boundaries are UTC and inclusive. Rows are never deleted.
    """
    __tablename__ = "leaderboard_periods"
    __table_args__ = (
        UniqueConstraint("leaderboard_id", "start_date", "end_date", name="uq_leaderboard_periods_slot"),
        Index("ix_leaderboard_periods_board_status", "leaderboard_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    leaderboard_id: Mapped[str] = mapped_column(
        ForeignKey("leaderboards.id", ondelete="CASCADE"),
        index=True,
    )

    name: Mapped[str] = mapped_column(String(128))
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    status: Mapped[PeriodStatus] = mapped_column(
        Enum(PeriodStatus, native_enum=False),
        default=PeriodStatus.ACTIVE,
    )

    finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # actor id, or one of the system/manual tokens in leaderboards.constants
    finalized_by: Mapped[str | None] = mapped_column(String(64), nullable=True)

    leaderboard: Mapped[Leaderboard] = relationship(back_populates="periods")
    entries: Mapped[list["LeaderboardEntry"]] = relationship(back_populates="period")
    winners: Mapped[list["LeaderboardWinner"]] = relationship(back_populates="period")
