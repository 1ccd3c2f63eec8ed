# leaderboards/database/models/entry.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaderboards.database.base import Base
from leaderboards.database.models.leaderboard import new_id
from leaderboards.utils.participant import Participant, ParticipantType, participant_from_row

if TYPE_CHECKING:
    from leaderboards.database.models.period import LeaderboardPeriod


class LeaderboardEntry(Base):
    """
    One participant's standing within one period.
    score is written by ingestion; rank only by the finalizer.
    """
    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        UniqueConstraint(
            "period_id",
            "participant_type",
            "participant_id",
            name="uq_leaderboard_entries_period_participant",
        ),
        Index("ix_leaderboard_entries_period_rank", "period_id", "rank"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    period_id: Mapped[str] = mapped_column(
        ForeignKey("leaderboard_periods.id", ondelete="CASCADE"),
        index=True,
    )

    participant_type: Mapped[ParticipantType] = mapped_column(Enum(ParticipantType, native_enum=False))
    participant_id: Mapped[str] = mapped_column(String(36), index=True)

    score: Mapped[float] = mapped_column(Float, default=0.0)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    previous_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    period: Mapped["LeaderboardPeriod"] = relationship(back_populates="entries")

    @property
    def participant(self) -> Participant:
        return participant_from_row(self.participant_type, self.participant_id)

    @participant.setter
    def participant(self, value: Participant) -> None:
        self.participant_type = value.type
        self.participant_id = value.id
