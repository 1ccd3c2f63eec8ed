# leaderboards/database/models/winner.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaderboards.constants import PRIZE_STATUS_PENDING
from leaderboards.database.base import Base
from leaderboards.database.models.leaderboard import new_id
from leaderboards.utils.participant import Participant, ParticipantType, participant_from_row

if TYPE_CHECKING:
    from leaderboards.database.models.period import LeaderboardPeriod


class LeaderboardWinner(Base):
    """
    Snapshot of a finalized period's prize holders.
    Deleted and rebuilt on every finalize, never edited by hand.
    """
    __tablename__ = "leaderboard_winners"
    __table_args__ = (
        UniqueConstraint("period_id", "position", name="uq_leaderboard_winners_period_position"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    period_id: Mapped[str] = mapped_column(
        ForeignKey("leaderboard_periods.id", ondelete="CASCADE"),
        index=True,
    )
    prize_id: Mapped[str] = mapped_column(
        ForeignKey("leaderboard_prizes.id", ondelete="CASCADE"),
        index=True,
    )

    participant_type: Mapped[ParticipantType] = mapped_column(Enum(ParticipantType, native_enum=False))
    participant_id: Mapped[str] = mapped_column(String(36), index=True)

    position: Mapped[int] = mapped_column(Integer)
    final_score: Mapped[float] = mapped_column(Float)
    prize_status: Mapped[str] = mapped_column(String(32), default=PRIZE_STATUS_PENDING)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    period: Mapped["LeaderboardPeriod"] = relationship(back_populates="winners")

    @property
    def participant(self) -> Participant:
        return participant_from_row(self.participant_type, self.participant_id)
