# leaderboards/database/models/leaderboard.py
from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    event,
    func,
    inspect,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.orm.base import NO_VALUE

from leaderboards.database.base import Base
from leaderboards.errors import InvalidStateError
from leaderboards.utils.participant import ParticipantType

if TYPE_CHECKING:
    from leaderboards.database.models.period import LeaderboardPeriod


def new_id() -> str:
    return str(uuid.uuid4())


class LeaderboardTimeframe(str, enum.Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
    ALL_TIME = "ALL_TIME"


class Leaderboard(Base):
    """
    A recurring competition definition.
    participant_type is fixed once the row exists.
    """
    __tablename__ = "leaderboards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(128))
    slug: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)

    participant_type: Mapped[ParticipantType] = mapped_column(Enum(ParticipantType, native_enum=False))
    timeframe: Mapped[LeaderboardTimeframe] = mapped_column(
        Enum(LeaderboardTimeframe, native_enum=False),
        index=True,
    )
    higher_is_better: Mapped[bool] = mapped_column(Boolean, default=True)

    # descriptive only
    metric_name: Mapped[str] = mapped_column(String(64))
    metric_unit: Mapped[str | None] = mapped_column(String(32), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    auto_calculate: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    prizes: Mapped[list["LeaderboardPrize"]] = relationship(
        back_populates="leaderboard",
        cascade="all, delete-orphan",
        order_by="LeaderboardPrize.position",
    )
    periods: Mapped[list["LeaderboardPeriod"]] = relationship(back_populates="leaderboard")

    @validates("participant_type")
    def _validate_participant_type(self, _key: str, value):
        value = ParticipantType(value)
        state = inspect(self)
        if state.has_identity:
            # expired or unloaded: the stored value is unknown, so refuse
            loaded = state.attrs.participant_type.loaded_value
            if loaded is NO_VALUE or loaded != value:
                raise InvalidStateError(f"Leaderboard {state.identity[0]} participant_type cannot change")
        return value


@event.listens_for(Leaderboard, "before_update")
def _reject_participant_type_change(_mapper, _connection, target: Leaderboard) -> None:
    if inspect(target).attrs.participant_type.history.has_changes():
        raise InvalidStateError(f"Leaderboard {target.id} participant_type cannot change")


class LeaderboardPrize(Base):
    __tablename__ = "leaderboard_prizes"
    __table_args__ = (
        UniqueConstraint("leaderboard_id", "position", name="uq_leaderboard_prizes_position"),
        CheckConstraint("position > 0", name="ck_leaderboard_prizes_position_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    leaderboard_id: Mapped[str] = mapped_column(
        ForeignKey("leaderboards.id", ondelete="CASCADE"),
        index=True,
    )

    position: Mapped[int] = mapped_column(Integer)  # 1-based
    name: Mapped[str] = mapped_column(String(128))
    prize_type: Mapped[str] = mapped_column(String(32))
    prize_value: Mapped[float | None] = mapped_column(Float, nullable=True)

    leaderboard: Mapped[Leaderboard] = relationship(back_populates="prizes")
