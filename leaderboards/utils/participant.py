# leaderboards/utils/participant.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from leaderboards.errors import InvalidStateError


class ParticipantType(str, enum.Enum):
    STUDIO = "STUDIO"
    TEACHER = "TEACHER"


@dataclass(frozen=True, slots=True)
class Studio:
    id: str

    @property
    def type(self) -> ParticipantType:
        return ParticipantType.STUDIO


@dataclass(frozen=True, slots=True)
class Teacher:
    id: str

    @property
    def type(self) -> ParticipantType:
        return ParticipantType.TEACHER


Participant = Union[Studio, Teacher]


def participant_from_row(participant_type: ParticipantType | str, participant_id: str) -> Participant:
    """
    Rebuilds the variant from the (participant_type, participant_id) column pair.
    """
    try:
        kind = ParticipantType(participant_type)
    except ValueError as e:
        raise InvalidStateError(f"Unknown participant type: {participant_type!r}") from e

    if kind is ParticipantType.STUDIO:
        return Studio(participant_id)
    return Teacher(participant_id)
