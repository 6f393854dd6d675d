"""
Message contract between two peers playing in the same room.

There is a single message kind, "move". Every message carries the *complete* position after the move, never a diff:
a message can be applied twice, or arrive after a later one, and the receiving peer simply ends up with the position
of the last message it processed.
"""

import secrets
from string import ascii_letters, digits
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.chess.square import is_valid_square
from src.core.shared_types import Color

MOVE_EVENT = "move"
ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = ascii_letters + digits + "_-"

# Static convention: whoever creates the room plays white, whoever joins it plays black
CREATOR_COLOR = Color.WHITE
JOINER_COLOR = Color.BLACK


def new_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def room_topic(room_code: str) -> str:
    """Name of the transport channel scoped to a room"""
    return f"room:{room_code}"


class MoveMessage(BaseModel):
    """Payload of a "move" message. Field names on the wire: from, to, description, resultingPosition."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    description: str = ""
    resulting_position: str = Field(alias="resultingPosition")

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_square(value):
            raise ValueError(f"Cannot interpret {value!r} as a valid square name.")
        return value

    @field_validator("resulting_position")
    @classmethod
    def validate_resulting_position(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("resultingPosition cannot be empty.")
        return value.strip()

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
