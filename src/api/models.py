"""Models handed to the presentation layer (board widget, palette, status line)"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess.square import is_valid_square
from src.core.shared_types import Color, Mode, PlayMode

SquareName = str
PieceCode = str


class SessionSnapshot(BaseModel):
    """Everything needed to draw the current state of a session"""

    mode: Mode
    play_mode: PlayMode
    editing: bool
    position: str  # FEN in strict mode, sandbox string otherwise
    board: dict[SquareName, PieceCode]
    turn: Color
    turn_label: str
    status: str
    selected_piece: Optional[PieceCode]
    online_available: bool
    room_code: Optional[str]
    joined: bool
    my_color: Color

    @field_validator("board")
    @classmethod
    def validate_board(cls, value: dict[SquareName, PieceCode]) -> dict[SquareName, PieceCode]:
        for square in value:
            if not is_valid_square(square):
                raise ValueError(f"Cannot interpret {square!r} as a valid square name.")
        return value

    @property
    def message(self) -> str:
        """What the status line shows: a pending status message wins over the turn indicator"""
        return self.status or self.turn_label
