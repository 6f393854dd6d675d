"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def code(self) -> str:
        """Single letter used in FEN and freeform strings."""
        return "w" if self == Color.WHITE else "b"

    @classmethod
    def from_code(cls, code: str) -> "Color":
        return cls.WHITE if code == "w" else cls.BLACK


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Mode(StrEnum):
    """Rule regime of a session"""

    STRICT = "strict"  # every move goes through the rule oracle
    SANDBOX = "sandbox"  # freeform, anything goes


class PlayMode(StrEnum):
    NONE = "none"
    BOT = "bot"
    PASS = "pass"
    ONLINE = "online"


class Termination(StrEnum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"
