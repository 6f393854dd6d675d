"""
Freeform ("sandbox") position string.

Positions that never went through the rule oracle cannot always be written as FEN (no kings, pawns on the back rank...).
They are shared in a tagged format instead:

SANDBOX:<active color>:<piece code>:<square>,<piece code>:<square>,...

ex) SANDBOX:b:wK:e1,bQ:d8,wP:a8

No castling rights / en passant data, and none of the FEN invariants apply.
"""

from typing import NamedTuple

from src.chess.board import Position
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color

SANDBOX_PREFIX = "SANDBOX:"


class FreeformPosition(NamedTuple):
    position: Position
    color_to_move: Color


def is_freeform(text: str) -> bool:
    return text.startswith(SANDBOX_PREFIX)


def to_freeform(position: Position, color_to_move: Color) -> str:
    pieces = ",".join(
        f"{piece.to_code()}:{square.to_algebraic()}"
        for square, piece in position.items()
    )
    return f"{SANDBOX_PREFIX}{color_to_move.code}:{pieces}"


def from_freeform(text: str) -> FreeformPosition:
    """
    Parse a sandbox string.
    ----

    Lenient where the format is: anything but 'b' is white to move, and chunks that miss either the piece or the
    square are skipped. Unknown piece codes or squares raise MalformedPlacement.
    """
    parts = text.split(":")
    color_to_move = Color.BLACK if len(parts) > 1 and parts[1] == "b" else Color.WHITE
    rest = ":".join(parts[2:])

    position: Position = {}
    if rest.strip():
        for chunk in rest.split(","):
            code, _, square_name = chunk.strip().partition(":")
            if not (code and square_name):
                continue
            position[Square.from_algebraic(square_name)] = Piece.from_code(code)
    return FreeformPosition(position, color_to_move)
