"""The editor form of a position: a sparse mapping of squares to pieces (absent square = empty square)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color

Position = dict[Square, Piece]


@dataclass
class Board:
    position: Position = field(default_factory=dict)

    @classmethod
    def from_algebraic(cls, pieces: dict[str, str]) -> Self:
        """Convenience constructor: {'e1': 'wK', 'e8': 'bK'}"""
        return cls(
            {
                Square.from_algebraic(square): Piece.from_code(code)
                for square, code in pieces.items()
            }
        )

    def to_algebraic(self) -> dict[str, str]:
        return {
            square.to_algebraic(): piece.to_code()
            for square, piece in self.position.items()
        }

    def copy(self) -> Self:
        return type(self)(dict(self.position))

    def place(self, square: Square, piece: Piece) -> None:
        """Put a piece on the square, replacing whatever stood there"""
        self.position[square] = piece

    def erase(self, square: Square) -> None:
        self.position.pop(square, None)

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """
        Freeform move: no rules, a piece on the target square is simply replaced.
        Returns the piece that moved (None if the starting square was empty, in which case nothing happens).
        """
        piece = self.position.pop(from_square, None)
        if piece is not None:
            self.position[to_square] = piece
        return piece

    def clear(self) -> None:
        self.position.clear()


def material_score(position: Position) -> int:
    """Material balance in centipawns: white pieces count positive, black pieces negative"""
    return sum(
        piece.value if piece.color == Color.WHITE else -piece.value
        for piece in position.values()
    )
