"""Moves as the rest of the application sees them (the rule oracle decides which ones are legal)."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN
from src.chess.square import Square
from src.core.shared_types import PieceType


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    # human readable notation (SAN) as given by the oracle. Not part of the identity of a move.
    description: str = field(default="", compare=False)

    @classmethod
    def from_uci(cls, uci: str, description: str = "") -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        return cls(from_sq, to_sq, promote_to, description)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def __str__(self) -> str:
        return self.description or self.to_uci()
