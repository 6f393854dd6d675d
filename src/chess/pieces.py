"""Defines the chess pieces and the tables that translate them to/from text."""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import MalformedPlacement
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Centipawns. The King's worth does not count towards the material balance.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}


@dataclass(frozen=True)
class Piece:
    color: Color
    type: PieceType

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if len(character) != 1 or character.lower() not in FEN_TO_PIECE:
            raise MalformedPlacement(f"Unknown piece symbol: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(color, FEN_TO_PIECE[character.lower()])

    def to_fen(self) -> str:
        symbol = PIECE_TO_FEN[self.type]
        return symbol.upper() if self.color == Color.WHITE else symbol

    @classmethod
    def from_code(cls, code: str) -> Self:
        """
        Palette code: color letter + upper case piece letter.

        ex) 'wK' is the white king, 'bP' a black pawn.
        """
        if len(code) != 2 or code[0] not in "wb" or code[1] not in "KQRBNP":
            raise MalformedPlacement(f"Unknown piece code: {code!r}")
        return cls(Color.from_code(code[0]), FEN_TO_PIECE[code[1].lower()])

    def to_code(self) -> str:
        return f"{self.color.code}{PIECE_TO_FEN[self.type].upper()}"

