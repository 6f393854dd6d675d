"""
Position editor.

Scratch area for setting up a position: place and erase pieces freely (anything goes, also illegal setups),
and only validate when the edit is committed. Cancelling simply drops the scratch board.
"""

from dataclasses import dataclass, field
from typing import Self

from src.chess.board import Board
from src.chess.castling import CastlingDirection, CastlingRights, no_castling_rights
from src.chess.fen import decode, encode
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import EditorClosedError
from src.core.shared_types import Color


@dataclass
class PositionEditor:
    board: Board = field(default_factory=Board)
    color_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=no_castling_rights)
    is_open: bool = True

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Pre-fill the editor with the current (validated) position"""
        position, color_to_move, castling_rights = decode(fen)
        return cls(Board(position), color_to_move, castling_rights)

    def place(self, square: Square, piece: Piece) -> None:
        self._assert_open()
        self.board.place(square, piece)

    def erase(self, square: Square) -> None:
        self._assert_open()
        self.board.erase(square)

    def set_castling_right(self, direction: CastlingDirection, allowed: bool) -> None:
        self._assert_open()
        self.castling_rights[direction] = allowed

    def set_color_to_move(self, color: Color) -> None:
        self._assert_open()
        self.color_to_move = color

    def commit(self) -> str:
        """
        Validate and serialize the scratch position into a FEN string.
        ----

        The editor is only closed (consumed) when this succeeds. On a validation error it stays open, so the
        caller can decide to fix the position or to keep it as a sandbox position.
        """
        self._assert_open()
        fen = encode(self.board.position, self.color_to_move, self.castling_rights)
        self.is_open = False
        return fen

    def cancel(self) -> None:
        self.board.clear()
        self.is_open = False

    def _assert_open(self) -> None:
        if not self.is_open:
            raise EditorClosedError("The edit has already been committed or cancelled.")
