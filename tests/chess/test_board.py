"""Unit tests for /src/chess/board.py"""

import pytest

from src.chess.board import Board, material_score
from src.chess.fen import STARTING_FEN, decode
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


def test_from_and_to_algebraic() -> None:
    pieces = {"e1": "wK", "e8": "bK", "a7": "wP"}
    board = Board.from_algebraic(pieces)
    assert board.position[Square.from_algebraic("a7")] == Piece(Color.WHITE, PieceType.PAWN)
    assert Square.from_algebraic("a6") not in board.position
    assert board.to_algebraic() == pieces


def test_place_replaces_piece() -> None:
    board = Board.from_algebraic({"d4": "wN"})
    board.place(Square.from_algebraic("d4"), Piece.from_code("bQ"))
    assert board.to_algebraic() == {"d4": "bQ"}


def test_erase() -> None:
    board = Board.from_algebraic({"d4": "wN", "e5": "bP"})
    board.erase(Square.from_algebraic("d4"))
    board.erase(Square.from_algebraic("h8"))  # erasing an empty square is fine
    assert board.to_algebraic() == {"e5": "bP"}


def test_move_piece_captures_by_replacement() -> None:
    """Freeform moves: no rules, the piece on the target square simply disappears"""
    board = Board.from_algebraic({"a1": "wR", "a8": "bK"})
    moved = board.move_piece(Square.from_algebraic("a1"), Square.from_algebraic("a8"))
    assert moved == Piece.from_code("wR")
    assert board.to_algebraic() == {"a8": "wR"}


def test_move_from_empty_square() -> None:
    board = Board.from_algebraic({"a1": "wR"})
    assert board.move_piece(Square.from_algebraic("b1"), Square.from_algebraic("b2")) is None
    assert board.to_algebraic() == {"a1": "wR"}


def test_copy_is_independent() -> None:
    board = Board.from_algebraic({"a1": "wR"})
    copied = board.copy()
    copied.erase(Square.from_algebraic("a1"))
    assert board.to_algebraic() == {"a1": "wR"}


@pytest.mark.parametrize(
    "pieces, expected",
    [
        ({}, 0),
        ({"e1": "wK", "e8": "bK"}, 0),  # kings do not count
        ({"d1": "wQ"}, 900),
        ({"d8": "bQ"}, -900),
        ({"a1": "wR", "b1": "wN", "c1": "wB", "a7": "bP"}, 500 + 320 + 330 - 100),
    ],
)
def test_material_score(pieces: dict[str, str], expected: int) -> None:
    """Positive: white is ahead. Negative: black is ahead"""
    board = Board.from_algebraic(pieces)
    assert material_score(board.position) == expected


def test_starting_position_is_balanced() -> None:
    assert material_score(decode(STARTING_FEN).position) == 0
