"""Unit tests for /src/chess/editor.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.editor import PositionEditor
from src.chess.fen import STARTING_FEN
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import EditorClosedError, InvalidKingCount, PawnOnBackRank
from src.core.shared_types import Color


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def test_empty_editor() -> None:
    editor = PositionEditor()
    assert editor.board.position == {}
    assert editor.color_to_move == Color.WHITE
    assert not any(editor.castling_rights.values())


def test_prefilled_from_fen() -> None:
    editor = PositionEditor.from_fen(STARTING_FEN)
    assert len(editor.board.position) == 32
    assert all(editor.castling_rights.values())
    assert editor.commit() == STARTING_FEN


def test_place_and_erase() -> None:
    editor = PositionEditor()
    editor.place(sq("d1"), Piece.from_code("wK"))
    editor.place(sq("d8"), Piece.from_code("bK"))
    editor.place(sq("a5"), Piece.from_code("wQ"))
    editor.erase(sq("a5"))
    editor.erase(sq("h3"))  # already empty
    assert editor.board.to_algebraic() == {"d1": "wK", "d8": "bK"}
    assert editor.commit() == "3k4/8/8/8/8/8/8/3K4 w - - 0 1"


def test_castling_rights_and_turn() -> None:
    editor = PositionEditor.from_fen("r3k3/8/8/8/8/8/8/4K2R w - - 0 1")
    editor.set_castling_right(CastlingDirection.WHITE_KING_SIDE, True)
    editor.set_castling_right(CastlingDirection.BLACK_QUEEN_SIDE, True)
    editor.set_color_to_move(Color.BLACK)
    assert editor.commit() == "r3k3/8/8/8/8/8/8/4K2R b Kq - 0 1"


def test_failed_commit_keeps_editor_open() -> None:
    """Fix the position and try again"""
    editor = PositionEditor()
    editor.place(sq("e1"), Piece.from_code("wK"))
    with pytest.raises(InvalidKingCount):
        editor.commit()
    assert editor.is_open

    editor.place(sq("b8"), Piece.from_code("wP"))
    with pytest.raises(PawnOnBackRank):
        editor.commit()

    editor.erase(sq("b8"))
    editor.place(sq("e8"), Piece.from_code("bK"))
    assert editor.commit() == "4k3/8/8/8/8/8/8/4K3 w - - 0 1"
    assert not editor.is_open


def test_commit_consumes_the_edit() -> None:
    editor = PositionEditor.from_fen(STARTING_FEN)
    editor.commit()
    with pytest.raises(EditorClosedError):
        editor.place(sq("e4"), Piece.from_code("wP"))
    with pytest.raises(EditorClosedError):
        editor.commit()


def test_cancel_discards_the_scratch_board() -> None:
    editor = PositionEditor.from_fen(STARTING_FEN)
    editor.cancel()
    assert editor.board.position == {}
    with pytest.raises(EditorClosedError):
        editor.commit()
