"""Unit tests for /src/chess/oracle.py (the python-chess adapter)"""

import pytest

from src.chess.fen import STARTING_FEN
from src.chess.moves import Move
from src.chess.oracle import ChessOracle
from src.chess.square import Square
from src.core.exceptions import OracleError, OracleRejectedMove, OracleRejectedPosition
from src.core.shared_types import Color, PieceType, Termination

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
BARE_KINGS = "8/8/8/4k3/8/8/8/4K3 w - - 0 1"
PROMOTION = "8/P7/8/8/8/8/8/k1K5 w - - 0 1"


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def test_load_starting_position(oracle: ChessOracle) -> None:
    handle = oracle.load(STARTING_FEN)
    assert oracle.current_fen(handle) == STARTING_FEN
    assert oracle.side_to_move(handle) == Color.WHITE
    assert oracle.termination(handle) == Termination.ONGOING


@pytest.mark.parametrize(
    "fen",
    [
        "not a fen at all",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",  # missing a rank
        "8/8/8/8/8/8/8/8 w - - 0 1",  # no kings
        "4k3/8/8/8/8/8/8/K3K3 w - - 0 1",  # two white kings
        "4k3/4R3/8/8/8/8/8/4K3 w - - 0 1",  # the side that is not to move is in check
        "P3k3/8/8/8/8/8/8/4K3 w - - 0 1",  # pawn on the back rank
    ],
)
def test_rejected_positions(oracle: ChessOracle, fen: str) -> None:
    with pytest.raises(OracleRejectedPosition):
        oracle.load(fen)


def test_unsupported_castling_rights_are_dropped(oracle: ChessOracle) -> None:
    """No rooks on the board: the rights cannot be used, but the position itself is fine"""
    handle = oracle.load("4k3/8/8/8/8/8/8/4K3 w KQkq - 0 1")
    assert oracle.current_fen(handle) == "4k3/8/8/8/8/8/8/4K3 w - - 0 1"


def test_impossible_en_passant_square_is_dropped(oracle: ChessOracle) -> None:
    """The black pawn cannot have come from d7: there is a knight"""
    handle = oracle.load("4k3/3n4/8/3pP3/8/8/8/4K3 w - d6 0 1")
    assert oracle.current_fen(handle) == "4k3/3n4/8/3pP3/8/8/8/4K3 w - - 0 1"
    assert Move.from_uci("e5d6") not in oracle.legal_moves(handle)


def test_legal_moves_starting_position(oracle: ChessOracle) -> None:
    handle = oracle.load(STARTING_FEN)
    moves = oracle.legal_moves(handle)
    assert len(moves) == 20
    assert Move.from_uci("e2e4") in moves
    assert "Nf3" in {move.description for move in moves}


def test_apply_move(oracle: ChessOracle) -> None:
    handle = oracle.load(STARTING_FEN)
    move = oracle.apply_move(handle, sq("e2"), sq("e4"))
    assert move == Move.from_uci("e2e4")
    assert move.description == "e4"
    assert oracle.side_to_move(handle) == Color.BLACK
    assert oracle.current_fen(handle).startswith("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b")


@pytest.mark.parametrize("from_sq, to_sq", [("e2", "e5"), ("e7", "e5"), ("d4", "d5"), ("e1", "e2")])
def test_illegal_move_is_rejected(oracle: ChessOracle, from_sq: str, to_sq: str) -> None:
    handle = oracle.load(STARTING_FEN)
    with pytest.raises(OracleRejectedMove):
        oracle.apply_move(handle, sq(from_sq), sq(to_sq))
    assert oracle.current_fen(handle) == STARTING_FEN


@pytest.mark.parametrize(
    "hint, expected",
    [
        (None, PieceType.QUEEN),
        (PieceType.QUEEN, PieceType.QUEEN),
        (PieceType.KNIGHT, PieceType.KNIGHT),
        (PieceType.ROOK, PieceType.ROOK),
    ],
)
def test_promotion_hint(oracle: ChessOracle, hint: PieceType | None, expected: PieceType) -> None:
    handle = oracle.load(PROMOTION)
    move = oracle.apply_move(handle, sq("a7"), sq("a8"), hint)
    assert move.promote_to == expected


def test_undo_move(oracle: ChessOracle) -> None:
    handle = oracle.load(STARTING_FEN)
    oracle.apply_move(handle, sq("g1"), sq("f3"))
    undone = oracle.undo_move(handle)
    assert undone == Move.from_uci("g1f3")
    assert oracle.current_fen(handle) == STARTING_FEN


def test_undo_without_moves(oracle: ChessOracle) -> None:
    handle = oracle.load(STARTING_FEN)
    with pytest.raises(OracleError):
        oracle.undo_move(handle)


@pytest.mark.parametrize(
    "fen, termination",
    [
        (STARTING_FEN, Termination.ONGOING),
        (FOOLS_MATE, Termination.CHECKMATE),
        (STALEMATE, Termination.STALEMATE),
        (BARE_KINGS, Termination.DRAW),  # insufficient material
    ],
)
def test_termination(oracle: ChessOracle, fen: str, termination: Termination) -> None:
    assert oracle.termination(oracle.load(fen)) == termination


def test_no_legal_moves_when_mated(oracle: ChessOracle) -> None:
    assert oracle.legal_moves(oracle.load(FOOLS_MATE)) == []
