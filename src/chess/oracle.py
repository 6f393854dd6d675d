"""
Rule oracle: the component that knows the rules of chess.

We do not implement chess rules ourselves. The rest of the application only talks to the `RuleOracle` protocol,
which is fulfilled here by a thin adapter around python-chess. A handle is whatever the oracle needs to remember
about one position (for python-chess: a `chess.Board`).
"""

import logging
from typing import Any, Optional, Protocol

import chess

from src.chess.moves import Move
from src.chess.pieces import PIECE_TO_FEN
from src.chess.square import Square
from src.core.exceptions import OracleError, OracleRejectedMove, OracleRejectedPosition
from src.core.shared_types import Color, PieceType, Termination

_log = logging.getLogger(__name__)

OracleHandle = Any


class RuleOracle(Protocol):
    """Everything the application needs to know about the rules of chess"""

    def load(self, fen: str) -> OracleHandle:
        """Set up a position. Raises OracleRejectedPosition for malformed / illegal positions."""
        ...

    def legal_moves(self, handle: OracleHandle) -> list[Move]:
        """All legal moves of the side to move."""
        ...

    def apply_move(
        self,
        handle: OracleHandle,
        from_square: Square,
        to_square: Square,
        promotion_hint: Optional[PieceType] = PieceType.QUEEN,
    ) -> Move:
        """Make the move on the handle. Raises OracleRejectedMove if it is not legal."""
        ...

    def undo_move(self, handle: OracleHandle) -> Move:
        """Take back the last move applied to the handle."""
        ...

    def current_fen(self, handle: OracleHandle) -> str: ...

    def side_to_move(self, handle: OracleHandle) -> Color: ...

    def termination(self, handle: OracleHandle) -> Termination: ...


def _to_chess_square(square: Square) -> chess.Square:
    return chess.parse_square(square.to_algebraic())


def _to_chess_piece_type(piece_type: PieceType) -> chess.PieceType:
    return chess.PIECE_SYMBOLS.index(PIECE_TO_FEN[piece_type])


class ChessOracle:
    """RuleOracle implemented with python-chess"""

    def load(self, fen: str) -> chess.Board:
        try:
            board = chess.Board(fen)
        except ValueError as exc:
            raise OracleRejectedPosition(f"Cannot read position: {fen!r}") from exc

        # The editor may hand us castling rights / an en passant square that the piece layout does not support.
        # Those flags are dropped instead of rejecting the whole position.
        status = board.status()
        if status & chess.STATUS_BAD_CASTLING_RIGHTS:
            board.castling_rights = board.clean_castling_rights()
        if status & chess.STATUS_INVALID_EP_SQUARE:
            board.ep_square = None

        if not board.is_valid():
            _log.info("Rejected position %r: %r", fen, board.status())
            raise OracleRejectedPosition(
                f"Illegal position ({board.status()!r}): {fen!r}"
            )
        return board

    def legal_moves(self, handle: chess.Board) -> list[Move]:
        return [self._to_move(handle, move) for move in handle.legal_moves]

    def apply_move(
        self,
        handle: chess.Board,
        from_square: Square,
        to_square: Square,
        promotion_hint: Optional[PieceType] = PieceType.QUEEN,
    ) -> Move:
        from_idx = _to_chess_square(from_square)
        to_idx = _to_chess_square(to_square)
        candidates = [
            move
            for move in handle.legal_moves
            if move.from_square == from_idx and move.to_square == to_idx
        ]
        if not candidates:
            raise OracleRejectedMove(f"Move not allowed: {from_square}{to_square}")

        # several candidates only for pawn promotions: pick the requested piece (a queen unless told otherwise)
        promotion = _to_chess_piece_type(promotion_hint or PieceType.QUEEN)
        chosen = next(
            (move for move in candidates if move.promotion == promotion),
            candidates[0],
        )
        accepted = self._to_move(handle, chosen)
        handle.push(chosen)
        return accepted

    def undo_move(self, handle: chess.Board) -> Move:
        try:
            move = handle.pop()
        except IndexError as exc:
            raise OracleError("No move to take back.") from exc
        return Move.from_uci(move.uci())

    def current_fen(self, handle: chess.Board) -> str:
        return handle.fen()

    def side_to_move(self, handle: chess.Board) -> Color:
        return Color.WHITE if handle.turn == chess.WHITE else Color.BLACK

    def termination(self, handle: chess.Board) -> Termination:
        if handle.is_checkmate():
            return Termination.CHECKMATE
        if handle.is_stalemate():
            return Termination.STALEMATE
        if handle.is_game_over():
            return Termination.DRAW
        return Termination.ONGOING

    def _to_move(self, board: chess.Board, move: chess.Move) -> Move:
        """SAN needs the position before the move is made"""
        return Move.from_uci(move.uci(), description=board.san(move))
