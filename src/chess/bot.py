"""
The bot opponent.

Very simple: pick the legal move that maximizes the immediate material gain (one ply, no search).
Moves are shuffled before scanning them, so that among equally good moves the winner is random.
Pass a seeded `random.Random` to get reproducible choices.
"""

import logging
import random
from typing import Optional

from src.chess.board import material_score
from src.chess.fen import decode
from src.chess.moves import Move
from src.chess.oracle import OracleHandle, RuleOracle
from src.core.shared_types import Color

_log = logging.getLogger(__name__)


def orientation(color: Color) -> int:
    """Material scores are from white's point of view. Flip the sign for black."""
    return 1 if color == Color.WHITE else -1


def score_position(oracle: RuleOracle, handle: OracleHandle) -> int:
    return material_score(decode(oracle.current_fen(handle)).position)


def material_delta(
    oracle: RuleOracle, handle: OracleHandle, move: Move, color: Color, base: int
) -> int:
    """Make the move, count the material, and take the move back again"""
    oracle.apply_move(handle, move.from_square, move.to_square, move.promote_to)
    try:
        after = score_position(oracle, handle)
    finally:
        oracle.undo_move(handle)
    return (after - base) * orientation(color)


def select_move(
    fen: str,
    color: Color,
    oracle: RuleOracle,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """
    Choose a move for `color` in the given position.
    ----

    Returns None when there is nothing to play (checkmate, stalemate, or it is not `color`'s turn).
    The engine works on its own oracle handle loaded from the FEN, so whatever the caller holds is never touched.
    """
    rng = rng or random.Random()
    handle = oracle.load(fen)
    if oracle.side_to_move(handle) != color:
        _log.debug("Not %s's turn in %r, no move selected.", color, fen)
        return None

    moves = oracle.legal_moves(handle)
    if not moves:
        return None

    # shuffle for tie-break randomness
    rng.shuffle(moves)

    base = score_position(oracle, handle)
    best: Optional[Move] = None
    best_delta = float("-inf")
    for move in moves:
        delta = material_delta(oracle, handle, move, color, base)
        if delta > best_delta:
            best_delta = delta
            best = move

    _log.debug("Bot (%s) picked %s with material delta %s", color, best, best_delta)
    return best
