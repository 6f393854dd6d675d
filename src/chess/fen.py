"""
Position codec: editor form (square -> piece mapping) <-> FEN string.

FEN, or Forsyth-Edwards Notation, is the standard notation for describing a chess position.
It is the only thing we hand to the rule oracle and send to the other player.

<board position> <active color> <castling rights> <en passant square> <half move clock> <number of turns>

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

The codec does not know about the move history: every position it writes starts a fresh game clock ("0 1").
"""

from typing import NamedTuple, Optional

from src.chess.board import Position
from src.chess.castling import CastlingRights, castling_from_fen, castling_to_fen
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import (
    InvalidKingCount,
    MalformedExchangeString,
    MalformedPlacement,
    PawnOnBackRank,
)
from src.core.shared_types import Color, PieceType

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_DIMENSIONS[1])

HALF_MOVE_CLOCK = 0
NUM_TURNS = 1
BACK_RANKS = (1, BOARD_DIMENSIONS[1])


class DecodedPosition(NamedTuple):
    position: Position
    color_to_move: Color
    castling_rights: CastlingRights


# --- DECODING ---
def decode(fen: str) -> DecodedPosition:
    """Parse (at least) the first three fields of a FEN string: placement, active color and castling rights."""
    parts = fen.split()
    if len(parts) < 3:
        raise MalformedExchangeString(
            f"Expected at least 3 space-separated fields, got {len(parts)}: {fen!r}"
        )
    placement, active_color, castling_str = parts[:3]

    position = decode_placement(placement)

    if active_color not in {"w", "b"}:
        raise MalformedExchangeString(f"Invalid active color: {active_color!r}")
    color_to_move = Color.from_code(active_color)

    castling_rights = castling_from_fen(castling_str)
    return DecodedPosition(position, color_to_move, castling_rights)


def decode_placement(placement: str) -> Position:
    """
    Read the board part of the FEN string.

    * ranks are read from top (8th) to bottom (1st), separated by a '/'
    * within a rank, the first character is the a-file
    * a digit denotes that many empty squares, a letter a piece (capital letters for white)
    """
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = placement.split("/")
    if len(rank_fens) != num_ranks:
        raise MalformedPlacement(
            f"Expected {num_ranks} ranks in placement, got {len(rank_fens)}: {placement!r}"
        )

    position: Position = {}
    for rank_idx, rank_fen in enumerate(rank_fens):
        rank = num_ranks - rank_idx
        file = 1
        for character in rank_fen:
            if character.isdigit():
                if character == "0":
                    raise MalformedPlacement(f"Empty-square count 0 on rank {rank}: {rank_fen!r}")
                file += int(character)
                continue
            if file > num_files:
                raise MalformedPlacement(f"Too many squares on rank {rank}: {rank_fen!r}")
            position[Square(file, rank)] = Piece.from_fen(character)
            file += 1

        # make sure you are describing a correctly sized board
        if file - 1 != num_files:
            raise MalformedPlacement(
                f"Rank {rank} should describe {num_files} squares: {rank_fen!r}"
            )
    return position


# --- ENCODING ---
def encode(
    position: Position, color_to_move: Color, castling_rights: CastlingRights
) -> str:
    """
    Validate the position and write the FEN string.
    ----

    Raises PawnOnBackRank as soon as a pawn is found on the 1st/8th rank, and InvalidKingCount after the scan
    unless both sides have exactly one king. Nothing is returned in either case.
    """
    for square in position:
        if not square.is_within_bounds():
            raise MalformedPlacement(f"Square outside of the board: {square!r}")

    placement = encode_placement(position)
    castling_str = castling_to_fen(castling_rights)

    en_passant_square = infer_en_passant_square(position, color_to_move)
    en_passant_algebraic = (
        en_passant_square.to_algebraic() if en_passant_square is not None else "-"
    )
    return f"{placement} {color_to_move.code} {castling_str} {en_passant_algebraic} {HALF_MOVE_CLOCK} {NUM_TURNS}"


def encode_placement(position: Position) -> str:
    """Ranks are separated by slashes, consecutive empty squares are written as a count."""
    num_files, num_ranks = BOARD_DIMENSIONS
    king_count = {Color.WHITE: 0, Color.BLACK: 0}

    rank_fens: list[str] = []
    for rank in range(num_ranks, 0, -1):
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, num_files + 1):
            piece = position.get(Square(file, rank))
            if piece is None:
                empty_count += 1
                continue

            if piece.type == PieceType.PAWN and rank in BACK_RANKS:
                raise PawnOnBackRank(rank)
            if piece.type == PieceType.KING:
                king_count[piece.color] += 1

            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        rank_fens.append("".join(fen_characters))

    if king_count[Color.WHITE] != 1 or king_count[Color.BLACK] != 1:
        raise InvalidKingCount(king_count[Color.WHITE], king_count[Color.BLACK])
    return "/".join(rank_fens)


# --- EN PASSANT ---
def infer_en_passant_square(
    position: Position, color_to_move: Color
) -> Optional[Square]:
    """
    Guess the en passant target square from the piece layout.
    ----

    The editor has no move history, so we look for a pawn of the opponent that *could* just have made a double step:
    * it stands on its 4th rank (5th for a black pawn, 4th for a white pawn)
    * the square it skipped over is empty
    * a pawn of the side to move stands right next to it, ready to capture

    Only if there is exactly one such pawn we return the square behind it. With several candidates we cannot know which
    pawn moved last, so no en passant square is given at all.
    """
    opponent = color_to_move.opponent
    if color_to_move == Color.WHITE:
        pawn_rank, target_rank = 5, 6
    else:
        pawn_rank, target_rank = 4, 3

    opponent_pawn = Piece(opponent, PieceType.PAWN)
    capturing_pawn = Piece(color_to_move, PieceType.PAWN)

    candidates: list[Square] = []
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        pawn_square = Square(file, pawn_rank)
        if position.get(pawn_square) != opponent_pawn:
            continue

        target = Square(file, target_rank)
        if target in position:
            continue

        neighbors = [pawn_square.offset(d_file, 0) for d_file in (-1, 1)]
        if any(
            neighbor is not None and position.get(neighbor) == capturing_pawn
            for neighbor in neighbors
        ):
            candidates.append(target)

    return candidates[0] if len(candidates) == 1 else None
