"""Castling rights. Part of the session state: they cannot be derived from where the pieces stand."""

from enum import Enum

from src.core.exceptions import MalformedExchangeString


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

CastlingRights = dict[CastlingDirection, bool]


def no_castling_rights() -> CastlingRights:
    return {direction: False for direction in CastlingDirection}


def castling_from_fen(castle_fen: str) -> CastlingRights:
    """parse the part of the FEN string that encodes castling rights"""
    if castle_fen != "-" and (
        not castle_fen
        or any(c not in "KQkq" for c in castle_fen)
        or len(set(castle_fen)) != len(castle_fen)
    ):
        raise MalformedExchangeString(f"Invalid castling field: {castle_fen!r}")
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: CastlingRights) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [
            direction.value
            for direction in CASTLING_ORDER
            if castling_rights.get(direction, False)
        ]
    )
    return castling_chars or "-"
