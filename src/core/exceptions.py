"""
Exceptions raised across layers.

The domain layer (codec, oracle adapter, transport) raises these; the Session layer catches them at its boundary
so that the session always falls back to its last-known-good position.
"""


class AnyChessError(Exception):
    """Base class for every error raised by this package."""


# --- Position codec ---
class PositionValidationError(AnyChessError):
    """The position (string or mapping) cannot be turned into a valid exchange string / position."""


class MalformedExchangeString(PositionValidationError):
    """Not enough (or unreadable) space-separated fields in a FEN string."""


class MalformedPlacement(PositionValidationError):
    """The placement field (or a freeform piece list) contains something that is not a piece / square."""


class PawnOnBackRank(PositionValidationError):
    def __init__(self, rank: int) -> None:
        self.rank = rank
        super().__init__(f"Pawns cannot stand on rank {rank}.")


class InvalidKingCount(PositionValidationError):
    def __init__(self, white: int, black: int) -> None:
        self.white = white
        self.black = black
        super().__init__(
            f"Each side needs exactly one king (white: {white}, black: {black})."
        )


# --- Editor ---
class EditorClosedError(AnyChessError):
    """Place/erase/commit on an edit that was already committed or cancelled."""


# --- Rule oracle ---
class OracleError(AnyChessError):
    pass


class OracleRejectedMove(OracleError):
    """Illegal move attempt. Recovered locally: the drag/drop is refused."""


class OracleRejectedPosition(OracleError):
    """Malformed or illegal position handed to the rule oracle."""


# --- Synchronization ---
class ChannelUnavailable(AnyChessError):
    """No realtime transport configured. Online play is hidden rather than reported."""
