"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

from src.core.exceptions import MalformedPlacement

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_valid_square(sq):
            raise MalformedPlacement(f"Not a square on the board: {sq!r}")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def __str__(self) -> str:
        return self.to_algebraic()

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, d_file: int, d_rank: int) -> Optional[Square]:
        """The square shifted by the given vector, or None if that falls off the board"""
        shifted = Square(self.file + d_file, self.rank + d_rank)
        return shifted if shifted.is_within_bounds() else None


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(square) != 2:
        return False
    file_char, rank_char = square[0], square[1]
    if file_char not in FILE_NAMES:
        return False
    if not rank_char.isdigit():
        return False
    return 1 <= int(rank_char) <= BOARD_DIMENSIONS[1]
