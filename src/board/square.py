"""
A square on the board

(placed in its own module as the controller, the API models and the tests all need to convert between UI grid coordinates and board notation)
"""

from __future__ import annotations

from dataclasses import dataclass

import chess

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    @classmethod
    def from_grid(cls, row: int, col: int) -> Square:
        """
        Grid coordinates as displayed: row 0 is the top row (rank 8), col 0 the leftmost column (file a).
        So (0, 0) -> a8 and (7, 7) -> h1.
        """
        return cls(col + 1, BOARD_DIMENSIONS[1] - row)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def to_grid(self) -> tuple[int, int]:
        """Reverse of from_grid: (row, col)"""
        return BOARD_DIMENSIONS[1] - self.rank, self.file - 1

    @property
    def index(self) -> chess.Square:
        """Square index as used by the rules library (a1 = 0, h8 = 63)."""
        return chess.square(self.file - 1, self.rank - 1)

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )
