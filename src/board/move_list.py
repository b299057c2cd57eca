"""Pairs a flat list of half-moves into numbered rows for the move list view."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MoveRow:
    move_number: int
    white: str
    black: Optional[str] = None


def format_move_list(moves: list[str]) -> list[MoveRow]:
    """['e4', 'e5', 'Nf3'] -> [1. e4 e5, 2. Nf3]"""
    return [
        MoveRow(
            move_number=i // 2 + 1,
            white=moves[i],
            black=moves[i + 1] if i + 1 < len(moves) else None,
        )
        for i in range(0, len(moves), 2)
    ]
