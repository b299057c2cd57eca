"""Requests and Response models"""

from datetime import datetime
from typing import Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.board.lobby import normalize_game_code
from src.board.square import BOARD_DIMENSIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, TacticalIdea

DataT = TypeVar("DataT")

# FEN letter of a piece, None for an empty square
Cell = Optional[str]


# --- REQUEST MODELS ---
class JoinGameRequest(BaseModel):
    game_code: str

    @field_validator("game_code")
    @classmethod
    def validate_game_code(cls, value: str) -> str:
        return normalize_game_code(value)


class SquareRequest(BaseModel):
    """A click on the grid. row 0 is the top row (rank 8), col 0 the leftmost column (file a)."""

    row: int
    col: int

    @field_validator("row", "col")
    @classmethod
    def validate_within_board(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Grid coordinate {value} outside of 0-{BOARD_DIMENSIONS[0] - 1}."
            )
        return value


class CreateCommentRequest(BaseModel):
    """
    Only `comment` is required (checked by the service, so that a blank comment comes back as a failed envelope).
    Rating 1-10 and the tactical idea choices are offered by the form but not enforced.
    """

    comment: str
    game_id: Optional[str] = None
    move_number: Optional[int] = None
    rating: Optional[int] = None
    player_side: Optional[str] = None
    tactical_idea: Optional[str] = None
    position: Optional[str] = None
    evaluation: Optional[str] = None
    time_spent: Optional[int] = None
    alternative: Optional[str] = None


# --- RESPONSE MODELS ---
class Envelope(BaseModel, Generic[DataT]):
    """Uniform wrapper for the annotation store: success flag plus either data or an error message."""

    success: bool
    data: Optional[DataT] = None
    error: Optional[str] = None


class MoveRowResponse(BaseModel):
    move_number: int
    white: str
    black: Optional[str] = None


class BoardResponse(BaseModel):
    session_id: UUID
    game_code: str
    grid: list[list[Cell]]
    selected: Optional[str]
    destinations: list[str]
    status: str
    move_history: list[str]
    fen: str
    move_list: list[MoveRowResponse]
    turn: Color
    move_number: int


class CommentResponse(BaseModel):
    id: int
    game_id: Optional[str]
    move_number: Optional[int]
    comment: str
    rating: Optional[int]
    player_side: Optional[str]
    tactical_idea: Optional[str]
    position: Optional[str]
    evaluation: Optional[str]
    time_spent: Optional[int]
    alternative: Optional[str]
    created_at: datetime


class GameStatsResponse(BaseModel):
    total_comments: int
    avg_rating: Optional[float]
    moves_with_comments: int


class CommentOptionsResponse(BaseModel):
    player_sides: list[Color]
    tactical_ideas: list[TacticalIdea]
    rating_min: int
    rating_max: int
