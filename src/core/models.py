"""
Boundary layer data model(s).

These objects can be used to communicate with the Services.
Hence, both the API layer (higher) and the db layer (lower) will use model(s) defined here to send to/receive from a Service
(Decouples the data model specific to the DB layer or the API layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class CommentModel:
    """Transport-safe representation of a comment that is about to be stored. Only `comment` is required."""

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


@dataclass
class StoredComment(CommentModel):
    """A comment as read back from storage: now also carries the id and timestamp assigned by the database."""

    id: int = 0
    created_at: Optional[datetime] = None


@dataclass
class GameStatsModel:
    """Aggregate over all comments of one game. Computed per query, never stored."""

    total_comments: int
    avg_rating: Optional[float]
    moves_with_comments: int
