"""Protocol repository (implemented with SQLAlchemy in sql_repository.py, mocked with a dictionary in the tests)"""

from typing import Optional, Protocol

from src.core.models import CommentModel, GameStatsModel, StoredComment

# The global listing (no game id given) never returns more than this many comments.
RECENT_COMMENTS_LIMIT = 50


class CommentRepository(Protocol):
    """Persistence layer orchestration"""

    def add_comment(self, comment: CommentModel) -> StoredComment:
        """Store a new comment and return it with the id and timestamp assigned by the database."""
        ...

    def list_game_comments(self, game_id: Optional[str]) -> list[StoredComment]:
        """All comments of one game (by move number, then newest first), or the most recent ones over all games."""
        ...

    def list_move_comments(self, game_id: str, move_number: int) -> list[StoredComment]:
        """Comments on one move of one game, newest first."""
        ...

    def game_stats(self, game_id: str) -> GameStatsModel:
        """Aggregate over the comments of one game."""
        ...

    def rollback(self) -> None:
        """Discard whatever a failed operation left behind."""
        ...
