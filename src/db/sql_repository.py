"""Implementation of (Comment)Repository using SQLAlchemy"""

from typing import Optional

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.orm import Session

from src.core.models import CommentModel, GameStatsModel, StoredComment
from src.db.repository import RECENT_COMMENTS_LIMIT
from src.db.schema import DBGameComment


class SQLCommentRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def add_comment(self, comment: CommentModel) -> StoredComment:
        """Store a new comment and return it with the id and timestamp assigned by the database."""
        comment_db = DBGameComment(
            game_id=comment.game_id,
            move_number=comment.move_number,
            comment=comment.comment,
            rating=comment.rating,
            player_side=comment.player_side,
            tactical_idea=comment.tactical_idea,
            position=comment.position,
            evaluation=comment.evaluation,
            time_spent=comment.time_spent,
            alternative=comment.alternative,
        )
        self.db.add(comment_db)
        self.db.commit()
        self.db.refresh(comment_db)
        return self._to_model(comment_db)

    def list_game_comments(self, game_id: Optional[str]) -> list[StoredComment]:
        """
        With a game id: every comment of that game, by move number (comments without one last), newest first per move.
        Without: the most recent comments over all games, capped at RECENT_COMMENTS_LIMIT.
        """
        if game_id is not None:
            query = (
                select(DBGameComment)
                .where(DBGameComment.game_id == game_id)
                .order_by(
                    DBGameComment.move_number.asc().nulls_last(),
                    *self._newest_first(),
                )
            )
        else:
            query = (
                select(DBGameComment)
                .order_by(*self._newest_first())
                .limit(RECENT_COMMENTS_LIMIT)
            )
        return self._fetch_comments(query)

    def list_move_comments(self, game_id: str, move_number: int) -> list[StoredComment]:
        """Comments on one move of one game, newest first."""
        query = (
            select(DBGameComment)
            .where(
                DBGameComment.game_id == game_id,
                DBGameComment.move_number == move_number,
            )
            .order_by(*self._newest_first())
        )
        return self._fetch_comments(query)

    def game_stats(self, game_id: str) -> GameStatsModel:
        """
        COUNT / AVG / COUNT DISTINCT in one statement.
        AVG ignores unrated comments and gives NULL when none are rated. COUNT DISTINCT ignores NULL move numbers.
        """
        query = select(
            func.count(DBGameComment.id),
            func.avg(DBGameComment.rating),
            func.count(distinct(DBGameComment.move_number)),
        ).where(DBGameComment.game_id == game_id)
        total, avg_rating, moves = self.db.execute(query).one()
        return GameStatsModel(
            total_comments=total,
            avg_rating=float(avg_rating) if avg_rating is not None else None,
            moves_with_comments=moves,
        )

    def rollback(self) -> None:
        self.db.rollback()

    # --- Internal helpers ---
    def _newest_first(self) -> tuple:
        # created_at only has second resolution on some backends: break ties on the (increasing) id
        return DBGameComment.created_at.desc(), DBGameComment.id.desc()

    def _fetch_comments(self, query: Select) -> list[StoredComment]:
        return [self._to_model(comment_db) for comment_db in self.db.scalars(query)]

    def _to_model(self, comment_db: DBGameComment) -> StoredComment:
        """Convert SQLAlchemy model to data transfer model."""
        return StoredComment(
            id=comment_db.id,
            created_at=comment_db.created_at,
            game_id=comment_db.game_id,
            move_number=comment_db.move_number,
            comment=comment_db.comment,
            rating=comment_db.rating,
            player_side=comment_db.player_side,
            tactical_idea=comment_db.tactical_idea,
            position=comment_db.position,
            evaluation=comment_db.evaluation,
            time_spent=comment_db.time_spent,
            alternative=comment_db.alternative,
        )
