"""
Orchestration of the annotation store: from API router to the persistence layer (and the reverse direction).

Every operation returns an Envelope. Storage faults never travel further up than this layer: they are logged,
the session is rolled back, and the caller gets a failed envelope with a generic message. Nothing is retried.
"""

import logging
from dataclasses import asdict
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.api.models import (
    CommentResponse,
    CreateCommentRequest,
    Envelope,
    GameStatsResponse,
)
from src.core.exceptions import RepositoryError
from src.core.models import CommentModel, StoredComment
from src.db.repository import CommentRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORAGE_ERRORS = (SQLAlchemyError, RepositoryError)


class AnnotationService:
    """Orchestration of layers for game comments."""

    def __init__(self, repository: CommentRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def add_comment(self, request: CreateCommentRequest) -> Envelope[CommentResponse]:
        """Store a comment. Optional fields are stored exactly as given."""
        if not request.comment.strip():
            return Envelope(success=False, error="Comment is required")

        comment = CommentModel(**request.model_dump())
        return self._run(
            lambda: self._to_response(self.repo.add_comment(comment)),
            failure="Failed to add comment",
            context={"game_id": request.game_id, "move_number": request.move_number},
        )

    def list_comments(
        self, game_id: Optional[str] = None
    ) -> Envelope[list[CommentResponse]]:
        """Comments of one game, or the most recent ones over all games when no (or an empty) game id is given."""
        game_id = game_id or None
        return self._run(
            lambda: [
                self._to_response(c) for c in self.repo.list_game_comments(game_id)
            ],
            failure="Failed to fetch comments",
            context={"game_id": game_id},
        )

    def list_move_comments(
        self, game_id: str, move_number: int
    ) -> Envelope[list[CommentResponse]]:
        return self._run(
            lambda: [
                self._to_response(c)
                for c in self.repo.list_move_comments(game_id, move_number)
            ],
            failure="Failed to fetch move comments",
            context={"game_id": game_id, "move_number": move_number},
        )

    def game_stats(self, game_id: str) -> Envelope[GameStatsResponse]:
        return self._run(
            lambda: GameStatsResponse(**asdict(self.repo.game_stats(game_id))),
            failure="Failed to fetch game statistics",
            context={"game_id": game_id},
        )

    # -- Internal helpers --
    def _run(
        self, operation: Callable[[], T], failure: str, context: dict
    ) -> Envelope[T]:
        """Wrap the outcome of a repository call in an Envelope."""
        try:
            data = operation()
        except STORAGE_ERRORS:
            logger.exception("%s (%s)", failure, context)
            self._rollback()
            return Envelope(success=False, error=failure)
        return Envelope(success=True, data=data)

    def _rollback(self) -> None:
        try:
            self.repo.rollback()
        except STORAGE_ERRORS:
            logger.exception("Rollback after failed operation failed as well")

    def _to_response(self, comment: StoredComment) -> CommentResponse:
        return CommentResponse(**asdict(comment))
