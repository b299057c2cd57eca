"""Unit tests for src/services/annotation_service.py"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from src.core.exceptions import StorageNotConfiguredError
from src.core.models import CommentModel, GameStatsModel, StoredComment
from src.services.annotation_service import (
    AnnotationService,
    CommentResponse,
    CreateCommentRequest,
    Envelope,
    GameStatsResponse,
)

GAME = "ABC123"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the CommentRepository using a list of stored comments."""

    def __init__(self) -> None:
        self._comments: list[StoredComment] = []
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def add_comment(self, comment: CommentModel) -> StoredComment:
        self._clock += timedelta(seconds=1)
        stored = StoredComment(
            **vars(comment), id=len(self._comments) + 1, created_at=self._clock
        )
        self._comments.append(stored)
        return stored

    def list_game_comments(self, game_id: Optional[str]) -> list[StoredComment]:
        newest_first = sorted(self._comments, key=lambda c: c.id, reverse=True)
        if game_id is None:
            return newest_first[:50]
        return [c for c in newest_first if c.game_id == game_id]

    def list_move_comments(self, game_id: str, move_number: int) -> list[StoredComment]:
        return [
            c
            for c in self.list_game_comments(game_id)
            if c.move_number == move_number
        ]

    def game_stats(self, game_id: str) -> GameStatsModel:
        comments = [c for c in self._comments if c.game_id == game_id]
        ratings = [c.rating for c in comments if c.rating is not None]
        return GameStatsModel(
            total_comments=len(comments),
            avg_rating=sum(ratings) / len(ratings) if ratings else None,
            moves_with_comments=len(
                {c.move_number for c in comments if c.move_number is not None}
            ),
        )

    def rollback(self) -> None:
        pass

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._comments.clear()


class BrokenRepository:
    """Every storage call fails like an unreachable database would."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.rollbacks = 0

    def add_comment(self, comment: CommentModel) -> StoredComment:
        raise self.error

    def list_game_comments(self, game_id: Optional[str]) -> list[StoredComment]:
        raise self.error

    def list_move_comments(self, game_id: str, move_number: int) -> list[StoredComment]:
        raise self.error

    def game_stats(self, game_id: str) -> GameStatsModel:
        raise self.error

    def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


# --- SERVICE - ADD COMMENT ---
def test_add_comment(mock_repository: MockRepository) -> None:
    service = AnnotationService(mock_repository)
    request = CreateCommentRequest(
        comment="Pin on the e-file.", game_id=GAME, move_number=14, rating=6
    )
    response = service.add_comment(request)

    assert isinstance(response, Envelope)
    assert response.success
    assert response.error is None
    assert isinstance(response.data, CommentResponse)
    assert response.data.id == 1
    assert response.data.created_at is not None
    assert response.data.comment == "Pin on the e-file."
    assert response.data.move_number == 14
    assert response.data.rating == 6
    assert response.data.player_side is None


def test_add_comment_only_text_then_list(mock_repository: MockRepository) -> None:
    service = AnnotationService(mock_repository)
    service.add_comment(CreateCommentRequest(comment="Just a thought", game_id=GAME))

    listed = service.list_comments(GAME)
    assert listed.success
    assert listed.data is not None and len(listed.data) == 1
    (comment,) = listed.data
    assert comment.id is not None
    assert comment.created_at is not None
    assert comment.move_number is None
    assert comment.rating is None
    assert comment.tactical_idea is None
    assert comment.alternative is None


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_comment_is_rejected(mock_repository: MockRepository, text: str) -> None:
    service = AnnotationService(mock_repository)
    response = service.add_comment(CreateCommentRequest(comment=text, game_id=GAME))
    assert not response.success
    assert response.error == "Comment is required"
    assert response.data is None
    # nothing stored
    assert service.list_comments(GAME).data == []


def test_rating_and_tactical_idea_not_enforced(mock_repository: MockRepository) -> None:
    """Form hints only: storage accepts whatever it gets."""
    service = AnnotationService(mock_repository)
    response = service.add_comment(
        CreateCommentRequest(comment="?!", rating=42, tactical_idea="windmill")
    )
    assert response.success
    assert response.data is not None
    assert response.data.rating == 42
    assert response.data.tactical_idea == "windmill"


# --- SERVICE - LISTS ---
def test_list_comments_without_game(mock_repository: MockRepository) -> None:
    service = AnnotationService(mock_repository)
    for i in range(3):
        service.add_comment(CreateCommentRequest(comment=f"c{i}", game_id=f"G{i}"))

    response = service.list_comments()
    assert response.success
    assert [c.comment for c in response.data] == ["c2", "c1", "c0"]

    # an empty game id is the same as none
    assert service.list_comments("") == response


def test_list_move_comments(mock_repository: MockRepository) -> None:
    service = AnnotationService(mock_repository)
    service.add_comment(CreateCommentRequest(comment="a", game_id=GAME, move_number=3))
    service.add_comment(CreateCommentRequest(comment="b", game_id=GAME, move_number=4))
    service.add_comment(CreateCommentRequest(comment="c", game_id=GAME, move_number=3))

    response = service.list_move_comments(GAME, 3)
    assert response.success
    assert [c.comment for c in response.data] == ["c", "a"]


# --- SERVICE - STATS ---
def test_game_stats(mock_repository: MockRepository) -> None:
    service = AnnotationService(mock_repository)
    service.add_comment(CreateCommentRequest(comment="a", game_id=GAME, move_number=1, rating=3))
    service.add_comment(CreateCommentRequest(comment="b", game_id=GAME, move_number=2, rating=7))
    service.add_comment(CreateCommentRequest(comment="c", game_id=GAME))

    response = service.game_stats(GAME)
    assert response.success
    assert response.data == GameStatsResponse(
        total_comments=3, avg_rating=5.0, moves_with_comments=2
    )


# --- SERVICE - STORAGE FAILURES ---
@pytest.mark.parametrize(
    "error",
    [
        SQLAlchemyError("connection refused"),
        OperationalError("SELECT 1", {}, Exception("server closed the connection")),
        StorageNotConfiguredError("no url"),
    ],
)
def test_storage_errors_become_failed_envelopes(
    error: Exception, caplog: pytest.LogCaptureFixture
) -> None:
    repo = BrokenRepository(error)
    service = AnnotationService(repo)

    with caplog.at_level(logging.ERROR):
        results = [
            service.add_comment(CreateCommentRequest(comment="x", game_id=GAME)),
            service.list_comments(GAME),
            service.list_comments(),
            service.list_move_comments(GAME, 1),
            service.game_stats(GAME),
        ]

    assert all(not r.success for r in results)
    assert all(r.data is None for r in results)
    assert [r.error for r in results] == [
        "Failed to add comment",
        "Failed to fetch comments",
        "Failed to fetch comments",
        "Failed to fetch move comments",
        "Failed to fetch game statistics",
    ]
    # no retries: one rollback per failed call
    assert repo.rollbacks == len(results)
    assert "Failed to add comment" in caplog.text
    assert GAME in caplog.text


def test_unexpected_errors_are_not_swallowed() -> None:
    """Only storage faults are turned into envelopes. Bugs still surface."""
    service = AnnotationService(BrokenRepository(KeyError("bug")))
    with pytest.raises(KeyError):
        service.game_stats(GAME)
