"""HTTP routes. Thin: validate the request, hand it to a service, return what the service returns."""

from typing import Generator, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from src.api.models import (
    BoardResponse,
    CommentOptionsResponse,
    CommentResponse,
    CreateCommentRequest,
    Envelope,
    GameStatsResponse,
    JoinGameRequest,
    SquareRequest,
)
from src.core.shared_types import RATING_RANGE, Color, TacticalIdea
from src.db.sql_repository import SQLCommentRepository
from src.services.annotation_service import AnnotationService
from src.services.board_service import BoardService

router = APIRouter(prefix="/api")


# --- Dependencies ---
def get_db(request: Request) -> Generator[Session, None, None]:
    yield from request.app.state.database.session()


def get_board_service(request: Request) -> BoardService:
    return request.app.state.board_service


def get_annotation_service(db: Session = Depends(get_db)) -> AnnotationService:
    return AnnotationService(SQLCommentRepository(db))


# --- Board ---
@router.post("/games", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
def create_game(service: BoardService = Depends(get_board_service)) -> BoardResponse:
    return service.create_game()


@router.post("/games/join", response_model=BoardResponse)
def join_game(
    request: JoinGameRequest, service: BoardService = Depends(get_board_service)
) -> BoardResponse:
    return service.join_game(request)


@router.get("/games/{session_id}", response_model=BoardResponse)
def get_board(
    session_id: UUID, service: BoardService = Depends(get_board_service)
) -> BoardResponse:
    return service.get_board(session_id)


@router.post("/games/{session_id}/squares", response_model=BoardResponse)
def activate_square(
    session_id: UUID,
    request: SquareRequest,
    service: BoardService = Depends(get_board_service),
) -> BoardResponse:
    return service.activate_square(session_id, request)


@router.post("/games/{session_id}/reset", response_model=BoardResponse)
def reset_board(
    session_id: UUID, service: BoardService = Depends(get_board_service)
) -> BoardResponse:
    return service.reset(session_id)


@router.delete("/games/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def end_game(session_id: UUID, service: BoardService = Depends(get_board_service)) -> None:
    service.end_game(session_id)


# --- Comments ---
@router.get("/comments/options", response_model=CommentOptionsResponse)
def comment_options() -> CommentOptionsResponse:
    """Choices the comment form offers. Storage accepts anything."""
    return CommentOptionsResponse(
        player_sides=list(Color),
        tactical_ideas=list(TacticalIdea),
        rating_min=RATING_RANGE[0],
        rating_max=RATING_RANGE[1],
    )


@router.post("/comments", response_model=Envelope[CommentResponse])
def add_comment(
    request: CreateCommentRequest,
    service: AnnotationService = Depends(get_annotation_service),
) -> Envelope[CommentResponse]:
    return service.add_comment(request)


@router.get("/comments", response_model=Envelope[list[CommentResponse]])
def list_comments(
    game_id: Optional[str] = None,
    service: AnnotationService = Depends(get_annotation_service),
) -> Envelope[list[CommentResponse]]:
    return service.list_comments(game_id)


@router.get("/comments/move", response_model=Envelope[list[CommentResponse]])
def list_move_comments(
    game_id: str,
    move_number: int,
    service: AnnotationService = Depends(get_annotation_service),
) -> Envelope[list[CommentResponse]]:
    return service.list_move_comments(game_id, move_number)


@router.get("/comments/stats", response_model=Envelope[GameStatsResponse])
def game_stats(
    game_id: str, service: AnnotationService = Depends(get_annotation_service)
) -> Envelope[GameStatsResponse]:
    return service.game_stats(game_id)
