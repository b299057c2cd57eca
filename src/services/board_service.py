"""
Orchestration of board sessions: from API router to the board layer (and the reverse direction).

Boards only live in the memory of this process. Every create and every join starts a board session of its own,
addressed by a session id. The game code is only a label: two clients using the same code still play on separate
boards, nothing is synchronized between them.

The registry is bounded: once it holds `max_sessions` boards, the least recently used one is dropped.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import asdict, dataclass
from uuid import UUID, uuid4

from src.api.models import BoardResponse, JoinGameRequest, SquareRequest
from src.board.controller import BoardController, BoardView
from src.board.lobby import generate_game_code
from src.core.exceptions import GameNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


@dataclass
class BoardSession:
    game_code: str
    board: BoardController


class BoardService:
    """Orchestration of layers for the interactive board."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[UUID, BoardSession] = OrderedDict()
        # guards the registry only, each board has a lock of its own
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    # -- API routes logic ---
    def create_game(self) -> BoardResponse:
        """Generate a new game code and set up a board for it."""
        code = generate_game_code()
        session_id, session = self._register(code)
        logger.info("Created game %s (session %s)", code, session_id)
        return self._to_response(session_id, code, session.board.view())

    def join_game(self, request: JoinGameRequest) -> BoardResponse:
        """Any well-formed code is accepted. The joiner always gets a fresh board of their own."""
        session_id, session = self._register(request.game_code)
        logger.info("Joining game with code: %s (session %s)", request.game_code, session_id)
        return self._to_response(session_id, session.game_code, session.board.view())

    def get_board(self, session_id: UUID) -> BoardResponse:
        return self._create_board_response(session_id)

    def activate_square(self, session_id: UUID, request: SquareRequest) -> BoardResponse:
        """Forward a click on the grid to the board."""
        session = self._fetch_session(session_id)
        view = session.board.activate_square(request.row, request.col)
        return self._to_response(session_id, session.game_code, view)

    def reset(self, session_id: UUID) -> BoardResponse:
        session = self._fetch_session(session_id)
        view = session.board.reset()
        return self._to_response(session_id, session.game_code, view)

    def end_game(self, session_id: UUID) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise GameNotFoundError(f"Game session with {session_id=} not found.")

    # -- Internal helpers --
    def _register(self, code: str) -> tuple[UUID, BoardSession]:
        session_id = uuid4()
        session = BoardSession(game_code=code, board=BoardController())
        with self._lock:
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, evicted = self._sessions.popitem(last=False)
                logger.info(
                    "Evicted least recently used board %s (game %s)",
                    evicted_id,
                    evicted.game_code,
                )
        return session_id, session

    def _create_board_response(self, session_id: UUID) -> BoardResponse:
        session = self._fetch_session(session_id)
        return self._to_response(session_id, session.game_code, session.board.view())

    def _to_response(
        self, session_id: UUID, code: str, view: BoardView
    ) -> BoardResponse:
        return BoardResponse(
            session_id=session_id,
            game_code=code,
            grid=view.grid,
            selected=view.selected,
            destinations=view.destinations,
            status=view.status,
            move_history=view.move_history,
            fen=view.fen,
            move_list=[asdict(row) for row in view.move_list],
            turn=view.turn,
            move_number=view.move_number,
        )

    def _fetch_session(self, session_id: UUID) -> BoardSession:
        """Attempt to find the board session and raise error if it fails. Marks it as recently used."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise GameNotFoundError(f"Game session with {session_id=} not found.")
            self._sessions.move_to_end(session_id)
            return session
