"""
The BoardController is the entrypoint into the board layer for the service layer.

It owns one game (the rules library's Board is the authority on legality and game state), translates clicks on the
grid into board notation, keeps track of what is selected / highlighted, and recomputes the derived views
(status, move history, FEN, display grid) after every change.
"""

import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import chess

from src.board.move_list import MoveRow, format_move_list
from src.board.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color

# Pushed the latest move history (SAN) and FEN after every recomputation.
Observer = Callable[[list[str], str], None]

# FEN letter of the piece (upper case = white), or None for an empty square.
Grid = list[list[Optional[str]]]

# No under-promotion: pawns reaching the last rank always become queens.
AUTO_PROMOTION = chess.QUEEN


@dataclass(frozen=True)
class BoardView:
    """Snapshot of everything needed to render the board, as it is right after the last operation."""

    grid: Grid
    selected: Optional[str]
    destinations: list[str]
    status: str
    move_history: list[str]
    fen: str
    move_list: list[MoveRow]
    turn: Color
    move_number: int


class BoardController:
    """
    Selection state machine on top of a chess.Board.

    Requests on one board may arrive from several threads (FastAPI runs sync routes in a threadpool), so every public
    operation holds the board's lock: a move is checked for legality and pushed as one step.
    """

    def __init__(
        self, observers: Iterable[Observer] = (), fen: Optional[str] = None
    ) -> None:
        """`fen` sets up a position other than the standard start. Reset always goes back to the standard start."""
        self._board = chess.Board(fen) if fen else chess.Board()
        self._observers: list[Observer] = list(observers)
        self._lock = threading.RLock()

        self.selected: Optional[Square] = None
        self.destinations: list[Square] = []
        self.grid: Grid = []
        self.status = ""
        self.move_history: list[str] = []

        self._sync()

    # --- BOARD LAYER API CALLED BY SERVICE ---
    def subscribe(self, observer: Observer) -> None:
        with self._lock:
            self._observers.append(observer)

    def activate_square(self, row: int, col: int) -> BoardView:
        """
        Handle a click on the grid.
        ----
        1. Nothing selected: select the square if it holds a piece of the side to move (else ignore the click).
        2. Another square selected: try to move there. Legal? apply it. Illegal? reselect if the target holds one of
           our own pieces, otherwise drop the selection.
        3. The selected square itself: drop the selection.
        """
        target = Square.from_grid(row, col)
        if not target.is_within_bounds():
            raise InvalidRequestError(f"Square ({row}, {col}) is not on the board.")

        with self._lock:
            if self.selected is None:
                if self._holds_piece_to_move(target):
                    self._select(target)
                return self.view()

            if target == self.selected:
                self._clear_selection()
                return self.view()

            move = self._build_move(self.selected, target)
            if move in self._board.legal_moves:
                self._board.push(move)
                self._clear_selection()
                self._sync()
            elif self._holds_piece_to_move(target):
                self._select(target)
            else:
                self._clear_selection()
            return self.view()

    def reset(self) -> BoardView:
        """Back to the starting position."""
        with self._lock:
            self._board.reset()
            self._clear_selection()
            self._sync()
            return self.view()

    def view(self) -> BoardView:
        with self._lock:
            return BoardView(
                grid=[list(row) for row in self.grid],
                selected=self.selected.to_algebraic() if self.selected else None,
                destinations=[square.to_algebraic() for square in self.destinations],
                status=self.status,
                move_history=list(self.move_history),
                fen=self.fen,
                move_list=format_move_list(self.move_history),
                turn=self.turn,
                move_number=self._board.fullmove_number,
            )

    @property
    def fen(self) -> str:
        return self._board.fen()

    @property
    def turn(self) -> Color:
        return Color.WHITE if self._board.turn == chess.WHITE else Color.BLACK

    # --- Internal helpers ---
    def _holds_piece_to_move(self, square: Square) -> bool:
        piece = self._board.piece_at(square.index)
        return piece is not None and piece.color == self._board.turn

    def _select(self, square: Square) -> None:
        """Select the square and highlight every square its piece can legally reach."""
        self.selected = square
        destinations: list[Square] = []
        for move in self._board.generate_legal_moves(
            from_mask=chess.BB_SQUARES[square.index]
        ):
            # promotions show up once per promotion piece
            to_square = Square(
                chess.square_file(move.to_square) + 1,
                chess.square_rank(move.to_square) + 1,
            )
            if to_square not in destinations:
                destinations.append(to_square)
        self.destinations = destinations

    def _clear_selection(self) -> None:
        self.selected = None
        self.destinations = []

    def _build_move(self, from_square: Square, to_square: Square) -> chess.Move:
        piece = self._board.piece_at(from_square.index)
        promotion = None
        if (
            piece is not None
            and piece.piece_type == chess.PAWN
            and to_square.rank in (1, BOARD_DIMENSIONS[1])
        ):
            promotion = AUTO_PROMOTION
        return chess.Move(from_square.index, to_square.index, promotion=promotion)

    def _sync(self) -> None:
        """Resync all derived views with the rules library and notify observers."""
        self.grid = self._mirror_grid()
        self.status = self._compute_status()
        self.move_history = self._compute_history()
        for observer in self._observers:
            observer(list(self.move_history), self.fen)

    def _mirror_grid(self) -> Grid:
        grid: Grid = []
        for row in range(BOARD_DIMENSIONS[1]):
            cells: list[Optional[str]] = []
            for col in range(BOARD_DIMENSIONS[0]):
                piece = self._board.piece_at(Square.from_grid(row, col).index)
                cells.append(piece.symbol() if piece else None)
            grid.append(cells)
        return grid

    def _compute_status(self) -> str:
        """Checkmate takes precedence over a draw, a draw over check."""
        side_to_move = self.turn.value.capitalize()
        if self._board.is_checkmate():
            # The side to move got mated, so the other side wins.
            winner = Color.BLACK if self.turn == Color.WHITE else Color.WHITE
            return f"Checkmate! {winner.value.capitalize()} wins!"
        if self._is_draw():
            return "Draw!"
        if self._board.is_check():
            return f"{side_to_move} is in check!"
        return f"{side_to_move} to move"

    def _is_draw(self) -> bool:
        """Stalemate, insufficient material, fifty-move rule or threefold repetition."""
        return (
            self._board.is_stalemate()
            or self._board.is_insufficient_material()
            or self._board.is_fifty_moves()
            or self._board.is_repetition(3)
        )

    def _compute_history(self) -> list[str]:
        """Replay the move stack from the root position to get every move in SAN."""
        replay = self._board.root()
        history: list[str] = []
        for move in self._board.move_stack:
            history.append(replay.san(move))
            replay.push(move)
        return history
