"""Game session: difficulty levels, the clock, turns and the move protocol."""

from __future__ import annotations

import random
from enum import Enum
from typing import Callable

from .board import GameBoard
from .stats import Stats


class _Signal:
    """A list of callbacks invoked together."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., object]] = []

    def connect(self, slot: Callable[..., object]) -> None:
        self._slots.append(slot)

    def emit(self, *args: object) -> None:
        for slot in list(self._slots):
            slot(*args)


class Difficulty(Enum):
    """Board sizes offered in the game menu."""

    BEGINNER = ("Новичок (9x9, 10 мин)", 9, 9, 10)
    INTERMEDIATE = ("Любитель (16x16, 40 мин)", 16, 16, 40)
    EXPERT = ("Профессионал (30x16, 99 мин)", 16, 30, 99)

    def __init__(self, label: str, rows: int, cols: int, mines: int) -> None:
        self.label = label
        self.rows = rows
        self.cols = cols
        self.mines = mines


def format_counter(value: int) -> str:
    """Render a counter the way the panel displays it: three digits, zero padded."""
    return f"{value:03d}"


def format_move(row: int, col: int) -> bytes:
    """Encode a move for the peer."""
    return f"MOVE {row} {col}".encode("utf-8")


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def parse_move(message: bytes | str) -> tuple[int, int] | None:
    """Decode a ``MOVE row col`` message; anything else gives None.

    A coordinate that is not a number reads as 0.
    """
    if isinstance(message, (bytes, bytearray)):
        message = bytes(message).decode("utf-8", errors="replace")
    parts = message.split(" ")
    if len(parts) != 3 or parts[0] != "MOVE":
        return None
    return _to_int(parts[1]), _to_int(parts[2])


class GameSession:
    """One player's view of the game, independent of any window.

    Listeners may be attached to:
    ``board_changed`` (), ``restarted`` (), ``cell_updated`` (row, col),
    ``game_over`` (won), ``counter_changed`` (text), ``timer_changed`` (text),
    ``turn_changed`` (my_turn), ``message`` (title, text) and
    ``outgoing`` (bytes to send to the peer).
    """

    def __init__(self, stats: Stats | None = None, rng: random.Random | None = None) -> None:
        self.stats = stats if stats is not None else Stats()
        self._rng = rng if rng is not None else random.Random()
        self.board_changed = _Signal()
        self.restarted = _Signal()
        self.cell_updated = _Signal()
        self.game_over = _Signal()
        self.counter_changed = _Signal()
        self.timer_changed = _Signal()
        self.turn_changed = _Signal()
        self.message = _Signal()
        self.outgoing = _Signal()
        self.difficulty = Difficulty.BEGINNER
        self.board: GameBoard = GameBoard(0, 0, 0, self._rng)
        self.elapsed = 0
        self.timer_running = False
        self.is_over = False
        self.network_game = False
        self.my_turn = False
        self.change_mode(Difficulty.BEGINNER)

    @property
    def rows(self) -> int:
        return self.difficulty.rows

    @property
    def cols(self) -> int:
        return self.difficulty.cols

    @property
    def mines(self) -> int:
        return self.difficulty.mines

    def change_mode(self, difficulty: Difficulty) -> None:
        """Switch to a new board size and start a fresh game on it."""
        if not isinstance(difficulty, Difficulty):
            raise TypeError(f"expected a Difficulty, got {difficulty!r}")
        self.difficulty = difficulty
        board = GameBoard(difficulty.rows, difficulty.cols, difficulty.mines, self._rng)
        board.cell_updated.connect(self.cell_updated.emit)
        board.game_over.connect(self._on_game_over)
        board.flags_changed.connect(
            lambda used: self.counter_changed.emit(format_counter(used))
        )
        self.board = board
        self.board_changed.emit()
        self.restart()

    def restart(self) -> None:
        """Lay new mines on the current board and reset the clock."""
        self.board.reset(self.rows, self.cols, self.mines)
        self.timer_running = False
        self.elapsed = 0
        self.is_over = False
        self.timer_changed.emit(format_counter(0))
        self.counter_changed.emit(format_counter(self.mines))
        self.restarted.emit()

    def left_click(self, row: int, col: int) -> list[tuple[int, int]]:
        """Open a cell; returns the positions that were opened."""
        if self.is_over:
            return []
        if self.network_game and not self.my_turn:
            self.message.emit("Подождите", "Сейчас не ваш ход!")
            return []
        if self.elapsed == 0:
            self.timer_running = True
        revealed = self.board.reveal_cell(row, col)
        if self.network_game:
            self.outgoing.emit(format_move(row, col))
            self.my_turn = False
            self.turn_changed.emit(False)
        return revealed

    def right_click(self, row: int, col: int) -> bool:
        """Toggle a flag; returns whether the cell is now flagged."""
        if self.is_over:
            return False
        return self.board.toggle_flag(row, col)

    def tick(self) -> int:
        """Advance the clock by one second while it runs; returns the time."""
        if self.timer_running:
            self.elapsed += 1
            self.timer_changed.emit(format_counter(self.elapsed))
        return self.elapsed

    def handle_remote_data(self, data: bytes) -> tuple[int, int] | None:
        """Apply the peer's move, if ``data`` is one; it is then our turn."""
        move = parse_move(data)
        if move is None:
            return None
        self.board.reveal_cell(*move)
        self.my_turn = True
        self.turn_changed.emit(True)
        return move

    def begin_network_game(self, my_turn: bool) -> None:
        self.network_game = True
        self.my_turn = my_turn
        self.restart()

    def end_network_game(self) -> None:
        self.network_game = False
        self.my_turn = False

    def _on_game_over(self, won: bool) -> None:
        if self.is_over:
            return
        self.is_over = True
        self.timer_running = False
        if won:
            self.stats.record_win(self.elapsed)
        else:
            self.stats.record_loss()
        self.game_over.emit(won)
        if won:
            self.message.emit("Победа!", f"Вы выиграли за {self.elapsed} секунд!")
        else:
            self.message.emit("Поражение", "Вы наступили на мину!")