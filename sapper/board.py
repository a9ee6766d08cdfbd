"""Minefield model: cells, mine placement, flood reveal and flags."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

MINE = -1
"""Value of ``Cell.adjacent_mines`` for a cell that holds a mine."""

_NEIGHBOUR_OFFSETS = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


@dataclass
class Cell:
    """State of one square of the field."""

    has_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    adjacent_mines: int = 0


class _Signal:
    """A list of callbacks invoked together."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., object]] = []

    def connect(self, slot: Callable[..., object]) -> None:
        self._slots.append(slot)

    def emit(self, *args: object) -> None:
        for slot in list(self._slots):
            slot(*args)


class GameBoard:
    """A rectangular minefield.

    Listeners may be attached to ``cell_updated`` (row, col), ``game_over``
    (won) and ``flags_changed`` (flags used).
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        mines: int,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.cell_updated = _Signal()
        self.game_over = _Signal()
        self.flags_changed = _Signal()
        self._rows = 0
        self._cols = 0
        self._total_mines = 0
        self._flags_used = 0
        self._cells: list[list[Cell]] = []
        self.reset(rows, cols, mines)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def total_mines(self) -> int:
        return self._total_mines

    @property
    def flags_used(self) -> int:
        return self._flags_used

    def reset(self, rows: int, cols: int, mines: int) -> None:
        """Start a fresh field with ``mines`` mines placed at random."""
        if rows < 0 or cols < 0:
            raise ValueError(f"invalid board size {rows}x{cols}")
        if not 0 <= mines <= rows * cols:
            raise ValueError(
                f"cannot place {mines} mines on a {rows}x{cols} board"
            )
        self._new_grid(rows, cols)
        positions = self._rng.sample(range(rows * cols), mines)
        for index in positions:
            self._cells[index // cols][index % cols].has_mine = True
        self._total_mines = mines
        self._calculate_adjacency()
        self.flags_changed.emit(self._flags_used)

    def set_mines(self, positions: Iterable[tuple[int, int]]) -> None:
        """Clear the field and put mines exactly at ``positions``."""
        wanted = set(positions)
        for row, col in wanted:
            if not self._in_bounds(row, col):
                raise ValueError(f"mine position ({row}, {col}) is off the board")
        self._new_grid(self._rows, self._cols)
        for row, col in wanted:
            self._cells[row][col].has_mine = True
        self._total_mines = len(wanted)
        self._calculate_adjacency()
        self.flags_changed.emit(self._flags_used)

    def reveal_cell(self, row: int, col: int) -> list[tuple[int, int]]:
        """Open a cell, flooding outward from cells with no adjacent mines.

        Returns the positions opened, in the order they were opened.
        """
        if not self._in_bounds(row, col):
            return []
        revealed: list[tuple[int, int]] = []
        pending = [(row, col)]
        while pending:
            r, c = pending.pop()
            cell = self._cells[r][c]
            if cell.is_revealed or cell.is_flagged:
                continue
            cell.is_revealed = True
            revealed.append((r, c))
            self.cell_updated.emit(r, c)
            if cell.has_mine:
                self.game_over.emit(False)
                return revealed
            if cell.adjacent_mines == 0:
                pending.extend(self._neighbours(r, c))
        if revealed and self.check_win():
            self.game_over.emit(True)
        return revealed

    def toggle_flag(self, row: int, col: int) -> bool:
        """Flag or unflag a closed cell; returns whether it is now flagged."""
        if not self._in_bounds(row, col):
            return False
        cell = self._cells[row][col]
        if cell.is_revealed:
            return False
        if cell.is_flagged:
            cell.is_flagged = False
            self._flags_used -= 1
        elif self._flags_used < self._total_mines:
            cell.is_flagged = True
            self._flags_used += 1
        self.cell_updated.emit(row, col)
        self.flags_changed.emit(self._flags_used)
        return cell.is_flagged

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at ``(row, col)``."""
        if not self._in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) is off the board")
        return self._cells[row][col]

    def check_win(self) -> bool:
        """True when every cell without a mine has been opened."""
        return all(
            cell.has_mine or cell.is_revealed
            for line in self._cells
            for cell in line
        )

    def __iter__(self) -> Iterator[tuple[int, int, Cell]]:
        for r, line in enumerate(self._cells):
            for c, cell in enumerate(line):
                yield r, c, cell

    def _new_grid(self, rows: int, cols: int) -> None:
        self._rows = rows
        self._cols = cols
        self._flags_used = 0
        self._cells = [[Cell() for _ in range(cols)] for _ in range(rows)]

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def _neighbours(self, row: int, col: int) -> Iterator[tuple[int, int]]:
        for dr, dc in _NEIGHBOUR_OFFSETS:
            r, c = row + dr, col + dc
            if self._in_bounds(r, c):
                yield r, c

    def _calculate_adjacency(self) -> None:
        for r, c, cell in self:
            if cell.has_mine:
                cell.adjacent_mines = MINE
            else:
                cell.adjacent_mines = sum(
                    self._cells[nr][nc].has_mine for nr, nc in self._neighbours(r, c)
                )