# sapper

A desktop minesweeper game. It has three difficulty levels. It keeps track of
your wins, losses and best time between sessions. Two people can also play it
by taking turns over a TCP connection.

## Installing

```
pip install .
```

The interface uses Tk, which ships with most Python builds. The package has no
other dependencies.

## Playing

```
sapper
```

- A left click opens a cell. An empty cell also opens its neighbours.
- A right click places or removes a flag. You cannot place more flags than
  there are mines.
- The counter on the left shows the number of mines when a game starts. Once
  you place or remove a flag, it shows the number of flags in use.
- The counter on the right shows the seconds elapsed. The clock starts with
  your first left click and stops when the game ends.
- The face button starts a new game. So does "Новая игра" in the "Игра" menu.
- When you step on a mine, every unflagged mine is shown and the board locks.

### Difficulty levels

Choose the level from the "Игра" menu.

| Level        | Size (columns × rows) | Mines |
|--------------|-----------------------|-------|
| Beginner     | 9 × 9                 | 10    |
| Intermediate | 16 × 16               | 40    |
| Expert       | 30 × 16               | 99    |

### Statistics

Wins, losses and the best winning time are saved as JSON after every finished
game. The file is `Minesweeper/Stats.json` in your configuration directory:
`%APPDATA%` on Windows, and `$XDG_CONFIG_HOME` or `~/.config` elsewhere (see
`sapper.stats.default_stats_path()`). To view them, choose "Статистика" in the
"Дополнительно" menu.

### Network game

Use the "Сетевая игра" menu:

1. One player hosts a game and picks a port. The default is 12345.
2. The other player connects to the host's address and port.

The host moves first, and the turns then alternate. After each left click, a
message `MOVE <row> <col>` goes to the other side, which opens the same cell on
its own board.

## Using the library

The game logic works without the interface:

```python
import random
from sapper.board import GameBoard

board = GameBoard(9, 9, 10, random.Random(1))
opened = board.reveal_cell(0, 0)          # positions opened, in order
print(opened, board.cell(0, 0).adjacent_mines, board.check_win())
```

The main parts of the library:

- `GameBoard.set_mines(positions)` places mines at fixed positions.
- `GameBoard.toggle_flag(row, col)` flags or unflags a cell.
- Callbacks can be attached to `cell_updated`, `game_over` and `flags_changed`
  with `.connect(...)`.
- `sapper.game.GameSession` holds a whole game: the difficulty (`Difficulty`),
  the clock (`tick()`), turns in a network game, and statistics (`Stats`).
  `parse_move` and `format_move` encode and decode the move messages.
- `sapper.network.NetworkManager` is the TCP link. It offers `start_server`,
  `connect_to_host`, `send_data` and `stop_server`. Its callbacks run on
  background threads.
- `sapper.stats.Stats` holds the statistics. It has `load` and `save`.

## Limitations

- In a network game, each side lays its own mines at random. Only the
  coordinates of left clicks are exchanged, so the two boards are not the same
  and flags are not shared.
- There is no matchmaking and no way to play against more than one other
  player. A host accepts one peer at a time.
- The "Coming soon..." menu entry is disabled and does nothing.

## Running the tests

```
pip install .[test]
pytest
```