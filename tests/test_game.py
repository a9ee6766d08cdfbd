import random

import pytest

from sapper.game import (
    Difficulty,
    GameSession,
    format_counter,
    format_move,
    parse_move,
)
from sapper.stats import Stats


def record(signal):
    events = []
    signal.connect(lambda *args: events.append(args))
    return events


@pytest.fixture
def session():
    game = GameSession(Stats(), random.Random(7))
    game.board.set_mines([(0, 0)])
    return game


def test_format_counter_pads_to_three_digits():
    assert format_counter(0) == "000"
    assert format_counter(10) == "010"
    assert format_counter(123) == "123"


def test_move_round_trip():
    for row, col in [(0, 0), (3, 4), (15, 29)]:
        assert parse_move(format_move(row, col)) == (row, col)


def test_format_move_wire_bytes():
    assert format_move(3, 4) == b"MOVE 3 4"


def test_parse_move_accepts_text():
    assert parse_move("MOVE 2 5") == (2, 5)


@pytest.mark.parametrize("message", [b"HELLO", b"MOVE 1", b"MOVE 1 2 3", b"move 1 2", b""])
def test_parse_move_rejects_other_messages(message):
    assert parse_move(message) is None


def test_parse_move_non_number_reads_as_zero():
    assert parse_move(b"MOVE x 2") == (0, 2)


def test_default_mode_is_beginner():
    game = GameSession(Stats(), random.Random(1))
    assert game.difficulty is Difficulty.BEGINNER
    assert (game.board.rows, game.board.cols) == (game.rows, game.cols)
    assert game.board.total_mines == Difficulty.BEGINNER.mines


def test_change_mode_builds_new_board():
    game = GameSession(Stats(), random.Random(1))
    changed = record(game.board_changed)
    game.change_mode(Difficulty.EXPERT)
    assert changed == [()]
    assert game.board.rows == 16
    assert game.board.cols == 30
    assert game.board.total_mines == 99


def test_change_mode_rejects_non_difficulty():
    game = GameSession(Stats(), random.Random(1))
    with pytest.raises(TypeError):
        game.change_mode(1)


def test_left_click_starts_timer_and_tick_advances(session):
    times = record(session.timer_changed)
    session.left_click(8, 8)
    # the click wins at once (single mine), so use a board that does not
    session.restart()
    session.board.set_mines([(0, 0), (8, 8)])
    session.left_click(0, 1)
    assert session.timer_running
    assert session.tick() == 1
    assert times[-1] == (format_counter(1),)


def test_tick_does_nothing_when_stopped(session):
    assert session.tick() == 0
    assert session.elapsed == 0


def test_win_records_stats(session):
    overs = record(session.game_over)
    messages = record(session.message)
    revealed = session.left_click(8, 8)
    assert len(revealed) == session.rows * session.cols - 1
    assert overs == [(True,)]
    assert session.is_over
    assert not session.timer_running
    assert session.stats.wins == 1
    assert session.stats.best_time == 0
    assert messages[-1][0] == "Победа!"


def test_loss_records_stats(session):
    overs = record(session.game_over)
    messages = record(session.message)
    session.left_click(0, 0)
    assert overs == [(False,)]
    assert session.stats.losses == 1
    assert session.stats.wins == 0
    assert messages[-1] == ("Поражение", "Вы наступили на мину!")


def test_clicks_ignored_after_game_over(session):
    session.left_click(0, 0)
    assert session.left_click(8, 8) == []
    assert not session.board.cell(8, 8).is_revealed
    assert session.right_click(5, 5) is False


def test_right_click_flags_and_updates_counter(session):
    counters = record(session.counter_changed)
    assert session.right_click(4, 4) is True
    assert counters[-1] == (format_counter(1),)
    assert session.right_click(4, 4) is False
    assert counters[-1] == (format_counter(0),)


def test_restart_resets_clock_and_counter(session):
    session.left_click(0, 0)
    counters = record(session.counter_changed)
    times = record(session.timer_changed)
    restarted = record(session.restarted)
    session.restart()
    assert not session.is_over
    assert session.elapsed == 0
    assert counters[-1] == (format_counter(session.mines),)
    assert times[-1] == ("000",)
    assert restarted == [()]
    assert not any(cell.is_revealed for _, _, cell in session.board)


def test_network_click_sends_move_and_passes_turn():
    game = GameSession(Stats(), random.Random(3))
    game.begin_network_game(my_turn=True)
    game.board.set_mines([(0, 0), (8, 8)])
    sent = record(game.outgoing)
    turns = record(game.turn_changed)
    game.left_click(0, 1)
    assert sent == [(format_move(0, 1),)]
    assert game.my_turn is False
    assert turns == [(False,)]


def test_network_click_out_of_turn_is_refused():
    game = GameSession(Stats(), random.Random(3))
    game.begin_network_game(my_turn=False)
    game.board.set_mines([(0, 0), (8, 8)])
    messages = record(game.message)
    sent = record(game.outgoing)
    assert game.left_click(4, 4) == []
    assert messages == [("Подождите", "Сейчас не ваш ход!")]
    assert sent == []
    assert not game.board.cell(4, 4).is_revealed


def test_remote_move_is_applied_and_gives_turn():
    game = GameSession(Stats(), random.Random(3))
    game.begin_network_game(my_turn=False)
    game.board.set_mines([(0, 0), (8, 8)])
    turns = record(game.turn_changed)
    assert game.handle_remote_data(format_move(0, 1)) == (0, 1)
    assert game.board.cell(0, 1).is_revealed
    assert game.my_turn is True
    assert turns == [(True,)]


def test_remote_garbage_is_ignored():
    game = GameSession(Stats(), random.Random(3))
    game.begin_network_game(my_turn=False)
    assert game.handle_remote_data(b"HELLO") is None
    assert game.my_turn is False


def test_end_network_game_clears_flags():
    game = GameSession(Stats(), random.Random(3))
    game.begin_network_game(my_turn=True)
    assert game.network_game
    game.end_network_game()
    assert (game.network_game, game.my_turn) == (False, False)


def test_remote_reveal_after_loss_is_not_counted_twice(session):
    session.board.set_mines([(0, 0), (8, 8)])
    session.left_click(0, 0)
    session.handle_remote_data(format_move(8, 8))
    assert session.stats.losses == 1