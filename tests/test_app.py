import pytest

from sapper.app import (
    CLOSED_BACKGROUND,
    EMPTY_BACKGROUND,
    FLAG_GLYPH,
    MINE_GLYPH,
    NUMBER_BACKGROUND,
    NUMBER_COLOURS,
    cell_appearance,
    main,
)
from sapper.board import MINE, Cell, GameBoard


def test_closed_cell_is_blank_and_enabled():
    look = cell_appearance(Cell())
    assert look.text == ""
    assert look.background == CLOSED_BACKGROUND == "#c0c0c0"
    assert look.enabled is True


def test_flagged_cell_shows_flag():
    look = cell_appearance(Cell(is_flagged=True))
    assert look.text == FLAG_GLYPH
    assert look.enabled is True
    assert look.background == CLOSED_BACKGROUND


def test_revealed_empty_cell():
    look = cell_appearance(Cell(is_revealed=True, adjacent_mines=0))
    assert look.text == ""
    assert look.background == EMPTY_BACKGROUND == "#e0e0e0"
    assert look.enabled is False


def test_revealed_mine_shows_mine():
    look = cell_appearance(Cell(has_mine=True, is_revealed=True, adjacent_mines=MINE))
    assert look.text == MINE_GLYPH
    assert look.background == NUMBER_BACKGROUND
    assert look.enabled is False


@pytest.mark.parametrize("count", range(1, 9))
def test_numbered_cells(count):
    look = cell_appearance(Cell(is_revealed=True, adjacent_mines=count))
    assert look.text == str(count)
    assert look.bold is True
    assert look.background == NUMBER_BACKGROUND
    assert look.foreground == NUMBER_COLOURS[count]


def test_number_one_is_blue():
    look = cell_appearance(Cell(is_revealed=True, adjacent_mines=1))
    assert look.foreground == "#0000ff"


def test_number_colours_are_distinct():
    colours = [
        cell_appearance(Cell(is_revealed=True, adjacent_mines=n)).foreground
        for n in range(1, 9)
    ]
    assert len(set(colours)) == len(colours)


def test_appearance_follows_board_state():
    board = GameBoard(3, 3, 0)
    board.set_mines([(0, 0)])
    board.reveal_cell(2, 2)
    assert cell_appearance(board.cell(1, 1)).text == "1"
    assert cell_appearance(board.cell(2, 2)).enabled is False
    assert cell_appearance(board.cell(0, 0)).enabled is True


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as info:
        main(["--no-such-option"])
    assert info.value.code == 2