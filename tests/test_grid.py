import pytest

from lsd.colors import Attribute, Colors, Elem, ElemKind, Style, ThemeOption
from lsd.grid import Cell, Direction, Grid, get_visible_width

PLAIN_WIDTHS = [
    ("Ｈｅｌｌｏ,ｗｏｒｌｄ!", 22),
    ("ASCII1234-_", 11),
    ("File with space", 15),
    ("制作样本。", 10),
    ("日本語", 6),
    ("샘플은 무료로 드리겠습니다", 26),
    ("👩🐩", 4),
    ("🔬", 2),
]


@pytest.mark.parametrize("text,width", PLAIN_WIDTHS)
def test_visible_width_hyperlink_simple(text, width):
    output = f"\x1b]8;;url://fake-url\x1b\\{text}\x1b]8;;\x1b\\"
    assert get_visible_width(output, True) == width


@pytest.mark.parametrize("text,width", PLAIN_WIDTHS)
def test_visible_width_plain(text, width):
    assert get_visible_width(text, False) == width


@pytest.mark.parametrize("text,width", PLAIN_WIDTHS)
def test_visible_width_with_colors(text, width):
    output = Colors(ThemeOption.NO_LSCOLORS).colorize(text, Elem(ElemKind.FILE))
    assert output.startswith("\x1b[38;5;")
    assert output.endswith("[39m")
    assert get_visible_width(output, False) == width


@pytest.mark.parametrize("text,width", PLAIN_WIDTHS)
def test_visible_width_without_colors(text, width):
    output = Colors(ThemeOption.NO_COLOR).colorize(text, Elem(ElemKind.FILE))
    assert not output.startswith("\x1b[38;5;")
    assert get_visible_width(output, False) == width


def test_visible_width_counts_hyperlink_when_not_requested():
    output = "\x1b]8;;u\x1b\\ab\x1b]8;;\x1b\\"
    assert get_visible_width(output, False) == 17
    assert get_visible_width(output, True) == 2


def test_visible_width_with_attributes():
    output = Style(attributes=frozenset({Attribute.BOLD})).apply("abc")
    assert output == "\x1b[1mabc\x1b[0m"
    assert get_visible_width(output) == 3


def test_cell_width_computed_from_contents():
    assert Cell("日本語").width == 6
    assert Cell("abc", 10).width == 10


def test_single_column_tree_lines():
    grid = Grid(Direction.LEFT_TO_RIGHT, 1)
    for text in ("one.d", "├── .hidden", "└── two"):
        grid.add(Cell(text))
    assert grid.fit_into_columns(1) == "one.d\n├── .hidden\n└── two\n"


def test_left_to_right_columns():
    grid = Grid(Direction.LEFT_TO_RIGHT, 1)
    for text in ("a", "bb", "ccc", "d"):
        grid.add(Cell(text))
    assert grid.fit_into_columns(2) == "a   bb\nccc d\n"


def test_top_to_bottom_columns():
    grid = Grid(Direction.TOP_TO_BOTTOM, 2)
    for text in ("a", "b", "c"):
        grid.add(Cell(text))
    assert grid.fit_into_columns(2) == "a  c\nb  \n"


def test_fit_into_width_single_line():
    grid = Grid(Direction.TOP_TO_BOTTOM, 2)
    for text in ("one", "two", "three"):
        grid.add(Cell(text))
    assert grid.fit_into_width(80) == "one  two  three\n"


def test_fit_into_width_two_lines():
    grid = Grid(Direction.TOP_TO_BOTTOM, 2)
    for text in ("one", "two", "three"):
        grid.add(Cell(text))
    assert grid.fit_into_width(11) == "one  three\ntwo  \n"


def test_fit_into_width_too_narrow_for_columns():
    grid = Grid(Direction.TOP_TO_BOTTOM, 2)
    for text in ("one", "two", "three"):
        grid.add(Cell(text))
    assert grid.fit_into_width(10) is None


def test_fit_into_width_cell_wider_than_width():
    grid = Grid()
    grid.add(Cell("three"))
    grid.add(Cell("a"))
    assert grid.fit_into_width(4) is None


def test_single_cell_fits():
    grid = Grid()
    grid.add(Cell("x"))
    assert grid.fit_into_width(5) == "x\n"


def test_empty_grid_renders_nothing():
    grid = Grid()
    assert grid.fit_into_width(80) == ""
    assert grid.fit_into_columns(3) == ""


def test_zero_columns_rejected():
    grid = Grid()
    grid.add(Cell("x"))
    with pytest.raises(ValueError):
        grid.fit_into_columns(0)


def test_negative_filling_rejected():
    with pytest.raises(ValueError):
        Grid(Direction.LEFT_TO_RIGHT, -1)


def test_text_filling_used_as_separator():
    grid = Grid(Direction.LEFT_TO_RIGHT, " | ")
    grid.add(Cell("a"))
    grid.add(Cell("b"))
    assert grid.fit_into_columns(2) == "a | b\n"


def test_colored_cells_are_padded_by_visible_width():
    style = Style(attributes=frozenset({Attribute.UNDERLINED}))
    grid = Grid(Direction.LEFT_TO_RIGHT, 1)
    grid.add(Cell(style.apply("x")))
    grid.add(Cell("y"))
    grid.add(Cell("long"))
    grid.add(Cell("z"))
    assert grid.fit_into_columns(2) == "\x1b[4mx\x1b[0m    y\nlong z\n"