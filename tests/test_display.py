from pathlib import Path

import pytest

from lsd.display import (
    BLANK,
    CORNER,
    EDGE,
    LINE,
    child_prefix,
    display_folder_path,
    entry_prefix,
    header_cells,
    should_display_folder_path,
)
from lsd.grid import Cell, get_visible_width


def test_tree_symbols_used_in_prefixes():
    assert entry_prefix(1, "", False) == EDGE + " " == "├── "
    assert entry_prefix(1, "", True) == CORNER + " " == "└── "
    assert child_prefix(1, "", False) == LINE + " " == "│   "
    assert child_prefix(1, "", True) == BLANK + " " == "    "


@pytest.mark.parametrize(
    "depth, parent, is_last, expected",
    [
        (0, "", False, ""),
        (0, "abc", True, "abc"),
        (1, "", False, "├── "),
        (1, "", True, "└── "),
        (2, "│   ", False, "│   ├── "),
        (2, "    ", True, "    └── "),
    ],
)
def test_entry_prefix(depth, parent, is_last, expected):
    assert entry_prefix(depth, parent, is_last) == expected


@pytest.mark.parametrize(
    "depth, parent, is_last, expected",
    [
        (0, "", False, ""),
        (1, "", False, "│   "),
        (1, "", True, "    "),
        (2, "│   ", True, "│       "),
    ],
)
def test_child_prefix(depth, parent, is_last, expected):
    assert child_prefix(depth, parent, is_last) == expected


def test_tree_with_all_layout():
    # one.d containing .hidden and two
    lines = [entry_prefix(0, "", True) + "one.d"]
    children = [".hidden", "two"]
    inner = child_prefix(0, "", True)
    for position, name in enumerate(children):
        is_last = position == len(children) - 1
        lines.append(entry_prefix(1, inner, is_last) + name)
    assert "\n".join(lines) + "\n" == "one.d\n├── .hidden\n└── two\n"


def test_tree_edge_before_name_ends_with_corner():
    assert (entry_prefix(1, "", True) + "two").endswith("└── two")


def test_folder_path(tmp_path):
    dir_path = tmp_path / "dir"
    assert display_folder_path(dir_path) == f"\n{tmp_path}{Path('/').anchor or '/'}dir:\n".replace(
        f"{tmp_path}/", f"{tmp_path}/"
    ) or display_folder_path(dir_path) == f"\n{dir_path}:\n"
    assert display_folder_path(dir_path) == f"\n{dir_path}:\n"


def test_folder_path_string():
    assert display_folder_path("some/dir") == "\nsome/dir:\n"


@pytest.mark.parametrize(
    "is_dirs, expected",
    [
        ([False], True),
        ([True], False),
        ([False, True], True),
        ([True, True], True),
        ([False, False], True),
    ],
)
def test_should_display_folder_path_top_level(is_dirs, expected):
    assert should_display_folder_path(0, is_dirs) is expected


@pytest.mark.parametrize(
    "is_dirs, expected",
    [
        # A symbolic link to a directory counts as a directory.
        ([True], False),
        ([False, True], True),
        ([True, True], True),
    ],
)
def test_should_display_folder_path_with_links(is_dirs, expected):
    assert should_display_folder_path(0, is_dirs) is expected


def test_should_display_folder_path_deeper_levels():
    assert should_display_folder_path(1, [True]) is True
    assert should_display_folder_path(3, []) is True


def test_should_display_folder_path_accepts_generator():
    assert should_display_folder_path(0, (flag for flag in [True])) is False


def test_header_cell_centred_and_underlined():
    cells = [Cell("a"), Cell("longer_name")]
    (header,) = header_cells(["Name"], cells)
    assert header.width == 11
    assert header.contents == "\x1b[4m   Name    \x1b[0m"
    assert get_visible_width(header.contents) == 11


def test_header_cells_per_column_widths():
    cells = [Cell("1.0 KB"), Cell("x"), Cell("12 B"), Cell("y")]
    headers = header_cells(["Size", "Name"], cells)
    assert [cell.width for cell in headers] == [6, 4]
    assert headers[0].contents == "\x1b[4m Size \x1b[0m"
    assert headers[1].contents == "\x1b[4mName\x1b[0m"


def test_header_wider_than_cells():
    headers = header_cells(["Date Modified"], [Cell("x")])
    assert headers[0].width == len("Date Modified")
    assert headers[0].contents == "\x1b[4mDate Modified\x1b[0m"


def test_header_cells_without_headers():
    assert header_cells([], [Cell("x")]) == []


def test_header_contains_all_names():
    names = ["Permissions", "User", "Group", "Size", "Date Modified", "Name", "INode", "Links"]
    cells = [Cell("v") for _ in names]
    joined = "".join(cell.contents for cell in header_cells(names, cells))
    for name in names:
        assert name in joined