"""Pieces of the listing layout: tree prefixes, folder headings and block headers."""

from __future__ import annotations

import os
from typing import Iterable, Sequence, Union

from lsd.colors import Attribute, Style
from lsd.grid import Cell, get_visible_width

EDGE = "\u251c\u2500\u2500"  # "├──"
LINE = "\u2502  "  # "│  "
CORNER = "\u2514\u2500\u2500"  # "└──"
BLANK = "   "

_UNDERLINE = Style(attributes=frozenset({Attribute.UNDERLINED}))


def entry_prefix(depth: int, parent_prefix: str, is_last: bool) -> str:
    """Return the tree prefix drawn before an entry at the given depth."""
    if depth <= 0:
        return parent_prefix
    branch = CORNER if is_last else EDGE
    return f"{parent_prefix}{branch} "


def child_prefix(depth: int, parent_prefix: str, is_last: bool) -> str:
    """Return the prefix handed down to the children of an entry at the given depth."""
    if depth <= 0:
        return parent_prefix
    rail = BLANK if is_last else LINE
    return f"{parent_prefix}{rail} "


def should_display_folder_path(depth: int, is_dirs: Iterable[bool]) -> bool:
    """Decide whether a folder's path is printed above its contents.

    ``is_dirs`` tells, for each listed entry, whether it is a directory or a
    symbolic link to one.
    """
    if depth > 0:
        return True
    flags = list(is_dirs)
    folder_number = sum(1 for is_dir in flags if is_dir)
    return folder_number > 1 or folder_number < len(flags)


def display_folder_path(path: Union[str, os.PathLike]) -> str:
    """Return the heading printed before a folder's contents."""
    return f"\n{os.fspath(path)}:\n"


def _center(text: str, width: int, visible: int) -> str:
    padding = max(0, width - visible)
    left = padding // 2
    return " " * left + text + " " * (padding - left)


def header_cells(
    headers: Sequence[str], cells: Sequence[Cell], hyperlink: bool = False
) -> list[Cell]:
    """Return centred, underlined header cells sized to fit their columns.

    ``cells`` are laid out row by row, one column per header.
    """
    num_columns = len(headers)
    if num_columns == 0:
        return []

    widths = [get_visible_width(header, hyperlink) for header in headers]
    for index, cell in enumerate(cells):
        column = index % num_columns
        widths[column] = max(widths[column], cell.width or 0)

    return [
        Cell(
            contents=_UNDERLINE.apply(
                _center(header, width, get_visible_width(header, hyperlink))
            ),
            width=width,
        )
        for header, width in zip(headers, widths)
    ]