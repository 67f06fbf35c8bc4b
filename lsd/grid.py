"""Measuring terminal text and laying cells out in columns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import wcwidth

_CSI = "\x1b["
_HYPERLINK_START = "\x1b]8;;"
_HYPERLINK_END = "\x1b\\"


def _char_width(char: str) -> int:
    width = wcwidth.wcwidth(char)
    # Control characters, the escape character among them, count as one column.
    return 1 if width < 0 else width


def _invisible_span(text: str, opener: str, closer: str, closer_len: int) -> int:
    total = 0
    start = text.find(opener)
    while start != -1:
        end = text.find(closer, start)
        if end != -1:
            total += end - start + closer_len
        start = text.find(opener, start + len(opener))
    return total


def get_visible_width(text: str, hyperlink: bool = False) -> int:
    """Return the number of terminal columns the text takes once printed.

    Colour escape sequences never count; hyperlink escape sequences are left
    out only when ``hyperlink`` is true.
    """
    invisible = _invisible_span(text, _CSI, "m", 1)
    if hyperlink:
        invisible += _invisible_span(text, _HYPERLINK_START, _HYPERLINK_END, 2)
    total = sum(_char_width(char) for char in text)
    return max(0, total - invisible)


class Direction(Enum):
    """The order in which cells fill the grid."""

    LEFT_TO_RIGHT = "left-to-right"
    TOP_TO_BOTTOM = "top-to-bottom"


@dataclass
class Cell:
    """Text placed in the grid, with its visible width."""

    contents: str
    width: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width is None:
            self.width = get_visible_width(self.contents)


@dataclass(frozen=True)
class _Dimensions:
    num_lines: int
    widths: list[int]


class Grid:
    """Cells arranged into aligned columns."""

    def __init__(
        self,
        direction: Direction = Direction.TOP_TO_BOTTOM,
        filling: Union[int, str] = 2,
    ) -> None:
        if isinstance(filling, int):
            if filling < 0:
                raise ValueError("filling must not be negative")
            filling = " " * filling
        self.direction = direction
        self.separator = filling
        self.cells: list[Cell] = []

    def add(self, cell: Cell) -> None:
        """Append a cell to the grid."""
        self.cells.append(cell)

    @property
    def _separator_width(self) -> int:
        return get_visible_width(self.separator)

    @property
    def _widest(self) -> int:
        return max((cell.width or 0 for cell in self.cells), default=0)

    def _column_widths(self, num_lines: int, num_columns: int) -> _Dimensions:
        widths = [0] * num_columns
        for index, cell in enumerate(self.cells):
            if self.direction is Direction.LEFT_TO_RIGHT:
                column = index % num_columns
            else:
                column = index // num_lines
            widths[column] = max(widths[column], cell.width or 0)
        return _Dimensions(num_lines, widths)

    def _theoretical_max_lines(self, maximum_width: int) -> int:
        columns = 0
        used = 0
        for cell in sorted(self.cells, key=lambda c: c.width or 0, reverse=True):
            width = cell.width or 0
            if width + used > maximum_width:
                return -(-len(self.cells) // columns)
            columns += 1
            used += width + self._separator_width
        return 1

    def _width_dimensions(self, maximum_width: int) -> Optional[_Dimensions]:
        if self._widest > maximum_width:
            return None
        count = len(self.cells)
        if count == 0:
            return _Dimensions(0, [])
        if count == 1:
            return _Dimensions(1, [self.cells[0].width or 0])
        max_lines = self._theoretical_max_lines(maximum_width)
        if max_lines == 1:
            return _Dimensions(1, [cell.width or 0 for cell in self.cells])

        best: Optional[_Dimensions] = None
        for num_lines in range(max_lines, 0, -1):
            num_columns = -(-count // num_lines)
            separators = (num_columns - 1) * self._separator_width
            if maximum_width < separators:
                continue
            candidate = self._column_widths(num_lines, num_columns)
            if sum(candidate.widths) < maximum_width - separators:
                best = candidate
            else:
                return best
        return best

    def _render(self, dimensions: _Dimensions) -> str:
        last_column = len(dimensions.widths) - 1
        lines = []
        for row in range(dimensions.num_lines):
            parts = []
            for column, width in enumerate(dimensions.widths):
                if self.direction is Direction.LEFT_TO_RIGHT:
                    index = row * len(dimensions.widths) + column
                else:
                    index = row + dimensions.num_lines * column
                if index >= len(self.cells):
                    continue
                cell = self.cells[index]
                if column == last_column:
                    parts.append(cell.contents)
                else:
                    padding = " " * (width - (cell.width or 0))
                    parts.append(cell.contents + padding + self.separator)
            lines.append("".join(parts) + "\n")
        return "".join(lines)

    def fit_into_width(self, width: int) -> Optional[str]:
        """Lay the cells out in as few lines as fit the width, or return None."""
        dimensions = self._width_dimensions(width)
        return None if dimensions is None else self._render(dimensions)

    def fit_into_columns(self, num_columns: int) -> str:
        """Lay the cells out in exactly the given number of columns."""
        if num_columns < 1:
            raise ValueError("the number of columns must be at least one")
        num_lines = -(-len(self.cells) // num_columns)
        return self._render(self._column_widths(num_lines, num_columns))