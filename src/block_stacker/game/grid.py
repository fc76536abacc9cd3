from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from .pieces import Cell


@dataclass
class ClearResult:
    lines_cleared: int
    rows: Tuple[int, ...]


class PlayField:
    """Occupancy grid with an overflow buffer above the visible area.

    Coordinates are 1-based: columns 1..width, visible rows 1..height and
    buffer rows (1 - overflow_height)..0. Row numbers grow downward. The grid
    uses 0 for empty cells and the tetromino id for locked cells.
    """

    EMPTY = 0

    def __init__(self, width: int, height: int, overflow_height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.overflow_height = int(overflow_height)
        self.top_row = 1 - self.overflow_height
        self.grid = np.zeros((self.height + self.overflow_height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(self.EMPTY)

    def _row_index(self, row: int) -> int:
        index = row - self.top_row
        if not 0 <= index < self.grid.shape[0]:
            raise IndexError(f"row {row} outside field rows {self.top_row}..{self.height}")
        return index

    def _col_index(self, col: int) -> int:
        if not 1 <= col <= self.width:
            raise IndexError(f"column {col} outside field columns 1..{self.width}")
        return col - 1

    def occupant(self, col: int, row: int) -> int:
        return int(self.grid[self._row_index(row), self._col_index(col)])

    def is_occupied(self, col: int, row: int) -> bool:
        return self.occupant(col, row) != self.EMPTY

    def collides(self, cells: Iterable[Cell], col: int, row: int) -> bool:
        for dx, dy in cells:
            x, y = col + dx, row + dy
            if x < 1 or x > self.width:
                return True
            # Rows inside the overflow buffer are fair game; its ceiling is a wall.
            if y > self.height or y < self.top_row:
                return True
            if self.grid[y - self.top_row, x - 1] != self.EMPTY:
                return True
        return False

    def drop_row(self, cells: Iterable[Cell], col: int, row: int) -> int:
        """Lowest row the cells can reach from `row` by falling straight down."""
        cells = tuple(cells)
        while not self.collides(cells, col, row + 1):
            row += 1
        return row

    def lock(self, cells: Iterable[Cell], col: int, row: int, value: int) -> Tuple[int, int]:
        """Write cells into the grid; return the (highest, lowest) rows touched."""
        positions = [(col + dx, row + dy) for dx, dy in cells]
        for x, y in positions:
            if self.is_occupied(x, y):
                raise ValueError(f"cell ({x}, {y}) is already occupied")
        for x, y in positions:
            self.grid[self._row_index(y), self._col_index(x)] = value
        rows = [y for _, y in positions]
        return min(rows), max(rows)

    def is_row_complete(self, row: int) -> bool:
        return bool(np.all(self.grid[self._row_index(row)] != self.EMPTY))

    def clear_lines(self, highest_row: int, lowest_row: int) -> ClearResult:
        """Clear complete rows in [highest_row, lowest_row] and compact the rest.

        Only the given range is scanned for complete rows; rows above it
        cannot have been completed by the last lock.
        """
        top = self._row_index(highest_row)
        bottom = self._row_index(lowest_row)
        cleared = []
        for index in range(bottom, top - 1, -1):
            if np.all(self.grid[index] != self.EMPTY):
                cleared.append(index + self.top_row)
            elif cleared:
                self.grid[index + len(cleared)] = self.grid[index]
        count = len(cleared)
        if count == 0:
            return ClearResult(lines_cleared=0, rows=())
        # Everything above the scanned range falls as one block.
        self.grid[count : top + count] = self.grid[0:top].copy()
        self.grid[:count] = self.EMPTY
        return ClearResult(lines_cleared=count, rows=tuple(cleared))

    def visible(self) -> np.ndarray:
        return self.grid[self.overflow_height :].copy()

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
