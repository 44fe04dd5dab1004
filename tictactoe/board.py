"""The 3x3 grid: cells numbered 1-9 row-major, the winning line catalog and mark validation."""

import logging
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

EMPTY = " "
MARKERS = ("X", "O")
INDICES = tuple(range(1, 10))
CENTER = 5

Line = Tuple[int, int, int]

ROWS: Tuple[Line, ...] = ((1, 2, 3), (4, 5, 6), (7, 8, 9))
COLUMNS: Tuple[Line, ...] = ((1, 4, 7), (2, 5, 8), (3, 6, 9))
DIAGONALS: Tuple[Line, ...] = ((1, 5, 9), (3, 5, 7))
LINES: Tuple[Line, ...] = ROWS + COLUMNS + DIAGONALS


class InvalidMoveError(ValueError):
    """Raised when a mark targets an occupied or out-of-range cell."""


def other_marker(marker: str) -> str:
    if marker not in MARKERS:
        raise ValueError(f"Unknown marker {marker!r}; expected one of {MARKERS}")
    return MARKERS[1] if marker == MARKERS[0] else MARKERS[0]


class Grid:
    """Nine cells keyed 1-9. A cell is marked at most once between resets."""

    def __init__(self) -> None:
        self._cells: Dict[int, str] = {}
        self.reset()

    def __getitem__(self, index: int) -> str:
        return self._cells[index]

    def __repr__(self) -> str:
        return f"Grid({''.join(self._cells[i] for i in INDICES)!r})"

    @classmethod
    def from_string(cls, layout: str) -> "Grid":
        """Build a grid from 9 characters (X, O, or space/dot for empty), row-major.

        Intended for tests and replays; bypasses turn order but not cell validation.
        """
        if len(layout) != len(INDICES):
            raise ValueError(f"Layout must have 9 cells, got {len(layout)}")
        grid = cls()
        for index, char in zip(INDICES, layout):
            if char in (EMPTY, "."):
                continue
            grid.mark(index, char)
        return grid

    def mark(self, index: int, marker: str) -> None:
        if index not in self._cells:
            raise InvalidMoveError(f"Square {index} is off the board (choose 1-9).")
        if marker not in MARKERS:
            raise InvalidMoveError(f"Cannot mark square {index} with {marker!r}.")
        if self._cells[index] != EMPTY:
            raise InvalidMoveError(f"Square {index} is already taken by {self._cells[index]}.")
        self._cells[index] = marker

    def unmarked_indices(self) -> List[int]:
        return [index for index in INDICES if self._cells[index] == EMPTY]

    def is_full(self) -> bool:
        return not self.unmarked_indices()

    def winning_line(self) -> Optional[Line]:
        # Catalog order decides which line is reported if more than one is complete.
        for line in LINES:
            a, b, c = (self._cells[i] for i in line)
            if a != EMPTY and a == b == c:
                return line
        return None

    def winning_marker(self) -> Optional[str]:
        line = self.winning_line()
        if line is None:
            return None
        return self._cells[line[0]]

    def reset(self) -> None:
        for index in INDICES:
            self._cells[index] = EMPTY
        logger.debug("grid reset")

    def cells(self) -> Dict[int, str]:
        return dict(self._cells)

    def line_cells(self, line: Line) -> Tuple[str, str, str]:
        a, b, c = line
        return self._cells[a], self._cells[b], self._cells[c]

    def rows(self) -> List[Tuple[str, str, str]]:
        return [self.line_cells(row) for row in ROWS]
