"""Move selection: a human deferring to an input provider, and the heuristic computer opponent."""

import logging
import random
from typing import Dict, List, Optional, Protocol, Sequence

from .board import CENTER, EMPTY, LINES, Grid

logger = logging.getLogger(__name__)

DEFAULT_FALLIBILITY = 0.10
DIFFICULTIES: Dict[str, float] = {
    "Easy": 0.5,
    "Normal": DEFAULT_FALLIBILITY,
    "Hard": 0.0,
}


class MoveStrategy(Protocol):
    def choose_move(self, grid: Grid, marker: str) -> int:
        ...


class InputProvider(Protocol):
    def request_move(self, legal_indices: Sequence[int]) -> int:
        ...


def find_opportunity(grid: Grid, marker: str) -> Optional[int]:
    """Return the empty square that completes a line for marker, if any."""
    for line in LINES:
        cells = grid.line_cells(line)
        if cells.count(EMPTY) == 1 and cells.count(marker) == 2:
            return line[cells.index(EMPTY)]
    return None


def find_threat(grid: Grid, marker: str) -> Optional[int]:
    """Return the empty square the opponent of marker needs to complete a line, if any."""
    for line in LINES:
        cells = grid.line_cells(line)
        if cells.count(EMPTY) != 1 or cells.count(marker) != 0:
            continue
        first, second = (cell for cell in cells if cell != EMPTY)
        if first == second:
            return line[cells.index(EMPTY)]
    return None


class HumanStrategy:
    """Defers to the input provider, which only ever returns one of the offered squares."""

    def __init__(self, input_provider: InputProvider) -> None:
        self.input_provider = input_provider

    def choose_move(self, grid: Grid, marker: str) -> int:
        return self.input_provider.request_move(grid.unmarked_indices())


class HeuristicStrategy:
    """
    Computer opponent: win if it can, block if it must, take the center, else play randomly.

    ``fallibility`` is the chance that the whole heuristic is skipped for a random legal move.
    ``rng`` is any ``random.Random``; pass a seeded one for reproducible play.
    """

    def __init__(self, fallibility: float = DEFAULT_FALLIBILITY, rng: Optional[random.Random] = None) -> None:
        if not 0.0 <= fallibility <= 1.0:
            raise ValueError(f"fallibility must be between 0 and 1, got {fallibility}")
        self.fallibility = fallibility
        self.rng = rng or random.Random()

    def __repr__(self) -> str:
        return f"HeuristicStrategy(fallibility={self.fallibility})"

    def choose_move(self, grid: Grid, marker: str) -> int:
        open_spots: List[int] = grid.unmarked_indices()
        if not open_spots:
            raise ValueError("No legal moves left on a full grid.")

        if self.rng.random() < self.fallibility:
            idx = self.rng.choice(open_spots)
            logger.debug("%s slipped up, random move %d", marker, idx)
            return idx

        win_idx = find_opportunity(grid, marker)
        if win_idx is not None:
            logger.debug("%s completes a line at %d", marker, win_idx)
            return win_idx

        block_idx = find_threat(grid, marker)
        if block_idx is not None:
            logger.debug("%s blocks at %d", marker, block_idx)
            return block_idx

        if CENTER in open_spots:
            return CENTER

        return self.rng.choice(open_spots)


def fallibility_for(difficulty: str) -> float:
    options = {name.lower(): value for name, value in DIFFICULTIES.items()}
    try:
        return options[difficulty.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown difficulty {difficulty!r}; choose from {', '.join(DIFFICULTIES)}") from None
