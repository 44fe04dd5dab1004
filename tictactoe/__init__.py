"""Terminal tic-tac-toe: rounds against a heuristic computer opponent, first to the score limit is champion."""

from .board import CENTER, EMPTY, LINES, MARKERS, Grid, InvalidMoveError, Line, other_marker
from .engine import Match, Player, Renderer, Round, RoundOutcome, RoundOverError, RoundState
from .strategy import DIFFICULTIES, HeuristicStrategy, HumanStrategy, MoveStrategy

__version__ = "1.0.0"

__all__ = [
    "CENTER",
    "DIFFICULTIES",
    "EMPTY",
    "LINES",
    "MARKERS",
    "Grid",
    "HeuristicStrategy",
    "HumanStrategy",
    "InvalidMoveError",
    "Line",
    "Match",
    "MoveStrategy",
    "Player",
    "Renderer",
    "Round",
    "RoundOutcome",
    "RoundOverError",
    "RoundState",
    "other_marker",
]
