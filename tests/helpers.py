from typing import List, Sequence

from tictactoe.board import Grid
from tictactoe.engine import Player, Renderer, RoundOutcome


class PreferenceStrategy:
    """Plays the first still-open square from a fixed preference list."""

    def __init__(self, preferences: Sequence[int]) -> None:
        self.preferences = list(preferences)

    def choose_move(self, grid: Grid, marker: str) -> int:
        open_spots = grid.unmarked_indices()
        for idx in self.preferences:
            if idx in open_spots:
                return idx
        return open_spots[0]


class RecordingRenderer(Renderer):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def round_started(self, grid, players) -> None:
        self.events.append(("round_started",))

    def move_made(self, grid: Grid, player: Player, index: int) -> None:
        self.events.append(("move", player.marker, index))

    def round_finished(self, grid, outcome: RoundOutcome, players) -> None:
        self.events.append(("round_finished", outcome.winner))

    def scores_changed(self, players) -> None:
        self.events.append(("scores", tuple(p.score for p in players)))

    def match_finished(self, champion, players) -> None:
        self.events.append(("match_finished", champion.marker if champion else None))

    def count(self, kind: str) -> int:
        return sum(1 for event in self.events if event[0] == kind)
