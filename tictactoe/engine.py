"""Rounds and matches: alternate turns until a line or a full board, keep score until someone hits the limit."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .board import Grid, Line
from .strategy import MoveStrategy

logger = logging.getLogger(__name__)

DEFAULT_SCORE_LIMIT = 2
MoveLog = List[Tuple[str, int]]


@dataclass
class Player:
    marker: str
    name: str
    strategy: MoveStrategy
    score: int = 0

    def __setattr__(self, name: str, value: object) -> None:
        # Marker is fixed once assigned; score and name stay mutable.
        if name == "marker" and "marker" in self.__dict__:
            raise AttributeError(f"{self.name} already plays {self.marker!r}")
        super().__setattr__(name, value)

    def choose_move(self, grid: Grid) -> int:
        return self.strategy.choose_move(grid, self.marker)


@dataclass(frozen=True)
class RoundOutcome:
    """Result of one round: a winning marker and line, or neither for a tie."""

    winner: Optional[str] = None
    line: Optional[Line] = None
    moves: Tuple[Tuple[str, int], ...] = ()

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    def as_dict(self) -> Dict[str, object]:
        return {
            "winner": self.winner,
            "line": list(self.line) if self.line else None,
            "moves": [list(move) for move in self.moves],
        }


class RoundState(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    TIED = "tied"


class RoundOverError(RuntimeError):
    """Raised when a turn is requested after the round already ended."""


class Renderer:
    """Sink for observable game state. Every hook is a no-op; console and tests override what they need."""

    def round_started(self, grid: Grid, players: Sequence[Player]) -> None:
        pass

    def move_made(self, grid: Grid, player: Player, index: int) -> None:
        pass

    def round_finished(self, grid: Grid, outcome: RoundOutcome, players: Sequence[Player]) -> None:
        pass

    def scores_changed(self, players: Sequence[Player]) -> None:
        pass

    def match_finished(self, champion: Optional[Player], players: Sequence[Player]) -> None:
        pass


def _check_pair(players: Sequence[Player]) -> Tuple[Player, Player]:
    if len(players) != 2:
        raise ValueError(f"A game needs exactly two players, got {len(players)}")
    first, second = players
    if first.marker == second.marker:
        raise ValueError(f"Both players use marker {first.marker!r}")
    return first, second


class Round:
    """
    One play-through from an empty grid to a win or a tie.

    The grid is reset on construction. ``play_turn`` advances a single move so
    drivers can step through a round; ``play`` runs it to the end.
    """

    def __init__(
        self,
        grid: Grid,
        players: Sequence[Player],
        first_to_move: Optional[str] = None,
        renderer: Optional[Renderer] = None,
    ) -> None:
        self.grid = grid
        self.players = _check_pair(players)
        self._by_marker = {player.marker: player for player in self.players}
        first_to_move = first_to_move or self.players[0].marker
        if first_to_move not in self._by_marker:
            raise ValueError(f"No player uses marker {first_to_move!r}")
        self.current_marker = first_to_move
        self.renderer = renderer or Renderer()
        self.state = RoundState.IN_PROGRESS
        self.moves: MoveLog = []
        self.outcome: Optional[RoundOutcome] = None
        self.grid.reset()

    @property
    def current_player(self) -> Player:
        return self._by_marker[self.current_marker]

    @property
    def is_over(self) -> bool:
        return self.state is not RoundState.IN_PROGRESS

    def _switch_player(self) -> None:
        first, second = self.players
        self.current_marker = second.marker if self.current_marker == first.marker else first.marker

    def play_turn(self) -> RoundState:
        if self.is_over:
            raise RoundOverError("The round is already over.")

        player = self.current_player
        idx = player.choose_move(self.grid)
        # An illegal index here is a strategy bug; InvalidMoveError propagates.
        self.grid.mark(idx, player.marker)
        self.moves.append((player.marker, idx))
        logger.debug("%s (%s) marks %d", player.name, player.marker, idx)
        self.renderer.move_made(self.grid, player, idx)

        line = self.grid.winning_line()
        if line is not None:
            self.state = RoundState.WON
            self.outcome = RoundOutcome(winner=player.marker, line=line, moves=tuple(self.moves))
        elif self.grid.is_full():
            self.state = RoundState.TIED
            self.outcome = RoundOutcome(moves=tuple(self.moves))
        else:
            self._switch_player()
        return self.state

    def play(self) -> RoundOutcome:
        self.renderer.round_started(self.grid, self.players)
        while not self.is_over:
            self.play_turn()
        assert self.outcome is not None
        logger.info("round over: %s", "tie" if self.outcome.is_tie else f"{self.outcome.winner} on {self.outcome.line}")
        self.renderer.round_finished(self.grid, self.outcome, self.players)
        return self.outcome


@dataclass
class Match:
    """
    A run of rounds with persistent scores; first player to ``score_limit`` round wins is champion.

    ``continue_match`` is asked between rounds while nobody has reached the limit;
    answering no ends the match without a champion, as does reaching ``max_rounds``.
    """

    players: Sequence[Player]
    score_limit: int = DEFAULT_SCORE_LIMIT
    first_to_move: Optional[str] = None
    renderer: Renderer = field(default_factory=Renderer)
    continue_match: Optional[Callable[["Match"], bool]] = None
    max_rounds: Optional[int] = None
    grid: Grid = field(default_factory=Grid)
    rounds_played: int = 0
    champion: Optional[Player] = None
    forfeited: bool = False
    outcomes: List[RoundOutcome] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.players = _check_pair(self.players)
        if self.score_limit < 1:
            raise ValueError(f"score_limit must be at least 1, got {self.score_limit}")
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError(f"max_rounds must be at least 1, got {self.max_rounds}")

    @property
    def is_over(self) -> bool:
        return self.champion is not None or self.forfeited

    @property
    def scores(self) -> Dict[str, int]:
        return {player.marker: player.score for player in self.players}

    def player_for(self, marker: str) -> Player:
        for player in self.players:
            if player.marker == marker:
                return player
        raise KeyError(marker)

    def play_round(self) -> RoundOutcome:
        if self.is_over:
            raise RoundOverError("The match is already over.")
        outcome = Round(self.grid, self.players, self.first_to_move, self.renderer).play()
        self.rounds_played += 1
        self.outcomes.append(outcome)

        if not outcome.is_tie:
            winner = self.player_for(outcome.winner)
            winner.score += 1
            if winner.score >= self.score_limit:
                self.champion = winner
        self.renderer.scores_changed(self.players)
        return outcome

    def play(self) -> Optional[Player]:
        while not self.is_over:
            self.play_round()
            if self.is_over:
                break
            if self.max_rounds is not None and self.rounds_played >= self.max_rounds:
                logger.info("no champion after %d rounds", self.rounds_played)
                self.forfeited = True
                break
            if self.continue_match is not None and not self.continue_match(self):
                logger.info("match abandoned after %d rounds", self.rounds_played)
                self.forfeited = True
        self.renderer.match_finished(self.champion, self.players)
        return self.champion

    def summary(self) -> Dict[str, object]:
        return {
            "players": [
                {"name": player.name, "marker": player.marker, "score": player.score}
                for player in self.players
            ],
            "scores": self.scores,
            "score_limit": self.score_limit,
            "rounds": self.rounds_played,
            "champion": self.champion.name if self.champion else None,
            "champion_marker": self.champion.marker if self.champion else None,
            "forfeited": self.forfeited,
            "results": [outcome.as_dict() for outcome in self.outcomes],
        }
