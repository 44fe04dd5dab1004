"""Terminal collaborators: board drawing, prompts that retry on bad input, and the thinking pause."""

import os
import random
import time
from typing import Callable, Iterable, List, Optional, Sequence

from .board import Grid
from .engine import Player, Renderer, RoundOutcome

COMPUTER_NAMES = ("R2D2", "Hal", "Chappie", "Sonny", "Number 5")
PROMPT = "=> "


def joinor(items: Iterable[object], delim: str = ", ", join_word: str = "or") -> str:
    """Join items for a prompt: "1", "1 or 2", "1, 2, or 3"."""
    words = [str(item) for item in items]
    if len(words) <= 2:
        return f" {join_word} ".join(words)
    return delim.join(words[:-1]) + f"{delim}{join_word} {words[-1]}"


def clear_screen() -> None:
    os.system("cls" if os.name == "nt" else "clear")


def pick_computer_name(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(COMPUTER_NAMES)


def format_board(grid: Grid) -> str:
    spacer = "     |     |"
    lines = []
    for r, row in enumerate(grid.rows()):
        lines.append(spacer)
        lines.append("  " + "  |  ".join(row))
        lines.append(spacer)
        if r < 2:
            lines.append("-----+-----+-----")
    return "\n".join(lines)


def ask_yes_no(question: str, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    read = input_fn or input
    while True:
        answer = read(f"{PROMPT}{question} (y/n): ").strip().lower()
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        print("Sorry, must be y or n.")


def ask_name(input_fn: Optional[Callable[[str], str]] = None) -> str:
    read = input_fn or input
    while True:
        name = read(f"{PROMPT}What's your name? ").strip()
        if name:
            return name
        print("Sorry, must enter a value.")


class ConsoleInput:
    """Reads a square number from the terminal until it names one of the open squares."""

    def __init__(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        self.input_fn = input_fn

    def request_move(self, legal_indices: Sequence[int]) -> int:
        while True:
            read = self.input_fn or input
            text = read(f"{PROMPT}Choose a square ({joinor(legal_indices)}): ").strip()
            try:
                choice = int(text)
            except ValueError:
                choice = None
            if choice in legal_indices:
                return choice
            print("Sorry, that's not a valid choice.")


FIREWORKS_WIDTH = 21
FIREWORKS_HEIGHT = 5
FIREWORKS_FRAMES = 40
FIREWORKS_REFRESH = 0.1
SPARK_SPRITES = (".", ".", ".", ".", ".", "*", "%", "*", "%", ".")


class Spark:
    """One rocket: climbs to a random height, then burns through its sprites and goes out."""

    def __init__(self, x: int, rng: random.Random) -> None:
        self.x = x
        self.y = FIREWORKS_HEIGHT - 1
        self.height = rng.randint(3, FIREWORKS_HEIGHT)
        self.frame = FIREWORKS_HEIGHT - self.height

    @property
    def active(self) -> bool:
        return self.frame < len(SPARK_SPRITES)

    def step(self) -> None:
        if self.y > FIREWORKS_HEIGHT - self.height:
            self.y -= 1
        self.frame += 1


def fireworks_frames(rng: random.Random, frames: int = FIREWORKS_FRAMES) -> List[List[str]]:
    """Pre-compute the celebration animation as a list of frames, each a list of text rows."""
    sparks: List[Spark] = []
    out = []
    for _ in range(frames):
        if rng.randrange(100) > 65:
            sparks.append(Spark(rng.randrange(FIREWORKS_WIDTH), rng))
        rows = [[" "] * FIREWORKS_WIDTH for _ in range(FIREWORKS_HEIGHT)]
        sparks = [spark for spark in sparks if spark.active]
        for spark in sparks:
            rows[spark.y][spark.x] = SPARK_SPRITES[spark.frame]
            spark.step()
        out.append(["".join(row) for row in rows])
    return out


class ConsoleRenderer(Renderer):
    def __init__(
        self,
        score_limit: int,
        human_markers: Sequence[str] = ("X",),
        clear: bool = True,
        delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        fireworks: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.score_limit = score_limit
        self.human_markers = tuple(human_markers)
        self.clear = clear
        self.delay = delay
        self.sleep = sleep
        self.fireworks = fireworks
        self.rng = rng or random.Random()
        self.rounds_started = 0
        self._players: Sequence[Player] = ()

    def _refresh(self, grid: Grid, players: Sequence[Player]) -> None:
        if self.clear:
            clear_screen()
        print(" | ".join(f"{p.name} is {p.marker}" for p in players))
        print()
        print(format_board(grid))
        print()

    def _thinking(self, player: Player) -> None:
        if self.delay <= 0:
            return
        print(f"{player.name} is thinking", end="", flush=True)
        for _ in range(3):
            self.sleep(self.delay / 3)
            print(".", end="", flush=True)
        print()

    def _celebrate(self, message: str) -> None:
        for frame in fireworks_frames(self.rng):
            if self.clear:
                clear_screen()
            print("\n".join(frame))
            print(message)
            self.sleep(FIREWORKS_REFRESH)

    def round_started(self, grid: Grid, players: Sequence[Player]) -> None:
        if self.rounds_started:
            print("Let's play again!")
            if self.delay > 0:
                self.sleep(self.delay)
        self.rounds_started += 1
        self._players = players
        self._refresh(grid, players)

    def move_made(self, grid: Grid, player: Player, index: int) -> None:
        is_computer = player.marker not in self.human_markers
        if is_computer:
            self._thinking(player)
        self._refresh(grid, self._players or [player])
        if is_computer:
            print(f"{player.name} marked square {index}.")

    def round_finished(self, grid: Grid, outcome: RoundOutcome, players: Sequence[Player]) -> None:
        if outcome.is_tie:
            print("It's a tie!")
            return
        winner = next(p for p in players if p.marker == outcome.winner)
        if winner.marker in self.human_markers:
            print(f"You won, {winner.name}!")
        else:
            print(f"{winner.name} won!")

    def scores_changed(self, players: Sequence[Player]) -> None:
        board = "  |  ".join(f"{p.name} ({p.marker}): {p.score}" for p in players)
        print(f"Score (first to {self.score_limit}): {board}")

    def match_finished(self, champion: Optional[Player], players: Sequence[Player]) -> None:
        if champion is None:
            print("No champion this time.")
            return
        if champion.marker in self.human_markers:
            message = f"You are the champion, {champion.name}!"
        else:
            message = f"{champion.name} is the champion!"
        # No animation without pauses (--delay 0, --auto).
        if self.fireworks and self.delay > 0:
            self._celebrate(message)
        else:
            print(message)
