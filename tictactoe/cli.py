"""Command-line entry point: play a match against the computer, or watch two computers play."""

import argparse
import json
import logging
import random
from typing import Dict, List, Optional

from .board import MARKERS
from .console import ConsoleInput, ConsoleRenderer, ask_name, ask_yes_no, pick_computer_name
from .engine import Match, Player, Renderer
from .settings import MAX_SCORE_LIMIT, GameSettings, resolve_settings
from .strategy import DIFFICULTIES, HeuristicStrategy, HumanStrategy, fallibility_for

logger = logging.getLogger(__name__)

AUTO_MAX_ROUNDS = 100


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tic-Tac-Toe against a scripted computer opponent.")
    parser.add_argument("--score-limit", type=int, help="Round wins needed to become champion (default 2).")
    ai = parser.add_mutually_exclusive_group()
    ai.add_argument("--fallibility", type=float, help="Chance (0-1) that the computer ignores its heuristic.")
    ai.add_argument("--difficulty", choices=tuple(DIFFICULTIES), help="Named fallibility preset.")
    parser.add_argument("--first", choices=MARKERS, help="Marker that moves first in every round.")
    parser.add_argument("--name", help="Your name (skips the prompt).")
    parser.add_argument("--seed", type=int, help="Seed the computer's random choices.")
    parser.add_argument("--settings", help="Path to a JSON settings file (or set TICTACTOE_SETTINGS).")
    parser.add_argument(
        "--auto",
        action="store_true",
        help=f"Computer vs computer with no prompts (stops after {AUTO_MAX_ROUNDS} rounds unless --max-rounds is set).",
    )
    parser.add_argument("--max-rounds", type=positive_int, help="Stop without a champion after this many rounds.")
    parser.add_argument("--no-clear", action="store_true", help="Do not clear the screen between moves.")
    parser.add_argument("--delay", type=float, help="Seconds the computer 'thinks' before each move.")
    parser.add_argument(
        "--output",
        choices=("text", "json"),
        default="text",
        help="Choose text (default) or a json match summary at the end.",
    )
    parser.add_argument("--result-file", help="Optional path to write the summary JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def apply_args(settings: GameSettings, args: argparse.Namespace) -> GameSettings:
    if args.score_limit is not None:
        settings.score_limit = min(max(1, args.score_limit), MAX_SCORE_LIMIT)
    if args.difficulty:
        settings.fallibility = fallibility_for(args.difficulty)
    if args.fallibility is not None:
        settings.fallibility = min(max(0.0, args.fallibility), 1.0)
    if args.first:
        settings.first_to_move = args.first
    if args.seed is not None:
        settings.seed = args.seed
    if args.no_clear:
        settings.clear_screen = False
    if args.delay is not None:
        settings.computer_delay = max(0.0, args.delay)
    if args.auto:
        settings.clear_screen = False
        settings.computer_delay = 0.0
    return settings


def build_match(settings: GameSettings, args: argparse.Namespace) -> Match:
    rng = random.Random(settings.seed)
    computer_marker = settings.computer_marker
    computer = Player(computer_marker, pick_computer_name(rng), HeuristicStrategy(settings.fallibility, rng))

    if args.auto:
        rival_name = pick_computer_name(rng)
        while rival_name == computer.name:
            rival_name = pick_computer_name(rng)
        human = Player(settings.human_marker, rival_name, HeuristicStrategy(settings.fallibility, rng))
        human_markers: tuple = ()
    else:
        name = args.name or ask_name()
        human = Player(settings.human_marker, name, HumanStrategy(ConsoleInput()))
        human_markers = (human.marker,)

    players = sorted([human, computer], key=lambda p: MARKERS.index(p.marker))
    renderer: Renderer = ConsoleRenderer(
        settings.score_limit,
        human_markers=human_markers,
        clear=settings.clear_screen,
        delay=settings.computer_delay,
        fireworks=True,
        rng=rng,
    )
    max_rounds = args.max_rounds
    if args.auto and max_rounds is None:
        max_rounds = AUTO_MAX_ROUNDS
    continue_match = None if args.auto else (lambda match: ask_yes_no("Would you like to continue?"))
    return Match(
        players,
        score_limit=settings.score_limit,
        first_to_move=settings.first_to_move,
        renderer=renderer,
        continue_match=continue_match,
        max_rounds=max_rounds,
    )


def write_summary(summary: Dict[str, object], result_file: Optional[str]) -> None:
    payload = json.dumps(summary, indent=2)
    print(payload)
    if result_file:
        try:
            with open(result_file, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as exc:
            print(f"Could not write result file: {exc}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = apply_args(resolve_settings(args.settings), args)
    logger.debug("settings: %s", settings.as_dict())

    print("Welcome to Tic Tac Toe!")
    try:
        match = build_match(settings, args)
        match.play()
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted.")
        return
    print("Thanks for playing Tic Tac Toe! Goodbye!")

    if args.output == "json":
        write_summary(match.summary(), args.result_file)


if __name__ == "__main__":
    main()
