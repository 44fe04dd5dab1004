import random
import unittest

from tictactoe.board import CENTER, LINES, MARKERS, Grid, other_marker
from tictactoe.strategy import (
    DIFFICULTIES,
    HeuristicStrategy,
    HumanStrategy,
    fallibility_for,
    find_opportunity,
    find_threat,
)


class FixedRandom(random.Random):
    """Always rolls ``roll`` and always picks the first option."""

    def __init__(self, roll: float) -> None:
        super().__init__(0)
        self.roll = roll

    def random(self) -> float:
        return self.roll

    def choice(self, seq):
        return seq[0]


class RecordingInput:
    def __init__(self, answer: int) -> None:
        self.answer = answer
        self.offered = None

    def request_move(self, legal_indices):
        self.offered = list(legal_indices)
        return self.answer


def reliable() -> HeuristicStrategy:
    return HeuristicStrategy(fallibility=0.0, rng=random.Random(1))


class TestPatterns(unittest.TestCase):
    def test_every_opportunity_pattern_is_found(self) -> None:
        for line in LINES:
            for empty_idx in line:
                for marker in MARKERS:
                    with self.subTest(line=line, empty=empty_idx, marker=marker):
                        grid = Grid()
                        for idx in line:
                            if idx != empty_idx:
                                grid.mark(idx, marker)
                        self.assertEqual(find_opportunity(grid, marker), empty_idx)
                        self.assertEqual(reliable().choose_move(grid, marker), empty_idx)

    def test_every_threat_pattern_is_found(self) -> None:
        for line in LINES:
            for empty_idx in line:
                for marker in MARKERS:
                    with self.subTest(line=line, empty=empty_idx, marker=marker):
                        grid = Grid()
                        for idx in line:
                            if idx != empty_idx:
                                grid.mark(idx, other_marker(marker))
                        self.assertIsNone(find_opportunity(grid, marker))
                        self.assertEqual(find_threat(grid, marker), empty_idx)
                        self.assertEqual(reliable().choose_move(grid, marker), empty_idx)

    def test_line_holding_own_marker_is_not_a_threat(self) -> None:
        grid = Grid.from_string("XO.......")
        self.assertIsNone(find_threat(grid, "O"))
        self.assertIsNone(find_threat(grid, "X"))

    def test_split_line_is_not_an_opportunity(self) -> None:
        grid = Grid.from_string("OXO......")
        self.assertIsNone(find_opportunity(grid, "O"))


class TestHeuristicStrategy(unittest.TestCase):
    def test_takes_the_win_before_blocking(self) -> None:
        grid = Grid.from_string("OO.XX....")
        self.assertEqual(reliable().choose_move(grid, "O"), 3)

    def test_win_preempts_block_even_later_in_catalog(self) -> None:
        # X threatens the top row; O can complete the bottom row.
        grid = Grid.from_string("XX....OO.")
        self.assertEqual(find_threat(grid, "O"), 3)
        self.assertEqual(reliable().choose_move(grid, "O"), 9)

    def test_blocks_the_opponent(self) -> None:
        grid = Grid.from_string("XX..O....")
        self.assertEqual(reliable().choose_move(grid, "O"), 3)

    def test_prefers_center_on_an_empty_board(self) -> None:
        for marker in MARKERS:
            self.assertEqual(reliable().choose_move(Grid(), marker), CENTER)

    def test_falls_back_to_a_random_open_square(self) -> None:
        grid = Grid.from_string("....X....")
        strategy = HeuristicStrategy(fallibility=0.0, rng=FixedRandom(0.99))
        self.assertEqual(strategy.choose_move(grid, "O"), 1)

    def test_seeded_fallbacks_are_reproducible(self) -> None:
        grid = Grid.from_string("....X....")
        first = HeuristicStrategy(0.0, random.Random(42)).choose_move(grid, "O")
        second = HeuristicStrategy(0.0, random.Random(42)).choose_move(grid, "O")
        self.assertEqual(first, second)
        self.assertIn(first, grid.unmarked_indices())

    def test_slip_up_skips_the_heuristic(self) -> None:
        grid = Grid.from_string(".X.OO....")
        self.assertEqual(HeuristicStrategy(0.5, FixedRandom(0.1)).choose_move(grid, "O"), 1)
        self.assertEqual(HeuristicStrategy(0.5, FixedRandom(0.9)).choose_move(grid, "O"), 6)

    def test_full_fallibility_always_plays_legal_moves(self) -> None:
        strategy = HeuristicStrategy(fallibility=1.0, rng=random.Random(3))
        grid = Grid()
        marker = "X"
        while not grid.is_full():
            idx = strategy.choose_move(grid, marker)
            self.assertIn(idx, grid.unmarked_indices())
            grid.mark(idx, marker)
            marker = other_marker(marker)

    def test_rejects_out_of_range_fallibility(self) -> None:
        with self.assertRaises(ValueError):
            HeuristicStrategy(fallibility=1.5)
        with self.assertRaises(ValueError):
            HeuristicStrategy(fallibility=-0.1)

    def test_full_grid_has_no_move(self) -> None:
        with self.assertRaises(ValueError):
            reliable().choose_move(Grid.from_string("XOXXOOOXX"), "X")


class TestHumanStrategy(unittest.TestCase):
    def test_offers_open_squares_and_returns_the_answer(self) -> None:
        provider = RecordingInput(answer=9)
        grid = Grid.from_string("XO..X....")
        self.assertEqual(HumanStrategy(provider).choose_move(grid, "O"), 9)
        self.assertEqual(provider.offered, [3, 4, 6, 7, 8, 9])


def test_difficulty_presets():
    assert fallibility_for("hard") == 0.0
    assert fallibility_for(" Normal ") == DIFFICULTIES["Normal"]
    assert fallibility_for("Easy") > fallibility_for("Normal")


def test_unknown_difficulty_raises():
    try:
        fallibility_for("Impossible")
    except ValueError as exc:
        assert "Impossible" in str(exc)
    else:
        raise AssertionError("expected ValueError")


if __name__ == "__main__":
    unittest.main()
