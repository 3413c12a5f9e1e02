from __future__ import annotations

import random
import unittest

from emadraw.draw import EXHAUSTED, draw_excluding, draw_with_reset
from emadraw.exceptions import NothingToDrawError


class FixedRandom(random.Random):
    """Random source replaying a fixed list of picks."""

    def __init__(self, picks: list[int]) -> None:
        super().__init__(0)
        self.picks = list(picks)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        return self.picks.pop(0)


class DrawExcludingTests(unittest.TestCase):
    def test_returns_value_outside_history(self) -> None:
        rng = random.Random(1234)
        for bound in range(1, 12):
            for size in range(bound):
                history = rng.sample(range(1, bound + 1), size)
                value = draw_excluding(history, bound, rng=rng)
                self.assertNotEqual(value, EXHAUSTED)
                self.assertGreaterEqual(value, 1)
                self.assertLessEqual(value, bound)
                self.assertNotIn(value, history)

    def test_full_history_is_exhausted(self) -> None:
        for bound in (1, 2, 5, 20):
            history = [str(v) for v in range(1, bound + 1)]
            self.assertIs(draw_excluding(history, bound), EXHAUSTED)

    def test_bound_below_one_is_exhausted(self) -> None:
        self.assertIs(draw_excluding([], 0), EXHAUSTED)
        self.assertIs(draw_excluding([], -3), EXHAUSTED)

    def test_only_remaining_value_is_found(self) -> None:
        self.assertEqual(draw_excluding(["1", "3"], 3), 2)

    def test_non_integer_entries_count_as_zero(self) -> None:
        value = draw_excluding(["abc", "", "1"], 2)
        self.assertEqual(value, 2)

    def test_retries_random_picks_before_scanning(self) -> None:
        rng = FixedRandom([1, 2, 4])
        value = draw_excluding([1, 2, 3], 5, max_attempts=3, rng=rng)
        self.assertEqual(value, 4)
        self.assertEqual(rng.calls, 3)

    def test_falls_back_to_smallest_free_value(self) -> None:
        rng = FixedRandom([1, 1])
        value = draw_excluding([1, 2], 5, max_attempts=2, rng=rng)
        self.assertEqual(value, 3)
        self.assertEqual(rng.calls, 2)

    def test_zero_attempts_scans_directly(self) -> None:
        rng = FixedRandom([])
        self.assertEqual(draw_excluding([1], 3, max_attempts=0, rng=rng), 2)
        self.assertEqual(rng.calls, 0)

    def test_exhausted_sentinel_is_falsy(self) -> None:
        self.assertFalse(EXHAUSTED)
        self.assertEqual(repr(EXHAUSTED), "EXHAUSTED")


class DrawWithResetTests(unittest.TestCase):
    def test_appends_value_to_history(self) -> None:
        outcome = draw_with_reset(["1", "3"], 3)
        self.assertEqual(outcome.value, 2)
        self.assertEqual(outcome.history, ["1", "3", "2"])
        self.assertFalse(outcome.reset)

    def test_exhausted_pool_resets(self) -> None:
        outcome = draw_with_reset(["1", "2", "3"], 3)
        self.assertTrue(outcome.reset)
        self.assertEqual(len(outcome.history), 1)
        self.assertIn(outcome.value, (1, 2, 3))
        self.assertEqual(outcome.history, [str(outcome.value)])

    def test_input_history_is_not_mutated(self) -> None:
        history = ["2"]
        draw_with_reset(history, 2)
        self.assertEqual(history, ["2"])

    def test_keeps_stored_entries_verbatim(self) -> None:
        outcome = draw_with_reset(["x", "1"], 2)
        self.assertEqual(outcome.history, ["x", "1", "2"])

    def test_bound_zero_raises(self) -> None:
        with self.assertRaises(NothingToDrawError):
            draw_with_reset([], 0)


if __name__ == "__main__":
    unittest.main()
