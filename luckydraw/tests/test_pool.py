import random
import unittest

from luckydraw.pool import (
    available_numbers,
    can_draw,
    remaining_count,
    sample_many,
    sample_one,
    total_range,
    validate_settings,
)
from luckydraw.tests.fakes import FixedRandom
from luckydraw.types import Settings


class AvailableNumbersTests(unittest.TestCase):
    def test_returns_ascending_range_without_exclusions(self) -> None:
        self.assertEqual(available_numbers(3, 9, [4, 8, 8, 20]), [3, 5, 6, 7, 9])

    def test_no_exclusions_returns_full_range(self) -> None:
        self.assertEqual(available_numbers(-2, 2), [-2, -1, 0, 1, 2])

    def test_inverted_range_is_empty(self) -> None:
        self.assertEqual(available_numbers(5, 1, []), [])


class SampleOneTests(unittest.TestCase):
    def test_single_value_range(self) -> None:
        for _ in range(20):
            self.assertEqual(sample_one(1, 1, []), 1)

    def test_exhausted_pool_returns_none(self) -> None:
        self.assertIsNone(sample_one(1, 3, [1, 2, 3]))

    def test_inverted_range_returns_none(self) -> None:
        self.assertIsNone(sample_one(3, 1))

    def test_selection_is_over_available_set(self) -> None:
        rng = FixedRandom()
        self.assertEqual(sample_one(1, 10, [1, 2, 3], rng=rng), 4)
        self.assertEqual(rng.calls, [7])

        last = FixedRandom(pick_last=True)
        self.assertEqual(sample_one(1, 10, [9, 10], rng=last), 8)

    def test_seeded_source_is_reproducible(self) -> None:
        first = [sample_one(1, 100, rng=random.Random(42)) for _ in range(3)]
        second = [sample_one(1, 100, rng=random.Random(42)) for _ in range(3)]
        self.assertEqual(first, second)


class SampleManyTests(unittest.TestCase):
    def test_distinct_numbers_without_duplicates(self) -> None:
        result = sample_many(1, 10, 5, [], False)
        self.assertEqual(len(result), 5)
        self.assertEqual(len(set(result)), 5)
        self.assertTrue(all(1 <= n <= 10 for n in result))

    def test_duplicates_allowed_returns_full_count(self) -> None:
        result = sample_many(1, 3, 10, [], True)
        self.assertEqual(len(result), 10)
        self.assertTrue(all(1 <= n <= 3 for n in result))

    def test_exhaustion_truncates_result(self) -> None:
        result = sample_many(1, 3, 10, [], False)
        self.assertEqual(sorted(result), [1, 2, 3])

    def test_respects_existing_exclusions(self) -> None:
        result = sample_many(1, 6, 6, [2, 4], False)
        self.assertEqual(sorted(result), [1, 3, 5, 6])

    def test_duplicates_reuse_given_exclusions_only(self) -> None:
        self.assertEqual(sample_many(1, 3, 4, [1, 2], True), [3, 3, 3, 3])

    def test_non_positive_count_and_inverted_range(self) -> None:
        self.assertEqual(sample_many(1, 10, 0), [])
        self.assertEqual(sample_many(1, 10, -3), [])
        self.assertEqual(sample_many(10, 1, 3), [])


class CountingTests(unittest.TestCase):
    def test_total_range(self) -> None:
        self.assertEqual(total_range(1, 12), 12)
        self.assertEqual(total_range(5, 5), 1)
        self.assertEqual(total_range(9, 1), 0)

    def test_remaining_count(self) -> None:
        self.assertEqual(remaining_count(1, 12, [1, 2, 3], False), 9)
        self.assertEqual(remaining_count(1, 12, [1, 2, 3], True), 12)

    def test_can_draw(self) -> None:
        self.assertTrue(can_draw(1, 5, 2, [1, 2, 3], False))
        self.assertFalse(can_draw(1, 5, 3, [1, 2, 3], False))
        self.assertTrue(can_draw(1, 5, 5, [1, 2, 3], True))


class ValidateSettingsTests(unittest.TestCase):
    def test_valid_settings(self) -> None:
        result = validate_settings(Settings(start_number=1, end_number=45, draw_count=6))
        self.assertTrue(result.valid)
        self.assertIsNone(result.error)

    def test_inverted_bounds(self) -> None:
        result = validate_settings(Settings(start_number=45, end_number=1, draw_count=6))
        self.assertFalse(result.valid)
        self.assertIn("start number", result.error.lower())

    def test_draw_count_must_be_positive(self) -> None:
        result = validate_settings(Settings(start_number=1, end_number=5, draw_count=0))
        self.assertFalse(result.valid)
        self.assertIn("at least 1", result.error)

    def test_draw_count_exceeding_range(self) -> None:
        result = validate_settings(Settings(start_number=1, end_number=5, draw_count=10))
        self.assertFalse(result.valid)
        self.assertIn("exceed the range", result.error)

    def test_range_above_limit(self) -> None:
        result = validate_settings(Settings(start_number=1, end_number=20000, draw_count=1))
        self.assertFalse(result.valid)
        self.assertIn("10000", result.error)

    def test_range_limit_is_inclusive(self) -> None:
        self.assertTrue(
            validate_settings(Settings(start_number=1, end_number=10000, draw_count=1)).valid
        )

    def test_first_failing_rule_wins(self) -> None:
        result = validate_settings(Settings(start_number=9, end_number=1, draw_count=0))
        self.assertIn("start number", result.error.lower())

        result = validate_settings(Settings(start_number=1, end_number=20000, draw_count=0))
        self.assertIn("at least 1", result.error)

    def test_custom_limit(self) -> None:
        result = validate_settings(
            Settings(start_number=1, end_number=100, draw_count=1), max_range=50
        )
        self.assertFalse(result.valid)
        self.assertIn("50", result.error)


if __name__ == "__main__":
    unittest.main()
