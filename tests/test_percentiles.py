import unittest

from stock_predictions.core.percentiles import (
    distribution_frame,
    get_percentiles,
    percentile_table,
)


class GetPercentilesTests(unittest.TestCase):
    def test_twenty_unique_outcomes(self) -> None:
        distribution = {value: 1 for value in range(1, 21)}
        self.assertEqual(get_percentiles(distribution, 20), {25: 5, 50: 10, 75: 15})

    def test_empty_distribution_is_none(self) -> None:
        self.assertIsNone(get_percentiles({}, 0))

    def test_single_outcome_fills_every_cut_point(self) -> None:
        self.assertEqual(get_percentiles({2: 1}, 1), {25: 2, 50: 2, 75: 2})

    def test_one_key_can_settle_several_cut_points(self) -> None:
        self.assertEqual(get_percentiles({1: 10, 5: 10}, 20), {25: 1, 50: 1, 75: 5})

    def test_unordered_mapping_is_scanned_ascending(self) -> None:
        self.assertEqual(get_percentiles({4: 3, -3: 1}, 4), {25: -3, 50: 4, 75: 4})

    def test_cut_points_are_monotonic(self) -> None:
        distribution = {-12: 3, -4: 40, 0: 25, 3: 90, 8: 12, 21: 2}
        result = get_percentiles(distribution, sum(distribution.values()))
        self.assertLessEqual(result[25], result[50])
        self.assertLessEqual(result[50], result[75])
        for value in result.values():
            self.assertIn(value, distribution)

    def test_total_larger_than_counts_resolves_to_largest_key(self) -> None:
        self.assertEqual(get_percentiles({1: 1, 2: 1}, 100), {25: 2, 50: 2, 75: 2})

    def test_custom_percentiles(self) -> None:
        distribution = {value: 1 for value in range(1, 11)}
        self.assertEqual(
            get_percentiles(distribution, 10, percentiles=(90, 10)), {10: 1, 90: 9}
        )

    def test_out_of_range_percentile_rejected(self) -> None:
        with self.assertRaises(ValueError):
            get_percentiles({1: 1}, 1, percentiles=(50, 101))


class PercentileFrameTests(unittest.TestCase):
    def test_percentile_table_is_sorted(self) -> None:
        frame = percentile_table({75: 15, 25: 5, 50: 10})
        self.assertEqual(frame["percentile"].tolist(), [25, 50, 75])
        self.assertEqual(frame["outcome"].tolist(), [5, 10, 15])

    def test_distribution_frame_cumulative_share(self) -> None:
        frame = distribution_frame({3: 1, -1: 3})
        self.assertEqual(frame["outcome"].tolist(), [-1, 3])
        self.assertEqual(frame["cumulative_share"].tolist(), [0.75, 1.0])

    def test_empty_distribution_frame(self) -> None:
        frame = distribution_frame({})
        self.assertTrue(frame.empty)
        self.assertIn("cumulative_share", frame.columns)


if __name__ == "__main__":
    unittest.main()
