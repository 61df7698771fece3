import unittest

from stock_predictions.core.ranking import get_highest_x
from stock_predictions.core.thresholds import (
    classify,
    classify_all,
    get_thresholds,
    threshold_indices,
)
from stock_predictions.models import Band, Thresholds, TopPrediction

from tests.test_ranking import SAMPLE


def make_entry(symbol, most_common, highest_low, total_span, weighted_span):
    return TopPrediction(
        symbol=symbol,
        most_common=most_common,
        highest_low=highest_low,
        total_span=total_span,
        weighted_span=weighted_span,
    )


class ThresholdIndexTests(unittest.TestCase):
    def test_indices(self) -> None:
        self.assertEqual(threshold_indices(1), (0, 0))
        self.assertEqual(threshold_indices(2), (0, 1))
        self.assertEqual(threshold_indices(5), (0, 4))
        self.assertEqual(threshold_indices(6), (1, 4))
        self.assertEqual(threshold_indices(25), (7, 17))

    def test_indices_stay_in_range(self) -> None:
        for count in range(1, 60):
            low, high = threshold_indices(count)
            self.assertTrue(0 <= low <= high < count)

    def test_non_positive_count_rejected(self) -> None:
        with self.assertRaises(ValueError):
            threshold_indices(0)


class GetThresholdsTests(unittest.TestCase):
    def test_empty_list_gives_zeros(self) -> None:
        self.assertEqual(get_thresholds([]), Thresholds())

    def test_single_entry_uses_its_own_scores(self) -> None:
        thresholds = get_thresholds([make_entry("ONE", 4, -2, 7, 1)])
        self.assertEqual(
            thresholds,
            Thresholds(
                most_common_green=4,
                most_common_yellow=4,
                highest_low_green=-2,
                highest_low_yellow=-2,
                total_span_green=7,
                total_span_yellow=7,
            ),
        )

    def test_top_five_sample(self) -> None:
        thresholds = get_thresholds(get_highest_x(5, SAMPLE))
        self.assertEqual(thresholds.most_common_green, 9)
        self.assertEqual(thresholds.most_common_yellow, 2)
        self.assertEqual(thresholds.highest_low_green, 2)
        self.assertEqual(thresholds.highest_low_yellow, -9)
        self.assertEqual(thresholds.total_span_green, 3)
        self.assertEqual(thresholds.total_span_yellow, 33)

    def test_six_entries_index_into_sorted_scores(self) -> None:
        entries = [make_entry(f"S{i}", i, -i, 10 * i, 0) for i in range(6)]
        thresholds = get_thresholds(entries)
        # low index 1, high index 4
        self.assertEqual(thresholds.most_common_green, 4)
        self.assertEqual(thresholds.most_common_yellow, 1)
        self.assertEqual(thresholds.highest_low_green, -1)
        self.assertEqual(thresholds.highest_low_yellow, -4)
        self.assertEqual(thresholds.total_span_green, 10)
        self.assertEqual(thresholds.total_span_yellow, 40)


class ClassifyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.thresholds = Thresholds(
            most_common_green=9,
            most_common_yellow=2,
            highest_low_green=2,
            highest_low_yellow=-9,
            total_span_green=3,
            total_span_yellow=33,
        )

    def test_green_scores(self) -> None:
        result = classify(make_entry("G", 9, 2, 3, 1), self.thresholds)
        self.assertEqual(
            (result.most_common, result.highest_low, result.total_span, result.weighted_span),
            (Band.GREEN, Band.GREEN, Band.GREEN, Band.GREEN),
        )

    def test_red_scores(self) -> None:
        result = classify(make_entry("R", 1, -10, 34, -1), self.thresholds)
        self.assertEqual(
            (result.most_common, result.highest_low, result.total_span, result.weighted_span),
            (Band.RED, Band.RED, Band.RED, Band.RED),
        )

    def test_yellow_scores_include_boundaries(self) -> None:
        result = classify(make_entry("Y", 2, -9, 33, 0), self.thresholds)
        self.assertEqual(
            (result.most_common, result.highest_low, result.total_span, result.weighted_span),
            (Band.YELLOW, Band.YELLOW, Band.YELLOW, Band.YELLOW),
        )
        self.assertEqual(result.symbol, "Y")

    def test_classify_all_keeps_order(self) -> None:
        ranked = get_highest_x(5, SAMPLE)
        thresholds, classified = classify_all(ranked)
        self.assertEqual(thresholds, get_thresholds(ranked))
        self.assertEqual([c.symbol for c in classified], [r.symbol for r in ranked])
        first, last = classified[0], classified[-1]
        self.assertEqual(first.most_common, Band.GREEN)
        self.assertEqual(first.highest_low, Band.YELLOW)
        self.assertEqual(first.total_span, Band.YELLOW)
        self.assertEqual(first.weighted_span, Band.GREEN)
        self.assertEqual(last.most_common, Band.YELLOW)
        self.assertEqual(last.total_span, Band.GREEN)
        self.assertEqual(last.weighted_span, Band.RED)

    def test_classify_all_empty(self) -> None:
        self.assertEqual(classify_all([]), (Thresholds(), []))


if __name__ == "__main__":
    unittest.main()
