import threading
import unittest

from stock_predictions.core.ranking import (
    RankingCriterion,
    TopNSelector,
    build_top_prediction,
    get_highest_x,
)
from stock_predictions.models import Percentiles, Prediction, TopPrediction


def make_prediction(symbol, p25, p50, p75):
    return Prediction(symbol=symbol, percentiles=Percentiles(p25=p25, p50=p50, p75=p75))


# Percentiles observed for ten symbols over 10 periods.
SAMPLE = [
    make_prediction("AAPB", -2, 2, 5),
    make_prediction("AAPL", -1, 2, 2),
    make_prediction("AAL", -7, -3, 1),
    make_prediction("AAPD", -2, -1, 1),
    make_prediction("AADI", -2, 4, 11),
    make_prediction("AADR", -2, -1, 0),
    make_prediction("AACG", -6, 9, 27),
    make_prediction("AAME", -14, -6, 3),
    make_prediction("AAON", 2, 5, 9),
    make_prediction("AAOI", -9, 3, 17),
]


class RankingCriterionTests(unittest.TestCase):
    def test_scores(self) -> None:
        prediction = make_prediction("AACG", -6, 9, 27)
        self.assertEqual(RankingCriterion.MOST_COMMON.score(prediction), 9)
        self.assertEqual(RankingCriterion.HIGHEST_LOW.score(prediction), -6)
        self.assertEqual(RankingCriterion.TOTAL_SPAN.score(prediction), 33)
        self.assertEqual(RankingCriterion.WEIGHTED_SPAN.score(prediction), 3)

    def test_higher_is_better_compare(self) -> None:
        for criterion in (
            RankingCriterion.MOST_COMMON,
            RankingCriterion.HIGHEST_LOW,
            RankingCriterion.WEIGHTED_SPAN,
        ):
            with self.subTest(criterion=criterion):
                self.assertEqual(criterion.compare(5, 3), 1)
                self.assertEqual(criterion.compare(3, 5), -1)
                self.assertEqual(criterion.compare(4, 4), 0)

    def test_total_span_prefers_narrow(self) -> None:
        self.assertEqual(RankingCriterion.TOTAL_SPAN.compare(5, 3), -1)
        self.assertEqual(RankingCriterion.TOTAL_SPAN.compare(3, 5), 1)
        self.assertEqual(RankingCriterion.TOTAL_SPAN.compare(4, 4), 0)

    def test_compare_is_antisymmetric(self) -> None:
        for criterion in RankingCriterion:
            for left, right in ((1, 2), (-3, 7), (0, 0)):
                self.assertEqual(
                    criterion.compare(left, right), -criterion.compare(right, left)
                )

    def test_parse(self) -> None:
        self.assertIs(RankingCriterion.parse("Total-Span"), RankingCriterion.TOTAL_SPAN)
        self.assertIs(RankingCriterion.parse("highest low"), RankingCriterion.HIGHEST_LOW)
        self.assertIs(
            RankingCriterion.parse(RankingCriterion.WEIGHTED_SPAN),
            RankingCriterion.WEIGHTED_SPAN,
        )
        with self.assertRaises(ValueError):
            RankingCriterion.parse("best")

    def test_build_top_prediction(self) -> None:
        entry = build_top_prediction(SAMPLE[1], RankingCriterion.TOTAL_SPAN)
        self.assertEqual(entry.symbol, "AAPL")
        self.assertEqual(
            (entry.most_common, entry.highest_low, entry.total_span, entry.weighted_span),
            (2, -1, 3, -3),
        )
        self.assertEqual(entry.primary_score, 3)

    def test_entry_rejects_unknown_primary_criterion(self) -> None:
        scores = dict(most_common=2, highest_low=-1, total_span=3, weighted_span=-3)
        for name in ("symbol", "best", ""):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    TopPrediction(symbol="AAPL", primary_criterion=name, **scores)
        entry = TopPrediction(
            symbol="AAPL", primary_criterion=RankingCriterion.HIGHEST_LOW, **scores
        )
        self.assertEqual(entry.primary_criterion, "highest_low")
        self.assertEqual(entry.primary_score, -1)


class GetHighestXTests(unittest.TestCase):
    def test_top_five_by_most_common(self) -> None:
        results = get_highest_x(5, SAMPLE)
        summary = [
            (r.symbol, r.most_common, r.highest_low, r.total_span, r.weighted_span)
            for r in results
        ]
        self.assertEqual(
            summary,
            [
                ("AACG", 9, -6, 33, 3),
                ("AAON", 5, 2, 7, 1),
                ("AADI", 4, -2, 13, 1),
                ("AAOI", 3, -9, 26, 2),
                ("AAPL", 2, -1, 3, -3),
            ],
        )

    def test_top_three_by_total_span(self) -> None:
        results = get_highest_x(3, SAMPLE, RankingCriterion.TOTAL_SPAN)
        self.assertEqual([r.symbol for r in results], ["AADR", "AAPD", "AAPL"])
        self.assertEqual([r.total_span for r in results], [2, 3, 3])

    def test_top_three_by_highest_low(self) -> None:
        results = get_highest_x(3, SAMPLE, "highest_low")
        self.assertEqual(results[0].symbol, "AAON")
        self.assertEqual([r.highest_low for r in results], [2, -1, -2])

    def test_result_is_sorted_for_every_criterion(self) -> None:
        for criterion in RankingCriterion:
            with self.subTest(criterion=criterion):
                results = get_highest_x(6, SAMPLE, criterion)
                self.assertEqual(len(results), 6)
                for better, worse in zip(results, results[1:]):
                    self.assertGreaterEqual(
                        criterion.compare(better.primary_score, worse.primary_score), 0
                    )

    def test_scores_are_order_independent(self) -> None:
        forward = get_highest_x(5, SAMPLE)
        backward = get_highest_x(5, list(reversed(SAMPLE)))
        self.assertEqual(
            [r.most_common for r in forward], [r.most_common for r in backward]
        )

    def test_fewer_inputs_than_limit(self) -> None:
        results = get_highest_x(25, SAMPLE[:3])
        self.assertEqual([r.symbol for r in results], ["AAPL", "AAPB", "AAL"])

    def test_zero_limit_and_empty_input(self) -> None:
        self.assertEqual(get_highest_x(0, SAMPLE), [])
        self.assertEqual(get_highest_x(5, []), [])

    def test_negative_limit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TopNSelector(-1)


class TopNSelectorTests(unittest.TestCase):
    def test_concurrent_offers_stay_bounded_and_sorted(self) -> None:
        selector = TopNSelector(10)
        predictions = [make_prediction(f"S{i:03d}", -i, i, 2 * i) for i in range(200)]

        def offer(chunk):
            for prediction in chunk:
                selector.offer(prediction)

        threads = [
            threading.Thread(target=offer, args=(predictions[start::4],))
            for start in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        results = selector.results()
        self.assertEqual(len(selector), 10)
        self.assertEqual([r.most_common for r in results], list(range(199, 189, -1)))

    def test_results_is_a_snapshot(self) -> None:
        selector = TopNSelector(2)
        selector.extend(SAMPLE[:2])
        snapshot = selector.results()
        snapshot.clear()
        self.assertEqual(len(selector), 2)


if __name__ == "__main__":
    unittest.main()
