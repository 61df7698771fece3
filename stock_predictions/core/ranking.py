"""Ranking criteria and bounded top-N selection."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Dict, Iterable, List, Union

from ..models.prediction import Outcome, Prediction, TopPrediction


class RankingCriterion(str, Enum):
    """Interchangeable scoring strategies over a prediction's percentiles."""

    MOST_COMMON = "most_common"
    HIGHEST_LOW = "highest_low"
    TOTAL_SPAN = "total_span"
    WEIGHTED_SPAN = "weighted_span"

    @classmethod
    def parse(cls, value: Union[str, "RankingCriterion"]) -> "RankingCriterion":
        """Accept enum members or names such as ``"Total-Span"``."""
        if isinstance(value, RankingCriterion):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported ranking criterion {value!r} (choose from: {choices})"
            ) from exc

    @property
    def label(self) -> str:
        return _LABELS[self]

    def score(self, prediction: Prediction) -> Outcome:
        """Compute this criterion's score for ``prediction``."""
        return _SCORERS[self](prediction)

    def compare(self, left: Outcome, right: Outcome) -> int:
        """Return 1 when ``left`` ranks higher than ``right``, -1 when lower, else 0."""
        if left == right:
            return 0
        higher = left > right
        if self in _LOWER_IS_BETTER:
            higher = not higher
        return 1 if higher else -1


_SCORERS: Dict[RankingCriterion, Callable[[Prediction], Outcome]] = {
    RankingCriterion.MOST_COMMON: lambda p: p.percentiles.p50,
    RankingCriterion.HIGHEST_LOW: lambda p: p.percentiles.p25,
    RankingCriterion.TOTAL_SPAN: lambda p: p.percentiles.p75 - p.percentiles.p25,
    RankingCriterion.WEIGHTED_SPAN: lambda p: (
        p.percentiles.p75 + p.percentiles.p25 - 2 * p.percentiles.p50
    ),
}

_LOWER_IS_BETTER = frozenset({RankingCriterion.TOTAL_SPAN})

_LABELS: Dict[RankingCriterion, str] = {
    RankingCriterion.MOST_COMMON: "Most common result",
    RankingCriterion.HIGHEST_LOW: "Bottom 25th",
    RankingCriterion.TOTAL_SPAN: "25th to 75th span",
    RankingCriterion.WEIGHTED_SPAN: "Weighted span",
}


def build_top_prediction(
    prediction: Prediction, primary: RankingCriterion
) -> TopPrediction:
    """Compute every criterion score for ``prediction``."""
    return TopPrediction(
        symbol=prediction.symbol,
        primary_criterion=primary.value,
        most_common=RankingCriterion.MOST_COMMON.score(prediction),
        highest_low=RankingCriterion.HIGHEST_LOW.score(prediction),
        total_span=RankingCriterion.TOTAL_SPAN.score(prediction),
        weighted_span=RankingCriterion.WEIGHTED_SPAN.score(prediction),
    )


class TopNSelector:
    """Maintain the best ``top_x`` entries ordered by the primary criterion.

    A new entry goes in front of the first incumbent that does not rank
    strictly higher; the list is truncated to ``top_x`` after each insert.
    ``offer`` holds a lock, so several producers may share one selector.
    """

    def __init__(
        self,
        top_x: int,
        primary: Union[str, RankingCriterion] = RankingCriterion.MOST_COMMON,
    ) -> None:
        if top_x < 0:
            raise ValueError("top_x cannot be negative")
        self.top_x = top_x
        self.primary = RankingCriterion.parse(primary)
        self._results: List[TopPrediction] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def offer(self, prediction: Prediction) -> None:
        entry = build_top_prediction(prediction, self.primary)
        primary_calc = entry.primary_score
        with self._lock:
            index = 0
            while (
                index < len(self._results)
                and self.primary.compare(self._results[index].primary_score, primary_calc) > 0
            ):
                index += 1
            self._results.insert(index, entry)
            del self._results[self.top_x:]

    def extend(self, predictions: Iterable[Prediction]) -> None:
        for prediction in predictions:
            self.offer(prediction)

    def results(self) -> List[TopPrediction]:
        """Return a snapshot of the ranked list, best first."""
        with self._lock:
            return list(self._results)


def get_highest_x(
    top_x: int,
    predictions: Iterable[Prediction],
    primary: Union[str, RankingCriterion] = RankingCriterion.MOST_COMMON,
) -> List[TopPrediction]:
    """Return the ``top_x`` best predictions ranked by ``primary``."""
    selector = TopNSelector(top_x, primary)
    selector.extend(predictions)
    return selector.results()


__all__ = [
    "RankingCriterion",
    "TopNSelector",
    "build_top_prediction",
    "get_highest_x",
]
