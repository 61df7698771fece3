"""Green/yellow/red thresholds for presenting a ranked list."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..models.prediction import Band, ClassifiedPrediction, Thresholds, TopPrediction


def threshold_indices(count: int) -> Tuple[int, int]:
    """Return ``(low_index, high_index)`` into a sorted list of ``count`` values."""
    if count <= 0:
        raise ValueError("count must be positive")
    threshold_length = max(count // 3, 1)
    low_index = threshold_length - 1
    high_index = min(count - threshold_length, count - 1)
    return low_index, high_index


def get_thresholds(calcs: Sequence[TopPrediction]) -> Thresholds:
    """Derive the six presentation cut-points from the final ranked list."""
    count = len(calcs)
    if count == 0:
        return Thresholds()

    low_index, high_index = threshold_indices(count)
    most_common_sorted = sorted(p.most_common for p in calcs)
    highest_low_sorted = sorted(p.highest_low for p in calcs)
    total_span_sorted = sorted(p.total_span for p in calcs)

    return Thresholds(
        most_common_green=most_common_sorted[high_index],
        most_common_yellow=most_common_sorted[low_index],
        highest_low_green=highest_low_sorted[high_index],
        highest_low_yellow=highest_low_sorted[low_index],
        # narrower spans are better, so the low end is green
        total_span_green=total_span_sorted[low_index],
        total_span_yellow=total_span_sorted[high_index],
    )


def _higher_is_better(value, green, yellow) -> Band:
    if value >= green:
        return Band.GREEN
    if value < yellow:
        return Band.RED
    return Band.YELLOW


def _lower_is_better(value, green, yellow) -> Band:
    if value <= green:
        return Band.GREEN
    if value > yellow:
        return Band.RED
    return Band.YELLOW


def _sign_band(value) -> Band:
    if value > 0:
        return Band.GREEN
    if value < 0:
        return Band.RED
    return Band.YELLOW


def classify(entry: TopPrediction, thresholds: Thresholds) -> ClassifiedPrediction:
    """Assign a band to each reported score of ``entry``."""
    return ClassifiedPrediction(
        entry=entry,
        most_common=_higher_is_better(
            entry.most_common, thresholds.most_common_green, thresholds.most_common_yellow
        ),
        highest_low=_higher_is_better(
            entry.highest_low, thresholds.highest_low_green, thresholds.highest_low_yellow
        ),
        total_span=_lower_is_better(
            entry.total_span, thresholds.total_span_green, thresholds.total_span_yellow
        ),
        weighted_span=_sign_band(entry.weighted_span),
    )


def classify_all(
    calcs: Sequence[TopPrediction],
) -> Tuple[Thresholds, List[ClassifiedPrediction]]:
    """Compute thresholds once and classify every entry against them."""
    thresholds = get_thresholds(calcs)
    return thresholds, [classify(entry, thresholds) for entry in calcs]


__all__ = ["classify", "classify_all", "get_thresholds", "threshold_indices"]
