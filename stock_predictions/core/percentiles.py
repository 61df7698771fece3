"""Percentile extraction from outcome frequency distributions."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence

import pandas as pd

from ..models.prediction import Outcome

DEFAULT_PERCENTILES: Sequence[int] = (25, 50, 75)


def get_percentiles(
    distribution: Mapping[Outcome, int],
    total: int,
    percentiles: Iterable[int] = DEFAULT_PERCENTILES,
) -> Optional[Dict[int, Outcome]]:
    """Resolve percentile cut-points with a single ascending scan.

    Each percentile's target count is ``total * pct // 100``. Targets are kept
    highest-to-lowest and consumed from the low end, so one pass over the
    ascending cumulative count can settle several of them on the same key.
    Returns ``None`` for an empty distribution.
    """
    if not distribution:
        return None

    requested = sorted(set(int(p) for p in percentiles), reverse=True)
    for pct in requested:
        if not 0 <= pct <= 100:
            raise ValueError(f"Percentile out of range: {pct}")

    pending = [(pct, total * pct // 100) for pct in requested]
    resolved: Dict[int, Outcome] = {}
    running = 0
    last_key: Optional[Outcome] = None
    for key in sorted(distribution):
        running += distribution[key]
        last_key = key
        while pending and running >= pending[-1][1]:
            pct, _target = pending.pop()
            resolved[pct] = key
        if not pending:
            break

    # total exceeded the tallied counts; unresolved cut-points take the top key
    for pct, _target in pending:
        resolved[pct] = last_key

    return {pct: resolved[pct] for pct in sorted(resolved)}


def percentile_table(values: Mapping[int, Outcome]) -> pd.DataFrame:
    """Return a percentile ladder as a dataframe."""
    ladder = [{"percentile": pct, "outcome": values[pct]} for pct in sorted(values)]
    return pd.DataFrame(ladder, columns=["percentile", "outcome"])


def distribution_frame(distribution: Mapping[Outcome, int]) -> pd.DataFrame:
    """Return an outcome distribution as an ascending table with cumulative share."""
    frame = pd.DataFrame(
        sorted(distribution.items()), columns=["outcome", "count"]
    )
    if frame.empty:
        frame["cumulative_share"] = pd.Series(dtype=float)
        return frame
    frame["cumulative_share"] = frame["count"].cumsum() / frame["count"].sum()
    return frame


__all__ = [
    "DEFAULT_PERCENTILES",
    "distribution_frame",
    "get_percentiles",
    "percentile_table",
]
