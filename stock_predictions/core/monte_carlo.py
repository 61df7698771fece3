"""Monte Carlo configuration, resampling and outcome simulation utilities."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union

import numpy as np

from .. import config as defaults
from ..models.prediction import Outcome, Percentiles, Prediction
from .percentiles import DEFAULT_PERCENTILES, get_percentiles

LOGGER = logging.getLogger(__name__)


@dataclass
class MonteCarloConfig:
    """Configuration bundle for a prediction run."""

    periods: int = defaults.DEFAULT_PERIODS
    num_simulations: int = defaults.DEFAULT_SIMULATIONS
    base_investment: float = defaults.BASE_INVESTMENT
    top_x: int = defaults.DEFAULT_TOP_X
    primary_criterion: str = defaults.DEFAULT_PRIMARY_CRITERION
    random_seed: Optional[int] = None
    rounded_outcomes: bool = True
    legacy_trial_count: bool = False
    retain_distributions: bool = False
    vectorized: bool = True
    batch_size: int = 50_000
    max_workers: int = 1
    archive_inputs: bool = True

    def to_metadata(self) -> Dict[str, object]:
        """Serialise into run metadata for persistence."""
        return {
            "periods": int(self.periods),
            "num_simulations": int(self.num_simulations),
            "base_investment": float(self.base_investment),
            "top_x": int(self.top_x),
            "primary_criterion": str(self.primary_criterion),
            "random_seed": self.random_seed,
            "rounded_outcomes": bool(self.rounded_outcomes),
            "legacy_trial_count": bool(self.legacy_trial_count),
            "retain_distributions": bool(self.retain_distributions),
            "vectorized": bool(self.vectorized),
            "batch_size": int(self.batch_size),
            "max_workers": int(self.max_workers),
            "archive_inputs": bool(self.archive_inputs),
        }

    @classmethod
    def from_metadata(cls, metadata: Dict[str, object]) -> "MonteCarloConfig":
        """Rehydrate a configuration from run metadata."""
        seed = metadata.get("random_seed")
        return cls(
            periods=int(metadata.get("periods", defaults.DEFAULT_PERIODS)),
            num_simulations=int(
                metadata.get("num_simulations", defaults.DEFAULT_SIMULATIONS)
            ),
            base_investment=float(
                metadata.get("base_investment", defaults.BASE_INVESTMENT)
            ),
            top_x=int(metadata.get("top_x", defaults.DEFAULT_TOP_X)),
            primary_criterion=str(
                metadata.get("primary_criterion", defaults.DEFAULT_PRIMARY_CRITERION)
            ),
            random_seed=int(seed) if seed is not None else None,
            rounded_outcomes=bool(metadata.get("rounded_outcomes", True)),
            legacy_trial_count=bool(metadata.get("legacy_trial_count", False)),
            retain_distributions=bool(metadata.get("retain_distributions", False)),
            vectorized=bool(metadata.get("vectorized", True)),
            batch_size=int(metadata.get("batch_size", 50_000)),
            max_workers=int(metadata.get("max_workers", 1)),
            archive_inputs=bool(metadata.get("archive_inputs", True)),
        )


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(value)
    floor = math.floor(magnitude)
    rounded = floor + 1 if magnitude - floor >= 0.5 else floor
    return int(math.copysign(rounded, value))


def _round_half_away_array(values: np.ndarray) -> np.ndarray:
    magnitude = np.abs(values)
    floor = np.floor(magnitude)
    rounded = floor + ((magnitude - floor) >= 0.5)
    return (np.sign(values) * rounded).astype(np.int64)


def trials_for(number_of_simulations: int, *, legacy_trial_count: bool = False) -> int:
    """Number of trials executed for a requested simulation count.

    In legacy mode the loop bound is exclusive and starts at one, so a request
    for ``T`` simulations runs ``T - 1`` trials.
    """
    if legacy_trial_count:
        return max(number_of_simulations - 1, 0)
    return max(number_of_simulations, 0)


def simulate_period(
    data: Sequence[float],
    periods: int,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Draw ``periods`` returns uniformly, with replacement, from ``data``."""
    if periods < 0:
        raise ValueError("periods cannot be negative")
    count = len(data)
    if count == 0:
        return np.array([], dtype=float)
    rng = rng if rng is not None else np.random.default_rng()
    indices = rng.integers(0, count, size=periods)
    return np.asarray(data, dtype=float)[indices]


def perform_simulation_calculation(
    rates: Sequence[float],
    base_investment: float = defaults.BASE_INVESTMENT,
    *,
    rounded: bool = True,
) -> Outcome:
    """Compound ``rates`` in order and return the gain/loss on the base investment."""
    investment = base_investment
    for rate in rates:
        investment += investment * float(rate)
    result = investment - base_investment
    if rounded:
        return round_half_away(result)
    return float(result)


def compound_paths(
    paths: np.ndarray,
    base_investment: float = defaults.BASE_INVESTMENT,
    *,
    rounded: bool = True,
) -> np.ndarray:
    """Row-wise :func:`perform_simulation_calculation` for a ``trials x periods`` matrix."""
    investment = np.full(paths.shape[0], base_investment, dtype=float)
    for column in range(paths.shape[1]):
        investment += investment * paths[:, column]
    result = investment - base_investment
    if rounded:
        return _round_half_away_array(result)
    return result


def tally_outcomes(
    data: Sequence[float],
    periods: int,
    trials: int,
    *,
    base_investment: float = defaults.BASE_INVESTMENT,
    rounded: bool = True,
    rng: Optional[np.random.Generator] = None,
    vectorized: bool = True,
    batch_size: int = 50_000,
) -> Dict[Outcome, int]:
    """Run ``trials`` resample-and-compound passes and count each outcome."""
    if periods < 0:
        raise ValueError("periods cannot be negative")
    rng = rng if rng is not None else np.random.default_rng()
    counts: Counter = Counter()

    if not vectorized:
        for _ in range(trials):
            path = simulate_period(data, periods, rng)
            counts[
                perform_simulation_calculation(path, base_investment, rounded=rounded)
            ] += 1
        return dict(sorted(counts.items()))

    values = np.asarray(data, dtype=float)
    batch_size = max(int(batch_size), 1)
    remaining = trials
    while remaining > 0:
        size = min(batch_size, remaining)
        if values.size == 0:
            paths = np.zeros((size, 0), dtype=float)
        else:
            paths = values[rng.integers(0, values.size, size=(size, periods))]
        outcomes = compound_paths(paths, base_investment, rounded=rounded)
        keys, key_counts = np.unique(outcomes, return_counts=True)
        counts.update(dict(zip(keys.tolist(), key_counts.tolist())))
        remaining -= size
    return dict(sorted(counts.items()))


def monte_carlo_simulation(
    symbol: str,
    data: Sequence[float],
    periods: int,
    number_of_simulations: int,
    *,
    base_investment: float = defaults.BASE_INVESTMENT,
    rounded: bool = True,
    legacy_trial_count: bool = False,
    retain_distribution: bool = False,
    rng: Optional[np.random.Generator] = None,
    logger: Optional[logging.Logger] = None,
    vectorized: bool = True,
    batch_size: int = 50_000,
) -> Optional[Prediction]:
    """Simulate one symbol and reduce its outcomes to a :class:`Prediction`.

    Returns ``None`` (after logging a diagnostic) when no trial was executed.
    """
    logger = logger or LOGGER
    trials = trials_for(number_of_simulations, legacy_trial_count=legacy_trial_count)
    if trials == 0:
        logger.warning("%s: no simulations were run", symbol)
        return None

    distribution = tally_outcomes(
        data,
        periods,
        trials,
        base_investment=base_investment,
        rounded=rounded,
        rng=rng,
        vectorized=vectorized,
        batch_size=batch_size,
    )
    if not distribution:
        logger.warning("%s: simulation produced no results", symbol)
        return None

    values = get_percentiles(distribution, sum(distribution.values()), DEFAULT_PERCENTILES)
    if values is None:
        logger.warning("%s: unable to derive percentiles", symbol)
        return None

    return Prediction(
        symbol=symbol,
        percentiles=Percentiles.from_mapping(values),
        trials=trials,
        sample_size=len(data),
        distribution=distribution if retain_distribution else None,
    )


def run_symbol_simulation(
    symbol: str,
    data: Sequence[float],
    config: MonteCarloConfig,
    *,
    rng: Optional[Union[np.random.Generator, np.random.SeedSequence]] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[Prediction]:
    """Run :func:`monte_carlo_simulation` with the settings of ``config``."""
    if isinstance(rng, np.random.SeedSequence):
        rng = np.random.default_rng(rng)
    return monte_carlo_simulation(
        symbol,
        data,
        config.periods,
        config.num_simulations,
        base_investment=config.base_investment,
        rounded=config.rounded_outcomes,
        legacy_trial_count=config.legacy_trial_count,
        retain_distribution=config.retain_distributions,
        rng=rng,
        logger=logger,
        vectorized=config.vectorized,
        batch_size=config.batch_size,
    )


__all__ = [
    "MonteCarloConfig",
    "compound_paths",
    "monte_carlo_simulation",
    "perform_simulation_calculation",
    "round_half_away",
    "run_symbol_simulation",
    "simulate_period",
    "tally_outcomes",
    "trials_for",
]
