"""High-level orchestration for the stock prediction pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .core.data_loader import SymbolDirectory, read_return_series
from .core.monte_carlo import MonteCarloConfig, run_symbol_simulation
from .core.ranking import RankingCriterion, TopNSelector
from .core.thresholds import classify_all
from .core.validator import (
    ValidationError,
    validate_simulation_settings,
    validate_top_x,
)
from .models.prediction import Prediction
from .models.results import EngineResults

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
SymbolSeries = Tuple[str, Sequence[float]]

EMPTY_SERIES_REASON = "empty return series"


def _simulate_worker(
    symbol: str,
    data: Sequence[float],
    metadata: Dict[str, object],
    seed: np.random.SeedSequence,
) -> Optional[Prediction]:
    """Process-pool entry point; must stay importable at module level."""
    config = MonteCarloConfig.from_metadata(metadata)
    return run_symbol_simulation(symbol, data, config, rng=seed)


class PredictionEngine:
    """Primary entry point for simulating, ranking and classifying symbols."""

    def __init__(
        self,
        config: Optional[MonteCarloConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or LOGGER
        self._config = MonteCarloConfig()
        self._primary = RankingCriterion.MOST_COMMON
        self.set_config(config or MonteCarloConfig())

    # ------------------------------------------------------------ Configuration
    def set_config(self, config: MonteCarloConfig) -> None:
        """Validate and register the run configuration."""
        validate_simulation_settings(
            config.periods, config.num_simulations, config.base_investment
        )
        validate_top_x(config.top_x)
        if config.max_workers < 1:
            raise ValidationError("max_workers must be at least 1")
        if config.batch_size < 1:
            raise ValidationError("batch_size must be at least 1")
        try:
            primary = RankingCriterion.parse(config.primary_criterion)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        self._primary = primary
        self._config = replace(config, primary_criterion=primary.value)

    @property
    def config(self) -> MonteCarloConfig:
        return self._config

    @property
    def primary(self) -> RankingCriterion:
        return self._primary

    # --------------------------------------------------------------- Execution
    def run_directory(
        self,
        directory: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EngineResults:
        """Simulate every symbol file in ``directory`` and rank the results.

        A missing directory raises :class:`SimulationError`; unreadable or
        malformed symbol files are logged and skipped.
        """
        source = SymbolDirectory(
            Path(directory), archive=self._config.archive_inputs, logger=self.logger
        )
        results = EngineResults()
        jobs: List[SymbolSeries] = []
        for symbol_file in source:
            try:
                data = read_return_series(symbol_file.path)
            except ValidationError as exc:
                self.logger.warning("%s: %s", symbol_file.symbol, exc)
                results.add_failure(symbol_file.symbol, exc)
                results.symbols_processed += 1
                continue
            jobs.append((symbol_file.symbol, data))
        for symbol, reason in source.errors:
            results.add_failure(symbol, reason)

        results.metadata["input_directory"] = str(directory)
        return self._run(jobs, results, progress_callback)

    def run_series(
        self,
        series: Union[Mapping[str, Sequence[float]], Sequence[SymbolSeries]],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> EngineResults:
        """Simulate in-memory return series (symbol -> returns) and rank them."""
        items = list(series.items()) if isinstance(series, Mapping) else list(series)
        return self._run(items, EngineResults(), progress_callback)

    def rank(self, predictions: Sequence[Prediction]) -> EngineResults:
        """Rank and classify already computed predictions."""
        results = EngineResults(predictions=list(predictions))
        self._finalise(results)
        return results

    # ----------------------------------------------------------------- Helpers
    def _emit(
        self,
        callback: Optional[ProgressCallback],
        step: int,
        total: int,
        message: str,
    ) -> None:
        if callback is None:
            return
        try:
            callback(step, total, message)
        except Exception as exc:  # pragma: no cover - guard rail
            self.logger.warning("Progress callback failed: %s", exc)

    def _run(
        self,
        jobs: List[SymbolSeries],
        results: EngineResults,
        progress_callback: Optional[ProgressCallback],
    ) -> EngineResults:
        config = self._config
        started = datetime.now()

        runnable: List[SymbolSeries] = []
        for symbol, data in jobs:
            if len(data) == 0:
                self.logger.warning("%s: %s", symbol, EMPTY_SERIES_REASON)
                results.add_failure(symbol, EMPTY_SERIES_REASON)
                results.symbols_processed += 1
            else:
                runnable.append((symbol, data))
        jobs = runnable

        total = max(len(jobs), 1)
        self._emit(progress_callback, 0, total, "Starting simulations...")

        seeds = np.random.SeedSequence(config.random_seed).spawn(len(jobs))
        if config.max_workers > 1 and len(jobs) > 1:
            outcomes = self._simulate_parallel(jobs, seeds, progress_callback)
        else:
            outcomes = self._simulate_sequential(jobs, seeds, progress_callback)

        for (symbol, _data), outcome in zip(jobs, outcomes):
            results.symbols_processed += 1
            if isinstance(outcome, Prediction):
                results.predictions.append(outcome)
            else:
                results.add_failure(symbol, outcome)

        self._finalise(results)
        results.metadata.update(
            {
                "config": config.to_metadata(),
                "started_at": started.isoformat(timespec="seconds"),
                "finished_at": datetime.now().isoformat(timespec="seconds"),
            }
        )
        self.logger.info("N/A: processed %d symbols", results.symbols_processed)
        return results

    def _log_begin(self, symbol: str, data: Sequence[float]) -> None:
        self.logger.info("%s: simulation begin", symbol)
        self.logger.info(
            "%s: %d items, %d periods, %d simulations",
            symbol,
            len(data),
            self._config.periods,
            self._config.num_simulations,
        )

    def _simulate_one(
        self, symbol: str, data: Sequence[float], seed: np.random.SeedSequence
    ) -> Union[Prediction, str]:
        config = self._config
        self._log_begin(symbol, data)
        try:
            prediction = run_symbol_simulation(
                symbol, data, config, rng=seed, logger=self.logger
            )
        except (ValueError, ValidationError) as exc:
            self.logger.warning("%s: %s", symbol, exc)
            prediction = None
            reason: str = str(exc)
        else:
            reason = "no simulation results"
        self.logger.info("%s: simulation end", symbol)
        return prediction if prediction is not None else reason

    def _simulate_sequential(
        self,
        jobs: List[SymbolSeries],
        seeds: List[np.random.SeedSequence],
        progress_callback: Optional[ProgressCallback],
    ) -> List[Union[Prediction, str]]:
        outcomes: List[Union[Prediction, str]] = []
        for index, ((symbol, data), seed) in enumerate(zip(jobs, seeds), start=1):
            outcomes.append(self._simulate_one(symbol, data, seed))
            self._emit(progress_callback, index, len(jobs), f"Simulated {symbol}")
        return outcomes

    def _simulate_parallel(
        self,
        jobs: List[SymbolSeries],
        seeds: List[np.random.SeedSequence],
        progress_callback: Optional[ProgressCallback],
    ) -> List[Union[Prediction, str]]:
        metadata = self._config.to_metadata()
        outcomes: List[Union[Prediction, str]] = []
        with ProcessPoolExecutor(max_workers=self._config.max_workers) as executor:
            futures = []
            for (symbol, data), seed in zip(jobs, seeds):
                self._log_begin(symbol, data)
                futures.append(
                    executor.submit(_simulate_worker, symbol, list(data), metadata, seed)
                )
            # collected in submission order so ranking sees the input order
            for index, ((symbol, _data), future) in enumerate(zip(jobs, futures), start=1):
                try:
                    prediction = future.result()
                except Exception as exc:
                    # a broken pool or unpicklable result fails this symbol only
                    self.logger.warning("%s: %s", symbol, exc)
                    outcomes.append(str(exc) or type(exc).__name__)
                else:
                    if prediction is None:
                        self.logger.warning("%s: no simulation results", symbol)
                        outcomes.append("no simulation results")
                    else:
                        outcomes.append(prediction)
                self.logger.info("%s: simulation end", symbol)
                self._emit(progress_callback, index, len(jobs), f"Simulated {symbol}")
        return outcomes

    def _finalise(self, results: EngineResults) -> None:
        self.logger.info("N/A: determine top x begin")
        selector = TopNSelector(self._config.top_x, self._primary)
        selector.extend(results.predictions)
        results.top_predictions = selector.results()
        self.logger.info("N/A: determine top x end")
        results.thresholds, results.classified = classify_all(results.top_predictions)
        results.metadata["primary_criterion"] = self._primary.value


__all__ = ["PredictionEngine"]
