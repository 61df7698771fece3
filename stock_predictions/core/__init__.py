"""Simulation, scoring and ranking algorithms."""

from .data_loader import SymbolDirectory, parse_return_series, read_return_series
from .monte_carlo import (
    MonteCarloConfig,
    monte_carlo_simulation,
    perform_simulation_calculation,
    simulate_period,
)
from .percentiles import get_percentiles
from .ranking import RankingCriterion, TopNSelector, get_highest_x
from .thresholds import classify, classify_all, get_thresholds
from .validator import SimulationError, ValidationError

__all__ = [
    "MonteCarloConfig",
    "RankingCriterion",
    "SimulationError",
    "SymbolDirectory",
    "TopNSelector",
    "ValidationError",
    "classify",
    "classify_all",
    "get_highest_x",
    "get_percentiles",
    "get_thresholds",
    "monte_carlo_simulation",
    "parse_return_series",
    "perform_simulation_calculation",
    "read_return_series",
    "simulate_period",
]
