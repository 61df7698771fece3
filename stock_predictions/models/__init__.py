"""Data models shared across the prediction pipeline."""

from .prediction import (
    Band,
    ClassifiedPrediction,
    Outcome,
    Percentiles,
    Prediction,
    Thresholds,
    TopPrediction,
)
from .results import EngineResults, SymbolFailure

__all__ = [
    "Band",
    "ClassifiedPrediction",
    "EngineResults",
    "Outcome",
    "Percentiles",
    "Prediction",
    "SymbolFailure",
    "Thresholds",
    "TopPrediction",
]
