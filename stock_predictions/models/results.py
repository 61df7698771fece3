"""Result data models for reporting."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, Field

from .prediction import ClassifiedPrediction, Prediction, Thresholds, TopPrediction


class SymbolFailure(BaseModel):
    """A symbol that was skipped, with the reason it was skipped."""

    symbol: str = Field(..., description="Symbol identifier (or 'N/A')")
    reason: str = Field(..., description="Human readable failure reason")


class EngineResults(BaseModel):
    """Aggregates everything produced by a single prediction run."""

    predictions: List[Prediction] = Field(
        default_factory=list, description="Predictions in input order"
    )
    top_predictions: List[TopPrediction] = Field(
        default_factory=list, description="Bounded, ranked list (best first)"
    )
    thresholds: Thresholds = Field(default_factory=Thresholds)
    classified: List[ClassifiedPrediction] = Field(default_factory=list)
    failures: List[SymbolFailure] = Field(default_factory=list)
    symbols_processed: int = Field(0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def add_failure(self, symbol: str, reason: object) -> None:
        """Record a per-symbol failure."""
        self.failures.append(SymbolFailure(symbol=symbol, reason=str(reason)))

    def prediction_for(self, symbol: str) -> Optional[Prediction]:
        for prediction in self.predictions:
            if prediction.symbol == symbol:
                return prediction
        return None

    def summary_frame(self) -> pd.DataFrame:
        """Return the ranked list as a table (rank starts at 1)."""
        if not self.top_predictions:
            return pd.DataFrame()
        rows = []
        for rank, entry in enumerate(self.top_predictions, start=1):
            rows.append(
                {
                    "rank": rank,
                    "symbol": entry.symbol,
                    "primary_score": entry.primary_score,
                    "most_common": entry.most_common,
                    "highest_low": entry.highest_low,
                    "total_span": entry.total_span,
                    "weighted_span": entry.weighted_span,
                }
            )
        return pd.DataFrame(rows)

    def failure_frame(self) -> pd.DataFrame:
        return pd.DataFrame([failure.model_dump() for failure in self.failures])
