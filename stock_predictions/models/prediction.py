"""Prediction and ranking data models."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Outcome = Union[int, float]

# score fields of TopPrediction, one per ranking criterion
CRITERION_NAMES = ("most_common", "highest_low", "total_span", "weighted_span")


class Percentiles(BaseModel):
    """Percentile cut-points derived from a completed outcome distribution."""

    model_config = ConfigDict(frozen=True)

    p25: Outcome = Field(..., description="25th percentile outcome")
    p50: Outcome = Field(..., description="50th percentile (median) outcome")
    p75: Outcome = Field(..., description="75th percentile outcome")

    @classmethod
    def from_mapping(cls, values: Dict[int, Outcome]) -> "Percentiles":
        """Build from a ``{percentile: outcome}`` mapping."""
        missing = {25, 50, 75} - set(values)
        if missing:
            raise ValueError(
                "Missing percentile(s): " + ", ".join(str(p) for p in sorted(missing))
            )
        return cls(p25=values[25], p50=values[50], p75=values[75])


class Prediction(BaseModel):
    """Simulation result for a single symbol, handed off to ranking."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Symbol identifier")
    percentiles: Percentiles = Field(..., description="Percentile cut-points")
    trials: int = Field(0, ge=0, description="Number of trials executed")
    sample_size: int = Field(0, ge=0, description="Length of the source return series")
    distribution: Optional[Dict[Outcome, int]] = Field(
        None,
        description="Outcome -> occurrence count, ascending by outcome (optional)",
    )

    @field_validator("symbol", mode="before")
    @classmethod
    def _coerce_symbol(cls, value: object) -> str:
        if value is None:
            raise ValueError("symbol cannot be null")
        symbol = str(value).strip()
        if not symbol:
            raise ValueError("symbol cannot be blank")
        return symbol


class TopPrediction(BaseModel):
    """Ranked entry: all four criterion scores for one symbol."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    primary_criterion: str = Field(
        "most_common", description="Criterion used to order the ranked list"
    )
    most_common: Outcome = Field(..., description="Median outcome")
    highest_low: Outcome = Field(..., description="25th percentile outcome")
    total_span: Outcome = Field(..., description="75th minus 25th percentile")
    weighted_span: Outcome = Field(
        ..., description="75th + 25th - 2 * median (skew measure)"
    )

    @field_validator("primary_criterion", mode="before")
    @classmethod
    def _check_criterion(cls, value: object) -> str:
        name = str(getattr(value, "value", value))
        if name not in CRITERION_NAMES:
            raise ValueError(
                f"Unsupported ranking criterion {name!r} "
                f"(choose from: {', '.join(CRITERION_NAMES)})"
            )
        return name

    def score_for(self, criterion: str) -> Outcome:
        """Return the stored score for a criterion name."""
        return getattr(self, str(getattr(criterion, "value", criterion)))

    @property
    def primary_score(self) -> Outcome:
        return self.score_for(self.primary_criterion)


class Thresholds(BaseModel):
    """Presentation cut-points derived from the final ranked list."""

    model_config = ConfigDict(frozen=True)

    most_common_green: Outcome = 0
    most_common_yellow: Outcome = 0
    highest_low_green: Outcome = 0
    highest_low_yellow: Outcome = 0
    total_span_green: Outcome = 0
    total_span_yellow: Outcome = 0


class Band(str, Enum):
    """Classification band used for report colouring."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ClassifiedPrediction(BaseModel):
    """A ranked entry together with its band per reported score."""

    model_config = ConfigDict(frozen=True)

    entry: TopPrediction
    most_common: Band
    highest_low: Band
    total_span: Band
    weighted_span: Band

    @property
    def symbol(self) -> str:
        return self.entry.symbol


__all__ = [
    "Band",
    "CRITERION_NAMES",
    "ClassifiedPrediction",
    "Outcome",
    "Percentiles",
    "Prediction",
    "Thresholds",
    "TopPrediction",
]
