"""Input validation utilities."""

from __future__ import annotations

import math
from typing import Iterable, List


class ValidationError(Exception):
    """Custom error for validation related issues."""


class SimulationError(Exception):
    """Raised when the pipeline cannot acquire its inputs at all."""


def validate_return_values(values: Iterable[float]) -> List[float]:
    """Ensure every return is a finite number."""
    checked: List[float] = []
    for index, value in enumerate(values):
        if not math.isfinite(value):
            raise ValidationError(f"Non-finite return at position {index}: {value!r}")
        checked.append(float(value))
    return checked


def validate_simulation_settings(
    periods: int, number_of_simulations: int, base_investment: float
) -> None:
    """Ensure the simulation settings are usable."""
    if periods < 0:
        raise ValidationError("periods cannot be negative")
    if number_of_simulations < 0:
        raise ValidationError("number_of_simulations cannot be negative")
    if not math.isfinite(base_investment) or base_investment <= 0:
        raise ValidationError("base_investment must be a positive number")


def validate_top_x(top_x: int) -> None:
    if top_x < 0:
        raise ValidationError("top_x cannot be negative")
