"""Visualization utilities for prediction reports."""

from .figure_utils import label_horizontal_bars, save_figure
from .prediction_plots import build_distribution_figure, plot_primary_scores
from .themes import DEFAULT_THEME

__all__ = [
    "DEFAULT_THEME",
    "build_distribution_figure",
    "label_horizontal_bars",
    "plot_primary_scores",
    "save_figure",
]
