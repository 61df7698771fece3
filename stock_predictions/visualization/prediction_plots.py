"""Charts for ranked predictions and outcome distributions."""

from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import plotly.graph_objects as go

from ..models.prediction import ClassifiedPrediction, Prediction
from .figure_utils import label_horizontal_bars
from .themes import DEFAULT_THEME


def plot_primary_scores(
    classified: Sequence[ClassifiedPrediction],
    *,
    title: str = "Top Predictions",
    theme: Optional[dict] = None,
) -> plt.Figure:
    """Horizontal bar chart of the primary score, best symbol on top."""
    theme = theme or DEFAULT_THEME
    bands = theme["bands"]
    fig, ax = plt.subplots(figsize=(8, max(2.5, 0.4 * len(classified) + 1)))
    if not classified:
        ax.text(0.5, 0.5, "No predictions", ha="center", va="center", transform=ax.transAxes)
        ax.set_axis_off()
        return fig

    criterion = classified[0].entry.primary_criterion
    symbols = [item.symbol for item in classified][::-1]
    values = [float(item.entry.primary_score) for item in classified][::-1]
    colours = [bands[getattr(item, criterion).value] for item in classified][::-1]

    bars = ax.barh(symbols, values, color=colours, edgecolor="#424242", linewidth=0.5)
    ax.axvline(0, color=theme["palette"]["neutral"], linewidth=0.8)
    label_horizontal_bars(ax, bars)
    ax.set_title(title)
    ax.set_xlabel(criterion.replace("_", " ").title() + " (%)")
    ax.grid(axis="x", alpha=0.3)
    fig.tight_layout()
    return fig


def build_distribution_figure(
    prediction: Prediction,
    *,
    theme: Optional[dict] = None,
) -> Optional[go.Figure]:
    """Bar chart of a retained outcome distribution with percentile markers."""
    if not prediction.distribution:
        return None
    theme = theme or DEFAULT_THEME
    palette = theme["palette"]
    outcomes = list(prediction.distribution.keys())
    counts = list(prediction.distribution.values())

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=outcomes,
            y=counts,
            marker=dict(color=palette["primary_blue"]),
            hovertemplate="Outcome %{x}%<br>Count %{y}<extra></extra>",
            name=prediction.symbol,
        )
    )
    percentiles = prediction.percentiles
    for label, value in (("25th", percentiles.p25), ("50th", percentiles.p50), ("75th", percentiles.p75)):
        fig.add_vline(
            x=value,
            line=dict(color=palette["primary_navy"], dash="dash", width=1),
            annotation_text=label,
            annotation_position="top",
        )
    fig.update_layout(
        template=theme["plotly_template"],
        title=f"{prediction.symbol} outcome distribution ({prediction.trials:,} trials)",
        xaxis_title="Outcome (%)",
        yaxis_title="Trials",
        showlegend=False,
        height=320,
        margin=dict(l=40, r=20, t=50, b=40),
    )
    return fig


__all__ = ["build_distribution_figure", "plot_primary_scores"]
