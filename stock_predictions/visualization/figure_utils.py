"""Shared helpers for formatting matplotlib figures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import matplotlib.pyplot as plt

NumberFormatter = Callable[[float], str]


def _default_score_formatter(value: float) -> str:
    return f"{value:+,.0f}%"


def label_horizontal_bars(
    ax: plt.Axes,
    bars: Iterable[plt.Rectangle],
    *,
    formatter: Optional[NumberFormatter] = None,
    padding_ratio: float = 0.02,
    text_kwargs: Optional[Dict[str, object]] = None,
) -> None:
    """Annotate horizontal bars (positive or negative) with value labels."""
    formatter = formatter or _default_score_formatter
    text_kwargs = text_kwargs.copy() if text_kwargs else {"fontsize": 9, "fontweight": "bold", "color": "#203040"}

    bars = list(bars)
    values = [float(bar.get_width()) for bar in bars]
    if not values:
        return

    low = min(min(values), 0.0)
    high = max(max(values), 0.0)
    span = max(high - low, 1.0)
    pad = span * padding_ratio
    ax.set_xlim(low - span * 0.15, high + span * 0.15)

    for bar, value in zip(bars, values):
        y_center = bar.get_y() + bar.get_height() / 2.0
        if value >= 0:
            text_x, ha = value + pad, "left"
        else:
            text_x, ha = value - pad, "right"
        ax.text(
            text_x,
            y_center,
            formatter(value),
            ha=ha,
            va="center",
            clip_on=True,
            **text_kwargs,
        )


def save_figure(fig: plt.Figure, output_path: Path) -> Path:
    """Persist matplotlib figure to disk."""

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return output_path


__all__ = ["label_horizontal_bars", "save_figure"]
