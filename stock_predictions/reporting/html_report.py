"""Static HTML rendering of a classified, ranked prediction list."""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Mapping, Optional, Sequence

from ..core.ranking import RankingCriterion
from ..models.prediction import ClassifiedPrediction, Prediction
from ..visualization.prediction_plots import build_distribution_figure

PAGE_TITLE = "Stock Predictions"

STYLE = """
body { font-family: Roboto, "Open Sans", sans-serif; background: #FAFAFA; color: #1E1E1E; margin: 0 2rem 2rem; }
h1 { font-weight: 500; }
.items-container { display: flex; flex-wrap: wrap; gap: 1rem; }
.item-container { background: #FFFFFF; border: 1px solid #E0E0E0; border-radius: 6px; padding: 0.75rem 1rem; min-width: 16rem; }
.item-header { font-size: 1.25rem; font-weight: bold; margin-bottom: 0.5rem; }
.info { margin: 0.2rem 0; }
.primary { font-weight: bold; }
.green { color: #2E7D32; }
.yellow { color: #B8860B; }
.red { color: #D32F2F; }
.chart { margin-top: 0.5rem; }
"""

def _info_row(item: ClassifiedPrediction, criterion: RankingCriterion) -> str:
    band = getattr(item, criterion.value).value
    css = f"primary {band}" if criterion.value == item.entry.primary_criterion else band
    value = escape(str(item.entry.score_for(criterion)))
    return f'<div class="info">{escape(criterion.label)}: <span class="{css}">{value}</span></div>'


def _item_html(item: ClassifiedPrediction, prediction: Optional[Prediction]) -> str:
    symbol = escape(item.symbol)
    parts = [
        '<div class="item-container">',
        f'<div class="item-header" id="{symbol}">{symbol}</div>',
    ]
    parts.extend(_info_row(item, criterion) for criterion in RankingCriterion)
    if prediction is not None:
        figure = build_distribution_figure(prediction)
        if figure is not None:
            chart = figure.to_html(full_html=False, include_plotlyjs=False)
            parts.append(f'<div class="chart">{chart}</div>')
    parts.append("</div>")
    return "\n".join(parts)


def build_html(
    classified: Sequence[ClassifiedPrediction],
    *,
    generated_at: Optional[datetime] = None,
    predictions: Optional[Mapping[str, Prediction]] = None,
) -> str:
    """Return a complete HTML page for the ranked list.

    ``predictions`` (symbol -> prediction) enables an embedded distribution
    chart for every symbol whose distribution was retained.
    """
    generated_at = generated_at or datetime.now()
    heading = generated_at.strftime(f"{PAGE_TITLE} - %B %d, %Y")
    predictions = predictions or {}
    items = [_item_html(item, predictions.get(item.symbol)) for item in classified]
    has_charts = any(
        predictions[item.symbol].distribution
        for item in classified
        if item.symbol in predictions
    )
    plotly_script = (
        '<script src="https://cdn.plot.ly/plotly-2.35.2.min.js"></script>\n'
        if has_charts
        else ""
    )
    body = "\n".join(items) if items else '<div class="info">No predictions available.</div>'
    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{PAGE_TITLE}</title>\n"
        f"<style>{STYLE}</style>\n"
        f"{plotly_script}"
        "</head>\n<body>\n"
        f"<h1>{escape(heading)}</h1>\n"
        f'<div class="items-container">\n{body}\n</div>\n'
        "</body>\n</html>\n"
    )


__all__ = ["PAGE_TITLE", "build_html"]
