"""Colour theme for prediction reports and charts."""

from __future__ import annotations

from typing import Dict

PRIMARY_BLUE = "#2E86AB"
PRIMARY_NAVY = "#1F4788"
POSITIVE_GREEN = "#4CAF50"
WARNING_YELLOW = "#F2C94C"
NEGATIVE_RED = "#FF5252"
NEUTRAL_GRAY = "#757575"
BACKGROUND = "#FAFAFA"
CARD_BACKGROUND = "#FFFFFF"
TEXT_COLOR = "#1E1E1E"
SUBTEXT_COLOR = "#424242"


LIGHT_THEME: Dict[str, object] = {
    "name": "light",
    "background_color": BACKGROUND,
    "card_background": CARD_BACKGROUND,
    "text_color": TEXT_COLOR,
    "subtext_color": SUBTEXT_COLOR,
    "palette": {
        "primary_blue": PRIMARY_BLUE,
        "primary_navy": PRIMARY_NAVY,
        "neutral": NEUTRAL_GRAY,
    },
    # keyed by Band value
    "bands": {
        "green": POSITIVE_GREEN,
        "yellow": WARNING_YELLOW,
        "red": NEGATIVE_RED,
    },
    "plotly_template": {
        "layout": {
            "font": {"family": "Roboto, Open Sans, sans-serif", "color": TEXT_COLOR},
            "paper_bgcolor": CARD_BACKGROUND,
            "plot_bgcolor": CARD_BACKGROUND,
            "xaxis": {"gridcolor": "#E0E0E0", "zerolinecolor": "#BDBDBD"},
            "yaxis": {"gridcolor": "#E0E0E0", "zerolinecolor": "#BDBDBD"},
        }
    },
}

DEFAULT_THEME = LIGHT_THEME

__all__ = ["DEFAULT_THEME", "LIGHT_THEME"]
