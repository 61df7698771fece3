"""Report generation utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from ..models.results import EngineResults
from ..visualization import plot_primary_scores, save_figure
from .html_report import build_html

LOGGER = logging.getLogger(__name__)


def _json_default(obj: object) -> object:
    """JSON serializer that handles numpy/path objects gracefully."""
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, (datetime,)):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, set):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class ReportGenerator:
    """Persist prediction run outputs to disk (HTML page, tables, chart)."""

    def __init__(
        self,
        output_dir: str | Path = "output",
        *,
        timestamped: bool = False,
        run_label: Optional[str] = None,
    ) -> None:
        base_dir = Path(output_dir)
        base_dir.mkdir(parents=True, exist_ok=True)
        if timestamped:
            run_label = run_label or datetime.now().strftime("run_%Y%m%d_%H%M%S")
            self.output_dir = base_dir / run_label
        else:
            self.output_dir = base_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.base_dir = base_dir
        self.run_label = self.output_dir.name

    # ------------------------------------------------------------------ helpers
    def _write_json(self, payload: Dict[str, object], filename: str) -> Path:
        path = self.output_dir / filename
        with path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, default=_json_default)
        return path

    # ------------------------------------------------------------------- exports
    def export_html(
        self,
        results: EngineResults,
        filename: str = "predictions.html",
        *,
        generated_at: Optional[datetime] = None,
    ) -> Path:
        """Render the classified ranked list as a static HTML page."""
        LOGGER.info("N/A: html creation begin")
        predictions = {p.symbol: p for p in results.predictions}
        html = build_html(
            results.classified, generated_at=generated_at, predictions=predictions
        )
        LOGGER.info("N/A: html creation end")
        path = self.output_dir / filename
        path.write_text(html, encoding="utf-8")
        return path

    def export_rankings(self, results: EngineResults, filename: str = "rankings.csv") -> Path:
        path = self.output_dir / filename
        frame = results.summary_frame()
        if frame.empty:
            frame = pd.DataFrame(
                columns=[
                    "rank",
                    "symbol",
                    "primary_score",
                    "most_common",
                    "highest_low",
                    "total_span",
                    "weighted_span",
                ]
            )
        elif results.classified:
            for field in ("most_common", "highest_low", "total_span", "weighted_span"):
                frame[f"{field}_band"] = [
                    getattr(item, field).value for item in results.classified
                ]
        frame.to_csv(path, index=False)
        return path

    def export_percentiles(
        self, results: EngineResults, filename: str = "percentiles.csv"
    ) -> Path:
        """Write every symbol's percentile set, ranked or not."""
        rows = [
            {
                "symbol": p.symbol,
                "trials": p.trials,
                "sample_size": p.sample_size,
                "p25": p.percentiles.p25,
                "p50": p.percentiles.p50,
                "p75": p.percentiles.p75,
            }
            for p in results.predictions
        ]
        path = self.output_dir / filename
        pd.DataFrame(
            rows, columns=["symbol", "trials", "sample_size", "p25", "p50", "p75"]
        ).to_csv(path, index=False)
        return path

    def export_run_summary(
        self, results: EngineResults, filename: str = "run_summary.json"
    ) -> Path:
        payload = {
            "symbols_processed": results.symbols_processed,
            "predictions": len(results.predictions),
            "ranked": len(results.top_predictions),
            "thresholds": results.thresholds.model_dump(),
            "failures": [failure.model_dump() for failure in results.failures],
            "metadata": results.metadata,
        }
        return self._write_json(payload, filename)

    def export_score_chart(
        self, results: EngineResults, filename: str = "top_scores.png"
    ) -> Optional[Path]:
        if not results.classified:
            return None
        figure = plot_primary_scores(results.classified)
        try:
            return save_figure(figure, self.output_dir / filename)
        finally:
            plt.close(figure)

    # ----------------------------------------------------------- comprehensive
    def export_report_bundle(
        self,
        results: EngineResults,
        *,
        html_filename: str = "predictions.html",
        include_tables: bool = True,
        include_chart: bool = False,
        generated_at: Optional[datetime] = None,
    ) -> Dict[str, Path]:
        """Export the HTML page plus optional tables and chart."""
        exported: Dict[str, Path] = {
            "html": self.export_html(results, html_filename, generated_at=generated_at)
        }
        if include_tables:
            exported["rankings"] = self.export_rankings(results)
            exported["percentiles"] = self.export_percentiles(results)
            exported["run_summary"] = self.export_run_summary(results)
        if include_chart:
            chart_path = self.export_score_chart(results)
            if chart_path is not None:
                exported["score_chart"] = chart_path
        return exported


__all__ = ["ReportGenerator"]
