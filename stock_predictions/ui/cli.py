"""Typer-based command line interface for prediction runs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.table import Table

from stock_predictions import config as settings
from stock_predictions.core.data_loader import read_return_series
from stock_predictions.core.monte_carlo import MonteCarloConfig, run_symbol_simulation
from stock_predictions.core.ranking import RankingCriterion
from stock_predictions.core.validator import SimulationError, ValidationError
from stock_predictions.engine import PredictionEngine
from stock_predictions.models.results import EngineResults
from stock_predictions.reporting import ReportGenerator

app = typer.Typer(help="Monte Carlo stock outcome simulator and ranker")
console = Console()

_BAND_STYLES = {"green": "green", "yellow": "yellow", "red": "red"}


def _parse_criterion(value: str) -> RankingCriterion:
    try:
        return RankingCriterion.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_ranking_table(results: EngineResults) -> Table:
    """Create a Rich table of the classified ranked list."""
    primary = results.metadata.get("primary_criterion", RankingCriterion.MOST_COMMON.value)
    table = Table(title=f"Top Predictions (ranked by {primary.replace('_', ' ')})")
    table.add_column("Rank", justify="right")
    table.add_column("Symbol")
    for criterion in RankingCriterion:
        table.add_column(criterion.label, justify="right")
    for rank, item in enumerate(results.classified, start=1):
        cells = []
        for criterion in RankingCriterion:
            style = _BAND_STYLES[getattr(item, criterion.value).value]
            cells.append(f"[{style}]{item.entry.score_for(criterion)}[/{style}]")
        table.add_row(str(rank), item.symbol, *cells)
    return table


def _print_failures(results: EngineResults) -> None:
    if not results.failures:
        return
    console.print(f"[yellow]{len(results.failures)} symbol(s) skipped:[/yellow]")
    for failure in results.failures:
        console.print(f"  - {failure.symbol}: {failure.reason}")


@app.command()
def run(
    directory: Path = typer.Argument(
        settings.DEFAULT_INPUT_DIR, help="Directory containing one return file per symbol"
    ),
    periods: int = typer.Option(settings.DEFAULT_PERIODS, min=0, help="Future periods to simulate"),
    simulations: int = typer.Option(
        settings.DEFAULT_SIMULATIONS, min=0, help="Monte Carlo trials per symbol"
    ),
    top: int = typer.Option(settings.DEFAULT_TOP_X, min=0, help="Number of symbols to report"),
    primary: str = typer.Option(
        settings.DEFAULT_PRIMARY_CRITERION,
        help="Primary ranking criterion: most_common | highest_low | total_span | weighted_span",
    ),
    output: Path = typer.Option(settings.DEFAULT_OUTPUT_HTML, help="HTML report path"),
    base_investment: float = typer.Option(settings.BASE_INVESTMENT, help="Base investment unit"),
    log_file: Optional[Path] = typer.Option(
        Path(settings.LOG_FILE_PATH) if settings.LOG_FILE_PATH else None,
        help="Append log messages to this file instead of stderr",
    ),
    workers: int = typer.Option(1, min=1, help="Worker processes used across symbols"),
    seed: Optional[int] = typer.Option(None, help="Random seed for reproducible runs"),
    retain_distributions: bool = typer.Option(
        False, help="Keep each symbol's outcome distribution and chart it in the report"
    ),
    archive: bool = typer.Option(True, help="Move processed files into <directory>/archive"),
    legacy_trial_count: bool = typer.Option(
        False, help="Run simulations - 1 trials per symbol, like earlier releases"
    ),
    raw_outcomes: bool = typer.Option(
        False, help="Tally unrounded outcomes instead of whole percentages"
    ),
    tables: bool = typer.Option(True, help="Also export rankings/percentiles CSV and a JSON summary"),
    chart: bool = typer.Option(False, help="Also export a PNG chart of the primary scores"),
) -> None:
    """Simulate every symbol in DIRECTORY and write the ranked HTML report."""
    criterion = _parse_criterion(primary)
    settings.configure_logging(log_file)

    mc_config = MonteCarloConfig(
        periods=periods,
        num_simulations=simulations,
        base_investment=base_investment,
        top_x=top,
        primary_criterion=criterion.value,
        random_seed=seed,
        rounded_outcomes=not raw_outcomes,
        legacy_trial_count=legacy_trial_count,
        retain_distributions=retain_distributions,
        max_workers=workers,
        archive_inputs=archive,
    )
    try:
        engine = PredictionEngine(mc_config)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(f"\n[bold]Running simulations for {directory}...[/bold]")
    try:
        results = engine.run_directory(directory)
    except SimulationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    reporter = ReportGenerator(output.parent)
    exported = reporter.export_report_bundle(
        results,
        html_filename=output.name,
        include_tables=tables,
        include_chart=chart,
    )

    console.print()
    console.print(_build_ranking_table(results))
    _print_failures(results)
    console.print(
        f"\n[bold green]Processed {results.symbols_processed} symbols, "
        f"ranked {len(results.top_predictions)}.[/bold green]"
    )
    for name, path in exported.items():
        console.print(f"  - {name}: {path}")


@app.command()
def simulate(
    file_path: Path = typer.Argument(..., help="File containing comma separated returns"),
    periods: int = typer.Option(settings.DEFAULT_PERIODS, min=0, help="Future periods to simulate"),
    simulations: int = typer.Option(
        settings.DEFAULT_SIMULATIONS, min=0, help="Monte Carlo trials"
    ),
    seed: Optional[int] = typer.Option(None, help="Random seed for reproducible runs"),
) -> None:
    """Simulate a single return file and print its percentiles and scores."""
    if not file_path.exists():
        raise typer.BadParameter(f"File not found: {file_path}")
    try:
        data = read_return_series(file_path)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    mc_config = MonteCarloConfig(periods=periods, num_simulations=simulations, random_seed=seed)
    prediction = run_symbol_simulation(
        file_path.name, data, mc_config, rng=np.random.default_rng(seed)
    )
    if prediction is None:
        console.print("[yellow]No simulation results.[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title=f"{prediction.symbol}: {prediction.trials:,} trials, {len(data)} returns")
    table.add_column("Measure")
    table.add_column("Value", justify="right")
    table.add_row("25th percentile", str(prediction.percentiles.p25))
    table.add_row("50th percentile", str(prediction.percentiles.p50))
    table.add_row("75th percentile", str(prediction.percentiles.p75))
    for criterion in RankingCriterion:
        table.add_row(criterion.label, str(criterion.score(prediction)))
    console.print(table)


def main() -> None:
    """Entry point for CLI execution."""
    app()


if __name__ == "__main__":
    main()
