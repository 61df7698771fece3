"""Monte Carlo outcome simulation and ranking for stock return series."""

__version__ = "0.3.0"
