"""Runtime defaults and logging setup.

Defaults can be overridden with ``STOCK_PREDICTIONS_*`` environment variables.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return float(value)


BASE_INVESTMENT = _env_float("STOCK_PREDICTIONS_BASE_INVESTMENT", 100.0)
DEFAULT_PERIODS = _env_int("STOCK_PREDICTIONS_PERIODS", 10)
DEFAULT_SIMULATIONS = _env_int("STOCK_PREDICTIONS_SIMULATIONS", 750_000)
DEFAULT_TOP_X = _env_int("STOCK_PREDICTIONS_TOP_X", 25)
DEFAULT_PRIMARY_CRITERION = os.environ.get(
    "STOCK_PREDICTIONS_PRIMARY", "most_common"
)
DEFAULT_INPUT_DIR = Path(os.environ.get("STOCK_PREDICTIONS_INPUT_DIR", "test_data"))
DEFAULT_OUTPUT_HTML = Path(
    os.environ.get("STOCK_PREDICTIONS_OUTPUT_HTML", "predictions.html")
)
LOG_FILE_PATH = os.environ.get("STOCK_PREDICTIONS_LOG_FILE") or None

LOG_FORMAT = "TS: %(asctime)s: %(name)s: %(levelname)s: %(message)s"


def configure_logging(
    log_file: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure the package logger once at process start.

    Messages go to ``log_file`` (appended) when given, otherwise to stderr.
    """
    logger = logging.getLogger("stock_predictions")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler: logging.Handler = logging.FileHandler(
            str(log_file), mode="a", encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
