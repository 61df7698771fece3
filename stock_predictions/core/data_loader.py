"""Data ingestion routines for per-symbol return series."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .validator import SimulationError, ValidationError, validate_return_values

LOGGER = logging.getLogger(__name__)

ARCHIVE_DIRNAME = "archive"


def parse_return_series(text: str) -> List[float]:
    """Parse a comma separated list of fractional returns.

    Whitespace around the whole text and leading/trailing commas are ignored.
    Each item must be a bare number: padding, underscore separators or a
    single malformed value reject the whole series, as does blank text.
    """
    content = text.strip().strip(",")
    if not content:
        raise ValidationError("empty return series")
    values: List[float] = []
    for position, item in enumerate(content.split(",")):
        try:
            if item != item.strip() or "_" in item:
                raise ValueError(item)
            values.append(float(item))
        except ValueError as exc:
            raise ValidationError(
                f"Invalid return value {item!r} at position {position}"
            ) from exc
    return validate_return_values(values)


def read_return_series(path: Union[str, Path]) -> List[float]:
    """Read and parse the return series stored in ``path``."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValidationError(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Unable to read {path}: {exc}") from exc
    return parse_return_series(content)


def _is_read_only(path: Path) -> bool:
    return not path.stat().st_mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)


@dataclass
class SymbolFile:
    """A symbol file ready to be processed."""

    symbol: str
    path: Path


@dataclass
class SymbolDirectory:
    """Iterate the symbol files of an input directory.

    Every regular, writable file is treated as one symbol (its file name).
    When ``archive`` is enabled the file is moved to ``<directory>/archive``
    before it is handed out, so an interrupted run never reprocesses it.
    """

    directory: Path
    archive: bool = True
    logger: Optional[logging.Logger] = None
    errors: List[Tuple[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)
        if self.logger is None:
            self.logger = LOGGER

    @property
    def archive_dir(self) -> Path:
        return self.directory / ARCHIVE_DIRNAME

    def candidates(self) -> List[Path]:
        """Return the files that would be processed, in name order."""
        if not self.directory.is_dir():
            raise SimulationError(f"directory not found: {self.directory}")
        try:
            entries = sorted(self.directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise SimulationError(f"Unable to list {self.directory}: {exc}") from exc
        return [
            entry
            for entry in entries
            if entry.is_file() and not _is_read_only(entry)
        ]

    def _move_to_archive(self, path: Path) -> Path:
        self.archive_dir.mkdir(parents=True, exist_ok=True)
        target = self.archive_dir / path.name
        return path.replace(target)

    def __iter__(self) -> Iterator[SymbolFile]:
        for path in self.candidates():
            symbol = path.name
            if not self.archive:
                yield SymbolFile(symbol=symbol, path=path)
                continue
            try:
                archived = self._move_to_archive(path)
            except OSError as exc:
                self.logger.warning("%s: unable to archive %s: %s", symbol, path, exc)
                self.errors.append((symbol, f"archive failed: {exc}"))
                continue
            yield SymbolFile(symbol=symbol, path=archived)


__all__ = [
    "ARCHIVE_DIRNAME",
    "SymbolDirectory",
    "SymbolFile",
    "parse_return_series",
    "read_return_series",
]
