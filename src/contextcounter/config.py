"""
Run configuration for context counting.

Defaults not given on the command line can be adjusted via environment variables:

``CONTEXTCOUNTER_OUTDIR``     output folder for count tables (default: contexts)
``CONTEXTCOUNTER_WORKERS``    worker processes for counting (default: 1)
``CONTEXTCOUNTER_LOG_LEVEL``  logging level (default: INFO)
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from contextcounter.prepare.fasta import ContigFilter

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RunSettings:
    """Resolved configuration for one counting run."""

    fasta: Path
    outdir: Path
    print_counts: bool
    header: bool
    contig_filter: ContigFilter
    workers: int
    log_level: str


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


def default_outdir() -> Path:
    return Path(_env("CONTEXTCOUNTER_OUTDIR", "contexts"))


def default_workers() -> int:
    raw = _env("CONTEXTCOUNTER_WORKERS", "1")
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"CONTEXTCOUNTER_WORKERS must be an integer, got {raw!r}") from e


def default_log_level() -> str:
    return _env("CONTEXTCOUNTER_LOG_LEVEL", "INFO")


def load_settings(
    fasta: Path,
    outdir: Path | None = None,
    print_counts: bool = False,
    header: bool = False,
    skip: Iterable[str] = (),
    include: Iterable[str] = (),
    workers: int | None = None,
    log_level: str | None = None,
) -> RunSettings:
    """Combine explicit arguments with environment defaults and validate them."""
    workers = default_workers() if workers is None else workers
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    log_level = (log_level or default_log_level()).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {log_level!r}; expected one of {LOG_LEVELS}")

    return RunSettings(
        fasta=Path(fasta),
        outdir=Path(outdir) if outdir is not None else default_outdir(),
        print_counts=print_counts,
        header=header,
        contig_filter=ContigFilter(skip=frozenset(skip), include=frozenset(include)),
        workers=workers,
        log_level=log_level,
    )
