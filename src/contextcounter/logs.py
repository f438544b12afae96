"""
Logging setup for the command-line tool.

Lines look like ``[2025-01-31T12:00:00Z INFO contextcounter.prepare.fasta] Contig: chr1``,
with the level coloured when writing to a terminal.
"""

import logging
import sys
import time

import click

LOG_FORMAT = "[%(asctime)s %(levelname)s %(name)s] %(message)s"

_LEVEL_COLORS = {
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class LevelColorFormatter(logging.Formatter):
    """RFC 3339 UTC timestamps, optionally coloured level names."""

    converter = time.gmtime

    def __init__(self, color: bool = False):
        super().__init__(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%SZ")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        if self.color and record.levelname in _LEVEL_COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = click.style(record.levelname, fg=_LEVEL_COLORS[record.levelname])
        return super().format(record)


def setup_logging(level: str = "INFO", stream=None) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    stream = stream if stream is not None else sys.stderr
    logger = logging.getLogger("contextcounter")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LevelColorFormatter(color=stream.isatty()))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def _next_cause(err: BaseException) -> BaseException | None:
    if err.__cause__ is not None:
        return err.__cause__
    return None if err.__suppress_context__ else err.__context__


def describe_error(err: BaseException) -> str:
    """``Fatal Error: <err>. Caused by: <cause> <= <cause>`` from the exception chain."""
    causes = []
    cause = _next_cause(err)
    while cause is not None:
        causes.append(f"Caused by: {cause}")
        cause = _next_cause(cause)
    return f"Fatal Error: {err}. {' <= '.join(causes)}".rstrip()


def log_fatal(err: BaseException) -> None:
    logging.getLogger("contextcounter").error(describe_error(err))
