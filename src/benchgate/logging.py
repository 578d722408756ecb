"""Logging for the benchgate command line.

Library modules log to the ``benchgate`` namespace and never configure
handlers.  The CLI calls setup_logging() once per command: console
records go to stderr through click, so stdout only ever carries the
report, and an optional file keeps the full DEBUG trace of a gate run.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

_LOGGER_NAME = "benchgate"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class ClickHandler(logging.Handler):
    """Echo records to stderr with click, prefixed by their level."""

    _colors = {"WARNING": "yellow", "ERROR": "red", "CRITICAL": "red"}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            prefix = record.levelname.lower()
            color = self._colors.get(record.levelname)
            if color:
                prefix = click.style(prefix, fg=color)
            click.echo(f"{prefix}: {msg}", err=True)
        except Exception:
            self.handleError(record)


def console_level(*, verbose: bool = False, quiet: bool = False, json_output: bool = False) -> int:
    """Pick the console level for a set of CLI flags.

    ``--verbose`` wins over everything.  JSON output is meant for other
    programs, so it gets the same WARNING floor as ``--quiet``.
    """
    if verbose:
        return logging.DEBUG
    if quiet or json_output:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_output: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach fresh handlers to the benchgate logger and return it.

    Handlers from an earlier call are closed first, so repeated
    invocations in one process (tests, CliRunner) do not stack output.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console = ClickHandler()
    console.setLevel(console_level(verbose=verbose, quiet=quiet, json_output=json_output))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
