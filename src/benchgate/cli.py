"""Command-line interface for benchgate.

Subcommands:
    benchgate compare   Compare two benchmark outputs and apply checks
"""

from __future__ import annotations

from pathlib import Path

import click

from benchgate import __version__
from benchgate.bench.check import CHECKER_FORMAT, parse_checker
from benchgate.errors import CheckerParseError, InternalConsistencyError
from benchgate.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """benchgate — gate code changes on benchmark regressions."""


def _validate_checks(
    ctx: click.Context,
    param: click.Parameter,
    value: tuple[str, ...],
) -> tuple[str, ...]:
    for text in value:
        try:
            parse_checker(text)
        except CheckerParseError as exc:
            raise click.BadParameter(str(exc)) from exc
    return value


def _read(path: str) -> str:
    with click.open_file(path) as f:
        return f.read()


@main.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option(
    "--check",
    "checks",
    type=str,
    multiple=True,
    callback=_validate_checks,
    help=f"Check to apply, in the form {CHECKER_FORMAT}. Eg: time/op=10% (repeatable).",
)
@click.option(
    "--alpha",
    type=float,
    default=None,
    help="Significance level for the Mann-Whitney U test (default: 0.05).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML file with alpha and checks.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also log at DEBUG level to this file.",
)
def compare(
    old: str,
    new: str,
    checks: tuple[str, ...],
    alpha: float | None,
    config_path: Path | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Compare benchmark output of an old and a new revision.

    OLD and NEW are files holding the raw output of repeated benchmark
    runs; either one, but not both, may be - for stdin.  Exits with
    status 1 if any check fails.

    \b
    Examples:
        go test -run='^$' -bench=. -count=10 > old.txt
        git checkout feature
        go test -run='^$' -bench=. -count=10 > new.txt
        benchgate compare old.txt new.txt --check time/op=+10%
    """
    from benchgate.bench.compare import stat
    from benchgate.bench.display import failed_checks, format_json, format_report
    from benchgate.config import config_from_file, load_config, validate_config

    if old == "-" and new == "-":
        raise click.UsageError("OLD and NEW cannot both be read from stdin.")

    setup_logging(verbose=verbose, quiet=quiet, json_output=as_json, log_file=log_file)

    try:
        data = load_config(config_path) if config_path else {}
        config = config_from_file(data, cli_overrides={"alpha": alpha, "checks": checks})
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    errors = validate_config(config)
    if errors:
        raise click.UsageError("\n".join(f"{e.field}: {e.message}" for e in errors))

    checkers = config.checkers()

    try:
        results = stat(_read(old), _read(new), alpha=config.alpha)
    except InternalConsistencyError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if as_json:
        click.echo(format_json(results, checkers))
    else:
        click.echo(format_report(results, checkers))

    if failed_checks(results, checkers):
        raise SystemExit(1)
