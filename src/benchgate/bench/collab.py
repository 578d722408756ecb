"""Interfaces to the external collaborators that produce benchmark output.

benchgate does not fetch code or run benchmarks itself.  A caller that
does supplies a ModuleFetcher and a BenchRunner; both report failure by
raising CmdError, which stat_module lets through untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from benchgate.bench.compare import DEFAULT_ALPHA, StatResult, stat
from benchgate.logging import get_logger

log = get_logger("collab")


class ModuleFetcher(Protocol):
    """Makes one revision of a module available on disk."""

    def fetch(self, module: str, revision: str) -> Path:
        """Return a directory holding *module* at *revision*.

        Raises:
            CmdError: If the fetch command fails.
        """
        ...


class BenchRunner(Protocol):
    """Runs a module's benchmarks and returns their raw output."""

    def run(self, location: Path, pattern: str, count: int) -> str:
        """Run benchmarks matching *pattern* in *location* *count* times.

        Returns:
            The concatenated output of all runs.

        Raises:
            CmdError: If the benchmark command fails.
        """
        ...


def stat_module(
    fetcher: ModuleFetcher,
    runner: BenchRunner,
    module: str,
    old_rev: str,
    new_rev: str,
    *,
    pattern: str = ".",
    count: int = 5,
    alpha: float = DEFAULT_ALPHA,
) -> list[StatResult]:
    """Benchmark two revisions of *module* and compare them.

    Each revision is fetched and benchmarked in turn, old first.

    Raises:
        ValueError: If *count* is not positive.
        CmdError: If a collaborator fails.
    """
    if count < 1:
        raise ValueError(f"count must be positive (got {count})")

    outputs: list[str] = []
    for revision in (old_rev, new_rev):
        location = fetcher.fetch(module, revision)
        log.info("Benchmarking %s@%s in %s (%d runs)", module, revision, location, count)
        outputs.append(runner.run(location, pattern, count))

    return stat(outputs[0], outputs[1], alpha=alpha)
