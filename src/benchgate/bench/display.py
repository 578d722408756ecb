"""Terminal display formatting for comparison results.

No external dependencies.
"""

from __future__ import annotations

import json
from typing import Sequence

from benchgate.bench.check import Checker
from benchgate.bench.compare import StatResult


def format_stat_results(results: Sequence[StatResult]) -> str:
    """Format results as a ``metric:`` header followed by one line per diff."""
    lines: list[str] = []
    for result in results:
        lines.append(str(result))
        lines.extend(str(diff) for diff in result.bench_diffs)
    return "\n".join(lines)


def failed_checks(
    results: Sequence[StatResult],
    checks: Sequence[Checker],
) -> list[Checker]:
    """Return the checks that fail against any of *results*, in order."""
    return [c for c in checks if not all(c.check(r) for r in results)]


def format_check_failures(
    results: Sequence[StatResult],
    checks: Sequence[Checker],
) -> str:
    """Format one ``check failed`` line per failing check.

    Each line lists the operations that broke the check.
    """
    lines: list[str] = []
    for check in failed_checks(results, checks):
        names = [d.name for r in results for d in check.failing(r)]
        lines.append(f"check failed: {check} ({', '.join(names)})")
    return "\n".join(lines)


def format_report(
    results: Sequence[StatResult],
    checks: Sequence[Checker] = (),
) -> str:
    """Format results followed by any check failures."""
    if not results:
        body = "No benchmarks in common between old and new."
    else:
        body = format_stat_results(results)
    failures = format_check_failures(results, checks)
    if failures:
        return f"{body}\n{failures}"
    return body


def format_json(
    results: Sequence[StatResult],
    checks: Sequence[Checker] = (),
) -> str:
    """Format results and check verdicts as a JSON document."""
    failed = set(map(str, failed_checks(results, checks)))
    data = {
        "results": [r.to_dict() for r in results],
        "checks": [{"check": str(c), "passed": str(c) not in failed} for c in checks],
    }
    return json.dumps(data, indent=2)
