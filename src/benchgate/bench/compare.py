"""Benchmark comparison analysis.

Turns paired old/new benchmark samples into per-metric results: one
BenchDiff per operation, carrying display summaries and the signed
percentage delta that threshold checks are evaluated against.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from benchgate.bench.group import BenchGroup, group_samples
from benchgate.bench.parse import Sample, parse_samples
from benchgate.bench.stats import Summary, mann_whitney_u, summarize
from benchgate.bench.units import Scaler, new_scaler

log = logging.getLogger("benchgate")

DEFAULT_ALPHA = 0.05

SIGNIFICANT = "significant"
NOT_SIGNIFICANT = "not significant"
TOO_FEW_SAMPLES = "too few samples"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchDiff:
    """Comparison of one operation under one metric."""

    name: str
    old: str  # e.g. "13.6ms ± 1%"
    new: str
    delta: float  # signed percentage, unrounded; 0.0 when not significant
    # Diagnostics
    old_center: float = float("nan")
    new_center: float = float("nan")
    old_n: int = 0
    new_n: int = 0
    p_value: float = float("nan")
    significance: str = NOT_SIGNIFICANT

    @property
    def reduced_confidence(self) -> bool:
        """True if the delta was computed without a significance test."""
        return self.significance == TOO_FEW_SAMPLES

    def __str__(self) -> str:
        return f"{self.name}: old {self.old}: new {self.new}: delta: {self.delta:+.2f}%"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "old": self.old,
            "new": self.new,
            "delta": self.delta,
            "old_center": self.old_center,
            "new_center": self.new_center,
            "old_n": self.old_n,
            "new_n": self.new_n,
            "p_value": None if math.isnan(self.p_value) else round(self.p_value, 6),
            "significance": self.significance,
        }


@dataclass
class StatResult:
    """All compared operations for one metric."""

    metric: str
    bench_diffs: list[BenchDiff] = field(default_factory=list)

    def __str__(self) -> str:
        return f"metric: {self.metric}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "metric": self.metric,
            "bench_diffs": [d.to_dict() for d in self.bench_diffs],
        }


# ---------------------------------------------------------------------------
# Per-group comparison
# ---------------------------------------------------------------------------


def _format_summary(summary: Summary, scaler: Scaler) -> str:
    spread = summary.spread
    if math.isnan(spread):
        return scaler(summary.mean)
    return f"{scaler(summary.mean)} ± {spread * 100:.0f}%"


def _pct_delta(old: float, new: float) -> float:
    return (new / old - 1.0) * 100.0


def compare_group(group: BenchGroup, *, alpha: float = DEFAULT_ALPHA) -> BenchDiff | None:
    """Compare the old and new values of one benchmark group.

    Each side is trimmed of IQR outliers and summarized by the mean of
    what remains.  With at least two retained values per side, a
    Mann-Whitney U test decides whether the sides differ; if they do
    not at level *alpha*, the delta is 0.0 whatever the means say.

    With fewer than two retained values on either side no test is
    possible.  The delta is then the direct mean-to-mean change and the
    diff is marked ``too few samples``.

    Returns:
        The BenchDiff, or None if the delta is undefined because the old
        mean is zero and the sides differ.

    Raises:
        InternalConsistencyError: If the group has an empty side or holds
            a sample of another metric or operation.
    """
    group.validate()

    old = summarize(group.old)
    new = summarize(group.new)
    scaler = new_scaler(old.mean, group.unit)

    if len(old.retained) < 2 or len(new.retained) < 2:
        significance = TOO_FEW_SAMPLES
        p_value = float("nan")
        differs = new.mean != old.mean
    else:
        utest = mann_whitney_u(old.retained, new.retained)
        p_value = utest.p_value
        differs = utest.significant(alpha)
        significance = SIGNIFICANT if differs else NOT_SIGNIFICANT

    if not differs:
        delta = 0.0
    elif old.mean == 0:
        log.warning(
            "Dropping %s under %s: old value is zero, delta is undefined",
            group.name,
            group.metric,
        )
        return None
    else:
        delta = _pct_delta(old.mean, new.mean)

    if old.n_outliers or new.n_outliers:
        log.debug(
            "%s %s: discarded %d old and %d new outliers",
            group.metric,
            group.name,
            old.n_outliers,
            new.n_outliers,
        )

    return BenchDiff(
        name=group.name,
        old=_format_summary(old, scaler),
        new=_format_summary(new, scaler),
        delta=delta,
        old_center=old.mean,
        new_center=new.mean,
        old_n=old.n,
        new_n=new.n,
        p_value=p_value,
        significance=significance,
    )


# ---------------------------------------------------------------------------
# Whole-run comparison
# ---------------------------------------------------------------------------


def stat_groups(
    groups: Iterable[BenchGroup],
    *,
    alpha: float = DEFAULT_ALPHA,
) -> list[StatResult]:
    """Compare every group and collect the diffs per metric.

    Metric and operation order follow the order of *groups*.  A group
    whose delta is undefined is left out; the rest are unaffected.
    """
    results: dict[str, StatResult] = {}
    for group in groups:
        diff = compare_group(group, alpha=alpha)
        if diff is None:
            continue
        result = results.get(group.metric)
        if result is None:
            result = results[group.metric] = StatResult(metric=group.metric)
        result.bench_diffs.append(diff)
    return list(results.values())


def stat_samples(
    old: Sequence[Sample],
    new: Sequence[Sample],
    *,
    alpha: float = DEFAULT_ALPHA,
) -> list[StatResult]:
    """Compare two Sample collections."""
    return stat_groups(group_samples(old, new), alpha=alpha)


def stat(
    old_lines: Iterable[str] | str,
    new_lines: Iterable[str] | str,
    *,
    alpha: float = DEFAULT_ALPHA,
) -> list[StatResult]:
    """Compare two sets of raw benchmark output.

    Args:
        old_lines: Output of the old revision, as lines or one string.
        new_lines: Output of the new revision, as lines or one string.
        alpha: Significance level for the Mann-Whitney U test.

    Returns:
        One StatResult per metric seen on both sides, in order of first
        appearance in the old output.  Empty if nothing is comparable.
    """
    old = parse_samples(old_lines)
    new = parse_samples(new_lines)
    log.debug("Parsed %d old and %d new samples", len(old), len(new))
    return stat_samples(old, new, alpha=alpha)
