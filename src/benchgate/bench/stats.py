"""Statistical functions for benchmark comparison.

Provides outlier rejection, trimmed summaries and the Mann-Whitney U
rank-sum test, all in pure Python with no external dependencies.

Benchmark timings are rarely normally distributed: a handful of runs hit
a busy CPU and land far from the rest.  The summaries here discard those
runs with the IQR rule before averaging, and the significance test works
on ranks only, so one wild run cannot fake a regression.

References:
    Mann-Whitney U: Mann, H. B. & Whitney, D. R. (1947). "On a test of
        whether one of two random variables is stochastically larger
        than the other." Annals of Mathematical Statistics 18(1): 50-60.
    Quantiles: Hyndman, R. J. & Fan, Y. (1996). "Sample quantiles in
        statistical packages." The American Statistician 50(4): 361-365.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field
from typing import Sequence

# Exact U distribution is used up to this many values per side.
EXACT_LIMIT = 50


# ---------------------------------------------------------------------------
# Percentiles and outliers
# ---------------------------------------------------------------------------


def _percentile(sorted_values: Sequence[float], p: float) -> float:
    """Compute the p-th quantile with the Hyndman-Fan type 8 estimator.

    Type 8 is approximately median-unbiased regardless of the underlying
    distribution, which suits the small samples benchmarks produce.
    Assumes sorted_values is already sorted in ascending order.
    """
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    if p <= 0:
        return sorted_values[0]
    if p >= 1:
        return sorted_values[-1]

    h = 1 / 3 + p * (n + 1 / 3)
    k = math.floor(h)
    frac = h - k
    if k <= 0:
        return sorted_values[0]
    if k >= n:
        return sorted_values[-1]
    return sorted_values[k - 1] + frac * (sorted_values[k] - sorted_values[k - 1])


def detect_outliers(
    values: Sequence[float],
    *,
    factor: float = 1.5,
) -> list[bool]:
    """Detect outliers using the IQR method.

    A value is an outlier if it falls below Q1 - factor*IQR or
    above Q3 + factor*IQR.

    Returns:
        A list of booleans, True for outlier positions.
    """
    if len(values) < 2:
        return [False] * len(values)

    sorted_v = sorted(values)
    q1 = _percentile(sorted_v, 0.25)
    q3 = _percentile(sorted_v, 0.75)
    iqr = q3 - q1

    lower = q1 - factor * iqr
    upper = q3 + factor * iqr

    return [v < lower or v > upper for v in values]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass
class Summary:
    """Outlier-trimmed summary of one side of a comparison."""

    n: int  # values before trimming
    retained: list[float] = field(default_factory=list)
    mean: float = float("nan")
    min: float = float("nan")
    max: float = float("nan")

    @property
    def n_outliers(self) -> int:
        return self.n - len(self.retained)

    @property
    def spread(self) -> float:
        """Largest relative deviation of a retained value from the mean.

        NaN when the mean or the maximum is zero.
        """
        if not self.retained or self.mean == 0 or self.max == 0:
            return float("nan")
        return max(1 - self.min / self.mean, self.max / self.mean - 1)


def summarize(values: Sequence[float], *, factor: float = 1.5) -> Summary:
    """Discard IQR outliers from *values* and summarize the rest."""
    if not values:
        return Summary(n=0)

    flags = detect_outliers(values, factor=factor)
    retained = [v for v, outlier in zip(values, flags) if not outlier]

    return Summary(
        n=len(values),
        retained=retained,
        mean=statistics.fmean(retained),
        min=min(retained),
        max=max(retained),
    )


# ---------------------------------------------------------------------------
# Mann-Whitney U test
# ---------------------------------------------------------------------------


@dataclass
class UTestResult:
    """Result of a two-sided Mann-Whitney U test."""

    u_statistic: float  # U for the first sample
    p_value: float
    method: str  # "exact", "normal" or "none"

    def significant(self, alpha: float = 0.05) -> bool:
        """True if the samples differ at significance level *alpha*."""
        return not math.isnan(self.p_value) and self.p_value <= alpha


def mann_whitney_u(
    sample_a: Sequence[float],
    sample_b: Sequence[float],
) -> UTestResult:
    """Perform a two-sided Mann-Whitney U test for independent samples.

    Tests the null hypothesis that a value drawn from one population is
    equally likely to be larger or smaller than one drawn from the other.

    The exact null distribution is used when there are no ties and both
    samples have at most ``EXACT_LIMIT`` values.  Otherwise the normal
    approximation with tie and continuity correction is used.

    If either sample is empty, returns a NaN p-value.  If every pooled
    value is equal, the samples are indistinguishable and p is 1.
    """
    na, nb = len(sample_a), len(sample_b)
    if na == 0 or nb == 0:
        return UTestResult(u_statistic=float("nan"), p_value=float("nan"), method="none")

    ranks, tie_sizes = _rank(list(sample_a) + list(sample_b))
    rank_sum_a = sum(ranks[:na])
    u_a = rank_sum_a - na * (na + 1) / 2
    u_b = na * nb - u_a
    u_min = min(u_a, u_b)

    has_ties = any(t > 1 for t in tie_sizes)
    if not has_ties and na <= EXACT_LIMIT and nb <= EXACT_LIMIT:
        p = 2.0 * _u_exact_cdf(int(u_min), na, nb)
        return UTestResult(u_statistic=u_a, p_value=min(p, 1.0), method="exact")

    n = na + nb
    mu = na * nb / 2
    tie_term = sum(t**3 - t for t in tie_sizes)
    variance = na * nb / 12 * ((n + 1) - tie_term / (n * (n - 1)))
    if variance <= 0:
        # All values tied.
        return UTestResult(u_statistic=u_a, p_value=1.0, method="normal")

    z = max(abs(u_a - mu) - 0.5, 0.0) / math.sqrt(variance)
    p = math.erfc(z / math.sqrt(2))
    return UTestResult(u_statistic=u_a, p_value=min(p, 1.0), method="normal")


def _rank(values: list[float]) -> tuple[list[float], list[int]]:
    """Rank *values* (1-based), giving tied values their average rank.

    Returns:
        (ranks in input order, sizes of each group of equal values)
    """
    order = sorted(range(len(values)), key=values.__getitem__)
    ranks = [0.0] * len(values)
    tie_sizes: list[int] = []

    i = 0
    while i < len(order):
        j = i
        while j + 1 < len(order) and values[order[j + 1]] == values[order[i]]:
            j += 1
        avg = (i + j) / 2 + 1
        for k in range(i, j + 1):
            ranks[order[k]] = avg
        tie_sizes.append(j - i + 1)
        i = j + 1

    return ranks, tie_sizes


def _u_exact_cdf(u: int, na: int, nb: int) -> float:
    """P(U <= u) under the null hypothesis, for samples without ties.

    The number of arrangements giving each U is a coefficient of the
    Gaussian binomial [na+nb choose na], built up one factor at a time:
    multiply by (1 - q^(nb+i)), then divide by (1 - q^i).
    """
    if u < 0:
        return 0.0
    size = na * nb + 1
    if u >= size - 1:
        return 1.0

    counts = [0] * size
    counts[0] = 1
    for i in range(1, na + 1):
        shift = nb + i
        for k in range(size - 1, shift - 1, -1):
            counts[k] -= counts[k - shift]
        for k in range(i, size):
            counts[k] += counts[k - i]

    return sum(counts[: u + 1]) / math.comb(na + nb, na)
