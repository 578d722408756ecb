"""Threshold checks evaluated against comparison results.

A check is written ``<metric>=<sign><number>%``, for example
``time/op=+10%`` (fail if any operation got more than 10% slower) or
``speed=-5%`` (fail if any operation lost more than 5% throughput).
The sign defaults to ``+`` and the trailing ``%`` is optional.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from benchgate.bench.compare import BenchDiff, StatResult
from benchgate.errors import CheckerParseError

CHECKER_FORMAT = "<metric>=(+|-)<number>%"

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


@dataclass(frozen=True)
class Checker:
    """A pass/fail rule bound to one metric and a signed threshold."""

    metric: str
    threshold: float  # percentage
    text: str = ""

    def __str__(self) -> str:
        return self.text or f"{self.metric}={self.threshold:+g}%"

    def _exceeds(self, delta: float) -> bool:
        if self.threshold >= 0:
            return delta > self.threshold
        return delta < self.threshold

    def failing(self, result: StatResult) -> list[BenchDiff]:
        """Return the diffs in *result* that break this check."""
        if result.metric != self.metric:
            return []
        return [d for d in result.bench_diffs if self._exceeds(d.delta)]

    def check(self, result: StatResult) -> bool:
        """True if *result* satisfies this check.

        A result for a different metric always passes.  Otherwise, a
        non-negative threshold fails when any delta is above it and a
        negative threshold fails when any delta is below it.  A delta
        equal to the threshold passes.
        """
        if result.metric != self.metric:
            return True
        return not any(self._exceeds(d.delta) for d in result.bench_diffs)


def parse_checker(text: str) -> Checker:
    """Parse a check rule of the form ``<metric>=<sign><number>%``.

    Raises:
        CheckerParseError: If the rule is empty, has no ``=`` or more than
            one, names no metric, or its threshold is not a number.
    """
    if not text:
        raise CheckerParseError(text, f"empty check, expected {CHECKER_FORMAT}")

    parts = text.split("=")
    if len(parts) == 1:
        raise CheckerParseError(text, f"missing '=' separator, expected {CHECKER_FORMAT}")
    if len(parts) > 2:
        raise CheckerParseError(text, "more than one '=' separator")

    metric, value = parts
    if not metric:
        raise CheckerParseError(text, "metric name is empty")

    number = value[:-1] if value.endswith("%") else value
    if not number:
        raise CheckerParseError(text, "threshold is empty")
    if not _NUMBER_RE.fullmatch(number):
        raise CheckerParseError(text, f"threshold {number!r} is not a number")

    return Checker(metric=metric, threshold=float(number), text=text)
