"""Metric naming and human-readable scaling of benchmark values.

Go benchmark output reports raw units (``ns/op``, ``MB/s``, ``B/op``).
Results are grouped under metric names derived from those units and
displayed with three significant digits and an SI prefix chosen from a
reference value, so every value in a row shares one scale.
"""

from __future__ import annotations

from typing import Callable

Scaler = Callable[[float], str]

_METRIC_NAMES: dict[str, str] = {
    "ns/op": "time/op",
    "MB/s": "speed",
    "B/op": "alloc/op",
    "allocs/op": "allocs/op",
}

# (threshold, decimals, scale, prefix), checked top to bottom.  Thresholds
# sit at 99.5/9.95/0.995 of each decade so that rounding never produces a
# four digit mantissa.
_SI_STEPS: list[tuple[float, int, float, str]] = [
    (99.5e12, 0, 1e12, "T"),
    (9.95e12, 1, 1e12, "T"),
    (995e9, 2, 1e12, "T"),
    (99.5e9, 0, 1e9, "G"),
    (9.95e9, 1, 1e9, "G"),
    (995e6, 2, 1e9, "G"),
    (99.5e6, 0, 1e6, "M"),
    (9.95e6, 1, 1e6, "M"),
    (995e3, 2, 1e6, "M"),
    (99.5e3, 0, 1e3, "k"),
    (9.95e3, 1, 1e3, "k"),
    (995.0, 2, 1e3, "k"),
    (99.5, 0, 1.0, ""),
    (9.95, 1, 1.0, ""),
]

_TIME_STEPS: list[tuple[float, int, float, str]] = [
    (99.5, 0, 1.0, "s"),
    (9.95, 1, 1.0, "s"),
    (0.995, 2, 1.0, "s"),
    (0.0995, 0, 1e-3, "ms"),
    (0.00995, 1, 1e-3, "ms"),
    (0.000995, 2, 1e-3, "ms"),
    (0.0000995, 0, 1e-6, "µs"),
    (0.00000995, 1, 1e-6, "µs"),
    (0.000000995, 2, 1e-6, "µs"),
    (0.0000000995, 0, 1e-9, "ns"),
    (0.00000000995, 1, 1e-9, "ns"),
]


def metric_name(unit: str) -> str:
    """Return the metric name results in *unit* are grouped under."""
    return _METRIC_NAMES.get(unit, unit)


def new_scaler(reference: float, unit: str) -> Scaler:
    """Build a formatter for values in *unit*, scaled to suit *reference*.

    Examples::

        new_scaler(13599058, "ns/op")(13599058)  -> "13.6ms"
        new_scaler(56.44, "MB/s")(56.44)         -> "56.4MB/s"
        new_scaler(1234, "B/op")(1234)           -> "1.23kB"
    """
    if unit == "ns/op":
        return _time_scaler(reference)

    prescale = 1e6 if unit == "MB/s" else 1.0
    decimals, scale, prefix = _pick(reference * prescale, _SI_STEPS, (2, 1.0, ""))
    suffix = prefix
    if unit == "B/op":
        suffix += "B"
    elif unit == "MB/s":
        suffix += "B/s"
    elif unit not in _METRIC_NAMES:
        suffix += f" {unit}"
    scale /= prescale

    def fmt(value: float) -> str:
        return f"{value / scale:.{decimals}f}{suffix}"

    return fmt


def _time_scaler(ns: float) -> Scaler:
    decimals, scale, suffix = _pick(ns / 1e9, _TIME_STEPS, (2, 1e-9, "ns"))

    def fmt(value: float) -> str:
        return f"{value / 1e9 / scale:.{decimals}f}{suffix}"

    return fmt


def _pick(
    x: float,
    steps: list[tuple[float, int, float, str]],
    default: tuple[int, float, str],
) -> tuple[int, float, str]:
    for threshold, decimals, scale, prefix in steps:
        if x >= threshold:
            return decimals, scale, prefix
    return default
