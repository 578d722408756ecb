"""Parsing of raw benchmark output into samples.

A record line looks like::

    BenchmarkGobEncode-8   	     100	  13552735 ns/op	  56.63 MB/s

The first field is ``Benchmark`` immediately followed by the operation
name, the second is the iteration count, and the rest are ``<value>
<unit>`` pairs.  Anything else in the runner output (``PASS``, ``ok``,
``goos: linux``...) is not a record and is skipped.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable

from benchgate.bench.units import metric_name

log = logging.getLogger("benchgate")

RECORD_PREFIX = "Benchmark"

_ITERATIONS_RE = re.compile(r"\d+", re.ASCII)
_VALUE_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class Sample:
    """One recorded value of one metric for one operation."""

    name: str
    metric: str
    value: float
    unit: str


@dataclass(frozen=True)
class BenchRecord:
    """One parsed record line."""

    name: str
    iterations: int
    measurements: tuple[tuple[float, str], ...]

    def samples(self) -> list[Sample]:
        """Expand the record into one Sample per measurement."""
        return [
            Sample(name=self.name, metric=metric_name(unit), value=value, unit=unit)
            for value, unit in self.measurements
        ]


def parse_line(line: str) -> BenchRecord | None:
    """Parse one line of benchmark output.

    Returns:
        The parsed record, or None if the line is not a complete record.
        A line is never partially accepted.
    """
    fields = line.split()
    if not fields or not fields[0].startswith(RECORD_PREFIX):
        return None

    name = fields[0][len(RECORD_PREFIX) :]
    if not name:
        log.debug("Skipping record without operation name: %r", line)
        return None

    if len(fields) < 2:
        log.debug("Skipping record without iteration count: %r", line)
        return None
    if not _ITERATIONS_RE.fullmatch(fields[1]):
        log.debug("Skipping record with bad iteration count: %r", line)
        return None
    iterations = int(fields[1])

    rest = fields[2:]
    if len(rest) % 2:
        log.debug("Skipping record with dangling field: %r", line)
        return None

    measurements: list[tuple[float, str]] = []
    for value_text, unit in zip(rest[::2], rest[1::2]):
        if not _VALUE_RE.fullmatch(value_text):
            log.debug("Skipping record with bad value %r: %r", value_text, line)
            return None
        value = float(value_text)
        if not math.isfinite(value):
            log.debug("Skipping record with out-of-range value %r: %r", value_text, line)
            return None
        measurements.append((value, unit))

    return BenchRecord(name=name, iterations=iterations, measurements=tuple(measurements))


def parse_records(lines: Iterable[str] | str) -> list[BenchRecord]:
    """Parse every record in *lines*, skipping non-record lines.

    *lines* may be an iterable of lines or one multi-line string.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    records = []
    for line in lines:
        record = parse_line(line)
        if record is not None:
            records.append(record)
    return records


def parse_samples(lines: Iterable[str] | str) -> list[Sample]:
    """Parse *lines* into a flat Sample collection, in input order."""
    samples: list[Sample] = []
    for record in parse_records(lines):
        samples.extend(record.samples())
    return samples
