"""Grouping of old and new samples into comparable benchmark groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from benchgate.bench.parse import Sample
from benchgate.errors import InternalConsistencyError

log = logging.getLogger("benchgate")


@dataclass
class BenchGroup:
    """All old and new samples observed for one (metric, name) key."""

    metric: str
    name: str
    unit: str
    old_samples: list[Sample] = field(default_factory=list)
    new_samples: list[Sample] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.metric, self.name)

    @property
    def old(self) -> list[float]:
        return [s.value for s in self.old_samples]

    @property
    def new(self) -> list[float]:
        return [s.value for s in self.new_samples]

    def validate(self) -> None:
        """Check that both sides are non-empty and every sample has this key.

        Raises:
            InternalConsistencyError: On the first violation found.
        """
        if not self.old_samples or not self.new_samples:
            raise InternalConsistencyError(
                f"group {self.metric}/{self.name} has {len(self.old_samples)} old and "
                f"{len(self.new_samples)} new values; both sides must be non-empty"
            )
        for side, samples in (("old", self.old_samples), ("new", self.new_samples)):
            for sample in samples:
                if (sample.metric, sample.name) != self.key:
                    raise InternalConsistencyError(
                        f"group {self.metric}/{self.name} holds {side} sample "
                        f"{sample.metric}/{sample.name}"
                    )


def _collect(samples: Sequence[Sample]) -> dict[tuple[str, str], list[Sample]]:
    """Bucket samples by (metric, name), preserving first appearance."""
    buckets: dict[tuple[str, str], list[Sample]] = {}
    for sample in samples:
        buckets.setdefault((sample.metric, sample.name), []).append(sample)
    return buckets


def group_samples(
    old: Sequence[Sample],
    new: Sequence[Sample],
) -> list[BenchGroup]:
    """Pair old and new samples by (metric, name).

    Groups are ordered by the first appearance of their metric in *old*,
    then by the first appearance of their name in *old*.  Keys seen on
    only one side cannot be compared and are dropped.

    Returns:
        The comparable groups; empty if either side is empty.
    """
    old_buckets = _collect(old)
    new_buckets = _collect(new)

    metric_order: dict[str, int] = {}
    for metric, _name in old_buckets:
        metric_order.setdefault(metric, len(metric_order))

    groups: list[BenchGroup] = []
    for key, old_samples in old_buckets.items():
        new_samples = new_buckets.get(key)
        if not new_samples:
            log.debug("Dropping %s %s: no new samples", key[0], key[1])
            continue
        groups.append(
            BenchGroup(
                metric=key[0],
                name=key[1],
                unit=old_samples[0].unit,
                old_samples=old_samples,
                new_samples=new_samples,
            )
        )

    for key in new_buckets.keys() - old_buckets.keys():
        log.debug("Dropping %s %s: no old samples", key[0], key[1])

    # Stable sort: names keep their old-side order within each metric.
    groups.sort(key=lambda g: metric_order[g.metric])
    return groups
