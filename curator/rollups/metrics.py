"""Rollup calculations over summarised performance statistics."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from curator.rollups.stats import Chunk, PerformanceStatistics, create_performance_stats


class MetricType(str, enum.Enum):
    """The kind of statistic a rollup value holds."""

    MEAN = "mean"
    MEDIAN = "median"
    MAX = "max"
    MIN = "min"
    SUM = "sum"
    STD_DEV = "standard-deviation"
    PERCENTILE_99 = "percentile-99th"
    PERCENTILE_90 = "percentile-90th"
    PERCENTILE_95 = "percentile-95th"
    PERCENTILE_80 = "percentile-80th"
    PERCENTILE_50 = "percentile-50th"
    THROUGHPUT = "throughput"
    LATENCY = "latency"

    def __str__(self) -> str:
        return self.value


@dataclass
class PerfRollupValue:
    """One computed rollup. ``value`` is None when it could not be computed."""

    name: str
    value: Any
    version: int
    metric_type: MetricType
    user_submitted: bool = False


def quantile(sorted_values: Sequence[float], q: float) -> float:
    """Return the ``q`` quantile of ascending values (Hyndman-Fan type 8).

    Returns NaN for an empty sequence.
    """
    if not sorted_values:
        return math.nan
    if q <= 0:
        return min(sorted_values)
    if q >= 1:
        return max(sorted_values)

    count = len(sorted_values)
    position = 1 / 3.0 + q * (count + 1 / 3.0)
    frac, whole = math.modf(position)
    k = int(whole)
    if k <= 0:
        return sorted_values[0]
    if k >= count:
        return sorted_values[-1]
    lower = sorted_values[k - 1]
    return lower + frac * (sorted_values[k] - lower)


class RollupFactory:
    """Base class for a family of rollups computed from statistics."""

    type_name: ClassVar[str] = ""
    names: ClassVar[tuple[str, ...]] = ()
    version: ClassVar[int] = 0

    def calc(self, stats: PerformanceStatistics, user: bool) -> list[PerfRollupValue]:
        """Compute this factory's rollups."""
        raise NotImplementedError

    def _value(
        self, name: str, metric_type: MetricType, user: bool, value: Any = None
    ) -> PerfRollupValue:
        return PerfRollupValue(
            name=name,
            value=value,
            version=self.version,
            metric_type=metric_type,
            user_submitted=user,
        )

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LatencyAverage(RollupFactory):
    type_name = "AverageLatency"
    names = ("AverageLatency",)
    version = 3

    def calc(self, stats, user):
        value = None
        if stats.operations_total > 0:
            value = float(stats.duration_total) / float(stats.operations_total)
        return [self._value(self.type_name, MetricType.MEAN, user, value)]


class SizeAverage(RollupFactory):
    type_name = "AverageSize"
    names = ("AverageSize",)
    version = 3

    def calc(self, stats, user):
        value = None
        if stats.operations_total > 0:
            value = float(stats.size_total) / float(stats.operations_total)
        return [self._value(self.type_name, MetricType.MEAN, user, value)]


def _throughput(amount: int, stats: PerformanceStatistics) -> float | None:
    if stats.total_wall_time > 0:
        return float(amount) / stats.total_wall_time_seconds
    return None


class OperationThroughput(RollupFactory):
    type_name = "OperationThroughput"
    names = ("OperationThroughput",)
    version = 5

    def calc(self, stats, user):
        value = _throughput(stats.operations_total, stats)
        return [self._value(self.type_name, MetricType.THROUGHPUT, user, value)]


class DocumentThroughput(RollupFactory):
    type_name = "DocumentThroughput"
    names = ("DocumentThroughput",)
    version = 1

    def calc(self, stats, user):
        value = _throughput(stats.documents_total, stats)
        return [self._value(self.type_name, MetricType.THROUGHPUT, user, value)]


class SizeThroughput(RollupFactory):
    type_name = "SizeThroughput"
    names = ("SizeThroughput",)
    version = 5

    def calc(self, stats, user):
        value = _throughput(stats.size_total, stats)
        return [self._value(self.type_name, MetricType.THROUGHPUT, user, value)]


class ErrorThroughput(RollupFactory):
    type_name = "ErrorRate"
    names = ("ErrorRate",)
    version = 5

    def calc(self, stats, user):
        value = _throughput(stats.errors_total, stats)
        return [self._value(self.type_name, MetricType.THROUGHPUT, user, value)]


class LatencyPercentile(RollupFactory):
    type_name = "LatencyPercentile"
    names = (
        "Latency50thPercentile",
        "Latency80thPercentile",
        "Latency90thPercentile",
        "Latency95thPercentile",
        "Latency99thPercentile",
    )
    version = 4

    _QUANTILES = (
        (0.5, MetricType.PERCENTILE_50),
        (0.8, MetricType.PERCENTILE_80),
        (0.9, MetricType.PERCENTILE_90),
        (0.95, MetricType.PERCENTILE_95),
        (0.99, MetricType.PERCENTILE_99),
    )

    def calc(self, stats, user):
        durations = sorted(stats.extracted_durations)
        return [
            self._value(
                name,
                metric_type,
                user,
                quantile(durations, q) if durations else None,
            )
            for name, (q, metric_type) in zip(self.names, self._QUANTILES)
        ]


def _bounds(
    factory: RollupFactory,
    values: Sequence[float],
    user: bool,
) -> list[PerfRollupValue]:
    low = high = None
    if values:
        low, high = min(values), max(values)
    min_name, max_name = factory.names
    return [
        factory._value(min_name, MetricType.MIN, user, low),
        factory._value(max_name, MetricType.MAX, user, high),
    ]


class WorkersBounds(RollupFactory):
    type_name = "WorkersBounds"
    names = ("WorkersMin", "WorkersMax")
    version = 3

    def calc(self, stats, user):
        return _bounds(self, stats.workers, user)


class LatencyBounds(RollupFactory):
    type_name = "LatencyBounds"
    names = ("LatencyMin", "LatencyMax")
    version = 4

    def calc(self, stats, user):
        return _bounds(self, stats.extracted_durations, user)


class DurationSum(RollupFactory):
    type_name = "DurationTotal"
    names = ("DurationTotal",)
    version = 5

    def calc(self, stats, user):
        return [self._value(self.type_name, MetricType.SUM, user, stats.total_wall_time)]


class ErrorsSum(RollupFactory):
    type_name = "ErrorsTotal"
    names = ("ErrorsTotal",)
    version = 3

    def calc(self, stats, user):
        return [self._value(self.type_name, MetricType.SUM, user, stats.errors_total)]


class OperationsSum(RollupFactory):
    type_name = "OperationsTotal"
    names = ("OperationsTotal",)
    version = 3

    def calc(self, stats, user):
        return [
            self._value(self.type_name, MetricType.SUM, user, stats.operations_total)
        ]


class DocumentsSum(RollupFactory):
    type_name = "DocumentsTotal"
    names = ("DocumentsTotal",)
    version = 0

    def calc(self, stats, user):
        return [
            self._value(self.type_name, MetricType.SUM, user, stats.documents_total)
        ]


class SizeSum(RollupFactory):
    type_name = "SizeTotal"
    names = ("SizeTotal",)
    version = 3

    def calc(self, stats, user):
        return [self._value(self.type_name, MetricType.SUM, user, stats.size_total)]


class OverheadSum(RollupFactory):
    type_name = "OverheadTotal"
    names = ("OverheadTotal",)
    version = 1

    def calc(self, stats, user):
        overhead = stats.total - stats.duration_total
        return [self._value(self.type_name, MetricType.SUM, user, overhead)]


_DEFAULT_ROLLUPS: tuple[RollupFactory, ...] = (
    LatencyAverage(),
    SizeAverage(),
    OperationThroughput(),
    DocumentThroughput(),
    SizeThroughput(),
    ErrorThroughput(),
    LatencyPercentile(),
    WorkersBounds(),
    LatencyBounds(),
    DurationSum(),
    ErrorsSum(),
    OperationsSum(),
    DocumentsSum(),
    SizeSum(),
    OverheadSum(),
)

_ROLLUPS_MAP: dict[str, RollupFactory] = {f.type_name: f for f in _DEFAULT_ROLLUPS}


def rollups_map() -> dict[str, RollupFactory]:
    """Return every known rollup factory keyed by its type name."""
    return dict(_ROLLUPS_MAP)


def rollup_factory_from_type(type_name: str) -> RollupFactory | None:
    """Return the factory for a type name, or None if it is unknown."""
    return _ROLLUPS_MAP.get(type_name)


def default_rollup_factories() -> list[RollupFactory]:
    """Return the factories used for the default rollups, in order."""
    return list(_DEFAULT_ROLLUPS)


def calculate_default_rollups(
    chunks: Iterable[Chunk], user: bool
) -> list[PerfRollupValue]:
    """Summarise the chunks and compute every default rollup.

    Raises ``ValueError`` when the chunks cannot be summarised.
    """
    try:
        stats = create_performance_stats(chunks)
    except ValueError as err:
        raise ValueError(f"calculating perf statistics: {err}") from err

    rollups: list[PerfRollupValue] = []
    for factory in default_rollup_factories():
        rollups.extend(factory.calc(stats, user))
    return rollups