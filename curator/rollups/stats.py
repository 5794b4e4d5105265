"""Performance statistics gathered from FTDC-style metric chunks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Union

MAX_DURATIONS_SIZE = 550_000_000
_NS_PER_MS = 1_000_000
_NS_PER_SECOND = 1_000_000_000

Chunk = Union[Mapping[str, Sequence[int]], Iterable[tuple[str, Sequence[int]]]]


@dataclass
class PerformanceStatistics:
    """Counters, timers and gauges summarised from a performance recording.

    All durations are integer nanoseconds.
    """

    operations_total: int = 0
    documents_total: int = 0
    size_total: int = 0
    errors_total: int = 0

    extracted_durations: list[float] = field(default_factory=list)
    duration_total: int = 0
    total: int = 0
    total_wall_time: int = 0

    state: list[float] = field(default_factory=list)
    workers: list[float] = field(default_factory=list)
    failed: list[float] = field(default_factory=list)

    @property
    def total_wall_time_seconds(self) -> float:
        """The wall-clock time of the recording in seconds."""
        return self.total_wall_time / _NS_PER_SECOND


def convert_to_floats(ints: Iterable[int]) -> list[float]:
    """Return the values as floats."""
    return [float(value) for value in ints]


def extract_values(vals: Iterable[float], last_value: float) -> list[float]:
    """Turn cumulative values into per-sample increments.

    ``last_value`` is the cumulative value that preceded the first sample.
    """
    extracted = []
    for value in vals:
        extracted.append(value - last_value)
        last_value = value
    return extracted


def _metric_pairs(chunk: Chunk) -> Iterable[tuple[str, Sequence[int]]]:
    if isinstance(chunk, Mapping):
        return chunk.items()
    return chunk


def create_performance_stats(chunks: Iterable[Chunk]) -> PerformanceStatistics:
    """Summarise a sequence of metric chunks.

    Each chunk maps a dotted metric name (``counters.ops``, ``timers.dur``,
    ``ts`` and so on) to its sample values. Raises ``ValueError`` for an
    unknown metric name or when the recording holds too many durations.
    """
    stats = PerformanceStatistics()
    last_value = 0.0
    first_ns = 0
    end_ns = 0

    for index, chunk in enumerate(chunks):
        for name, values in _metric_pairs(chunk):
            match name:
                case "counters.ops":
                    stats.operations_total = values[-1]
                case "counters.n":
                    stats.documents_total = values[-1]
                case "counters.size":
                    stats.size_total = values[-1]
                case "counters.errors":
                    stats.errors_total = values[-1]
                case "timers.duration" | "timers.dur":
                    stats.extracted_durations.extend(
                        extract_values(convert_to_floats(values), last_value)
                    )
                    if len(stats.extracted_durations) > MAX_DURATIONS_SIZE:
                        raise ValueError("size of ftdc file exceeds 2GB")
                    last_value = float(values[-1])
                    stats.duration_total = int(values[-1])
                case "timers.total":
                    stats.total = int(values[-1])
                case "gauges.state":
                    stats.state = convert_to_floats(values)
                case "gauges.workers":
                    stats.workers = convert_to_floats(values)
                case "gauges.failed":
                    stats.failed = convert_to_floats(values)
                case "ts":
                    if index == 0:
                        first_ns = int(values[0]) * _NS_PER_MS
                    end_ns = int(values[-1]) * _NS_PER_MS
                case "id":
                    continue
                case _:
                    raise ValueError(f"unknown field name '{name}'")

    # Timestamps mark the end of operations, so the first operation's
    # duration is subtracted to include it in the wall-clock time.
    if stats.extracted_durations:
        start_ns = first_ns - int(stats.extracted_durations[0])
    else:
        start_ns = first_ns
    stats.total_wall_time = end_ns - start_ns

    return stats