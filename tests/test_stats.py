from itertools import accumulate

import pytest

from curator.rollups.stats import (
    PerformanceStatistics,
    convert_to_floats,
    create_performance_stats,
    extract_values,
)


def test_convert_to_floats_preserves_values():
    result = convert_to_floats([1, 5, 42])
    assert result == [1.0, 5.0, 42.0]
    assert all(isinstance(value, float) for value in result)


def test_convert_to_floats_empty():
    assert convert_to_floats([]) == []


def test_extract_values_accumulates_back_to_input():
    cumulative = [10.0, 30.0, 60.0, 100.0]
    increments = extract_values(cumulative, 0.0)
    assert len(increments) == len(cumulative)
    assert list(accumulate(increments)) == cumulative


def test_extract_values_uses_last_value_as_baseline():
    increments = extract_values([50.0, 70.0], 40.0)
    assert list(accumulate(increments, initial=40.0))[1:] == [50.0, 70.0]


def test_counters_take_last_value():
    stats = create_performance_stats(
        [
            {
                "counters.ops": [1, 2, 5],
                "counters.n": [3, 9],
                "counters.size": [100, 400],
                "counters.errors": [0, 7],
            }
        ]
    )
    assert stats.operations_total == 5
    assert stats.documents_total == 9
    assert stats.size_total == 400
    assert stats.errors_total == 7


def test_durations_span_chunks():
    stats = create_performance_stats(
        [{"timers.dur": [10, 30]}, {"timers.duration": [60]}]
    )
    assert list(accumulate(stats.extracted_durations)) == [10.0, 30.0, 60.0]
    assert stats.duration_total == 60


def test_timers_total_and_gauges():
    stats = create_performance_stats(
        [
            {
                "timers.total": [5, 80],
                "gauges.state": [1, 2],
                "gauges.workers": [4, 8],
                "gauges.failed": [0, 1],
            }
        ]
    )
    assert stats.total == 80
    assert stats.state == [1.0, 2.0]
    assert stats.workers == [4.0, 8.0]
    assert stats.failed == [0.0, 1.0]


def test_wall_time_includes_first_operation():
    stats = create_performance_stats(
        [{"ts": [1000, 2000], "timers.dur": [100, 300]}]
    )
    assert stats.total_wall_time == (2000 - 1000) * 1_000_000 + 100


def test_wall_time_uses_first_and_last_timestamps_across_chunks():
    stats = create_performance_stats([{"ts": [1000, 1500]}, {"ts": [2000, 3000]}])
    assert stats.total_wall_time == (3000 - 1000) * 1_000_000
    assert stats.total_wall_time_seconds == stats.total_wall_time / 1e9


def test_pairs_are_accepted_as_chunks():
    stats = create_performance_stats([[("counters.ops", [4, 6]), ("id", [1])]])
    assert stats.operations_total == 6


def test_id_field_is_ignored():
    assert create_performance_stats([{"id": [1, 2]}]) == PerformanceStatistics()


def test_unknown_field_raises():
    with pytest.raises(ValueError, match="unknown field name 'bogus'"):
        create_performance_stats([{"bogus": [1]}])


def test_empty_input_gives_zeroed_statistics():
    stats = create_performance_stats([])
    assert stats == PerformanceStatistics()
    assert stats.total_wall_time == 0