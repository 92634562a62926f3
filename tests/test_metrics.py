from __future__ import annotations

from skillswap.services.metrics import MetricsCollector


def test_average_of_recorded_samples() -> None:
    metrics = MetricsCollector()
    for value in (10.0, 20.0, 30.0):
        metrics.record("matching.rank", value)

    assert metrics.average("matching.rank") == 20.0
    assert metrics.count("matching.rank") == 3


def test_unknown_label_averages_to_zero() -> None:
    metrics = MetricsCollector()

    assert metrics.average("missing") == 0.0
    assert metrics.count("missing") == 0


def test_only_most_recent_samples_are_kept() -> None:
    metrics = MetricsCollector(max_samples=100)
    for value in range(150):
        metrics.record("x", float(value))

    assert metrics.count("x") == 100
    # Samples 50..149 remain.
    assert metrics.average("x") == sum(range(50, 150)) / 100


def test_timer_records_elapsed_milliseconds() -> None:
    metrics = MetricsCollector()
    stop = metrics.start_timer("op")
    elapsed = stop()

    assert elapsed >= 0.0
    assert metrics.count("op") == 1

    with metrics.timer("op"):
        pass
    assert metrics.count("op") == 2


def test_snapshot_lists_every_label() -> None:
    metrics = MetricsCollector()
    metrics.record("a", 1.0)
    metrics.record("b", 4.0)
    metrics.record("b", 6.0)

    assert metrics.snapshot() == {
        "a": {"average": 1.0, "count": 1},
        "b": {"average": 5.0, "count": 2},
    }
