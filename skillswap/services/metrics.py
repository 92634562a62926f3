from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Callable, Iterator


MAX_SAMPLES = 100


class MetricsCollector:
    """Rolling timing samples keyed by label.

    Created once per application in the lifespan hook and reached through
    ``request.app.state.metrics``.
    """

    def __init__(self, max_samples: int = MAX_SAMPLES) -> None:
        self._max_samples = max_samples
        self._samples: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def record(self, label: str, value: float) -> None:
        with self._lock:
            values = self._samples.get(label)
            if values is None:
                values = deque(maxlen=self._max_samples)
                self._samples[label] = values
            values.append(float(value))

    def start_timer(self, label: str) -> Callable[[], float]:
        start = time.perf_counter()

        def stop() -> float:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            self.record(label, elapsed_ms)
            return elapsed_ms

        return stop

    @contextmanager
    def timer(self, label: str) -> Iterator[None]:
        stop = self.start_timer(label)
        try:
            yield
        finally:
            stop()

    def average(self, label: str) -> float:
        with self._lock:
            values = self._samples.get(label)
            if not values:
                return 0.0
            return sum(values) / len(values)

    def count(self, label: str) -> int:
        with self._lock:
            return len(self._samples.get(label) or ())

    def snapshot(self) -> dict[str, dict[str, float]]:
        with self._lock:
            labels = list(self._samples)
        return {label: {"average": self.average(label), "count": self.count(label)} for label in labels}
