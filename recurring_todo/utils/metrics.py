"""
Metrics Collection for recurring task generation.

Provides counters and timers for materialization runs.
"""

import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict

from recurring_todo.utils.dates import utcnow


class MetricsCollector:
    """Collects and manages metrics for recurring task generation."""

    def __init__(self):
        """Initialize metrics collector."""
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()
        self.reset()

    def reset(self):
        """Zero all counters and timers."""
        with self.lock:
            self.metrics.clear()
            self.timers.clear()
            self.metrics["generation_runs_total"] = 0
            self.metrics["instances_created_total"] = 0
            self.metrics["instance_conflicts_total"] = 0
            self.metrics["generation_errors_total"] = 0
            self.metrics["generation_skipped_inactive_total"] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Record a timing metric."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": utcnow().isoformat(),
            }

    def generation_run(self):
        self.increment_counter("generation_runs_total")

    def instances_created(self, count: int):
        self.increment_counter("instances_created_total", count)

    def instance_conflict(self):
        """Record an instance already created by a concurrent caller."""
        self.increment_counter("instance_conflicts_total")

    def generation_error(self):
        self.increment_counter("generation_errors_total")

    def generation_skipped_inactive(self):
        self.increment_counter("generation_skipped_inactive_total")

    @contextmanager
    def time_operation(self, metric_name: str):
        """Context manager to time an operation."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self.record_timer(metric_name, time.perf_counter() - start_time)


# Global metrics instance
metrics_collector = MetricsCollector()
