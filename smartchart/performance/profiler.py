"""
Performance Profiler Module

Execution time measurement for layout requests.
"""

import functools
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Performance metrics data structure"""
    function_name: str
    execution_time: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'function': self.function_name,
            'time_seconds': round(self.execution_time, 4)
        }


class PerformanceProfiler:
    """Centralized performance profiler"""

    def __init__(self, history_size: int = 100):
        self.metrics_history: List[PerformanceMetrics] = []
        self.history_size = history_size
        self.enabled = True

    def record_metrics(self, metrics: PerformanceMetrics):
        """Record performance metrics"""
        if self.enabled:
            self.metrics_history.append(metrics)
            del self.metrics_history[:-self.history_size]

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary"""
        if not self.metrics_history:
            return {}

        total_time = sum(m.execution_time for m in self.metrics_history)

        return {
            'total_functions': len(self.metrics_history),
            'total_time_seconds': round(total_time, 4),
            'avg_time_seconds': round(total_time / len(self.metrics_history), 4),
            'recent_metrics': [m.to_dict() for m in self.metrics_history[-5:]]
        }


# Global profiler instance
profiler = PerformanceProfiler()


def time_monitor(func: Callable) -> Callable:
    """Decorator to monitor execution time"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)

        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            execution_time = time.perf_counter() - start_time
            profiler.record_metrics(PerformanceMetrics(function_name=func.__name__, execution_time=execution_time))
            logger.info(f"{func.__name__}: {execution_time:.4f}s")
    return wrapper
