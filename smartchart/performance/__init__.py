"""
Performance Module

Optional helpers for callers that recompute layouts on every render:
- Result memoization keyed by request payload
- Execution time profiling
"""

from .profiler import PerformanceProfiler, PerformanceMetrics, time_monitor, profiler
from .cache import CacheManager, cache_manager

__all__ = [
    'PerformanceProfiler',
    'PerformanceMetrics',
    'time_monitor',
    'profiler',
    'CacheManager',
    'cache_manager'
]
