"""
Utility functions for the scan operators

Helpers for counting combiner calls, measuring performance and checking that
lazy scans agree with eager ones.
"""

import gc
import logging
import time
import tracemalloc
from itertools import islice
from typing import Any, Callable, Dict, Iterable, List

import psutil

from lazy import is_lazy
from models import PerformanceMetric
from scan import lazy_scan, scan

logger = logging.getLogger(__name__)


# Global performance tracking
_performance_metrics: List[PerformanceMetric] = []


class CallCounter:
    """Wraps a callable and counts how many times it has been invoked"""

    def __init__(self, fn: Callable):
        self.fn = fn
        self.calls = 0
        self.arguments = []

    def __call__(self, *args):
        self.calls += 1
        self.arguments.append(args)
        return self.fn(*args)

    def reset(self):
        self.calls = 0
        self.arguments = []


def measure_performance(operation_name: str, func, *args, **kwargs) -> PerformanceMetric:
    """Measure performance of a function call with memory tracking"""
    tracemalloc.start()
    gc.collect()

    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
    except Exception as e:
        metric = _record(operation_name, start_time, success=False, error=str(e))
        logger.warning(f"{operation_name} failed after {metric.execution_time_ms:.2f} ms: {e}")
        raise
    finally:
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

    metric = _record(
        operation_name,
        start_time,
        success=True,
        peak=peak,
        result_size=len(result) if hasattr(result, "__len__") else None,
    )
    logger.debug(f"{operation_name} took {metric.execution_time_ms:.2f} ms")
    return metric


def _record(operation_name: str, start_time: float, success: bool, peak: int = 0,
            result_size=None, error=None) -> PerformanceMetric:
    execution_time_ms = (time.perf_counter() - start_time) * 1000
    if not peak and tracemalloc.is_tracing():
        peak = tracemalloc.get_traced_memory()[1]
    metric = PerformanceMetric(
        operation=operation_name,
        execution_time_ms=execution_time_ms,
        peak_memory_mb=peak / 1024 / 1024,
        rss_mb=psutil.Process().memory_info().rss / 1024 / 1024,
        success=success,
        result_size=result_size,
        error=error,
    )
    _performance_metrics.append(metric)
    return metric


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = len(_performance_metrics)
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "avg_time_ms": 0.0,
            "max_peak_memory_mb": 0.0,
            "failures": 0
        }

    total_time = sum(m.execution_time_ms for m in _performance_metrics)
    return {
        "total_operations": count,
        "total_time_ms": total_time,
        "avg_time_ms": total_time / count,
        "max_peak_memory_mb": max(m.peak_memory_mb for m in _performance_metrics),
        "failures": sum(1 for m in _performance_metrics if not m.success)
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    _performance_metrics.clear()


def validate_lazy_evaluation(sequence) -> bool:
    """Validate that a sequence declares itself lazy and can hand out iterators"""
    return is_lazy(sequence) and callable(getattr(sequence, "__iter__", None))


def check_prefix_correspondence(initial, combine: Callable, iterable: Iterable, n: int) -> bool:
    """
    True when the first n+1 values of the lazy scan over iterable equal the
    eager scan over its first n elements.

    iterable must be re-iterable; it is traversed twice.
    """
    eager = scan(initial, combine, islice(iter(iterable), n))
    lazily = tuple(lazy_scan(initial, combine, iterable).take(n + 1))
    if eager != lazily:
        logger.info(f"Prefix mismatch at n={n}: eager={eager!r} lazy={lazily!r}")
        return False
    return True
