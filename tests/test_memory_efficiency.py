import gc
import tracemalloc
from itertools import count
from operator import add

from lazy import lazy
from scan import scan


def _peak_while(func):
    gc.collect()
    tracemalloc.start()
    baseline = tracemalloc.get_traced_memory()[0]
    try:
        result = func()
        current, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    return result, peak - baseline


class TestMemoryEfficiency:
    """Test that lazy scans hold only the current accumulator"""

    def test_memory_does_not_grow_with_steps(self):
        """Driving 10x more steps does not need 10x more memory"""
        def drive(steps):
            it = iter(lazy(count(1)).scan(0, add))
            for _ in range(steps):
                value = next(it)
            return value

        value, small_peak = _peak_while(lambda: drive(10_000))
        assert value == sum(range(10_000))
        value, large_peak = _peak_while(lambda: drive(100_000))
        assert value == sum(range(100_000))

        assert large_peak < 100_000, f"Used too much memory: {large_peak} bytes"
        assert large_peak < small_peak * 3 + 10_000

    def test_prior_values_are_not_retained(self):
        """Accumulators already handed out can be collected"""
        def drive():
            it = iter(lazy(count(1)).scan([], lambda acc, x: [x] * 1000))
            for _ in range(200):
                next(it)

        _, peak = _peak_while(drive)
        # 200 lists of 1000 pointers would be ~1.6MB if kept
        assert peak < 200_000, f"Used too much memory: {peak} bytes"

    def test_eager_scan_materializes_everything(self):
        """The eager form holds n+1 results, the lazy form does not"""
        eager, eager_peak = _peak_while(lambda: scan(0, add, range(50_000)))
        lazy_last, lazy_peak = _peak_while(lambda: lazy(range(50_000)).scan(0, add).last())
        assert eager[-1] == lazy_last
        assert lazy_peak < eager_peak
