import logging
from itertools import count
from operator import add

from lazy import lazy
from models import ScanSettings
from scan import scan
from utils import CallCounter, get_performance_summary, measure_performance

settings = ScanSettings.from_env()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def concat(a, b):
    return a + b


print("\n--- Demo: eager scan ---")
print(f"scan(0, +, 1..5)      -> {scan(0, add, range(1, 6))}")
print(f"scan('', concat, abc) -> {scan('', concat, ['a', 'b', 'c'])}")
print(f"scan(100, +, [])      -> {scan(100, add, [])}")

print("\n--- Demo: lazy scan over an infinite sequence ---")
counted = CallCounter(add)
running_totals = lazy(count(1)).scan(0, counted, settings=settings)
print(f"Built {running_totals!r}; combiner calls so far: {counted.calls}")
first_six = running_totals.take(6).to_list()
print(f"First six partial sums: {first_six}")
print(f"Combiner calls: {counted.calls} (one per upstream element consumed)")

print("\n--- Demo: chaining stays lazy ---")
even_totals = (
    lazy(count(1))
    .scan(0, add, settings=settings)
    .filter(lambda total: total % 2 == 0)
    .map(lambda total: total // 2)
    .take(5)
)
print(f"Halved even running totals: {even_totals.to_list()}")

print("\n--- Demo: measurement ---")
metric = measure_performance("eager_scan_100k", scan, 0, add, range(100_000))
print(f"Eager scan over 100k items: {metric.execution_time_ms:.2f} ms, "
      f"peak {metric.peak_memory_mb:.2f} MB")
metric = measure_performance(
    "lazy_scan_100k_prefix",
    lambda: lazy(count(1)).scan(0, add).skip(99_999).first()
)
print(f"Lazy scan to the 100k-th total: {metric.execution_time_ms:.2f} ms, "
      f"peak {metric.peak_memory_mb:.2f} MB")
logger.info(f"Performance summary: {get_performance_summary()}")
