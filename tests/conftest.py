"""
Configuration for pytest to set up the proper import paths and shared fixtures.
"""

import sys
from itertools import count
from pathlib import Path

import pytest


# Add the parent directory to Python path so we can import scan, lazy, etc.
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

# Import after path setup
from utils import CallCounter, clear_performance_metrics


class RecordingIterable:
    """Re-iterable source that logs every element handed out by any of its iterators."""

    def __init__(self, factory):
        self.factory = factory
        self.log = []

    def __iter__(self):
        for item in self.factory():
            self.log.append(item)
            yield item

    @property
    def pulls(self):
        return len(self.log)


@pytest.fixture
def naturals():
    """Re-iterable infinite sequence 1, 2, 3, ..."""
    return RecordingIterable(lambda: count(1))


@pytest.fixture
def recording():
    """Factory wrapping any re-iterable in a RecordingIterable"""
    def _make(iterable):
        return RecordingIterable(lambda: iter(iterable))
    return _make


@pytest.fixture
def call_counter():
    """Factory for CallCounter-wrapped combining functions"""
    return CallCounter


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty performance log"""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
