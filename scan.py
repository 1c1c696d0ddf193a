"""
Running fold ("scan") operators.

``scan`` is the eager form: it folds a finite iterable and returns every
partial result at once. ``LazyScanSequence`` is the lazy form: it wraps any
iterable, possibly infinite, and computes partial results one per ``next()``.

    >>> from operator import add
    >>> scan(0, add, range(1, 6))
    (0, 1, 3, 6, 10, 15)
    >>> from itertools import count
    >>> lazy_scan(0, add, count(1)).take(6).to_list()
    [0, 1, 3, 6, 10, 15]
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from lazy import LazyCollection, lazy
from models import ScanSettings, ScanStepping

logger = logging.getLogger(__name__)

A = TypeVar("A")
E = TypeVar("E")

# pending slot value once the upstream has run dry
_EXHAUSTED = object()


class ScanState(str, Enum):
    """Lifecycle of a lazy scan iterator"""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    EXHAUSTED = "exhausted"


def scan(initial: A, combine: Callable[[A, E], A], sequence: Iterable[E]) -> Tuple[A, ...]:
    """
    Return the results of folding ``combine`` over every prefix of
    ``sequence``, shortest first, starting from ``initial``.

    The result always has one more item than the input. ``combine`` is
    called once per element, left to right; anything it raises propagates
    and no partial result is returned.
    """
    result = [initial]
    for element in sequence:
        result.append(combine(result[-1], element))
    logger.debug(f"Eager scan produced {len(result)} partial results")
    return tuple(result)


def lazy_scan(initial: A, combine: Callable[[A, E], A], iterable: Iterable[E],
              settings: Optional[ScanSettings] = None) -> "LazyScanSequence[A, E]":
    """Functional spelling of ``lazy(iterable).scan(initial, combine)``."""
    return lazy(iterable).scan(initial, combine, settings=settings)


class LazyScanSequence(LazyCollection, Generic[A, E]):
    """
    Lazy sequence of the partial results of a running fold.

    Holds the initial value, the upstream iterable and the combining
    function; nothing else. Each ``iter()`` returns an independent iterator
    starting from ``initial``, as long as the upstream iterable itself hands
    out independent iterators.
    """

    def __init__(self, initial: A, base: Iterable[E], combine: Callable[[A, E], A],
                 settings: Optional[ScanSettings] = None):
        super().__init__(base)
        self._initial = initial
        self._combine = combine
        self._settings = settings or ScanSettings()
        logger.debug(f"Created lazy scan over {type(base).__name__} "
                     f"({self._settings.stepping.value} stepping)")

    @property
    def initial(self) -> A:
        return self._initial

    @property
    def base(self) -> Iterable[E]:
        return self._source

    @property
    def combine(self) -> Callable[[A, E], A]:
        return self._combine

    @property
    def settings(self) -> ScanSettings:
        return self._settings

    def __iter__(self) -> "_ScanIterator[A, E]":
        if self._settings.stepping is ScanStepping.LOOKAHEAD:
            return LookaheadScanIterator(self._initial, iter(self._source), self._combine)
        return LazyScanIterator(self._initial, iter(self._source), self._combine)

    def _with_op(self, op_tuple) -> LazyCollection:
        # chained ops consume the scan's output, not its upstream
        return LazyCollection(self, [op_tuple])

    def __repr__(self):
        return (f"LazyScanSequence(initial={self._initial!r}, base={self._source!r}, "
                f"stepping={self._settings.stepping.value})")


class _ScanIterator(ABC, Generic[A, E]):

    def __init__(self, initial: A, base: Iterator[E], combine: Callable[[A, E], A]):
        self._pending = initial
        self._base = base
        self._combine = combine
        logger.debug(f"Started scan iterator {type(self).__name__}")

    def __iter__(self):
        return self

    @abstractmethod
    def __next__(self) -> A:
        ...

    @property
    @abstractmethod
    def state(self) -> ScanState:
        ...

    def _pull(self):
        """Next upstream element, or _EXHAUSTED."""
        try:
            return next(self._base)
        except StopIteration:
            logger.debug("Upstream exhausted; scan iterator finished")
            return _EXHAUSTED

    def _step(self, prev: A, element: E) -> A:
        # a failed combine leaves the iterator finished
        self._pending = _EXHAUSTED
        try:
            return self._combine(prev, element)
        except Exception as e:
            logger.debug(f"Combining function raised {type(e).__name__}; scan iterator closed")
            raise


class LazyScanIterator(_ScanIterator[A, E]):
    """
    Produces ``initial, combine(initial, e0), combine(combine(initial, e0), e1), ...``.

    The first ``next()`` returns ``initial`` without touching upstream. Each
    later call pulls exactly one upstream element and returns the freshly
    combined value. Once upstream ends, every call raises StopIteration.
    """

    def __init__(self, initial: A, base: Iterator[E], combine: Callable[[A, E], A]):
        super().__init__(initial, base, combine)
        self._emitted_initial = False

    @property
    def state(self) -> ScanState:
        if not self._emitted_initial:
            return ScanState.NOT_STARTED
        if self._pending is _EXHAUSTED:
            return ScanState.EXHAUSTED
        return ScanState.RUNNING

    def __next__(self) -> A:
        if not self._emitted_initial:
            self._emitted_initial = True
            return self._pending
        if self._pending is _EXHAUSTED:
            raise StopIteration
        element = self._pull()
        if element is _EXHAUSTED:
            self._pending = _EXHAUSTED
            raise StopIteration
        self._pending = self._step(self._pending, element)
        return self._pending


class LookaheadScanIterator(_ScanIterator[A, E]):
    """
    Same output as LazyScanIterator, but computed one step ahead: each
    ``next()`` returns the pending value and then pulls and combines the
    following one before returning. ``k`` calls pull ``k`` upstream elements.
    """

    def __init__(self, initial: A, base: Iterator[E], combine: Callable[[A, E], A]):
        super().__init__(initial, base, combine)
        self._started = False
        self._finished = False

    @property
    def state(self) -> ScanState:
        if self._finished:
            return ScanState.EXHAUSTED
        if not self._started:
            return ScanState.NOT_STARTED
        return ScanState.RUNNING

    def __next__(self) -> A:
        self._started = True
        result = self._pending
        if result is _EXHAUSTED:
            self._finished = True
            raise StopIteration
        element = self._pull()
        if element is _EXHAUSTED:
            self._pending = _EXHAUSTED
        else:
            try:
                self._pending = self._step(result, element)
            except Exception:
                self._finished = True
                raise
        return result
