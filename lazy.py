from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, List, TypeVar

T = TypeVar("T")
A = TypeVar("A")

_MISSING = object()


class LazySequence(ABC, Generic[T]):
    """
    Marker base for sequences whose chained operations stay lazy.

    Subclasses never compute an element before it is requested. Each
    ``__iter__`` call starts a fresh traversal only when the underlying
    source can itself be re-iterated; over a one-shot iterator such as
    ``itertools.count()`` a second traversal resumes where the first stopped.
    """
    is_lazy = True

    @abstractmethod
    def __iter__(self) -> Iterator[T]:
        ...

    @property
    def lazy(self) -> "LazySequence[T]":
        return self


def is_lazy(obj) -> bool:
    """True when obj declares the lazy-sequence capability"""
    return isinstance(obj, LazySequence) and getattr(type(obj), "is_lazy", False) is True


def lazy(iterable: Iterable[T]) -> "LazyCollection[T]":
    """Wrap iterable in a LazyCollection, or return it as-is if it already is one."""
    if isinstance(iterable, LazyCollection):
        return iterable
    return LazyCollection(iterable)


class LazyCollection(LazySequence[T]):
    """
    A chainable, lazy collection. Transformations are stored and applied
    only when you iterate.
    """
    def __init__(self, source: Iterable[Any], ops=None):
        self._source = source
        self._ops = ops or []          # sequence of ("op_name", callable/arg)

    # --------- chainable operators (lazy) ----------
    def map(self, fn: Callable[[T], Any]) -> "LazyCollection":
        return self._with_op(("map", fn))

    def filter(self, pred: Callable[[T], bool]) -> "LazyCollection[T]":
        return self._with_op(("filter", pred))

    def skip(self, n: int) -> "LazyCollection[T]":
        return self._with_op(("skip", _count_arg(n, "skip")))

    def take(self, n: int) -> "LazyCollection[T]":
        return self._with_op(("take", _count_arg(n, "take")))

    def prefix(self, n: int) -> "LazyCollection[T]":
        """Alias for take() - the first n elements, or fewer if the source ends"""
        return self.take(n)

    def scan(self, initial: A, combine: Callable[[A, T], A], settings=None):
        """
        Running fold over this collection, evaluated on demand.

        Nothing is pulled from the source here; the returned sequence is
        itself lazy, so further chained operations do not materialize it.
        """
        from scan import LazyScanSequence
        return LazyScanSequence(initial, self, combine, settings=settings)

    # --------- forcing evaluation ----------
    def to_list(self) -> List[T]:
        return list(self)

    def scan_eager(self, initial: A, combine: Callable[[A, T], A]):
        """Materialize every partial result. The collection must be finite."""
        from scan import scan
        return scan(initial, combine, self)

    def reduce(self, fn, initial=_MISSING):
        """Apply a function of two arguments cumulatively to items, from left to right"""
        from functools import reduce as builtin_reduce
        if initial is _MISSING:
            return builtin_reduce(fn, self)
        return builtin_reduce(fn, self, initial)

    def first(self, default=None):
        """Return the first element, or default if empty"""
        for item in self:
            return item
        return default

    def last(self, default=None):
        """Return the last element, or default if empty"""
        last_item = default
        for item in self:
            last_item = item
        return last_item

    # --------- iterator protocol ----------
    def __iter__(self) -> Iterator[T]:
        it = iter(self._source)
        for op, arg in self._ops:
            if op == "map":
                fn = arg
                it = (fn(x) for x in it)
            elif op == "filter":
                pred = arg
                it = (x for x in it if pred(x))
            elif op == "skip":
                k = arg
                def _skip(gen, k=k):
                    skipped = 0
                    for x in gen:
                        if skipped < k:
                            skipped += 1
                            continue
                        yield x
                it = _skip(it)
            elif op == "take":
                n = arg
                # stop right after the n-th item so nothing upstream is pulled early
                def _take(gen, n=n):
                    if n == 0:
                        return
                    taken = 0
                    for x in gen:
                        yield x
                        taken += 1
                        if taken >= n:
                            return
                it = _take(it)
            else:
                raise ValueError(f"Unknown op: {op}")
        return it

    # --------- helpers ----------
    def _with_op(self, op_tuple) -> "LazyCollection":
        return LazyCollection(self._source, self._ops + [op_tuple])

    def __repr__(self):
        ops = ", ".join(op for op, _ in self._ops)
        return f"{type(self).__name__}(source={self._source!r}, ops=[{ops}])"


def _count_arg(n: int, op_name: str) -> int:
    n = int(n)
    if n < 0:
        raise ValueError(f"{op_name}() count must be >= 0, got {n}")
    return n
