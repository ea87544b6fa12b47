"""
Standard stages.

Producers, pipes and consumers that come up in almost every pipeline. All
of them are built from ``emit``, ``demand``, ``lift`` and ``bind``, so they
hold no mutable state and can be driven more than once. The exception is
``each`` over a one-shot iterator, which can only be driven once.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import IO, Any, TypeVar

from dopipe.core import demand, emit, io, lift
from dopipe.proxy import Pure, SingleUse, bind
from dopipe.types import Consumer, Pipe, Producer

A = TypeVar("A")
B = TypeVar("B")

_EXHAUSTED = object()


def each(iterable: Iterable[A]) -> Producer[A, Any, None]:
    """Emit every element of ``iterable`` in order, then return ``None``.

    Sequences are walked by index and the producer can be reused. Any other
    iterable is pulled one element per emission, and each pull is a base
    effect action (``next``) performed in drive order, so the iterator never
    advances before a value is demanded. Such a producer is single-use.

    Pulls from an iterator need an interpreter that calls its actions;
    under ``Inert`` every pull answers ``None`` and the producer never ends.
    """

    if isinstance(iterable, Sequence):
        return _each_index(iterable, 0)
    return _each_iter(iter(iterable))


def _each_index(items: Sequence[A], index: int) -> Producer[A, Any, None]:
    if index >= len(items):
        return Pure(None)
    return bind(emit(items[index]), lambda _: _each_index(items, index + 1))


def _each_iter(iterator: Iterator[A]) -> Producer[A, Any, None]:
    def pulled(item: Any) -> Producer[A, Any, None]:
        if item is _EXHAUSTED:
            return Pure(None)
        return bind(emit(item), SingleUse(lambda _: _each_iter(iterator), "each"))

    return bind(io(next, iterator, _EXHAUSTED), SingleUse(pulled, "each"))


def repeatedly(action: Any) -> Producer[Any, Any, Any]:
    """Perform ``action`` forever, emitting each result."""

    return bind(lift(action), lambda value: bind(emit(value), lambda _: repeatedly(action)))


def cat() -> Pipe[A, A, Any, Any]:
    """Pass every value through unchanged, forever."""

    return bind(demand(), lambda value: bind(emit(value), lambda _: cat()))


def mapping(f: Callable[[A], B]) -> Pipe[B, A, Any, Any]:
    """Apply ``f`` to every value passing through."""

    if not callable(f):
        raise TypeError("mapping expects a callable")

    def step() -> Pipe[B, A, Any, Any]:
        return bind(demand(), lambda value: bind(emit(f(value)), lambda _: step()))

    return step()


def filtering(predicate: Callable[[A], bool]) -> Pipe[A, A, Any, Any]:
    """Pass on only the values for which ``predicate`` holds."""

    if not callable(predicate):
        raise TypeError("filtering expects a callable")

    def keep(value: A) -> Pipe[A, A, Any, Any]:
        if predicate(value):
            return bind(emit(value), lambda _: step())
        return step()

    def step() -> Pipe[A, A, Any, Any]:
        return bind(demand(), keep)

    return step()


def take(n: int) -> Pipe[A, A, Any, None]:
    """Pass on the first ``n`` values, then return ``None``."""

    if n < 0:
        raise ValueError(f"take expects a non-negative count; got {n}")

    def step(remaining: int) -> Pipe[A, A, Any, None]:
        if remaining == 0:
            return Pure(None)
        return bind(demand(), lambda value: bind(emit(value), lambda _: step(remaining - 1)))

    return step(n)


def drop(n: int) -> Pipe[A, A, Any, Any]:
    """Discard the first ``n`` values, then pass the rest through."""

    if n < 0:
        raise ValueError(f"drop expects a non-negative count; got {n}")

    def step(remaining: int) -> Pipe[A, A, Any, Any]:
        if remaining == 0:
            return cat()
        return bind(demand(), lambda _: step(remaining - 1))

    return step(n)


def take_while(predicate: Callable[[A], bool]) -> Pipe[A, A, Any, None]:
    """Pass values on while ``predicate`` holds; return ``None`` at the first miss."""

    if not callable(predicate):
        raise TypeError("take_while expects a callable")

    def check(value: A) -> Pipe[A, A, Any, None]:
        if not predicate(value):
            return Pure(None)
        return bind(emit(value), lambda _: step())

    def step() -> Pipe[A, A, Any, None]:
        return bind(demand(), check)

    return step()


def printer(file: IO[str] | None = None) -> Consumer[Any, Any, Any]:
    """Print every value received, forever.

    Output goes to ``file`` or, when omitted, to whatever ``sys.stdout`` is
    at the time each value is printed.
    """

    return bind(demand(), lambda value: bind(io(print, value, file=file), lambda _: printer(file)))


__all__ = [
    "cat",
    "drop",
    "each",
    "filtering",
    "mapping",
    "printer",
    "repeatedly",
    "take",
    "take_while",
]
