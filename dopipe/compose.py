"""
Composition operators for stream handles.

``for_`` substitutes a sub-stream for every emitted value. ``connect`` pairs
each demand of a consumer with the next emission of a producer. Both are
written as loops that only return once a step needs outside attention (an
effect, an emission leaving the composite, a demand leaving the composite or
a final result), so a long stream of purely internal traffic costs no stack.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import reduce
from typing import Any, TypeVar

from dopipe.errors import NotAHandleError
from dopipe.proxy import (
    Continuation,
    Demand,
    Emit,
    Perform,
    Proxy,
    Pure,
    _append_frames,
    ensure_fresh,
    ensure_handle,
)

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
I = TypeVar("I")  # noqa: E741
M = TypeVar("M")
R = TypeVar("R")


def for_(
    source: Proxy[A, I, M, R], body: Callable[[A], Proxy[B, I, M, Any]]
) -> Proxy[B, I, M, R]:
    """Replace every value emitted by ``source`` with the stream ``body(value)``.

    ``source`` is resumed with the body's return value once the body
    finishes. Demand and Perform steps of ``source`` pass through.
    """

    if not callable(body):
        raise TypeError("for_ body must be callable returning a stream handle")
    return _for(ensure_handle(source, "for_ source"), body)


def _for(source: Proxy[Any, Any, Any, Any], body: Callable[[Any], Proxy[Any, Any, Any, Any]]) -> Proxy[Any, Any, Any, Any]:
    while True:
        match ensure_fresh(source):
            case Pure():
                return source
            case Perform(action=action, k=k):
                return Perform(action, Continuation.of(lambda value, k=k: _for(k(value), body)))
            case Demand(probe=probe, k=k):
                return Demand(probe, Continuation.of(lambda value, k=k: _for(k(value), body)))
            case Emit(value=value, k=k):
                inner = ensure_handle(body(value), "for_ body result")
                if isinstance(inner, Pure):
                    source = k(inner.value)
                    continue
                return _append_frames(inner, (lambda result, k=k: _for(k(result), body),))
            case _:
                raise NotAHandleError(source, "for_ source")


def compose_right(
    f: Callable[[A], Proxy[B, I, M, Any]],
    g: Callable[[B], Proxy[C, I, M, Any]],
) -> Callable[[A], Proxy[C, I, M, Any]]:
    """Point-free ``for_``: ``compose_right(f, g)(x) == for_(f(x), g)``.

    With ``emit`` as identity this is a category.
    """

    if not callable(f) or not callable(g):
        raise TypeError("compose_right expects two callables")

    def composed(value: A) -> Proxy[C, I, M, Any]:
        return for_(f(value), g)

    composed.__name__ = f"{getattr(f, '__name__', 'f')}_then_{getattr(g, '__name__', 'g')}"
    return composed


@dataclass(frozen=True)
class _Matched:
    """An emission met a demand; both sides are ready to continue."""

    upstream: Callable[[], Proxy[Any, Any, Any, Any]]
    downstream: Proxy[Any, Any, Any, Any]


def connect(
    producer: Proxy[A, Any, M, R], consumer: Proxy[B, A, M, R]
) -> Proxy[B, Any, M, R]:
    """Feed every value ``producer`` emits to the next demand of ``consumer``.

    The consumer drives: the producer only runs while the consumer is
    waiting for a value, and is resumed after an emission only when the
    consumer demands again. Whichever side finishes first supplies the
    result and the other side is dropped without being resumed. Emissions
    of the consumer pass downstream and demands of the producer pass
    upstream, so pipes chain.
    """

    ensure_handle(producer, "connect producer")
    ensure_handle(consumer, "connect consumer")
    return _connect(lambda: producer, consumer)


def _connect(
    upstream: Callable[[], Proxy[Any, Any, Any, Any]],
    downstream: Proxy[Any, Any, Any, Any],
) -> Proxy[Any, Any, Any, Any]:
    while True:
        match ensure_fresh(downstream):
            case Pure():
                return downstream
            case Perform(action=action, k=k):
                return Perform(action, Continuation.of(lambda value, k=k, up=upstream: _connect(up, k(value))))
            case Emit(value=value, k=k):
                return Emit(value, Continuation.of(lambda reply, k=k, up=upstream: _connect(up, k(reply))))
            case Demand(k=waiting):
                step = _pull(upstream(), waiting)
                if not isinstance(step, _Matched):
                    return step
                upstream, downstream = step.upstream, step.downstream
            case _:
                raise NotAHandleError(downstream, "connect consumer")


def _pull(
    producer: Proxy[Any, Any, Any, Any], waiting: Continuation
) -> Proxy[Any, Any, Any, Any] | _Matched:
    match ensure_fresh(producer):
        case Pure():
            return producer
        case Perform(action=action, k=k):
            return Perform(action, Continuation.of(lambda value, k=k: _resume_pull(k(value), waiting)))
        case Demand(probe=probe, k=k):
            return Demand(probe, Continuation.of(lambda value, k=k: _resume_pull(k(value), waiting)))
        case Emit(value=value, k=k):
            return _Matched(lambda k=k: k(None), waiting(value))
    raise NotAHandleError(producer, "connect producer")


def _resume_pull(
    producer: Proxy[Any, Any, Any, Any], waiting: Continuation
) -> Proxy[Any, Any, Any, Any]:
    step = _pull(producer, waiting)
    if isinstance(step, _Matched):
        return _connect(step.upstream, step.downstream)
    return step


def pipeline(*stages: Proxy[Any, Any, Any, R]) -> Proxy[Any, Any, Any, R]:
    """``pipeline(a, b, c)`` is ``connect(connect(a, b), c)``."""

    if not stages:
        raise ValueError("pipeline requires at least one stage")
    return reduce(connect, stages)


__all__ = [
    "compose_right",
    "connect",
    "for_",
    "pipeline",
]
