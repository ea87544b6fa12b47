"""
Suspension primitives.

``emit`` and ``demand`` are the only ways to build handles that talk to
their neighbours; ``lift`` is the only way to reach the base effect.
Everything else is sequenced from these with :func:`dopipe.proxy.bind`.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any, TypeVar

from dopipe.proxy import IDENTITY, Demand, Emit, Perform, Proxy, Pure

O = TypeVar("O")
I = TypeVar("I")  # noqa: E741
M = TypeVar("M")
T = TypeVar("T")


def emit(value: O) -> Proxy[O, I, M, Any]:
    """Emit ``value`` downstream; the handle returns the reply it is resumed with."""

    return Emit(value, IDENTITY)


def demand(probe: Any = None) -> Proxy[O, I, M, I]:
    """Suspend until upstream supplies a value, and return that value."""

    return Demand(probe, IDENTITY)


def lift(action: M) -> Proxy[O, I, M, Any]:
    """Wrap one base-effect action; the handle returns the action's result.

    What an action is depends on the interpreter that runs the pipeline: the
    default synchronous interpreter expects a zero-argument callable.
    """

    return Perform(action, IDENTITY)


def io(fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Proxy[O, I, Callable[[], T], T]:
    """Lift a deferred call ``fn(*args, **kwargs)`` for the callable-based interpreters."""

    if not callable(fn):
        raise TypeError(f"io expects a callable; got {type(fn).__name__}")
    return lift(partial(fn, *args, **kwargs))


def pure(value: T) -> Proxy[O, I, M, T]:
    """A handle that finishes immediately with ``value``."""

    return Pure(value)


__all__ = [
    "demand",
    "emit",
    "io",
    "lift",
    "pure",
]
