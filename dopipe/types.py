"""
Specializations of the stream handle.

These are type aliases only; every one of them is a ``Proxy`` at run time.
They let call sites state intent and let a static type checker reject
compositions such as connecting two producers or running a handle that can
still emit.

``X`` is the uninhabited type: a ``Producer`` never receives (its input is
``X``), a ``Consumer`` never emits, and an ``Effect`` does neither, so only
an ``Effect`` is accepted by :func:`dopipe.drivers.run` in typed code. Untyped
code gets the same guarantee from the driver's run-time check.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Never, TypeAlias, TypeVar

from dopipe.proxy import Proxy

A = TypeVar("A")
O = TypeVar("O")
I = TypeVar("I")  # noqa: E741
M = TypeVar("M")
R = TypeVar("R")

X: TypeAlias = Never

Producer: TypeAlias = Proxy[O, X, M, R]
Consumer: TypeAlias = Proxy[X, I, M, R]
Pipe: TypeAlias = Proxy[O, I, M, R]
Effect: TypeAlias = Proxy[X, X, M, R]

# Loop bodies for for_ and compose_right.
ProducerK: TypeAlias = Callable[[A], Proxy[O, X, M, R]]

__all__ = [
    "Consumer",
    "Effect",
    "Pipe",
    "Producer",
    "ProducerK",
    "X",
]
