"""
Base-effect interpreters.

A handle's ``Perform`` steps carry opaque actions. The driver hands each
action to an interpreter, which performs it and returns its result. This is
the only thing dopipe asks of the base effect: the driver loop supplies the
sequencing.

- ``Direct``: actions are zero-argument callables, called synchronously
- ``AsyncDirect``: like ``Direct`` for ``run_async``; awaitables are awaited
- ``Inert``: performs nothing and answers ``None``, for tracing handles
- ``Recording``: wraps another interpreter and keeps every action it saw
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Interpreter(Protocol):
    """Performs one base-effect action and returns its result."""

    def perform(self, action: Any) -> Any: ...


class Direct:
    """Synchronous interpreter: every action is a zero-argument callable."""

    def perform(self, action: Callable[[], Any]) -> Any:
        if not callable(action):
            raise TypeError(
                f"Direct interpreter expects a zero-argument callable; got {type(action).__name__}"
            )
        return action()

    def __repr__(self) -> str:
        return "Direct()"


class AsyncDirect:
    """Interpreter for ``run_async``.

    An action may be an awaitable, or a callable returning either an
    awaitable or a plain value. The returned value is awaited by the driver.
    """

    def perform(self, action: Any) -> Awaitable[Any] | Any:
        if inspect.isawaitable(action):
            return action
        if callable(action):
            return action()
        raise TypeError(
            f"AsyncDirect interpreter expects an awaitable or a callable; got {type(action).__name__}"
        )

    def __repr__(self) -> str:
        return "AsyncDirect()"


class Inert:
    """Performs nothing; every action yields ``None``."""

    def perform(self, action: Any) -> None:
        return None

    def __repr__(self) -> str:
        return "Inert()"


@dataclass
class Recording:
    """Delegates to ``inner`` and appends each action to ``actions``."""

    inner: Interpreter = field(default_factory=Direct)
    actions: list[Any] = field(default_factory=list)

    def perform(self, action: Any) -> Any:
        self.actions.append(action)
        return self.inner.perform(action)


DIRECT = Direct()
ASYNC_DIRECT = AsyncDirect()
INERT = Inert()


__all__ = [
    "ASYNC_DIRECT",
    "AsyncDirect",
    "DIRECT",
    "Direct",
    "INERT",
    "Inert",
    "Interpreter",
    "Recording",
]
