"""
The stage decorator for the dopipe system.

This module provides the @stage decorator that converts generator functions
into factories of stream handles, enabling do-notation for pipeline stages.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Generator
from functools import update_wrapper
from typing import Any, Generic, ParamSpec, TypeVar

from dopipe.errors import NotAHandleError
from dopipe.proxy import Demand, Emit, Perform, Proxy, Pure, SingleUse, _append_frames
from dopipe.utils import DEBUG_PIPES, capture_creation_context

P = ParamSpec("P")
T = TypeVar("T")

StageGenerator = Generator[Proxy[Any, Any, Any, Any], Any, T]


def _advance(
    generator: Generator[Any, Any, Any],
    sent: Any,
    owner: str,
    location: str | None,
) -> Proxy[Any, Any, Any, Any]:
    # Pure yields are resolved in place so pure-only stretches cost no frames.
    while True:
        try:
            current = generator.send(sent)
        except StopIteration as stop:
            return Pure(stop.value)

        match current:
            case Pure(value=value):
                sent = value
            case Emit() | Demand() | Perform():
                frame = SingleUse(
                    lambda value: _advance(generator, value, owner, location), owner
                )
                return _append_frames(current, (frame,))
            case _:
                raise NotAHandleError(current, f"value yielded by stage {owner}", location)


class StageFunction(Generic[P, T]):
    """Callable returned by ``@stage``; each call builds a fresh handle."""

    def __init__(self, func: Callable[P, StageGenerator[T]]) -> None:
        update_wrapper(self, func)
        self.original_func = func

        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            self.__signature__ = signature

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Proxy[Any, Any, Any, T]:
        owner = getattr(self, "__qualname__", "<stage>")
        location = None
        if DEBUG_PIPES:
            context = capture_creation_context(skip_frames=2)
            location = context.format_location() if context is not None else None

        gen_or_value = self.original_func(*args, **kwargs)
        if not inspect.isgenerator(gen_or_value):
            if isinstance(gen_or_value, (Pure, Emit, Demand, Perform)):
                return gen_or_value
            return Pure(gen_or_value)
        return _advance(gen_or_value, None, owner, location)

    def __repr__(self) -> str:
        return f"<stage {getattr(self, '__qualname__', '?')}>"


def stage(func: Callable[P, StageGenerator[T]]) -> StageFunction[P, T]:
    """
    Decorator that converts a generator function into a stage factory.

    Inside the generator, ``yield`` any stream handle to run it and receive
    its result::

        @stage
        def print_n(n: int) -> StageGenerator[None]:
            for _ in range(n):
                line = yield demand()
                yield io(print, line)

        run(connect(each(["a", "b", "c"]), print_n(2)))

    ``yield emit(x)`` emits, ``yield demand()`` awaits input, ``yield
    lift(action)`` performs a base effect and any other handle (including
    another stage's) is run inline.

    EVALUATION ORDER:
    Calling the factory starts the generator immediately and runs it up to
    its first suspending yield; nothing after that point runs until the
    handle is driven. Plain Python side effects placed before the first
    yield therefore happen at construction time, even when the stage is a
    producer whose consumer never demands a value. That breaks the rule
    that no stage runs ahead of its caller, so any side effect before the
    first yield belongs behind ``io``::

        @stage
        def lines(path):
            handle = yield io(open, path)   # opened only when pulled
            for line in handle:
                yield emit(line)

    SINGLE USE:
    The returned handle closes over one live generator, so it can be driven
    once. Driving it again raises ``ContinuationReusedError`` before any of
    its actions is performed a second time; call the factory again instead.

    Args:
        func: A generator function that yields handles and returns T

    Returns:
        StageFunction building a ``Proxy`` per call. A function that returns
        a handle instead of a generator is passed through, and any other
        return value is wrapped in ``Pure``.
    """

    return StageFunction(func)


__all__ = ["StageFunction", "StageGenerator", "stage"]
