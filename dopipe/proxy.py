"""
Stream handles for the dopipe system.

A stream handle (``Proxy``) is a suspended or finished streaming computation.
It is exactly one of four cases:

- ``Pure``: finished with a return value
- ``Perform``: wants the base effect to perform an action first
- ``Emit``: produced a value and waits for it to be accepted
- ``Demand``: needs a value before it can continue

The cases are plain frozen dataclasses with no common base class; code that
consumes a handle dispatches on them with ``match``. The three suspended
cases carry a :class:`Continuation`, the rest of the computation, as an
immutable tuple of frames. Binding appends a frame instead of nesting
closures, and applying a continuation walks the frames in a loop, so long
sequential chains never grow the Python stack.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeAlias, TypeVar, Union

from dopipe.errors import ContinuationReusedError, NotAHandleError

O = TypeVar("O")
I = TypeVar("I")  # noqa: E741
M = TypeVar("M")
R = TypeVar("R")
S = TypeVar("S")

Frame: TypeAlias = Callable[[Any], "Proxy[Any, Any, Any, Any]"]


@dataclass(frozen=True)
class Continuation:
    """The rest of a suspended computation.

    ``frames[0]`` receives the resumption value; each following frame
    receives the return value of the handle produced before it, as long as
    that handle is ``Pure``. The first non-pure handle takes over the
    remaining frames.
    """

    frames: tuple[Frame, ...]

    @classmethod
    def of(cls, frame: Frame) -> Continuation:
        return cls((frame,))

    def then(self, frame: Frame) -> Continuation:
        return Continuation(self.frames + (frame,))

    def __call__(self, value: Any) -> Proxy[Any, Any, Any, Any]:
        frames = self.frames
        handle = frames[0](value)
        for index in range(1, len(frames)):
            match handle:
                case Pure(value=result):
                    handle = frames[index](result)
                case Emit() | Demand() | Perform():
                    return _append_frames(handle, frames[index:])
                case _:
                    raise NotAHandleError(handle, "continuation frame result")
        if not isinstance(handle, HANDLE_TYPES):
            raise NotAHandleError(handle, "continuation frame result")
        return handle

    def ensure_fresh(self) -> None:
        """Raise ``ContinuationReusedError`` if a single-use frame here was already resumed.

        Drivers call this before acting on a suspended step, so a spent
        handle is rejected before its action is performed a second time.
        """

        for frame in self.frames:
            if isinstance(frame, SingleUse) and frame.used:
                raise ContinuationReusedError(frame.owner)

    def __len__(self) -> int:
        return len(self.frames)

    def __repr__(self) -> str:
        return f"Continuation(<{len(self.frames)} frames>)"


@dataclass(frozen=True)
class Pure(Generic[R]):
    """A finished computation holding its return value."""

    value: R


@dataclass(frozen=True)
class Perform(Generic[O, I, M, R]):
    """An effect step: perform ``action`` in the base effect, then resume ``k``."""

    action: M
    k: Continuation = field(repr=False)


@dataclass(frozen=True)
class Emit(Generic[O, I, M, R]):
    """An emitted ``value``; ``k`` receives the downstream reply."""

    value: O
    k: Continuation = field(repr=False)


@dataclass(frozen=True)
class Demand(Generic[O, I, M, R]):
    """A request for input; ``k`` receives the supplied value."""

    probe: Any
    k: Continuation = field(repr=False)


# Type variable order follows first appearance: O, I, M, R.
Proxy: TypeAlias = Union[Emit[O, I, M, R], Demand[O, I, M, R], Perform[O, I, M, R], Pure[R]]

HANDLE_TYPES: tuple[type, ...] = (Pure, Perform, Emit, Demand)

IDENTITY = Continuation.of(Pure)


class SingleUse:
    """Continuation frame that may be called once.

    Wraps frames that advance live state (a generator, an iterator) so that
    driving the same handle twice fails loudly instead of silently resuming
    where the first run stopped. See :meth:`Continuation.ensure_fresh`.
    """

    __slots__ = ("_frame", "_owner", "_called")

    def __init__(self, frame: Frame, owner: str) -> None:
        self._frame = frame
        self._owner = owner
        self._called = False

    @property
    def used(self) -> bool:
        return self._called

    @property
    def owner(self) -> str:
        return self._owner

    def __call__(self, value: Any) -> Proxy[Any, Any, Any, Any]:
        if self._called:
            raise ContinuationReusedError(self._owner)
        self._called = True
        return self._frame(value)

    def __repr__(self) -> str:
        return f"SingleUse({self._owner})"


def is_handle(value: Any) -> bool:
    """Return ``True`` when ``value`` is one of the four handle cases."""

    return isinstance(value, HANDLE_TYPES)


def ensure_handle(value: Any, context: str) -> Proxy[Any, Any, Any, Any]:
    if not isinstance(value, HANDLE_TYPES):
        raise NotAHandleError(value, context)
    return value


def ensure_fresh(handle: Proxy[O, I, M, R]) -> Proxy[O, I, M, R]:
    """Return ``handle`` after checking that its continuation was never resumed."""

    match handle:
        case Perform(k=k) | Emit(k=k) | Demand(k=k):
            k.ensure_fresh()
    return handle


def _append_frames(
    handle: Proxy[O, I, M, Any], frames: tuple[Frame, ...]
) -> Proxy[O, I, M, Any]:
    match handle:
        case Perform(action=action, k=k):
            return Perform(action, Continuation(k.frames + frames))
        case Emit(value=value, k=k):
            return Emit(value, Continuation(k.frames + frames))
        case Demand(probe=probe, k=k):
            return Demand(probe, Continuation(k.frames + frames))
    raise NotAHandleError(handle, "suspended handle")


def bind(
    handle: Proxy[O, I, M, R], f: Callable[[R], Proxy[O, I, M, S]]
) -> Proxy[O, I, M, S]:
    """Monadic bind: continue with ``f(result)`` once ``handle`` finishes.

    Emit, Demand and Perform steps are threaded through unchanged; only the
    ``Pure`` leaf is replaced.
    """

    if not callable(f):
        raise TypeError("binder must be callable returning a stream handle")

    match handle:
        case Pure(value=value):
            return ensure_handle(f(value), "bind continuation result")
        case Emit() | Demand() | Perform():
            return _append_frames(handle, (f,))
    raise NotAHandleError(handle, "bind source")


def fmap(handle: Proxy[O, I, M, R], f: Callable[[R], S]) -> Proxy[O, I, M, S]:
    """Map a function over the handle's return value."""

    if not callable(f):
        raise TypeError("mapper must be callable")
    return bind(handle, lambda value: Pure(f(value)))


def then(first: Proxy[O, I, M, Any], second: Proxy[O, I, M, S]) -> Proxy[O, I, M, S]:
    """Run ``first``, discard its result, then run ``second``."""

    ensure_handle(second, "then second")
    return bind(first, lambda _: second)


def replace_result(handle: Proxy[O, I, M, Any], value: S) -> Proxy[O, I, M, S]:
    """Keep every step of ``handle`` but finish with ``value`` instead."""

    return bind(handle, lambda _: Pure(value))


def sequence(handles: Iterable[Proxy[O, I, M, R]]) -> Proxy[O, I, M, list[R]]:
    """Run handles one after another and collect their results."""

    items = tuple(handles)
    for item in items:
        ensure_handle(item, "sequence item")

    def step(index: int, collected: tuple[Any, ...]) -> Proxy[O, I, M, list[R]]:
        while index < len(items):
            current = items[index]
            if not isinstance(current, Pure):
                return bind(
                    current,
                    lambda value, i=index, acc=collected: step(i + 1, acc + (value,)),
                )
            collected = collected + (current.value,)
            index += 1
        return Pure(list(collected))

    return step(0, ())


__all__ = [
    "Continuation",
    "Demand",
    "Emit",
    "Frame",
    "HANDLE_TYPES",
    "IDENTITY",
    "Perform",
    "Proxy",
    "Pure",
    "bind",
    "ensure_fresh",
    "ensure_handle",
    "fmap",
    "is_handle",
    "replace_result",
    "SingleUse",
    "sequence",
    "then",
]
