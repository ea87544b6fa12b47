"""
Execution drivers.

``run`` and ``run_async`` discharge a saturated handle into the base effect.
Both are plain loops over the handle, so any number of effect steps runs in
constant stack. ``next_step`` is the external-iteration counterpart for
producers.

Every driver checks a step's continuation before acting on it, so a spent
single-use handle is rejected before any of its actions is performed again.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from dopipe.errors import DopipeError, NotAHandleError, UnsaturatedHandleError
from dopipe.interpreters import ASYNC_DIRECT, DIRECT, Interpreter
from dopipe.proxy import Continuation, Demand, Emit, Perform, Pure, ensure_handle
from dopipe.result import Err, Ok, Result
from dopipe.types import Effect, Producer
from dopipe.utils import DEBUG_PIPES

O = TypeVar("O")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def run(effect: Effect[Any, R], interpreter: Interpreter = DIRECT) -> R:
    """Run a saturated handle to completion and return its result.

    Each ``Perform`` action is handed to ``interpreter``. Exceptions raised
    while performing an action propagate unchanged. Reaching an ``Emit`` or
    ``Demand`` step raises ``UnsaturatedHandleError``.
    """

    handle = ensure_handle(effect, "run argument")
    logger.debug("run: start with %r", interpreter)
    steps = 0
    while True:
        match handle:
            case Pure(value=value):
                logger.debug("run: finished after %d effect steps", steps)
                return value
            case Perform(action=action, k=k):
                k.ensure_fresh()
                if DEBUG_PIPES:
                    logger.debug("run: perform %r", action)
                handle = k(interpreter.perform(action))
                steps += 1
            case Emit() | Demand():
                raise UnsaturatedHandleError(handle)
            case _:
                raise NotAHandleError(handle, "run step")


async def run_async(effect: Effect[Any, R], interpreter: Interpreter = ASYNC_DIRECT) -> R:
    """Coroutine version of :func:`run`; awaitable action results are awaited."""

    handle = ensure_handle(effect, "run_async argument")
    logger.debug("run_async: start with %r", interpreter)
    steps = 0
    while True:
        match handle:
            case Pure(value=value):
                logger.debug("run_async: finished after %d effect steps", steps)
                return value
            case Perform(action=action, k=k):
                k.ensure_fresh()
                if DEBUG_PIPES:
                    logger.debug("run_async: perform %r", action)
                result = interpreter.perform(action)
                if inspect.isawaitable(result):
                    result = await result
                handle = k(result)
                steps += 1
            case Emit() | Demand():
                raise UnsaturatedHandleError(handle)
            case _:
                raise NotAHandleError(handle, "run_async step")


def run_result(effect: Effect[Any, R], interpreter: Interpreter = DIRECT) -> Result[R]:
    """Like :func:`run`, but base-effect failures come back as ``Err``.

    Misuse of the library (``DopipeError``) is still raised.
    """

    try:
        return Ok(run(effect, interpreter))
    except DopipeError:
        raise
    except Exception as exc:
        logger.debug("run_result: captured %s", type(exc).__name__)
        return Err(exc)


@dataclass(frozen=True)
class Yielded(Generic[O]):
    """The producer emitted ``value``; ``rest()`` resumes it."""

    value: O
    continuation: Continuation

    def rest(self) -> Producer[O, Any, Any]:
        return self.continuation(None)


@dataclass(frozen=True)
class Exhausted(Generic[R]):
    """The producer finished with ``value`` before emitting again."""

    value: R


def next_step(
    producer: Producer[O, Any, R], interpreter: Interpreter = DIRECT
) -> Yielded[O] | Exhausted[R]:
    """Perform effects up to the producer's next emission.

    The emission is not accepted yet: the producer stays suspended until
    ``Yielded.rest()`` is called.
    """

    handle = ensure_handle(producer, "next_step argument")
    while True:
        match handle:
            case Pure(value=value):
                return Exhausted(value)
            case Emit(value=value, k=k):
                k.ensure_fresh()
                return Yielded(value, k)
            case Perform(action=action, k=k):
                k.ensure_fresh()
                handle = k(interpreter.perform(action))
            case Demand():
                raise UnsaturatedHandleError(handle)
            case _:
                raise NotAHandleError(handle, "next_step step")


def to_list(producer: Producer[O, Any, Any], interpreter: Interpreter = DIRECT) -> list[O]:
    """Collect every value a finite producer emits, in order."""

    values: list[O] = []
    step = next_step(producer, interpreter)
    while isinstance(step, Yielded):
        values.append(step.value)
        step = next_step(step.rest(), interpreter)
    return values


__all__ = [
    "Exhausted",
    "Yielded",
    "next_step",
    "run",
    "run_async",
    "run_result",
    "to_list",
]
