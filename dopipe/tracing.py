"""Step traces of stream handles.

A trace is the observable behaviour of a handle: what it emits, what it
demands, which actions it performs and what it returns. Handles hold
closures and cannot be compared directly, so two handles are considered
equal when their traces are equal for the same inputs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeAlias

from dopipe.errors import NotAHandleError
from dopipe.interpreters import INERT, Interpreter
from dopipe.proxy import Demand, Emit, Perform, Proxy, Pure, ensure_fresh, ensure_handle


@dataclass(frozen=True)
class EmitEvent:
    value: Any


@dataclass(frozen=True)
class DemandEvent:
    probe: Any
    supplied: Any


@dataclass(frozen=True)
class PerformEvent:
    action: Any
    result: Any


@dataclass(frozen=True)
class ReturnEvent:
    value: Any


@dataclass(frozen=True)
class StalledEvent:
    """A demand arrived after the supplied inputs ran out."""

    probe: Any


@dataclass(frozen=True)
class TruncatedEvent:
    """The event limit was reached before the handle finished."""

    limit: int


TraceEvent: TypeAlias = (
    EmitEvent | DemandEvent | PerformEvent | ReturnEvent | StalledEvent | TruncatedEvent
)


def trace(
    handle: Proxy[Any, Any, Any, Any],
    inputs: Iterable[Any] = (),
    interpreter: Interpreter = INERT,
    limit: int | None = None,
) -> list[TraceEvent]:
    """Drive ``handle`` and record every step.

    Emissions are accepted with ``None``, demands are answered from
    ``inputs`` in order and actions are performed by ``interpreter``, which
    by default performs nothing and answers ``None``.
    """

    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative; got {limit}")

    supply = iter(inputs)
    events: list[TraceEvent] = []
    current = ensure_handle(handle, "trace argument")
    while True:
        if limit is not None and len(events) >= limit:
            events.append(TruncatedEvent(limit))
            return events
        ensure_fresh(current)
        match current:
            case Pure(value=value):
                events.append(ReturnEvent(value))
                return events
            case Emit(value=value, k=k):
                events.append(EmitEvent(value))
                current = k(None)
            case Demand(probe=probe, k=k):
                for supplied in supply:
                    break
                else:
                    events.append(StalledEvent(probe))
                    return events
                events.append(DemandEvent(probe, supplied))
                current = k(supplied)
            case Perform(action=action, k=k):
                result = interpreter.perform(action)
                events.append(PerformEvent(action, result))
                current = k(result)
            case _:
                raise NotAHandleError(current, "trace step")


def emitted(events: Iterable[TraceEvent]) -> list[Any]:
    """The emitted values of a trace, in order."""

    return [event.value for event in events if isinstance(event, EmitEvent)]


def format_trace(events: Iterable[TraceEvent]) -> str:
    lines = []
    for index, event in enumerate(events):
        match event:
            case EmitEvent(value=value):
                lines.append(f"{index:>4}  emit     {value!r}")
            case DemandEvent(probe=probe, supplied=supplied):
                lines.append(f"{index:>4}  demand   {probe!r} -> {supplied!r}")
            case PerformEvent(action=action, result=result):
                lines.append(f"{index:>4}  perform  {action!r} -> {result!r}")
            case ReturnEvent(value=value):
                lines.append(f"{index:>4}  return   {value!r}")
            case StalledEvent(probe=probe):
                lines.append(f"{index:>4}  stalled  {probe!r}")
            case TruncatedEvent(limit=limit):
                lines.append(f"{index:>4}  truncated after {limit} events")
    return "\n".join(lines)


__all__ = [
    "DemandEvent",
    "EmitEvent",
    "PerformEvent",
    "ReturnEvent",
    "StalledEvent",
    "TraceEvent",
    "TruncatedEvent",
    "emitted",
    "format_trace",
    "trace",
]
