"""
dopipe - Effectful streaming pipelines for Python.

Stages emit values, demand values and perform base effects. They compose
with ``for_`` (substitute a stream for every emitted value) and ``connect``
(pull composition), and a fully connected pipeline is driven with ``run``
in constant memory.

Example:
    >>> from dopipe import connect, demand, each, io, run, stage
    >>>
    >>> @stage
    ... def print_n(n):
    ...     for _ in range(n):
    ...         value = yield demand()
    ...         yield io(print, value)
    >>>
    >>> run(connect(each([1, 2, 3, 4]), print_n(2)))
    1
    2
"""

from dopipe.compose import compose_right, connect, for_, pipeline
from dopipe.core import demand, emit, io, lift, pure
from dopipe.do import StageFunction, StageGenerator, stage
from dopipe.errors import (
    ContinuationReusedError,
    DopipeError,
    NotAHandleError,
    UnsaturatedHandleError,
)
from dopipe.interpreters import (
    ASYNC_DIRECT,
    DIRECT,
    INERT,
    AsyncDirect,
    Direct,
    Inert,
    Interpreter,
    Recording,
)
from dopipe.prelude import (
    cat,
    drop,
    each,
    filtering,
    mapping,
    printer,
    repeatedly,
    take,
    take_while,
)
from dopipe.proxy import (
    Continuation,
    Demand,
    Emit,
    Perform,
    Proxy,
    Pure,
    bind,
    fmap,
    is_handle,
    replace_result,
    sequence,
    then,
)
from dopipe.result import Err, Ok, Result
from dopipe.drivers import Exhausted, Yielded, next_step, run, run_async, run_result, to_list
from dopipe.tracing import (
    DemandEvent,
    EmitEvent,
    PerformEvent,
    ReturnEvent,
    StalledEvent,
    TraceEvent,
    TruncatedEvent,
    emitted,
    format_trace,
    trace,
)
from dopipe.types import Consumer, Effect, Pipe, Producer, ProducerK, X

__version__ = "0.1.0"

__all__ = [
    "ASYNC_DIRECT",
    "AsyncDirect",
    "Consumer",
    "Continuation",
    "ContinuationReusedError",
    "DIRECT",
    "Demand",
    "DemandEvent",
    "Direct",
    "DopipeError",
    "Effect",
    "Emit",
    "EmitEvent",
    "Err",
    "Exhausted",
    "INERT",
    "Inert",
    "Interpreter",
    "NotAHandleError",
    "Ok",
    "Perform",
    "PerformEvent",
    "Pipe",
    "Producer",
    "ProducerK",
    "Proxy",
    "Pure",
    "Recording",
    "Result",
    "ReturnEvent",
    "StageFunction",
    "StageGenerator",
    "StalledEvent",
    "TraceEvent",
    "TruncatedEvent",
    "UnsaturatedHandleError",
    "X",
    "Yielded",
    "bind",
    "cat",
    "compose_right",
    "connect",
    "demand",
    "drop",
    "each",
    "emit",
    "emitted",
    "filtering",
    "fmap",
    "for_",
    "format_trace",
    "io",
    "is_handle",
    "lift",
    "mapping",
    "next_step",
    "pipeline",
    "printer",
    "pure",
    "repeatedly",
    "replace_result",
    "run",
    "run_async",
    "run_result",
    "sequence",
    "stage",
    "take",
    "take_while",
    "then",
    "to_list",
    "trace",
]
