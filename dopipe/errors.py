"""Error types raised by dopipe itself.

Failures of the base effect are never wrapped: they propagate out of the
drivers unchanged. The classes here only describe misuse of the library.
"""

from __future__ import annotations

from typing import Any


class DopipeError(Exception):
    """Root of all errors raised by dopipe."""


class UnsaturatedHandleError(DopipeError, RuntimeError):
    """Raised when a driver reaches an ``Emit`` or ``Demand`` step.

    Only saturated handles (nothing emitted, nothing demanded) can be run.
    Reaching either step means the pipeline was not fully connected, which is
    a programming error rather than a recoverable runtime failure.
    """

    def __init__(self, step: Any) -> None:
        self.step = step
        kind = type(step).__name__
        super().__init__(
            f"Cannot run a handle that reached an {kind} step: {step!r}\n"
            "Hint: connect every producer to a consumer (or close it with for_) "
            "before passing it to run()"
        )


class ContinuationReusedError(DopipeError, RuntimeError):
    """Raised when a single-use continuation is resumed a second time."""

    def __init__(self, owner: str) -> None:
        self.owner = owner
        super().__init__(
            f"Continuation of {owner} was already resumed; handles backed by a "
            "generator or a one-shot iterator can only be driven once.\n"
            "Hint: call the stage factory again to get a fresh handle"
        )


class NotAHandleError(DopipeError, TypeError):
    """Raised when a stream handle was expected but something else was found."""

    def __init__(self, value: Any, context: str, location: str | None = None) -> None:
        self.value = value
        self.context = context
        self.location = location
        message = f"{context} must be a stream handle; got {type(value).__name__}: {value!r}"
        if location:
            message += f"\n  stage created at {location}"
        super().__init__(message)


__all__ = [
    "ContinuationReusedError",
    "DopipeError",
    "NotAHandleError",
    "UnsaturatedHandleError",
]
