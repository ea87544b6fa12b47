"""
Outcome of :func:`dopipe.drivers.run_result`.

``Ok`` holds the pipeline's return value and ``Err`` the exception raised
by the base effect. Either one turns back into a stream handle with
``or_handle``, so a failed run can be retried or replaced by a fallback
pipeline.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar, cast

if TYPE_CHECKING:
    from dopipe.proxy import Proxy

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Result(Generic[T_co]):
    __slots__ = ()

    def unwrap(self) -> T_co:
        """The pipeline's result; re-raises the base-effect failure on ``Err``."""

        if isinstance(self, Err):
            raise self.error
        return cast("Ok[T_co]", self).value

    def or_handle(self, fallback: Proxy[Any, Any, Any, Any]) -> Proxy[Any, Any, Any, Any]:
        """A finished handle holding the result, or ``fallback`` after a failure.

        Example::

            outcome = run_result(pipeline(source(), sink()))
            value = run(outcome.or_handle(pipeline(backup_source(), sink())))
        """
        from dopipe.proxy import Pure

        if isinstance(self, Ok):
            return Pure(self.value)
        return fallback


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    error: Exception

    def format_traceback(self) -> str:
        """Render the failure with the traceback of the action that raised it."""

        return "".join(traceback.format_exception(self.error))


__all__ = [
    "Err",
    "Ok",
    "Result",
]
