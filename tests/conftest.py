"""
Shared helpers for the dopipe test suite.

Law tests compare handles by their traces, so the actions used there are
plain tuples (comparable by value) traced with the ``Inert`` interpreter.
Tests that need real side effects use ``Ledger``, which records every action
and answers deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from dopipe import bind, demand, emit, each, lift, pure, stage, then


@dataclass
class Ledger:
    """Interpreter for tuple actions: records them and answers with a counter."""

    actions: list[Any] = field(default_factory=list)

    def perform(self, action: Any) -> Any:
        self.actions.append(action)
        if callable(action):
            return action()
        return len(self.actions)


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


INPUTS = tuple(range(100, 160))


def mixed_source():
    """A source that performs, demands, emits twice and returns."""

    return bind(
        lift(("start",)),
        lambda _: bind(
            demand("q"),
            lambda value: then(emit(value), then(emit(value * 10), pure("done"))),
        ),
    )


@stage
def generator_source():
    yield lift(("open",))
    for value in (1, 2, 3):
        yield emit(value)
    reply = yield demand("more")
    yield emit(reply)
    return "closed"


# Factories, not handles: generator-backed handles are single-use.
SOURCES = {
    "each": lambda: each([1, 2, 3]),
    "empty": lambda: pure("empty"),
    "mixed": mixed_source,
    "generator": generator_source,
}

BODIES = {
    "reemit": lambda x: emit(x),
    "duplicate": lambda x: then(emit(x), emit(x)),
    "effectful": lambda x: then(lift(("saw", x)), emit((x, "seen"))),
    "silent": lambda x: pure(None),
    "demanding": lambda x: bind(demand(("need", x)), lambda y: emit((x, y))),
}
