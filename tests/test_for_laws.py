"""Law checks for ``for_`` and ``compose_right``.

Handles are compared by trace: same emissions, demands, actions and result
for the same inputs.
"""

from __future__ import annotations

import pytest

from dopipe import compose_right, emit, for_, trace
from tests.conftest import BODIES, INPUTS, SOURCES


def _trace(handle):
    return trace(handle, inputs=INPUTS, limit=500)


@pytest.mark.parametrize("source", sorted(SOURCES))
@pytest.mark.parametrize("f", sorted(BODIES))
@pytest.mark.parametrize("g", sorted(BODIES))
def test_for_associativity(source: str, f: str, g: str) -> None:
    m, body_f, body_g = SOURCES[source], BODIES[f], BODIES[g]

    left = for_(for_(m(), body_f), body_g)
    right = for_(m(), lambda x: for_(body_f(x), body_g))

    assert _trace(left) == _trace(right)


@pytest.mark.parametrize("f", sorted(BODIES))
@pytest.mark.parametrize("x", [0, "word", (1, 2)])
def test_for_left_identity(f: str, x) -> None:
    body = BODIES[f]

    assert _trace(for_(emit(x), body)) == _trace(body(x))


@pytest.mark.parametrize("source", sorted(SOURCES))
def test_for_right_identity(source: str) -> None:
    m = SOURCES[source]

    assert _trace(for_(m(), emit)) == _trace(m())


class TestComposeRight:
    @pytest.mark.parametrize("f", sorted(BODIES))
    def test_emit_is_left_identity(self, f: str) -> None:
        body = BODIES[f]

        assert _trace(compose_right(emit, body)(7)) == _trace(body(7))

    @pytest.mark.parametrize("f", sorted(BODIES))
    def test_emit_is_right_identity(self, f: str) -> None:
        body = BODIES[f]

        assert _trace(compose_right(body, emit)(7)) == _trace(body(7))

    @pytest.mark.parametrize("f", sorted(BODIES))
    @pytest.mark.parametrize("g", sorted(BODIES))
    @pytest.mark.parametrize("h", ["duplicate", "effectful", "demanding"])
    def test_associativity(self, f: str, g: str, h: str) -> None:
        bf, bg, bh = BODIES[f], BODIES[g], BODIES[h]

        left = compose_right(compose_right(bf, bg), bh)
        right = compose_right(bf, compose_right(bg, bh))

        assert _trace(left(3)) == _trace(right(3))

    def test_rejects_non_callables(self) -> None:
        with pytest.raises(TypeError):
            compose_right(emit, "not callable")


class TestForSemantics:
    def test_body_emissions_replace_source_emissions(self) -> None:
        from dopipe import each, emitted, then

        handle = for_(each([1, 2, 3]), lambda x: then(emit(x), emit(-x)))

        assert emitted(trace(handle)) == [1, -1, 2, -2, 3, -3]

    def test_source_result_is_kept(self) -> None:
        from dopipe import ReturnEvent, each, replace_result

        handle = for_(replace_result(each([1]), "finished"), emit)

        assert trace(handle)[-1] == ReturnEvent("finished")

    def test_source_resumes_with_body_result(self) -> None:
        from dopipe import bind, pure

        seen = []

        def source():
            return bind(emit("a"), lambda reply: bind(emit(("reply", reply)), lambda _: pure(None)))

        def body(value):
            seen.append(value)
            return pure(f"handled {value}")

        trace(for_(source(), body))

        assert seen == ["a", ("reply", "handled a")]

    def test_body_must_return_handle(self) -> None:
        from dopipe import NotAHandleError, each

        with pytest.raises(NotAHandleError):
            trace(for_(each([1]), lambda x: x))

    def test_body_must_be_callable(self) -> None:
        from dopipe import each

        with pytest.raises(TypeError):
            for_(each([1]), None)
