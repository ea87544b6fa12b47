"""Debug configuration and creation-site capture."""

from __future__ import annotations

import logging

import pytest

import dopipe.do
import dopipe.drivers
from dopipe import NotAHandleError, io, run, stage
from dopipe.utils import CreationContext, _is_dopipe_internal, capture_creation_context


def test_capture_creation_context_finds_caller():
    context = capture_creation_context(skip_frames=1)

    assert context is not None
    assert context.function == "test_capture_creation_context_finds_caller"
    assert context.filename.endswith("test_utils.py")
    assert "capture_creation_context" in context.code


def test_format_location():
    context = CreationContext(filename="pipes.py", line=12, function="main")

    assert context.format_location() == "pipes.py:12 in main"


def test_stage_errors_name_creation_site_in_debug_mode(monkeypatch):
    monkeypatch.setattr(dopipe.do, "DEBUG_PIPES", True)

    @stage
    def broken():
        yield "not a handle"

    with pytest.raises(NotAHandleError) as exc_info:
        broken()

    assert exc_info.value.location is not None
    assert "test_utils.py" in exc_info.value.location
    assert "stage created at" in str(exc_info.value)


def test_no_creation_site_by_default(monkeypatch):
    monkeypatch.setattr(dopipe.do, "DEBUG_PIPES", False)

    @stage
    def broken():
        yield "not a handle"

    with pytest.raises(NotAHandleError) as exc_info:
        broken()

    assert exc_info.value.location is None


def test_debug_mode_logs_each_action(monkeypatch, caplog):
    monkeypatch.setattr(dopipe.drivers, "DEBUG_PIPES", True)
    log = []

    with caplog.at_level(logging.DEBUG, logger="dopipe.drivers"):
        run(io(log.append, "x"))

    assert log == ["x"]
    assert any("run: perform" in message for message in caplog.messages)


def test_only_package_modules_count_as_internal(tmp_path):
    user_file = tmp_path / "dopipe" / "examples" / "printn.py"

    assert not _is_dopipe_internal(str(user_file))
    assert not _is_dopipe_internal(str(tmp_path / "dopipe" / "printn.py"))
    assert _is_dopipe_internal(dopipe.do.__file__)


def test_user_project_named_dopipe_gets_creation_site(monkeypatch, tmp_path):
    monkeypatch.setattr(dopipe.do, "DEBUG_PIPES", True)
    filename = str(tmp_path / "dopipe" / "examples" / "printn.py")
    source = "@stage\ndef broken():\n    yield 'not a handle'\n\nbroken()\n"

    with pytest.raises(NotAHandleError) as exc_info:
        exec(compile(source, filename, "exec"), {"stage": stage})

    assert exc_info.value.location == f"{filename}:5 in <module>"
