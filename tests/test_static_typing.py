"""Saturation is checked statically: only an Effect can be run."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path

import pytest

pytestmark = pytest.mark.typecheck

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES = Path("tests/fixtures/typing")

_ERROR_LINE = re.compile(r"^(?P<path>[^:]+):(?P<line>\d+): error:")


def _mypy_error_lines(fixture: Path, cache_dir: Path) -> set[int]:
    mypy_bin = shutil.which("mypy")
    if mypy_bin is None:
        pytest.skip("mypy is not installed")

    completed = subprocess.run(
        [
            mypy_bin,
            "--follow-imports=silent",
            "--no-error-summary",
            "--cache-dir",
            str(cache_dir),
            str(fixture),
        ],
        cwd=REPO_ROOT,
        env={**os.environ, "MYPYPATH": str(REPO_ROOT)},
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode not in {0, 1}:
        raise AssertionError(
            f"mypy failed:\nstdout:\n{completed.stdout}\nstderr:\n{completed.stderr}"
        )

    lines = set()
    for row in completed.stdout.splitlines():
        match = _ERROR_LINE.match(row)
        if match and Path(match["path"]) == fixture:
            lines.add(int(match["line"]))
    return lines


def _marked_lines(fixture: Path) -> set[int]:
    text = (REPO_ROOT / fixture).read_text()
    return {index for index, line in enumerate(text.splitlines(), start=1) if "# rejected" in line}


def test_saturated_pipelines_type_check(tmp_path: Path) -> None:
    assert _mypy_error_lines(FIXTURES / "saturated.py", tmp_path) == set()


def test_unsaturated_handles_are_rejected(tmp_path: Path) -> None:
    fixture = FIXTURES / "unsaturated.py"

    assert _marked_lines(fixture) == {3, 4, 5}
    assert _mypy_error_lines(fixture, tmp_path) >= _marked_lines(fixture)
