"""Echo standard input with a for loop.

Every line read from stdin is printed back. The loop body emits nothing, so
the whole loop is an effect and can be run directly.

Run with: python examples/echo.py < some_file.txt
"""

import sys
from typing import Any

from dopipe import Effect, each, for_, io, run


def strip_newline(line: str) -> str:
    return line.rstrip("\n")


def echo_loop() -> Effect[Any, None]:
    # Read this as "for line in stdin: print(line)".
    return for_(each(sys.stdin), lambda line: io(print, strip_newline(line)))


if __name__ == "__main__":
    run(echo_loop())
