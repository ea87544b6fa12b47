"""Loop over a loop.

``duplicated`` re-emits every input line twice, so it is itself a producer
and can be the source of a second for loop.

Run with: python examples/nested.py < some_file.txt
"""

import sys
from typing import Any

from dopipe import Producer, each, emit, for_, io, run, then


def twice(line: str) -> Producer[str, Any, None]:
    return then(emit(line), emit(line))


def duplicated() -> Producer[str, Any, None]:
    return for_(each(line.rstrip("\n") for line in sys.stdin), twice)


if __name__ == "__main__":
    run(for_(duplicated(), lambda line: io(print, line)))
