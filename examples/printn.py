"""A consumer that prints a fixed number of values.

``print_n(3)`` awaits three lines and prints each one. Connected to a stdin
producer it stops reading after the third line. The second run shows the
termination race: whichever side finishes first supplies the result.

Run with: python examples/printn.py
"""

import sys

from dopipe import connect, demand, each, io, replace_result, run, stage


@stage
def print_n(n: int):
    for _ in range(n):
        line = yield demand()
        yield io(print, line.rstrip("\n"))


def main() -> None:
    run(connect(each(sys.stdin), print_n(3)))

    # True when print_n finished first, False when stdin ran out.
    finished = run(
        connect(
            replace_result(each(sys.stdin), False),
            replace_result(print_n(3), True),
        )
    )
    print(f"printed all three: {finished}")


if __name__ == "__main__":
    main()
