"""
Utility functions and environment configuration for dopipe.
"""

import linecache
import os
import sys
from dataclasses import dataclass
from typing import Optional

# Environment variable to control debug mode
DEBUG_PIPES = os.environ.get("DOPIPE_DEBUG", "").lower() in ("1", "true", "yes")


_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _is_dopipe_internal(path: str) -> bool:
    return os.path.dirname(os.path.abspath(path)) == _PACKAGE_DIR


@dataclass(frozen=True)
class CreationContext:
    """Where a stage handle was created."""

    filename: str
    line: int
    function: str
    code: str | None = None

    def format_location(self) -> str:
        """Format the creation location as a string."""
        return f"{self.filename}:{self.line} in {self.function}"


def capture_creation_context(skip_frames: int = 2) -> Optional[CreationContext]:
    """
    Capture the first caller frame outside dopipe.

    Args:
        skip_frames: Number of frames to skip (default 2 to skip this function and caller)

    Returns:
        CreationContext for the caller, or None when frames are unavailable
    """
    try:
        frame = sys._getframe(skip_frames)
    except ValueError:
        return None

    while frame.f_back is not None and _is_dopipe_internal(frame.f_code.co_filename):
        frame = frame.f_back

    filename = frame.f_code.co_filename
    code = linecache.getline(filename, frame.f_lineno).strip() or None
    return CreationContext(
        filename=filename,
        line=frame.f_lineno,
        function=frame.f_code.co_name,
        code=code,
    )


__all__ = [
    "DEBUG_PIPES",
    "CreationContext",
    "capture_creation_context",
]
