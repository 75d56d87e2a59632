"""Diagnostic printer: render a vector's contents as text."""

from __future__ import annotations

import sys
from typing import TextIO

from vector_runtime.vector import Vector

DEFAULT_FORMAT = "%e"


def format_vector(vector: Vector, fmt: str = DEFAULT_FORMAT) -> str:
    """Space-separated elements in fmt (scientific by default), newline-terminated."""
    host = vector.to_numpy()
    return " ".join(fmt % float(x) for x in host) + "\n"


def print_vector(vector: Vector, file: TextIO | None = None, fmt: str = DEFAULT_FORMAT) -> None:
    """Write format_vector(vector) to file (stderr by default)."""
    out = file if file is not None else sys.stderr
    out.write(format_vector(vector, fmt))
    out.flush()
