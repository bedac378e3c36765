"""
Text rendering of matrices.

Layout, one logical row per line, every element followed by a comma:

    [
      1.000e+00,  0.000e+00,
      0.000e+00,  1.000e+00,
    ]
"""

from __future__ import annotations

import re

from pydense.core.exceptions import ValidationError
from pydense.core.precision import DEFAULT_DISPLAY_PRECISION
from pydense.core.protocols import MatrixAccessor

_FORMAT_SPEC = re.compile(r"^(?:\.(\d+))?[eE]?$")


def format_matrix(matrix: MatrixAccessor, precision: int = DEFAULT_DISPLAY_PRECISION) -> str:
    """
    Render the logical grid in scientific notation.

    Args:
        matrix: Any MatrixAccessor
        precision: Digits after the decimal point

    Returns:
        Multi-line string, bracket-delimited
    """
    if precision < 0:
        raise ValidationError(f"precision: must be non-negative, got {precision}")
    nrows, ncols = matrix.shape
    lines = ["["]
    for r in range(nrows):
        cells = "".join(f"  {matrix.get(r, c):.{precision}e}," for c in range(ncols))
        lines.append(cells)
    lines.append("]")
    return "\n".join(lines)


def parse_precision(format_spec: str) -> int:
    """
    Precision from a format spec such as '', '.5', '.5e'.

    Raises:
        ValueError: For any other spec (str.format convention)
    """
    match = _FORMAT_SPEC.match(format_spec)
    if match is None:
        raise ValueError(f"Invalid format specifier {format_spec!r} for matrix")
    digits = match.group(1)
    return DEFAULT_DISPLAY_PRECISION if digits is None else int(digits)
