"""
Scalar type and numerical precision constants.

Every buffer in PyDense holds FP (float64) values. The constants here are
the single source of truth for the scalar dtype, machine limits, display
precision and the default tolerances of approximate comparison.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


# Scalar dtype of every matrix buffer
FP = np.float64

# Machine epsilon for FP
FP_EPSILON: float = float(np.finfo(FP).eps)  # ~2.22e-16

# Smallest positive normal FP value
FP_MINPOS: float = float(np.finfo(FP).tiny)  # ~2.23e-308

# Digits after the decimal point when rendering a matrix
DEFAULT_DISPLAY_PRECISION: int = 3

# Default tolerance for numerical comparisons (relative)
DEFAULT_RTOL: float = 1e-12

# Default tolerance for considering values as zero (absolute)
DEFAULT_ATOL: float = 1e-14


def is_close(
    a: float | NDArray[np.floating[Any]],
    b: float | NDArray[np.floating[Any]],
    rtol: float = DEFAULT_RTOL,
    atol: float = DEFAULT_ATOL
) -> bool | NDArray[np.bool_]:
    """
    Check if values are numerically close.

    Uses the formula: |a - b| <= atol + rtol * |b|

    Args:
        a: First value(s)
        b: Second value(s)
        rtol: Relative tolerance
        atol: Absolute tolerance

    Returns:
        Boolean or boolean array indicating closeness
    """
    return np.abs(a - b) <= atol + rtol * np.abs(b)
