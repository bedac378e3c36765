"""
Core infrastructure for PyDense.

This module provides shared abstractions and utilities used by the
matrix layer.

Key components:
    protocols: View, MatrixAccessor protocols
    exceptions: Exception hierarchy
    validation: Input validators
    precision: Scalar type and numeric constants
    config: Runtime switches (borrow checking)
"""

from pydense.core.protocols import View, MatrixAccessor
from pydense.core.exceptions import (
    PyDenseError,
    ValidationError,
    ShapeMismatchError,
    OutOfRangeError,
    InvalidOperationError,
    BorrowError,
)
from pydense.core.precision import FP, FP_EPSILON, FP_MINPOS
from pydense.core.config import (
    get_config,
    set_borrow_checking,
    get_borrow_checking,
    borrow_checking,
)

__all__ = [
    # Protocols
    "View",
    "MatrixAccessor",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "ShapeMismatchError",
    "OutOfRangeError",
    "InvalidOperationError",
    "BorrowError",
    # Precision
    "FP",
    "FP_EPSILON",
    "FP_MINPOS",
    # Config
    "get_config",
    "set_borrow_checking",
    "get_borrow_checking",
    "borrow_checking",
]
