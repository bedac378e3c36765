"""
PyDense: dense column-major matrices with zero-copy views.

Owned matrices and borrowed views (immutable or mutable) share one
Matrix type. Slicing and transposing are O(1) and never copy; the
operator algebra clones only when a result has to be owned.

Submodules:
    core: Protocols, exceptions, validation, precision, configuration
    matrix: Matrix handle, storage kinds and operator algebra
    rng: Deterministic xorshift generator
"""

__version__ = "0.1.0"

from pydense.core import (
    MatrixAccessor,
    PyDenseError,
    ValidationError,
    ShapeMismatchError,
    OutOfRangeError,
    InvalidOperationError,
    BorrowError,
    FP,
    FP_EPSILON,
    FP_MINPOS,
    get_config,
    set_borrow_checking,
    get_borrow_checking,
    borrow_checking,
)
from pydense.matrix import (
    Matrix,
    StorageKind,
    ArrayAccessor,
    as_accessor,
    format_matrix,
)
from pydense.rng import XOR64_INIT, Xor64, xor64

__all__ = [
    "__version__",
    # Matrix
    "Matrix",
    "MatrixAccessor",
    "ArrayAccessor",
    "as_accessor",
    "StorageKind",
    "format_matrix",
    # Random
    "xor64",
    "XOR64_INIT",
    "Xor64",
    # Precision
    "FP",
    "FP_EPSILON",
    "FP_MINPOS",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "ShapeMismatchError",
    "OutOfRangeError",
    "InvalidOperationError",
    "BorrowError",
    # Config
    "get_config",
    "set_borrow_checking",
    "get_borrow_checking",
    "borrow_checking",
]
